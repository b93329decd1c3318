from datetime import UTC, datetime


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Разбирает ISO-8601 время GitHub (``2024-01-01T12:00:00Z``) в aware datetime.

    :param value: Строка времени или None
    :return: datetime в UTC или None
    """
    if not value:
        return None

    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
