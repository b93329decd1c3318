from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from datetime import UTC, datetime
from typing import Any


def _plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: _plain(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, datetime):
        return value.astimezone(UTC).isoformat().replace("+00:00", "Z")
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def to_dict(obj: Any) -> dict[str, Any]:
    """
    Переводит dataclass-модель в JSON-совместимый словарь.

    Кортежи становятся списками, read-only mapping обычными словарями.

    :param obj: Экземпляр dataclass
    :return: Словарь с datetime в формате ISO-8601 (UTC, суффикс Z)
    """
    if not is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"Expected a dataclass instance, got {type(obj).__name__}")
    return _plain(obj)
