import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from src.config.logger import logger
from src.reports.models import ProfileReport


@dataclass(slots=True)
class _Entry:
    report: ProfileReport
    expires_at: float


class ReportSessionStore:
    """
    Эфемерное хранилище отчётов, заменяющее sessionStorage браузера.

    Отчёт создаётся при анализе, читается при отображении и удаляется
    явно (invalidate) или по истечении TTL. Данные живут только в памяти
    процесса.

    :param ttl_seconds: Время жизни отчёта
    :param clock: Источник монотонного времени
    :return:
    """

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        self._evict_expired()
        return len(self._entries)

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.info("Удалены просроченные отчёты", extra={"count": len(expired)})

    def create(self, report: ProfileReport) -> str:
        """
        Сохраняет отчёт под новым идентификатором сессии.

        :param report: Отчёт
        :return: Идентификатор сессии
        """
        self._evict_expired()
        session_id = uuid.uuid4().hex
        self._entries[session_id] = _Entry(report, self._clock() + self._ttl)
        logger.info(
            "Отчёт сохранён",
            extra={"session_id": session_id, "login": report.github.account.login},
        )
        return session_id

    def get(self, session_id: str) -> ProfileReport | None:
        """
        Возвращает отчёт, если сессия существует и не истекла.

        :param session_id: Идентификатор сессии
        :return: ProfileReport или None
        """
        self._evict_expired()
        entry = self._entries.get(session_id)
        return entry.report if entry else None

    def invalidate(self, session_id: str) -> bool:
        """
        Удаляет отчёт.

        :param session_id: Идентификатор сессии
        :return: True, если отчёт был удалён
        """
        self._evict_expired()
        return self._entries.pop(session_id, None) is not None
