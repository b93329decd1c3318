from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Generic, TypeVar

from src.github_profile.models.account import Account, Follower
from src.github_profile.models.repository import ActivityEvent, Repository

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class FetchResult(Generic[T]):
    """
    Результат необязательного запроса.

    Если запрос не удался, ``data`` содержит пустое значение, а ``reason``
    описывает причину деградации.
    """

    data: T
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def degraded(self) -> bool:
        return self.reason is not None


@dataclass(slots=True, frozen=True)
class LanguageShare:
    """Доля языка в суммарном объёме кода выборки репозиториев."""

    name: str
    bytes: int
    percentage: int


@dataclass(slots=True, frozen=True)
class ContributionStats:
    """Производные метрики активности."""

    total_commits: int
    recent_activity: int
    active_repos: int
    inactive_repos: int


@dataclass(slots=True, frozen=True)
class Analysis:
    """
    Агрегированный результат анализа профиля GitHub.

    Неизменяем целиком: последовательности хранятся как кортежи, причины
    деградации как read-only mapping. Повторный анализ создаёт новый объект.
    """

    account: Account
    repos: tuple[Repository, ...]
    languages: tuple[LanguageShare, ...]
    contribution_stats: ContributionStats
    events: tuple[ActivityEvent, ...]
    followers: tuple[Follower, ...]
    strengths: tuple[str, ...]
    weaknesses: tuple[str, ...]
    degraded: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("repos", "languages", "events", "followers", "strengths", "weaknesses"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        object.__setattr__(self, "degraded", MappingProxyType(dict(self.degraded)))
