from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.github_profile.models.timestamps import parse_timestamp


@dataclass(slots=True, frozen=True)
class Repository:
    """Модель репозитория с основной статистикой и временными метками."""

    id: int
    name: str
    full_name: str
    description: str | None
    html_url: str
    homepage: str | None
    language: str | None
    stars: int
    watchers: int
    forks: int
    open_issues: int
    created_at: datetime | None
    updated_at: datetime | None
    pushed_at: datetime | None
    size: int
    topics: tuple[str, ...] = ()
    fork: bool = False
    archived: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Repository":
        """
        Создаёт Repository из элемента ответа ``GET /users/{login}/repos``.

        :param data: Сырые данные репозитория из GitHub API
        :return: Объект Repository
        """
        return cls(
            id=data["id"],
            name=data["name"],
            full_name=data.get("full_name") or data["name"],
            description=data.get("description"),
            html_url=data.get("html_url") or "",
            homepage=data.get("homepage") or None,
            language=data.get("language"),
            stars=data.get("stargazers_count") or 0,
            watchers=data.get("watchers_count") or 0,
            forks=data.get("forks_count") or 0,
            open_issues=data.get("open_issues_count") or 0,
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            pushed_at=parse_timestamp(data.get("pushed_at")),
            size=data.get("size") or 0,
            topics=tuple(data.get("topics") or ()),
            fork=bool(data.get("fork")),
            archived=bool(data.get("archived")),
        )


@dataclass(slots=True, frozen=True)
class ActivityEvent:
    """Публичное событие пользователя. Используется только для подсчётов."""

    id: str
    type: str
    created_at: datetime | None
    repo_id: int | None
    repo_name: str | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ActivityEvent":
        """
        Создаёт ActivityEvent из элемента ответа ``GET /users/{login}/events``.

        :param data: Сырые данные события из GitHub API
        :return: Объект ActivityEvent
        """
        repo = data.get("repo") or {}
        return cls(
            id=str(data["id"]),
            type=data.get("type") or "",
            created_at=parse_timestamp(data.get("created_at")),
            repo_id=repo.get("id"),
            repo_name=repo.get("name"),
        )
