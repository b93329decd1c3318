from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.github_profile.models.timestamps import parse_timestamp


@dataclass(slots=True, frozen=True)
class Account:
    """Снимок профиля пользователя GitHub на момент анализа."""

    login: str
    id: int
    avatar_url: str
    name: str | None
    bio: str | None
    company: str | None
    blog: str | None
    location: str | None
    public_repos: int
    public_gists: int
    followers: int
    following: int
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Account":
        """
        Создаёт Account из ответа ``GET /users/{login}``.

        :param data: JSON-ответ GitHub API
        :return: Объект Account
        """
        return cls(
            login=data["login"],
            id=data["id"],
            avatar_url=data.get("avatar_url") or "",
            name=data.get("name"),
            bio=data.get("bio"),
            company=data.get("company"),
            blog=data.get("blog") or None,
            location=data.get("location"),
            public_repos=data.get("public_repos") or 0,
            public_gists=data.get("public_gists") or 0,
            followers=data.get("followers") or 0,
            following=data.get("following") or 0,
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )


@dataclass(slots=True, frozen=True)
class Follower:
    """Краткая карточка подписчика (так её отдаёт ``/followers``)."""

    login: str
    id: int
    avatar_url: str
    html_url: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Follower":
        """
        Создаёт Follower из элемента ответа ``GET /users/{login}/followers``.

        :param data: Сырые данные подписчика из GitHub API
        :return: Объект Follower
        """
        return cls(
            login=data["login"],
            id=data["id"],
            avatar_url=data.get("avatar_url") or "",
            html_url=data.get("html_url") or "",
        )


@dataclass(slots=True, frozen=True)
class Contributor:
    """Участник репозитория. Привязан к репозиторию по имени, а не к аккаунту."""

    login: str
    id: int
    avatar_url: str
    html_url: str
    contributions: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Contributor":
        """
        Создаёт Contributor из элемента ответа ``GET /repos/{owner}/{repo}/contributors``.

        :param data: Сырые данные участника из GitHub API
        :return: Объект Contributor
        """
        return cls(
            login=data.get("login") or "unknown",
            id=data.get("id") or 0,
            avatar_url=data.get("avatar_url") or "",
            html_url=data.get("html_url") or "",
            contributions=data.get("contributions"),
        )
