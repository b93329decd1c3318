import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.config.logger import logger
from src.github_profile.config import (
    ENRICHMENT_CONTRIBUTORS_PER_REPO,
    ENRICHMENT_MAX_REPOS,
)
from src.github_profile.github_profile_client import GithubProfileClient
from src.github_profile.models.account import Contributor
from src.github_profile.models.repository import Repository


@dataclass(slots=True)
class RepositoryContributors:
    """Участники по репозиториям. Содержит только успешно загруженные репозитории."""

    owner: str
    contributors: dict[str, list[Contributor]] = field(default_factory=dict)
    degraded: dict[str, str] = field(default_factory=dict)


async def fetch_contributors_map(
    client: GithubProfileClient,
    owner: str,
    *,
    repos: Sequence[Repository] | None = None,
    max_repos: int = ENRICHMENT_MAX_REPOS,
    contributors_per_repo: int = ENRICHMENT_CONTRIBUTORS_PER_REPO,
) -> RepositoryContributors:
    """
    Параллельно загружает участников для ограниченного набора репозиториев.

    Ошибка по одному репозиторию не влияет на остальные. Если ``repos`` не
    передан, список репозиториев запрашивается заново, и его ошибка
    пробрасывается.

    :param client: Клиент GitHub API
    :param owner: Логин владельца
    :param repos: Уже полученные репозитории (в порядке обновления)
    :param max_repos: Сколько репозиториев обработать
    :param contributors_per_repo: Сколько участников запрашивать на репозиторий
    :return: RepositoryContributors
    """
    if repos is None:
        repos = await client.fetch_repositories(owner)

    selected = repos[:max_repos]
    logger.info(
        "Запрос участников репозиториев",
        extra={"owner": owner, "repos": len(selected), "per_repo": contributors_per_repo},
    )

    result = RepositoryContributors(owner=owner)

    async def load(repo: Repository) -> None:
        fetched = await client.fetch_repository_contributors(
            owner, repo.name, contributors_per_repo
        )
        # Ключи уникальны для каждого репозитория, запись без блокировок
        if fetched.ok:
            result.contributors[repo.name] = fetched.data
        else:
            result.degraded[repo.name] = fetched.reason

    await asyncio.gather(*(load(repo) for repo in selected))

    logger.info(
        "Участники репозиториев загружены",
        extra={
            "owner": owner,
            "succeeded": len(result.contributors),
            "failed": len(result.degraded),
        },
    )
    return result
