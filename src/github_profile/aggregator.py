import asyncio
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta

from src.config.logger import logger
from src.github_profile.github_profile_client import GithubProfileClient
from src.github_profile.models.account import Account, Follower
from src.github_profile.models.analysis import (
    Analysis,
    ContributionStats,
    FetchResult,
    LanguageShare,
)
from src.github_profile.models.repository import ActivityEvent, Repository

LANGUAGE_SAMPLE_SIZE = 10
TOP_LANGUAGES = 8
ACTIVE_WINDOW = timedelta(days=180)
INACTIVE_WINDOW = timedelta(days=365)
PUSH_EVENT = "PushEvent"


def merge_languages(language_maps: Iterable[Mapping[str, int]]) -> dict[str, int]:
    """
    Суммирует байты по языкам из нескольких репозиториев.

    :param language_maps: Словари язык -> байты
    :return: Объединённый словарь
    """
    merged: dict[str, int] = {}
    for languages in language_maps:
        for name, count in languages.items():
            merged[name] = merged.get(name, 0) + count
    return merged


def language_shares(
    language_bytes: Mapping[str, int], limit: int | None = TOP_LANGUAGES
) -> list[LanguageShare]:
    """
    Считает доли языков и оставляет ``limit`` самых крупных по байтам.

    Процент считается от суммы по всем языкам, а не только по оставшимся,
    поэтому после обрезки сумма процентов может быть меньше 100.

    :param language_bytes: Словарь язык -> байты
    :param limit: Сколько языков оставить (None - все)
    :return: Список LanguageShare по убыванию байтов
    """
    total = sum(language_bytes.values())
    shares = [
        LanguageShare(
            name=name,
            bytes=count,
            percentage=round(count / total * 100) if total > 0 else 0,
        )
        for name, count in language_bytes.items()
    ]
    shares.sort(key=lambda share: share.bytes, reverse=True)
    return shares if limit is None else shares[:limit]


def contribution_stats(
    repos: list[Repository], events: list[ActivityEvent], now: datetime
) -> ContributionStats:
    """
    Считает метрики активности относительно момента ``now``.

    Репозитории без pushed_at не считаются ни активными, ни неактивными.

    :param repos: Репозитории пользователя
    :param events: Публичные события пользователя
    :param now: Текущий момент
    :return: ContributionStats
    """
    six_months_ago = now - ACTIVE_WINDOW
    one_year_ago = now - INACTIVE_WINDOW

    active = sum(
        1 for repo in repos if repo.pushed_at is not None and repo.pushed_at > six_months_ago
    )
    inactive = sum(
        1 for repo in repos if repo.pushed_at is not None and repo.pushed_at < one_year_ago
    )
    recent_events = [
        event
        for event in events
        if event.created_at is not None and event.created_at > six_months_ago
    ]

    return ContributionStats(
        total_commits=sum(1 for event in recent_events if event.type == PUSH_EVENT),
        recent_activity=len(recent_events),
        active_repos=active,
        inactive_repos=inactive,
    )


def evaluate_rules(
    repos: list[Repository],
    followers: list[Follower],
    languages: list[LanguageShare],
    stats: ContributionStats,
) -> tuple[list[str], list[str]]:
    """
    Прогоняет фиксированный набор пороговых правил.

    Каждая тема даёт не больше одной строки и только в один из списков.
    Порядок тем фиксирован.

    :return: (strengths, weaknesses)
    """
    strengths: list[str] = []
    weaknesses: list[str] = []
    repo_count = len(repos)

    if repo_count > 20:
        strengths.append("Prolific repository creator with diverse projects")
    elif repo_count < 5:
        weaknesses.append("Limited public repository presence")

    if stats.active_repos > repo_count * 0.5:
        strengths.append("Maintains active development on most repositories")
    elif stats.active_repos < repo_count * 0.2:
        weaknesses.append("Many repositories appear abandoned or inactive")

    if len(followers) > 50:
        strengths.append("Strong community following indicating influence")
    elif len(followers) < 5:
        weaknesses.append("Limited community visibility and followers")

    if len(languages) > 4:
        strengths.append("Polyglot developer with diverse language skills")
    elif len(languages) < 2:
        weaknesses.append("Limited language diversity in public projects")

    # Для звёзд слабой стороны нет
    if sum(repo.stars for repo in repos) > 100:
        strengths.append("Projects have gained community recognition (stars)")

    if stats.recent_activity > 50:
        strengths.append("Highly active contributor with consistent engagement")
    elif stats.recent_activity < 10:
        weaknesses.append("Recent GitHub activity is low")

    if any(repo.description and len(repo.description) > 20 for repo in repos):
        strengths.append("Good project documentation practices")
    else:
        weaknesses.append("Projects lack detailed descriptions")

    return strengths, weaknesses


class ProfileAggregator:
    """
    Собирает Analysis из параллельных запросов к GitHub.

    :param client: Клиент GitHub API
    :return:
    """

    def __init__(self, client: GithubProfileClient):
        self._client = client

    async def _sample_languages(
        self, owner: str, repos: list[Repository]
    ) -> tuple[dict[str, int], dict[str, str]]:
        """
        Запрашивает языки первых LANGUAGE_SAMPLE_SIZE репозиториев параллельно.

        :param owner: Логин владельца
        :param repos: Репозитории в порядке ответа GitHub
        :return: Объединённые байты по языкам и причины деградации
        """
        sample = repos[:LANGUAGE_SAMPLE_SIZE]
        results: list[FetchResult[dict[str, int]]] = await asyncio.gather(
            *(self._client.fetch_repository_languages(owner, repo.name) for repo in sample)
        )

        degraded = {
            f"languages:{repo.name}": result.reason
            for repo, result in zip(sample, results)
            if result.degraded
        }
        return merge_languages(result.data for result in results), degraded

    async def analyze(self, login: str, *, now: datetime | None = None) -> Analysis:
        """
        Полный анализ профиля.

        Ошибки профиля и репозиториев пробрасываются и прерывают анализ,
        остальные источники деградируют до пустых значений.

        :param login: Логин GitHub
        :param now: Момент отсчёта окон активности (по умолчанию текущее время)
        :return: Объект Analysis
        """
        logger.info("Начало анализа профиля", extra={"login": login})

        account, repos, events, followers = await asyncio.gather(
            self._client.fetch_account(login),
            self._client.fetch_repositories(login),
            self._client.fetch_events(login),
            self._client.fetch_followers(login),
        )
        return await self.build(account, repos, events, followers, now=now)

    async def build(
        self,
        account: Account,
        repos: list[Repository],
        events: FetchResult[list[ActivityEvent]],
        followers: FetchResult[list[Follower]],
        *,
        now: datetime | None = None,
    ) -> Analysis:
        """
        Агрегирует уже полученные основные данные в Analysis.

        :param account: Профиль пользователя
        :param repos: Репозитории пользователя
        :param events: Результат запроса событий
        :param followers: Результат запроса подписчиков
        :param now: Момент отсчёта окон активности
        :return: Объект Analysis
        """
        now = now or datetime.now(UTC)

        degraded: dict[str, str] = {}
        if events.degraded:
            degraded["events"] = events.reason
        if followers.degraded:
            degraded["followers"] = followers.reason

        language_bytes, language_failures = await self._sample_languages(
            account.login, repos
        )
        degraded.update(language_failures)

        languages = language_shares(language_bytes)
        stats = contribution_stats(repos, events.data, now)
        strengths, weaknesses = evaluate_rules(repos, followers.data, languages, stats)

        logger.info(
            "Анализ профиля завершён",
            extra={
                "login": account.login,
                "repos": len(repos),
                "languages": len(languages),
                "degraded": sorted(degraded),
            },
        )

        return Analysis(
            account=account,
            repos=repos,
            languages=languages,
            contribution_stats=stats,
            events=events.data,
            followers=followers.data,
            strengths=strengths,
            weaknesses=weaknesses,
            degraded=degraded,
        )
