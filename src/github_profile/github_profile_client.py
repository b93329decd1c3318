import asyncio
from collections.abc import Awaitable
from typing import Any, TypeVar

from aiohttp import ClientError, ClientSession, ClientTimeout

from src.config.logger import logger
from src.github_profile.config import (
    CONTRIBUTORS_PER_REPO,
    EVENTS_LIMIT,
    FOLLOWERS_LIMIT,
    GITHUB_API_BASE_URL,
    GITHUB_API_VERSION,
    REPOSITORIES_LIMIT,
)
from src.github_profile.errors import NotFound, RateLimited, UpstreamError
from src.github_profile.models.account import Account, Contributor, Follower
from src.github_profile.models.analysis import FetchResult
from src.github_profile.models.repository import ActivityEvent, Repository
from src.github_profile.rate_limiter import RateLimiter

T = TypeVar("T")


class GithubProfileClient:
    """
    Клиент GitHub REST API для чтения профиля пользователя.

    Обязательные данные (профиль и репозитории) бросают исключения
    NotFound / RateLimited / UpstreamError. Необязательные данные (события,
    подписчики, языки и участники репозиториев) возвращаются как FetchResult:
    при ошибке вместо исключения отдаётся пустое значение и причина.

    :param access_token: GitHub Personal Access Token (необязателен)
    :param base_url: Базовый URL GitHub API
    :param max_concurrent_requests: Максимальное количество одновременных HTTP-запросов
    :param requests_per_second: Ограничение RPS, 0 или None отключает ограничение
    :return:
    """

    def __init__(
        self,
        access_token: str | None = None,
        *,
        base_url: str = GITHUB_API_BASE_URL,
        max_concurrent_requests: int | None = None,
        requests_per_second: int | None = None,
        timeout: float | None = None,
    ):
        logger.info(
            "Инициализация GithubProfileClient",
            extra={
                "base_url": base_url,
                "max_concurrent_requests": max_concurrent_requests,
                "requests_per_second": requests_per_second,
                "authenticated": bool(access_token),
            },
        )

        headers = {
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        self._base_url = base_url.rstrip("/")
        session_kwargs: dict[str, Any] = {"headers": headers}
        if timeout:
            session_kwargs["timeout"] = ClientTimeout(total=timeout)
        self._session = ClientSession(**session_kwargs)

        self._mcr = asyncio.Semaphore(max_concurrent_requests or 10)
        self._rate_limiter = (
            RateLimiter(requests_per_second) if requests_per_second else None
        )

    async def __aenter__(self):
        """
        Вход в контекстный менеджер.

        :return: self
        """
        return self

    async def __aexit__(self, exc_type, exc, tb):
        """
        Выход из контекстного менеджера. Закрывает HTTP-сессию.

        :param exc_type: Тип исключения
        :param exc: Исключение
        :param tb: Traceback
        :return:
        """
        await self.close()

    async def _safe_request(
        self,
        endpoint: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Выполняет GET-запрос к GitHub API и переводит ошибки в доменные исключения.

        :param endpoint: API endpoint GitHub
        :param params: Параметры запроса
        :return: JSON-ответ GitHub API
        """
        url = f"{self._base_url}/{endpoint.lstrip('/')}"

        async with self._mcr:
            if self._rate_limiter is not None:
                await self._rate_limiter.acquire()

            logger.info(
                "Выполнение запроса к GitHub API",
                extra={"url": url, "params": params},
            )

            try:
                async with self._session.get(url, params=params) as resp:
                    if resp.status == 404:
                        logger.error("Ресурс GitHub не найден", extra={"url": url})
                        raise NotFound(endpoint)

                    if resp.status in (403, 429):
                        text = await resp.text()
                        logger.error(
                            "Превышение лимитов GitHub API",
                            extra={"status": resp.status, "url": url},
                        )
                        raise RateLimited(text[:200])

                    if resp.status >= 400:
                        text = await resp.text()
                        logger.error(
                            "Ошибка GitHub API",
                            extra={"status": resp.status, "url": url, "response": text[:200]},
                        )
                        raise UpstreamError(resp.status, text[:200])

                    data = await resp.json(content_type=None)
                    logger.info("Запрос успешно выполнен", extra={"url": url})
                    return data

            except (ClientError, asyncio.TimeoutError) as e:
                logger.error(
                    "Сетевая ошибка GitHub API",
                    extra={"url": url, "error": str(e)},
                )
                raise UpstreamError(None, str(e)) from e

            except ValueError as e:
                logger.error("Некорректный JSON от GitHub API", extra={"url": url})
                raise UpstreamError(None, "invalid JSON payload") from e

    async def _best_effort(
        self, source: str, request: Awaitable[T], empty: T
    ) -> FetchResult[T]:
        """
        Выполняет необязательный запрос, заменяя любую ошибку пустым результатом.

        :param source: Имя источника данных для лога и причины
        :param request: Корутина запроса
        :param empty: Значение, возвращаемое при ошибке
        :return: FetchResult с данными или с причиной деградации
        """
        try:
            return FetchResult(await request)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            logger.warning(
                "Необязательные данные недоступны, используется пустой результат",
                extra={"source": source, "reason": reason},
            )
            return FetchResult(empty, reason)

    async def fetch_account(self, login: str) -> Account:
        """
        Получение профиля пользователя.

        :param login: Логин GitHub
        :return: Объект Account
        """
        data = await self._safe_request(f"users/{login}")
        return Account.from_api(data)

    async def fetch_repositories(self, login: str) -> list[Repository]:
        """
        Получение до 100 последних обновлённых репозиториев пользователя.

        :param login: Логин GitHub
        :return: Список Repository в порядке, отданном GitHub
        """
        data = await self._safe_request(
            f"users/{login}/repos",
            params={"per_page": REPOSITORIES_LIMIT, "sort": "updated"},
        )
        return [Repository.from_api(item) for item in data]

    async def _get_events(self, login: str) -> list[ActivityEvent]:
        """
        Запрос событий пользователя без подавления ошибок.

        :param login: Логин GitHub
        :return: Список ActivityEvent
        """
        data = await self._safe_request(
            f"users/{login}/events", params={"per_page": EVENTS_LIMIT}
        )
        return [ActivityEvent.from_api(item) for item in data]

    async def fetch_events(self, login: str) -> FetchResult[list[ActivityEvent]]:
        """
        Получение до 100 последних публичных событий пользователя.

        :param login: Логин GitHub
        :return: FetchResult со списком ActivityEvent
        """
        return await self._best_effort("events", self._get_events(login), [])

    async def _get_followers(self, login: str) -> list[Follower]:
        """
        Запрос подписчиков пользователя без подавления ошибок.

        :param login: Логин GitHub
        :return: Список Follower
        """
        data = await self._safe_request(
            f"users/{login}/followers", params={"per_page": FOLLOWERS_LIMIT}
        )
        return [Follower.from_api(item) for item in data]

    async def fetch_followers(self, login: str) -> FetchResult[list[Follower]]:
        """
        Получение до 30 подписчиков пользователя.

        :param login: Логин GitHub
        :return: FetchResult со списком Follower
        """
        return await self._best_effort("followers", self._get_followers(login), [])

    async def _get_languages(self, owner: str, repo: str) -> dict[str, int]:
        """
        Запрос языков репозитория без подавления ошибок.

        :param owner: Логин владельца репозитория
        :param repo: Имя репозитория
        :return: Словарь язык -> байты (отрицательные значения обнуляются)
        """
        data = await self._safe_request(f"repos/{owner}/{repo}/languages")
        return {name: max(int(count), 0) for name, count in data.items()}

    async def fetch_repository_languages(
        self, owner: str, repo: str
    ) -> FetchResult[dict[str, int]]:
        """
        Получение объёма кода (в байтах) по языкам для одного репозитория.

        :param owner: Логин владельца репозитория
        :param repo: Имя репозитория
        :return: FetchResult со словарём язык -> байты
        """
        return await self._best_effort(
            f"languages:{repo}", self._get_languages(owner, repo), {}
        )

    async def _get_contributors(
        self, owner: str, repo: str, limit: int
    ) -> list[Contributor]:
        """
        Запрос участников репозитория без подавления ошибок.

        :param owner: Логин владельца репозитория
        :param repo: Имя репозитория
        :param limit: Максимум участников (per_page)
        :return: Список Contributor
        """
        data = await self._safe_request(
            f"repos/{owner}/{repo}/contributors", params={"per_page": limit}
        )
        # Пустой репозиторий GitHub отдаёт 204 без тела
        return [Contributor.from_api(item) for item in data or []]

    async def fetch_repository_contributors(
        self, owner: str, repo: str, limit: int | None = None
    ) -> FetchResult[list[Contributor]]:
        """
        Получение участников репозитория.

        :param owner: Логин владельца репозитория
        :param repo: Имя репозитория
        :param limit: Максимум участников (per_page)
        :return: FetchResult со списком Contributor
        """
        return await self._best_effort(
            f"contributors:{repo}",
            self._get_contributors(owner, repo, limit or CONTRIBUTORS_PER_REPO),
            [],
        )

    async def close(self):
        """
        Закрытие HTTP-сессии и лимитера.

        :return:
        """
        logger.info("Закрытие GitHub HTTP-сессии")
        if self._rate_limiter is not None:
            await self._rate_limiter.close()
        await self._session.close()
