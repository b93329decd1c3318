import re
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

import uvicorn
from fastapi import APIRouter, FastAPI, HTTPException, Path, Query, Request, status
from pydantic import BaseModel

from src.advisory.advisory_client import AdvisoryClient
from src.advisory.config import ADVISORY_API_KEY, ADVISORY_URL
from src.api.config import API_HOST, API_PORT, SESSION_TTL_SECONDS
from src.config.logger import logger
from src.github_profile.aggregator import ProfileAggregator
from src.github_profile.config import (
    ENRICHMENT_CONTRIBUTORS_PER_REPO,
    ENRICHMENT_MAX_REPOS,
    GITHUB_API_BASE_URL,
    GITHUB_TOKEN,
    MAX_CONCURRENT_REQUESTS,
    REQUESTS_PER_SECOND,
    USERNAME_PATTERN,
)
from src.github_profile.contributors import fetch_contributors_map
from src.github_profile.errors import GitHubError, NotFound, RateLimited
from src.github_profile.github_profile_client import GithubProfileClient
from src.reports.report_service import AdvisoryUnavailable, ReportService
from src.reports.serialization import to_dict
from src.reports.session_store import ReportSessionStore

Username = Annotated[str, Path(pattern=USERNAME_PATTERN)]


class AnalyzeRequest(BaseModel):
    username: str
    with_advice: bool = True


def github_http_error(exc: GitHubError) -> HTTPException:
    """
    Переводит ошибку GitHub в HTTP-ответ.

    :param exc: Ошибка GitHub
    :return: HTTPException
    """
    if isinstance(exc, NotFound):
        return HTTPException(status.HTTP_404_NOT_FOUND, detail="User not found")
    if isinstance(exc, RateLimited):
        return HTTPException(
            status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Please try again later.",
        )
    return HTTPException(status.HTTP_502_BAD_GATEWAY, detail=str(exc))


def make_lifespan(
    github_base_url: str,
    github_token: str | None,
    advisory_url: str,
    advisory_api_key: str | None,
    session_ttl: int,
):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """
        Контекст жизненного цикла приложения FastAPI.

        Открывает HTTP-клиенты GitHub и сервиса рекомендаций при старте
        и закрывает их при завершении работы.

        :param app: Экземпляр приложения FastAPI.
        :return: None
        """
        github = GithubProfileClient(
            github_token,
            base_url=github_base_url,
            max_concurrent_requests=MAX_CONCURRENT_REQUESTS,
            requests_per_second=REQUESTS_PER_SECOND,
        )
        advisory = AdvisoryClient(advisory_api_key, url=advisory_url)

        app.state.github = github
        app.state.aggregator = ProfileAggregator(github)
        app.state.reports = ReportService(app.state.aggregator, advisory)
        app.state.sessions = ReportSessionStore(session_ttl)
        logger.info("HTTP-клиенты созданы")

        try:
            yield
        finally:
            await github.close()
            await advisory.close()
            logger.info("HTTP-клиенты закрыты")

    return lifespan


async def analyze(body: AnalyzeRequest, request: Request):
    """
    Полный анализ профиля с рекомендациями и сохранением отчёта в сессии.

    :param body: Логин и флаг запроса рекомендаций
    :param request: Текущий HTTP-запрос
    :return: Идентификатор сессии и отчёт
    """
    if not re.fullmatch(USERNAME_PATTERN, body.username):
        raise HTTPException(
            status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid GitHub username"
        )

    try:
        report = await request.app.state.reports.build_report(
            body.username, with_advice=body.with_advice
        )
    except GitHubError as exc:
        raise github_http_error(exc)
    except AdvisoryUnavailable as exc:
        raise HTTPException(
            status.HTTP_502_BAD_GATEWAY,
            detail={"error": "AI analysis failed", "github": to_dict(exc.analysis)},
        )

    session_id = request.app.state.sessions.create(report)
    return {"session_id": session_id, "report": to_dict(report)}


async def get_github_analysis(username: Username, request: Request):
    """
    Анализ профиля GitHub без рекомендаций.

    :param username: Логин GitHub
    :param request: Текущий HTTP-запрос
    :return: Analysis
    """
    try:
        analysis = await request.app.state.aggregator.analyze(username)
    except GitHubError as exc:
        raise github_http_error(exc)
    return to_dict(analysis)


async def get_contributors(
    username: Username,
    request: Request,
    max_repos: Annotated[int, Query(ge=1, le=100)] = ENRICHMENT_MAX_REPOS,
    per_repo: Annotated[int, Query(ge=1, le=100)] = ENRICHMENT_CONTRIBUTORS_PER_REPO,
):
    """
    Участники последних обновлённых репозиториев пользователя.

    :param username: Логин GitHub
    :param request: Текущий HTTP-запрос
    :param max_repos: Сколько репозиториев обработать
    :param per_repo: Сколько участников на репозиторий
    :return: Словарь репозиторий -> участники
    """
    try:
        result = await fetch_contributors_map(
            request.app.state.github,
            username,
            max_repos=max_repos,
            contributors_per_repo=per_repo,
        )
    except GitHubError as exc:
        raise github_http_error(exc)
    return to_dict(result)


async def get_report(session_id: str, request: Request):
    """
    Чтение сохранённого отчёта по идентификатору сессии.

    :param session_id: Идентификатор сессии
    :param request: Текущий HTTP-запрос
    :return: ProfileReport
    """
    report = request.app.state.sessions.get(session_id)
    if report is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Report not found")
    return to_dict(report)


async def delete_report(session_id: str, request: Request):
    """
    Удаление отчёта из сессии.

    :param session_id: Идентификатор сессии
    :param request: Текущий HTTP-запрос
    :return: Идентификатор удалённой сессии
    """
    if not request.app.state.sessions.invalidate(session_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Report not found")
    return {"deleted": session_id}


def register_routes(app: FastAPI) -> None:
    """
    Регистрация роутов приложения.

    :param app: Экземпляр приложения FastAPI.
    """
    router = APIRouter(prefix="/api")
    router.add_api_route("/analyze", endpoint=analyze, methods=["POST"])
    router.add_api_route("/github/{username}", endpoint=get_github_analysis)
    router.add_api_route("/github/{username}/contributors", endpoint=get_contributors)
    router.add_api_route("/reports/{session_id}", endpoint=get_report)
    router.add_api_route("/reports/{session_id}", endpoint=delete_report, methods=["DELETE"])
    app.include_router(router)


def create_app(
    *,
    github_base_url: str = GITHUB_API_BASE_URL,
    github_token: str | None = GITHUB_TOKEN,
    advisory_url: str = ADVISORY_URL,
    advisory_api_key: str | None = ADVISORY_API_KEY,
    session_ttl: int = SESSION_TTL_SECONDS,
) -> FastAPI:
    """
    Фабрика создания экземпляра FastAPI.

    :return: Настроенный экземпляр приложения FastAPI.
    """
    app = FastAPI(
        title="GitHub Profile Analyzer",
        lifespan=make_lifespan(
            github_base_url, github_token, advisory_url, advisory_api_key, session_ttl
        ),
    )
    register_routes(app)
    return app


if __name__ == "__main__":
    uvicorn.run("src.api.main:create_app", factory=True, host=API_HOST, port=API_PORT)
