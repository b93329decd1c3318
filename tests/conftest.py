from typing import Any

import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from src.github_profile.github_profile_client import GithubProfileClient


class FakeUpstream:
    """Поддельный HTTP-сервер: (метод, путь) -> (статус, JSON)."""

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[web.Request] = []
        self.bodies: list[Any] = []
        self.base_url = ""

    def set(self, path: str, payload: Any, status: int = 200, method: str = "GET") -> None:
        self.routes[(method, path)] = (status, payload)

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(request)
        if request.can_read_body:
            self.bodies.append(await request.json())

        status, payload = self.routes.get(
            (request.method, request.path), (404, {"message": "Not Found"})
        )
        if isinstance(payload, str):
            return web.Response(text=payload, status=status)
        return web.json_response(payload, status=status)

    def paths(self) -> list[str]:
        return [request.path for request in self.requests]


@pytest_asyncio.fixture
async def upstream():
    fake = FakeUpstream()
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", fake.handle)

    server = TestServer(app)
    await server.start_server()
    fake.base_url = str(server.make_url("")).rstrip("/")
    try:
        yield fake
    finally:
        await server.close()


@pytest_asyncio.fixture
async def client(upstream):
    github = GithubProfileClient("test-token", base_url=upstream.base_url)
    try:
        yield github
    finally:
        await github.close()
