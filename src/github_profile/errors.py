class GitHubError(RuntimeError):
    """Базовая ошибка обращения к GitHub API."""


class NotFound(GitHubError):
    """Запрошенный пользователь или репозиторий не существует (404)."""

    def __init__(self, resource: str):
        super().__init__(f"GitHub resource not found: {resource}")
        self.resource = resource


class RateLimited(GitHubError):
    """Превышен лимит запросов GitHub API (403/429)."""

    def __init__(self, detail: str = ""):
        super().__init__(
            f"Rate limit exceeded. Please try again later. {detail}".strip()
        )
        self.detail = detail


class UpstreamError(GitHubError):
    """Любой другой неуспешный ответ или сетевая ошибка (status=None)."""

    def __init__(self, status: int | None, detail: str = ""):
        label = status if status is not None else "network"
        super().__init__(f"GitHub API error: {label} {detail}".strip())
        self.status = status
        self.detail = detail
