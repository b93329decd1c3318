import os

from src.config.config import config

GITHUB_TOKEN = os.getenv("GITHUB_TOKEN") or None
GITHUB_API_BASE_URL = config.get("GitHub", "url_api", fallback="https://api.github.com")
GITHUB_API_VERSION = config.get("GitHub", "api_version", fallback="2022-11-28")

MAX_CONCURRENT_REQUESTS = config.getint(
    "GithubProfileClient", "max_concurrent_requests", fallback=10
)
REQUESTS_PER_SECOND = config.getint(
    "GithubProfileClient", "requests_per_second", fallback=0
)
CONTRIBUTORS_PER_REPO = config.getint(
    "GithubProfileClient", "contributors_per_repo", fallback=30
)

ENRICHMENT_MAX_REPOS = config.getint("Enrichment", "max_repos", fallback=8)
ENRICHMENT_CONTRIBUTORS_PER_REPO = config.getint(
    "Enrichment", "contributors_per_repo", fallback=5
)

REPOSITORIES_LIMIT = 100
EVENTS_LIMIT = 100
FOLLOWERS_LIMIT = 30

# Логин GitHub: латиница, цифры и дефис, не длиннее 39 символов
USERNAME_PATTERN = r"^[A-Za-z0-9-]{1,39}$"
