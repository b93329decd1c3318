import argparse
import asyncio
import json
import re

from src.config.logger import logger
from src.github_profile.aggregator import ProfileAggregator
from src.github_profile.config import (
    GITHUB_TOKEN,
    MAX_CONCURRENT_REQUESTS,
    REQUESTS_PER_SECOND,
    USERNAME_PATTERN,
)
from src.github_profile.contributors import fetch_contributors_map
from src.github_profile.errors import GitHubError
from src.github_profile.github_profile_client import GithubProfileClient
from src.reports.serialization import to_dict


def github_login(value: str) -> str:
    """
    Проверяет логин GitHub перед подстановкой в путь запроса.

    :param value: Логин из командной строки
    :return: Логин без изменений
    """
    if not re.fullmatch(USERNAME_PATTERN, value):
        raise argparse.ArgumentTypeError(f"invalid GitHub username: {value!r}")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Анализ публичного профиля GitHub")
    parser.add_argument("login", type=github_login, help="Логин пользователя GitHub")
    parser.add_argument(
        "--contributors",
        action="store_true",
        help="Дополнительно загрузить участников последних репозиториев",
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Запуск анализа профиля и вывод результата в JSON."""
    args = parse_args(argv)
    logger.info("Запуск анализа профиля GitHub", extra={"login": args.login})

    async with GithubProfileClient(
        GITHUB_TOKEN,
        max_concurrent_requests=MAX_CONCURRENT_REQUESTS,
        requests_per_second=REQUESTS_PER_SECOND,
    ) as client:
        try:
            analysis = await ProfileAggregator(client).analyze(args.login)
            output = {"github": to_dict(analysis)}

            if args.contributors:
                contributors = await fetch_contributors_map(
                    client, args.login, repos=analysis.repos
                )
                output["contributors"] = to_dict(contributors)["contributors"]

        except GitHubError as e:
            logger.error(f"Ошибка анализа профиля: {e}")
            return 1

    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
