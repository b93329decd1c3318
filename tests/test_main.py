import json
from functools import partial

import pytest

from src.github_profile import main as cli
from src.github_profile.github_profile_client import GithubProfileClient
from tests.factories import repo_payload, user_payload


async def test_prints_analysis_with_contributors(upstream, monkeypatch, capsys):
    upstream.set("/users/octocat", user_payload())
    upstream.set("/users/octocat/repos", [repo_payload("Hello-World")])
    upstream.set(
        "/repos/octocat/Hello-World/contributors",
        [{"login": "octocat", "id": 1, "avatar_url": "", "html_url": ""}],
    )
    monkeypatch.setattr(
        cli, "GithubProfileClient", partial(GithubProfileClient, base_url=upstream.base_url)
    )

    code = await cli.main(["octocat", "--contributors"])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["github"]["account"]["login"] == "octocat"
    assert output["contributors"]["Hello-World"][0]["login"] == "octocat"


async def test_missing_user_exits_with_error(upstream, monkeypatch, capsys):
    monkeypatch.setattr(
        cli, "GithubProfileClient", partial(GithubProfileClient, base_url=upstream.base_url)
    )

    assert await cli.main(["ghost"]) == 1
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("login", ["a/repos", "bad_name", "a" * 40, ""])
async def test_rejects_invalid_login_before_any_request(upstream, monkeypatch, login):
    monkeypatch.setattr(
        cli, "GithubProfileClient", partial(GithubProfileClient, base_url=upstream.base_url)
    )

    with pytest.raises(SystemExit) as exc_info:
        await cli.main([login])

    assert exc_info.value.code == 2
    assert upstream.requests == []
