import pytest

from src.github_profile.contributors import fetch_contributors_map
from src.github_profile.errors import RateLimited
from src.github_profile.models.repository import Repository
from tests.factories import repo_payload


def contributor(login: str) -> dict:
    return {"login": login, "id": len(login), "avatar_url": "", "html_url": "", "contributions": 3}


async def test_failed_repository_does_not_affect_siblings(upstream, client):
    upstream.set("/repos/octocat/good/contributors", [contributor("octocat"), contributor("hubot")])
    upstream.set("/repos/octocat/broken/contributors", {"message": "boom"}, status=500)
    repos = [Repository.from_api(repo_payload(name)) for name in ("good", "broken")]

    result = await fetch_contributors_map(client, "octocat", repos=repos)

    assert list(result.contributors) == ["good"]
    assert [c.login for c in result.contributors["good"]] == ["octocat", "hubot"]
    assert "broken" not in result.contributors
    assert "500" in result.degraded["broken"]


async def test_fetches_repository_list_when_not_given(upstream, client):
    upstream.set(
        "/users/octocat/repos", [repo_payload(f"r{i}") for i in range(12)]
    )
    for i in range(12):
        upstream.set(f"/repos/octocat/r{i}/contributors", [contributor("octocat")])

    result = await fetch_contributors_map(
        client, "octocat", max_repos=3, contributors_per_repo=2
    )

    assert sorted(result.contributors) == ["r0", "r1", "r2"]
    contributor_queries = [
        request.query["per_page"]
        for request in upstream.requests
        if request.path.endswith("/contributors")
    ]
    assert contributor_queries == ["2", "2", "2"]


async def test_repository_list_failure_propagates(upstream, client):
    upstream.set("/users/octocat/repos", {"message": "limit"}, status=403)

    with pytest.raises(RateLimited):
        await fetch_contributors_map(client, "octocat")
