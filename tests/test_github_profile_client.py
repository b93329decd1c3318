import pytest

from src.github_profile.aggregator import ProfileAggregator
from src.github_profile.errors import NotFound, RateLimited, UpstreamError
from src.github_profile.github_profile_client import GithubProfileClient
from tests.factories import NOW, event_payload, repo_payload, user_payload


async def test_fetch_account_maps_payload_and_sends_token(upstream, client):
    upstream.set("/users/octocat", user_payload())

    account = await client.fetch_account("octocat")

    assert account.login == "octocat"
    assert account.followers == 120
    assert account.created_at.year == 2011
    request = upstream.requests[0]
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["Accept"] == "application/vnd.github.v3+json"


async def test_anonymous_client_sends_no_authorization(upstream):
    upstream.set("/users/octocat", user_payload())

    async with GithubProfileClient(None, base_url=upstream.base_url) as anonymous:
        await anonymous.fetch_account("octocat")

    assert "Authorization" not in upstream.requests[0].headers


async def test_fetch_repositories_keeps_order_and_query(upstream, client):
    upstream.set(
        "/users/octocat/repos",
        [repo_payload("newest", topics=["cli", "async"]), repo_payload("older", fork=True)],
    )

    repos = await client.fetch_repositories("octocat")

    assert [repo.name for repo in repos] == ["newest", "older"]
    assert repos[0].topics == ("cli", "async")
    assert repos[1].fork is True
    query = upstream.requests[0].query
    assert query["per_page"] == "100"
    assert query["sort"] == "updated"


@pytest.mark.parametrize(
    ("status", "error"),
    [(404, NotFound), (403, RateLimited), (429, RateLimited), (500, UpstreamError)],
)
async def test_mandatory_fetch_errors(upstream, client, status, error):
    upstream.set("/users/octocat", {"message": "boom"}, status=status)

    with pytest.raises(error):
        await client.fetch_account("octocat")


async def test_upstream_error_carries_status(upstream, client):
    upstream.set("/users/octocat/repos", {"message": "unavailable"}, status=503)

    with pytest.raises(UpstreamError) as exc_info:
        await client.fetch_repositories("octocat")

    assert exc_info.value.status == 503


async def test_network_error_is_upstream_error():
    async with GithubProfileClient(None, base_url="http://127.0.0.1:1") as unreachable:
        with pytest.raises(UpstreamError) as exc_info:
            await unreachable.fetch_account("octocat")

    assert exc_info.value.status is None


async def test_optional_fetches_degrade_instead_of_raising(upstream, client):
    upstream.set("/users/octocat/followers", {"message": "boom"}, status=500)

    events = await client.fetch_events("octocat")
    followers = await client.fetch_followers("octocat")
    languages = await client.fetch_repository_languages("octocat", "missing")
    contributors = await client.fetch_repository_contributors("octocat", "missing")

    assert events.data == [] and events.degraded
    assert "NotFound" in events.reason
    assert followers.data == [] and "500" in followers.reason
    assert languages.data == {} and languages.degraded
    assert contributors.data == [] and contributors.degraded


async def test_optional_fetches_return_data(upstream, client):
    upstream.set("/users/octocat/events", [event_payload(1, days_ago=2)])
    upstream.set(
        "/users/octocat/followers",
        [{"login": "hubot", "id": 2, "avatar_url": "a", "html_url": "h"}],
    )
    upstream.set("/repos/octocat/spoon/languages", {"Python": 1200, "Shell": 30})
    upstream.set(
        "/repos/octocat/spoon/contributors",
        [{"login": "octocat", "id": 1, "avatar_url": "a", "html_url": "h", "contributions": 7}],
    )

    events = await client.fetch_events("octocat")
    followers = await client.fetch_followers("octocat")
    languages = await client.fetch_repository_languages("octocat", "spoon")
    contributors = await client.fetch_repository_contributors("octocat", "spoon", 5)

    assert events.ok and events.data[0].type == "PushEvent"
    assert followers.ok and followers.data[0].login == "hubot"
    assert languages.ok and languages.data == {"Python": 1200, "Shell": 30}
    assert contributors.ok and contributors.data[0].contributions == 7

    queries = {request.path: request.query for request in upstream.requests}
    assert queries["/users/octocat/events"]["per_page"] == "100"
    assert queries["/users/octocat/followers"]["per_page"] == "30"
    assert queries["/repos/octocat/spoon/contributors"]["per_page"] == "5"


async def test_analysis_survives_failing_followers(upstream, client):
    upstream.set("/users/octocat", user_payload())
    upstream.set(
        "/users/octocat/repos",
        [
            repo_payload("Hello-World", pushed_days_ago=10, description="My first repository on GitHub!"),
            repo_payload("linguist", pushed_days_ago=400),
        ],
    )
    upstream.set("/users/octocat/followers", {"message": "boom"}, status=500)
    upstream.set("/repos/octocat/Hello-World/languages", {"Python": 300, "C": 100})

    analysis = await ProfileAggregator(client).analyze("octocat", now=NOW)

    assert analysis.followers == ()
    assert analysis.events == ()
    assert set(analysis.degraded) == {"followers", "events", "languages:linguist"}
    assert [(s.name, s.percentage) for s in analysis.languages] == [("Python", 75), ("C", 25)]
    assert analysis.contribution_stats.active_repos == 1
    assert analysis.contribution_stats.inactive_repos == 1
    assert "Good project documentation practices" in analysis.strengths


async def test_analysis_aborts_when_account_missing(upstream, client):
    upstream.set("/users/octocat/repos", [])

    with pytest.raises(NotFound):
        await ProfileAggregator(client).analyze("octocat", now=NOW)
