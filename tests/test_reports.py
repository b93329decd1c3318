from datetime import UTC, datetime

import pytest

from src.advisory.errors import AdvisoryServiceError
from src.advisory.models import Advice, CareerPrediction
from src.github_profile.models.account import Account
from src.github_profile.models.analysis import Analysis, ContributionStats
from src.github_profile.models.repository import Repository
from src.reports.models import ProfileReport
from src.reports.report_service import AdvisoryUnavailable, ReportService
from src.reports.serialization import to_dict
from src.reports.session_store import ReportSessionStore
from tests.factories import repo_payload, user_payload


def make_analysis(login: str = "octocat") -> Analysis:
    return Analysis(
        account=Account.from_api(user_payload(login)),
        repos=[Repository.from_api(repo_payload("spoon-knife"))],
        languages=[],
        contribution_stats=ContributionStats(0, 0, 1, 0),
        events=[],
        followers=[],
        strengths=["Good project documentation practices"],
        weaknesses=["Recent GitHub activity is low"],
        degraded={"events": "NotFound: GitHub resource not found: users/octocat/events"},
    )


class StubAggregator:
    def __init__(self, analysis: Analysis):
        self.analysis = analysis

    async def analyze(self, login):
        return self.analysis


class StubAdvisory:
    def __init__(self, advice: Advice | None = None, error: Exception | None = None):
        self.advice = advice
        self.error = error
        self.calls = 0

    async def advise(self, analysis):
        self.calls += 1
        if self.error:
            raise self.error
        return self.advice


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def make_report(login: str = "octocat") -> ProfileReport:
    return ProfileReport(github=make_analysis(login), generated_at=datetime.now(UTC))


class TestReportService:
    async def test_merges_advice_into_report(self):
        advice = Advice(
            recommendations=[],
            roadmap=[],
            career_predictions=[CareerPrediction("SRE", 70, "ops", ["Go"])],
        )
        service = ReportService(StubAggregator(make_analysis()), StubAdvisory(advice))

        report = await service.build_report("octocat")

        assert report.career_predictions[0].role == "SRE"
        assert report.overall_strengths == ["Good project documentation practices"]
        assert report.overall_weaknesses == ["Recent GitHub activity is low"]

    async def test_skips_advice_when_not_requested(self):
        advisory = StubAdvisory(error=AdvisoryServiceError("down"))
        service = ReportService(StubAggregator(make_analysis()), advisory)

        report = await service.build_report("octocat", with_advice=False)

        assert report.recommendations == []
        assert advisory.calls == 0

    async def test_advisory_failure_keeps_analysis(self):
        analysis = make_analysis()
        service = ReportService(
            StubAggregator(analysis), StubAdvisory(error=AdvisoryServiceError("down"))
        )

        with pytest.raises(AdvisoryUnavailable) as exc_info:
            await service.build_report("octocat")

        assert exc_info.value.analysis is analysis
        assert isinstance(exc_info.value, AdvisoryServiceError)


class TestSessionStore:
    def test_create_get_invalidate(self):
        store = ReportSessionStore(ttl_seconds=60)
        report = make_report()

        session_id = store.create(report)

        assert store.get(session_id) is report
        assert store.invalidate(session_id) is True
        assert store.get(session_id) is None
        assert store.invalidate(session_id) is False

    def test_reports_expire(self):
        clock = FakeClock()
        store = ReportSessionStore(ttl_seconds=10, clock=clock)
        first = store.create(make_report("first"))

        clock.now = 5
        second = store.create(make_report("second"))

        clock.now = 10
        assert store.get(first) is None
        assert store.get(second) is not None
        assert len(store) == 1

    def test_expired_report_cannot_be_invalidated(self):
        clock = FakeClock()
        store = ReportSessionStore(ttl_seconds=10, clock=clock)
        clock.now = 100
        session_id = store.create(make_report())

        clock.now = 200

        assert store.invalidate(session_id) is False
        assert store.get(session_id) is None

    def test_new_analysis_gets_new_session(self):
        store = ReportSessionStore(ttl_seconds=60)
        assert store.create(make_report()) != store.create(make_report())


def test_to_dict_is_json_ready():
    data = to_dict(make_report())
    github = data["github"]

    assert github["account"]["created_at"] == "2011-01-25T18:44:36Z"
    assert github["repos"][0]["name"] == "spoon-knife"
    assert github["repos"][0]["pushed_at"].endswith("Z")
    assert github["contribution_stats"]["active_repos"] == 1
    assert github["degraded"]["events"].startswith("NotFound")
    assert data["generated_at"].endswith("Z")


def test_to_dict_rejects_non_dataclass():
    with pytest.raises(TypeError):
        to_dict({"login": "octocat"})
