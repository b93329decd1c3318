from datetime import UTC, datetime

from src.advisory.advisory_client import AdvisoryClient
from src.advisory.errors import AdvisoryServiceError
from src.config.logger import logger
from src.github_profile.aggregator import ProfileAggregator
from src.github_profile.models.analysis import Analysis
from src.reports.models import ProfileReport


class AdvisoryUnavailable(AdvisoryServiceError):
    """
    Сервис рекомендаций не ответил, но анализ GitHub уже собран.

    :param analysis: Готовый анализ профиля
    :param cause: Исходная ошибка сервиса
    """

    def __init__(self, analysis: Analysis, cause: AdvisoryServiceError):
        super().__init__(str(cause))
        self.analysis = analysis


class ReportService:
    """
    Собирает ProfileReport: сначала анализ GitHub, затем рекомендации.

    :param aggregator: Агрегатор профиля
    :param advisory: Клиент сервиса рекомендаций (None - без рекомендаций)
    :return:
    """

    def __init__(self, aggregator: ProfileAggregator, advisory: AdvisoryClient | None = None):
        self._aggregator = aggregator
        self._advisory = advisory

    async def build_report(self, login: str, *, with_advice: bool = True) -> ProfileReport:
        """
        Построение отчёта по логину.

        Ошибки GitHub (профиль, репозитории) пробрасываются как есть. Ошибка
        сервиса рекомендаций пробрасывается как AdvisoryUnavailable вместе
        с уже собранным анализом.

        :param login: Логин GitHub
        :param with_advice: Запрашивать ли рекомендации
        :return: ProfileReport
        """
        analysis = await self._aggregator.analyze(login)

        if not with_advice or self._advisory is None:
            return self._report(analysis)

        try:
            advice = await self._advisory.advise(analysis)
        except AdvisoryServiceError as e:
            logger.error(
                "Рекомендации недоступны, анализ GitHub сохранён",
                extra={"login": login, "error": str(e)},
            )
            raise AdvisoryUnavailable(analysis, e) from e

        return self._report(
            analysis,
            recommendations=advice.recommendations,
            roadmap=advice.roadmap,
            career_predictions=advice.career_predictions,
        )

    @staticmethod
    def _report(analysis: Analysis, **advice) -> ProfileReport:
        return ProfileReport(
            github=analysis,
            generated_at=datetime.now(UTC),
            overall_strengths=list(analysis.strengths),
            overall_weaknesses=list(analysis.weaknesses),
            **advice,
        )
