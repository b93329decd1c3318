from dataclasses import dataclass, field
from datetime import datetime

from src.advisory.models import CareerPrediction, Recommendation, RoadmapPhase
from src.github_profile.models.analysis import Analysis


@dataclass(slots=True, frozen=True)
class ProfileReport:
    """Итоговый отчёт: анализ GitHub и рекомендации сервиса."""

    github: Analysis
    generated_at: datetime
    recommendations: list[Recommendation] = field(default_factory=list)
    roadmap: list[RoadmapPhase] = field(default_factory=list)
    career_predictions: list[CareerPrediction] = field(default_factory=list)
    overall_strengths: list[str] = field(default_factory=list)
    overall_weaknesses: list[str] = field(default_factory=list)
