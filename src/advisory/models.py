import math
from dataclasses import dataclass, field
from typing import Any

from src.advisory.errors import AdvisoryServiceError

PRIORITIES = ("high", "medium", "low")
CATEGORIES = ("github", "general")
PHASES = ("7-day", "30-day", "90-day")


def _require(data: Any, key: str, kind: type | tuple[type, ...] = str) -> Any:
    if not isinstance(data, dict) or not isinstance(data.get(key), kind):
        raise AdvisoryServiceError(f"Advisory response field '{key}' is missing or invalid")
    return data[key]


def _optional_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise AdvisoryServiceError(f"Advisory response field '{key}' must be a list")
    return value


@dataclass(slots=True, frozen=True)
class Recommendation:
    id: str
    title: str
    description: str
    priority: str
    category: str
    impact: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Recommendation":
        priority = _require(data, "priority").lower()
        if priority not in PRIORITIES:
            raise AdvisoryServiceError(f"Unknown recommendation priority: {priority}")

        category = str(data.get("category") or "general").lower()
        return cls(
            id=str(_require(data, "id", (str, int))),
            title=_require(data, "title"),
            description=_require(data, "description"),
            priority=priority,
            category=category if category in CATEGORIES else "general",
            impact=str(data.get("impact") or ""),
        )


@dataclass(slots=True, frozen=True)
class RoadmapItem:
    task: str
    how_to: str
    expected_outcome: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RoadmapItem":
        return cls(
            task=_require(data, "task"),
            how_to=str(data.get("howTo") or ""),
            expected_outcome=str(data.get("expectedOutcome") or ""),
        )


@dataclass(slots=True, frozen=True)
class RoadmapPhase:
    phase: str
    items: list[RoadmapItem] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RoadmapPhase":
        phase = _require(data, "phase")
        if phase not in PHASES:
            raise AdvisoryServiceError(f"Unknown roadmap phase: {phase}")
        return cls(
            phase=phase,
            items=[RoadmapItem.from_api(item) for item in _require(data, "items", list)],
        )


@dataclass(slots=True, frozen=True)
class CareerPrediction:
    role: str
    confidence: int
    reasoning: str
    skills_needed: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CareerPrediction":
        confidence = _require(data, "confidence", (int, float))
        if not math.isfinite(confidence):
            raise AdvisoryServiceError(f"Career prediction confidence is not finite: {confidence}")

        return cls(
            role=_require(data, "role"),
            confidence=max(0, min(100, round(confidence))),
            reasoning=str(data.get("reasoning") or ""),
            skills_needed=[str(skill) for skill in _optional_list(data, "skillsNeeded")],
        )


@dataclass(slots=True, frozen=True)
class Advice:
    """Рекомендации, план развития и прогноз карьеры от сервиса рекомендаций."""

    recommendations: list[Recommendation]
    roadmap: list[RoadmapPhase]
    career_predictions: list[CareerPrediction]

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Advice":
        return cls(
            recommendations=[
                Recommendation.from_api(item)
                for item in _require(data, "recommendations", list)
            ],
            roadmap=[RoadmapPhase.from_api(item) for item in _require(data, "roadmap", list)],
            career_predictions=[
                CareerPrediction.from_api(item)
                for item in _require(data, "careerPredictions", list)
            ],
        )
