"""
Data model shared by the workout, knowledge and weekly-report code.

Log entries and knowledge entries are immutable once built. WeeklyStats is
either the empty-week sentinel (``no_data_this_week=True``) or a full record.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from utils.helpers import parse_time


class WorkoutCategory(str, Enum):
    CARDIO = "cardio"
    STRENGTH = "strength"


class Classification(str, Enum):
    """Outcome of classifying a raw message."""
    NOT_A_LOG = "not_a_log"
    CARDIO = "cardio"
    STRENGTH = "strength"

    @property
    def category(self) -> Optional[WorkoutCategory]:
        if self is Classification.NOT_A_LOG:
            return None
        return WorkoutCategory(self.value)


class Consistency(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class VolumeTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ExerciseSet:
    name: str
    weight: Optional[int] = None
    weight_unit: str = "lb"
    reps: Optional[int] = None
    sets: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "weight": self.weight,
            "weight_unit": self.weight_unit,
            "reps": self.reps,
            "sets": self.sets,
        }


@dataclass(frozen=True)
class CardioDetails:
    distance: Optional[float] = None
    distance_unit: Optional[str] = None
    duration_minutes: Optional[int] = None
    pace: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance": self.distance,
            "distance_unit": self.distance_unit,
            "duration_minutes": self.duration_minutes,
            "pace": self.pace,
        }


@dataclass(frozen=True)
class WorkoutLogEntry:
    """
    One parsed workout message.

    Cardio entries carry ``cardio``; strength entries carry at least one
    ExerciseSet in ``exercises``.
    """
    date: datetime
    raw_text: str
    category: WorkoutCategory
    cardio: Optional[CardioDetails] = None
    exercises: Tuple[ExerciseSet, ...] = ()

    def __post_init__(self):
        if self.category is WorkoutCategory.STRENGTH and not self.exercises:
            raise ValueError("A strength entry needs at least one exercise")
        if self.category is WorkoutCategory.CARDIO and self.cardio is None:
            object.__setattr__(self, "cardio", CardioDetails())

    def to_document(self, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Serialize for the workout_logs collection."""
        document = {
            "date": self.date,
            "raw_text": self.raw_text,
            "category": self.category.value,
        }
        if self.category is WorkoutCategory.CARDIO:
            document["details"] = self.cardio.to_dict()
        else:
            document["exercises"] = [exercise.to_dict() for exercise in self.exercises]
        if user_id is not None:
            document["user_id"] = user_id
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "WorkoutLogEntry":
        """Rebuild an entry from a stored document."""
        when = document["date"]
        if isinstance(when, str):
            when = parse_time(when)
            if when is None:
                raise ValueError(f"Unparseable workout date: {document['date']!r}")

        category = WorkoutCategory(document["category"])
        if category is WorkoutCategory.CARDIO:
            return cls(
                date=when,
                raw_text=document.get("raw_text", ""),
                category=category,
                cardio=CardioDetails(**(document.get("details") or {})),
            )
        return cls(
            date=when,
            raw_text=document.get("raw_text", ""),
            category=category,
            exercises=tuple(ExerciseSet(**item) for item in document.get("exercises", [])),
        )


@dataclass(frozen=True)
class KnowledgeEntry:
    topic: str
    source: str
    summary: str
    action: str
    vector: Tuple[float, ...] = field(repr=False)

    @property
    def dimension(self) -> int:
        return len(self.vector)

    def to_record(self) -> Dict[str, Any]:
        """Persisted corpus format."""
        return {
            "topic": self.topic,
            "source": self.source,
            "summary": self.summary,
            "action": self.action,
            "vector": list(self.vector),
        }


@dataclass(frozen=True)
class RetrievalResult:
    entry: KnowledgeEntry
    similarity: float


@dataclass(frozen=True)
class TrainingBalance:
    cardio_percent: int
    strength_percent: int


@dataclass(frozen=True)
class WeeklyStats:
    no_data_this_week: bool = False
    total_workouts: int = 0
    cardio_count: int = 0
    strength_count: int = 0
    total_distance: float = 0.0
    total_duration_minutes: int = 0
    active_day_count: int = 0
    training_balance: Optional[TrainingBalance] = None
    consistency: Optional[Consistency] = None
    volume_trend: VolumeTrend = VolumeTrend.UNKNOWN
    volume_change_percent: Optional[int] = None

    @classmethod
    def empty_week(cls) -> "WeeklyStats":
        return cls(no_data_this_week=True)

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot stored with the weekly history record."""
        if self.no_data_this_week:
            return {"no_data_this_week": True}
        return {
            "total_workouts": self.total_workouts,
            "cardio_count": self.cardio_count,
            "strength_count": self.strength_count,
            "total_distance": self.total_distance,
            "total_duration_minutes": self.total_duration_minutes,
            "active_day_count": self.active_day_count,
            "training_balance": {
                "cardio_percent": self.training_balance.cardio_percent,
                "strength_percent": self.training_balance.strength_percent,
            },
            "consistency": self.consistency.value,
            "volume_trend": self.volume_trend.value,
            "volume_change_percent": self.volume_change_percent,
        }
