"""
Arlo Test Configuration

Shared fixtures and configuration for pytest.
"""

import sys
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import pytz

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from modules.lexicon import Lexicon
from modules.models import (
    CardioDetails,
    ExerciseSet,
    KnowledgeEntry,
    WorkoutCategory,
    WorkoutLogEntry,
)

TZ = pytz.timezone("America/Los_Angeles")


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: fast tests with no external services")


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def fixed_now() -> datetime:
    """Wednesday 2026-10-14 09:30 local time."""
    return TZ.localize(datetime(2026, 10, 14, 9, 30))


@pytest.fixture
def minimal_lexicon() -> Lexicon:
    """Tiny lexicon so tests do not depend on the curated tables."""
    return Lexicon(
        cardio_terms=("run", "row"),
        strength_terms=("lift", "row"),
        question_phrases=("?", "should i"),
        exercises=("bench", "bench press", "squat"),
        max_words=10,
    )


@pytest.fixture
def make_cardio():
    def _make(day: int, distance=None, duration=None, hour: int = 7):
        return WorkoutLogEntry(
            date=TZ.localize(datetime(2026, 10, day, hour, 0)),
            raw_text="ran",
            category=WorkoutCategory.CARDIO,
            cardio=CardioDetails(
                distance=distance,
                distance_unit="k" if distance is not None else None,
                duration_minutes=duration,
            ),
        )
    return _make


@pytest.fixture
def make_strength():
    def _make(day: int, hour: int = 18):
        return WorkoutLogEntry(
            date=TZ.localize(datetime(2026, 10, day, hour, 0)),
            raw_text="squat 315x5",
            category=WorkoutCategory.STRENGTH,
            exercises=(ExerciseSet(name="squat", weight=315, reps=5),),
        )
    return _make


@pytest.fixture
def knowledge_entry():
    def _make(topic: str, vector):
        return KnowledgeEntry(
            topic=topic,
            source=f"{topic} source",
            summary=f"{topic} summary",
            action=f"{topic} action",
            vector=tuple(float(v) for v in vector),
        )
    return _make


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_db():
    """Database stand-in: each collection name maps to its own MagicMock."""
    return defaultdict(MagicMock)


@pytest.fixture
def mock_embedding_provider():
    provider = MagicMock()
    provider.embed_query.return_value = [1.0, 0.0, 0.0]
    return provider
