"""
Workout extractor - turns a classified message into a WorkoutLogEntry.

Cardio messages yield distance, duration and pace when present. Strength
messages are split into clauses and each clause naming a known exercise
yields one ExerciseSet. A strength message where no clause names an
exercise yields None: a strength word like "press" gets a message past the
classifier but only a recognised exercise name makes it a log.
"""

import re
from datetime import datetime
from typing import Callable, List, Optional, Union

import pytz

from modules.lexicon import Lexicon
from modules.models import (
    CardioDetails,
    Classification,
    ExerciseSet,
    WorkoutCategory,
    WorkoutLogEntry,
)
from utils.helpers import format_number
from utils.logger import get_logger

logger = get_logger("extractor")

# "5k", "3.1 miles"; not "8 hours" style phrases and not "27 minutes"
DISTANCE_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*(km|k|miles|mile|mi)(?![a-z])(?!\s*hour)",
    re.IGNORECASE,
)
DURATION_RE = re.compile(r"\b(?:in|took|for)\s*(\d+)\s*(?:minutes|mins|min)\b", re.IGNORECASE)
PACE_RE = re.compile(r"(\d+):(\d{2})\s*/\s*(km|k|miles|mile|mi)\b", re.IGNORECASE)

CLAUSE_SPLIT_RE = re.compile(r",|\bthen\b|\band\b|\n", re.IGNORECASE)
WEIGHT_REPS_RE = re.compile(
    r"(\d+)\s*(lbs?|kgs?)?\s*(?:x|for|×)\s*(\d+)\s*(?:reps?)?",
    re.IGNORECASE,
)
SETS_RE = re.compile(r"(\d+)\s*sets?\b", re.IGNORECASE)

UNIT_ALIASES = {
    "km": "km",
    "k": "k",
    "miles": "mile",
    "mile": "mile",
    "mi": "mi",
}


def _normalize_weight_unit(unit: Optional[str]) -> str:
    if unit and unit.lower().startswith("kg"):
        return "kg"
    return "lb"


def parse_cardio(text: str) -> CardioDetails:
    """Pull the optional distance, duration and pace out of a cardio message."""
    distance = distance_unit = duration = pace = None

    match = DISTANCE_RE.search(text)
    if match:
        distance = float(match.group(1))
        distance_unit = UNIT_ALIASES[match.group(2).lower()]

    match = DURATION_RE.search(text)
    if match:
        duration = int(match.group(1))

    match = PACE_RE.search(text)
    if match:
        pace = f"{int(match.group(1))}:{match.group(2)}/{UNIT_ALIASES[match.group(3).lower()]}"

    return CardioDetails(
        distance=distance,
        distance_unit=distance_unit,
        duration_minutes=duration,
        pace=pace,
    )


def split_clauses(text: str) -> List[str]:
    return [clause.strip() for clause in CLAUSE_SPLIT_RE.split(text) if clause.strip()]


def match_exercise(clause: str, lexicon: Lexicon) -> Optional[str]:
    """Longest exercise name contained in the clause, or None."""
    lowered = clause.lower()
    for name in lexicon.exercises_longest_first:
        if name in lowered:
            return name
    return None


def parse_clause(clause: str, lexicon: Lexicon) -> Optional[ExerciseSet]:
    """
    Parse one clause such as "incline press 185 for 8 reps 3 sets".

    Returns:
        ExerciseSet, or None if the clause names no known exercise
    """
    name = match_exercise(clause, lexicon)
    if name is None:
        return None

    weight = reps = sets = None
    unit = "lb"

    match = WEIGHT_REPS_RE.search(clause)
    if match:
        weight = int(match.group(1))
        unit = _normalize_weight_unit(match.group(2))
        reps = int(match.group(3))

    match = SETS_RE.search(clause)
    if match:
        sets = int(match.group(1))

    return ExerciseSet(name=name, weight=weight, weight_unit=unit, reps=reps, sets=sets)


def parse_strength(text: str, lexicon: Lexicon) -> List[ExerciseSet]:
    exercises = []
    for clause in split_clauses(text):
        exercise = parse_clause(clause, lexicon)
        if exercise is None:
            logger.debug(f"No exercise name in clause {clause!r}")
            continue
        exercises.append(exercise)
    return exercises


class WorkoutExtractor:
    """Builds WorkoutLogEntry objects from classified text."""

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timezone: str = "America/Los_Angeles",
    ):
        self.lexicon = lexicon or Lexicon.default()
        tz = pytz.timezone(timezone)
        self.clock = clock or (lambda: datetime.now(tz))

    def extract(
        self,
        text: str,
        category: Union[WorkoutCategory, Classification, None],
    ) -> Optional[WorkoutLogEntry]:
        """
        Extract a structured entry from text already classified as a log.

        Args:
            text: Raw message text
            category: Result of classification (cardio or strength)

        Returns:
            WorkoutLogEntry, or None when the message is not a usable log
        """
        if isinstance(category, Classification):
            category = category.category
        if category is None:
            return None

        if category is WorkoutCategory.CARDIO:
            return WorkoutLogEntry(
                date=self.clock(),
                raw_text=text,
                category=category,
                cardio=parse_cardio(text),
            )

        exercises = parse_strength(text, self.lexicon)
        if not exercises:
            logger.info("Strength candidate rejected: no recognised exercise name")
            return None

        return WorkoutLogEntry(
            date=self.clock(),
            raw_text=text,
            category=category,
            exercises=tuple(exercises),
        )


def extract(
    text: str,
    category: Union[WorkoutCategory, Classification, None],
    lexicon: Optional[Lexicon] = None,
) -> Optional[WorkoutLogEntry]:
    """Extract a WorkoutLogEntry from text with the default clock."""
    return WorkoutExtractor(lexicon).extract(text, category)


def _describe_set(exercise: ExerciseSet) -> str:
    if exercise.weight is None or exercise.reps is None:
        return ""
    detail = f"{exercise.weight}{exercise.weight_unit} x {exercise.reps} reps"
    if exercise.sets:
        detail += f", {exercise.sets} sets"
    return detail


def render_confirmation(entry: WorkoutLogEntry) -> str:
    """Short confirmation message listing whatever was extracted."""
    lines = ["Workout logged!", ""]

    if entry.category is WorkoutCategory.CARDIO:
        details = entry.cardio
        if details.distance is not None:
            lines.append(f"Distance: {format_number(details.distance)}{details.distance_unit}")
        if details.duration_minutes is not None:
            lines.append(f"Duration: {details.duration_minutes} min")
        if details.pace:
            lines.append(f"Pace: {details.pace}")
        lines.extend(["", "Nice work"])
        return "\n".join(lines)

    if len(entry.exercises) == 1:
        exercise = entry.exercises[0]
        lines.append(f"Exercise: {exercise.name}")
        detail = _describe_set(exercise)
        if detail:
            lines.append(detail)
    else:
        lines.append(f"{len(entry.exercises)} exercises:")
        for exercise in entry.exercises:
            detail = _describe_set(exercise)
            lines.append(f"- {exercise.name}: {detail}" if detail else f"- {exercise.name}")

    lines.extend(["", "Strong session"])
    return "\n".join(lines)
