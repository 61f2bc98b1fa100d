"""
Curated word lists used to recognise workout messages.

A Lexicon is plain configuration data handed to the classifier and the
extractor. ``Lexicon.default()`` carries the built-in tables and
``Lexicon.from_config()`` lets config.yaml replace any of them.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional, Tuple

CARDIO_TERMS = (
    "run", "running", "ran", "jog", "jogging", "bike", "biking",
    "swim", "swimming", "row", "rowing", "hike", "hiking", "walked", "walk",
)

STRENGTH_TERMS = (
    "lift", "lifting", "lifted", "squat", "squats", "deadlift", "deadlifts",
    "bench", "press", "curl", "row", "pull", "push", "workout", "gym",
    "weights", "reps", "sets", "training", "chest", "back", "legs",
    "shoulders", "arms",
)

# A message containing any of these is a question or a plan, not a log
QUESTION_PHRASES = (
    "?", "should i", "what do", "how do", "can i", "is it", "would it",
    "do you think", "advice", "help", "recommend", "suggest", "opinion",
    "supposed to", "planning to", "going to", "about to", "want to",
)

EXERCISES = (
    # Chest
    "bench press", "bench", "incline press", "incline bench", "decline press",
    "decline bench", "chest press", "dumbbell press", "db press", "cable flies",
    "cable fly", "pec flies", "pec fly", "chest flies", "chest fly", "dips",
    "push ups", "pushups",
    # Back
    "deadlift", "deadlifts", "barbell row", "barbell rows", "bent over row",
    "bent row", "dumbbell row", "db row", "cable row", "seated row",
    "lat pulldown", "pulldown", "pull up", "pullup", "pull-up", "pullups",
    "chin up", "chinup", "chin-up", "t-bar row", "tbar row", "face pulls",
    "face pull",
    # Legs
    "squat", "squats", "back squat", "front squat", "leg press",
    "leg extension", "leg curl", "hamstring curl", "calf raise", "calf raises",
    "lunges", "lunge", "bulgarian split squat", "split squat",
    "romanian deadlift", "rdl", "leg day",
    # Shoulders
    "overhead press", "ohp", "shoulder press", "military press",
    "arnold press", "lateral raise", "lateral raises", "front raise",
    "front raises", "rear delt fly", "rear delt flies", "shrugs", "shrug",
    # Arms
    "bicep curl", "bicep curls", "curls", "curl", "hammer curl",
    "hammer curls", "preacher curl", "concentration curl",
    "tricep extension", "tricep extensions", "skull crusher",
    "skull crushers", "close grip bench", "tricep pushdown", "tricep dips",
    # Core
    "plank", "planks", "sit up", "sit ups", "crunches", "crunch", "leg raise",
    "leg raises", "russian twist", "russian twists", "ab wheel",
    "hanging leg raise",
)

DEFAULT_MAX_WORDS = 50


def _clean(terms: Iterable[str]) -> Tuple[str, ...]:
    """Lower-case, strip and de-duplicate while keeping first-seen order."""
    seen = {}
    for term in terms:
        term = str(term).strip().lower()
        if term and term not in seen:
            seen[term] = None
    return tuple(seen)


@dataclass(frozen=True)
class Lexicon:
    cardio_terms: Tuple[str, ...]
    strength_terms: Tuple[str, ...]
    question_phrases: Tuple[str, ...]
    exercises: Tuple[str, ...]
    max_words: int = DEFAULT_MAX_WORDS

    def __post_init__(self):
        for name in ("cardio_terms", "strength_terms", "question_phrases", "exercises"):
            object.__setattr__(self, name, _clean(getattr(self, name)))
        if self.max_words < 1:
            raise ValueError("max_words must be positive")

    @property
    def exercises_longest_first(self) -> Tuple[str, ...]:
        """Exercise names ordered so no name is tried before a longer one containing it."""
        return tuple(sorted(self.exercises, key=len, reverse=True))

    @classmethod
    def default(cls) -> "Lexicon":
        return cls(
            cardio_terms=CARDIO_TERMS,
            strength_terms=STRENGTH_TERMS,
            question_phrases=QUESTION_PHRASES,
            exercises=EXERCISES,
        )

    @classmethod
    def from_config(cls, config: Optional[Dict] = None) -> "Lexicon":
        """
        Build a lexicon from the ``lexicons`` and ``classifier`` config sections.

        Args:
            config: Full application config dict (may be None or partial)

        Returns:
            Default lexicon with any configured tables swapped in
        """
        config = config or {}
        lexicon = cls.default()
        overrides = {}

        for name, terms in (config.get("lexicons") or {}).items():
            if name not in ("cardio_terms", "strength_terms", "question_phrases", "exercises"):
                raise ValueError(f"Unknown lexicon table: {name}")
            if not isinstance(terms, (list, tuple)):
                raise ValueError(f"Lexicon table {name} must be a list")
            overrides[name] = tuple(terms)

        max_words = (config.get("classifier") or {}).get("max_words")
        if max_words is not None:
            overrides["max_words"] = int(max_words)

        return replace(lexicon, **overrides) if overrides else lexicon
