"""
Coach modules and the message-understanding logic they share.
"""

from .classifier import MessageClassifier, classify
from .extractor import WorkoutExtractor, extract, render_confirmation
from .insights import build_prompts
from .lexicon import Lexicon
from .registry import ModuleRegistry
from .stats import aggregate, calculate_streak

__all__ = [
    "MessageClassifier",
    "classify",
    "WorkoutExtractor",
    "extract",
    "render_confirmation",
    "build_prompts",
    "Lexicon",
    "ModuleRegistry",
    "aggregate",
    "calculate_streak",
]
