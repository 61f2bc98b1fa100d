"""
Message classifier - decides whether a text message is a workout log.

Classification is an ordered rule table. Each rule is a named predicate over
the lower-cased message plus the outcome it yields; the first rule that
fires wins. Rule order is the policy:

1. question/intent phrase present  -> not a log
2. more words than the ceiling     -> not a log
3. no cardio or strength term      -> not a log
4. cardio term and no strength term -> cardio
5. any strength term               -> strength

Rule 5 means strength wins whenever both lexicons match (e.g. "row" is in
both).
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from modules.lexicon import Lexicon
from modules.models import Classification
from utils.logger import get_logger

logger = get_logger("classifier")


@dataclass(frozen=True)
class MessageFeatures:
    """Everything the rules look at, computed once per message."""
    text: str
    word_count: int
    question_phrase: Optional[str]
    cardio_term: Optional[str]
    strength_term: Optional[str]


@dataclass(frozen=True)
class Rule:
    name: str
    applies: Callable[[MessageFeatures, Lexicon], bool]
    outcome: Classification


def first_match(text: str, terms) -> Optional[str]:
    """Return the first term that occurs as a substring of text."""
    for term in terms:
        if term in text:
            return term
    return None


def word_count(text: str) -> int:
    return len(text.split())


def extract_features(text: str, lexicon: Lexicon) -> MessageFeatures:
    lowered = (text or "").lower()
    return MessageFeatures(
        text=lowered,
        word_count=word_count(lowered),
        question_phrase=first_match(lowered, lexicon.question_phrases),
        cardio_term=first_match(lowered, lexicon.cardio_terms),
        strength_term=first_match(lowered, lexicon.strength_terms),
    )


DEFAULT_RULES: Tuple[Rule, ...] = (
    Rule(
        "question_phrase",
        lambda f, lex: f.question_phrase is not None,
        Classification.NOT_A_LOG,
    ),
    Rule(
        "too_long",
        lambda f, lex: f.word_count > lex.max_words,
        Classification.NOT_A_LOG,
    ),
    Rule(
        "no_workout_term",
        lambda f, lex: f.cardio_term is None and f.strength_term is None,
        Classification.NOT_A_LOG,
    ),
    Rule(
        "cardio_only",
        lambda f, lex: f.cardio_term is not None and f.strength_term is None,
        Classification.CARDIO,
    ),
    Rule(
        "strength_term",
        lambda f, lex: f.strength_term is not None,
        Classification.STRENGTH,
    ),
)


class MessageClassifier:
    """Applies the rule table to raw message text."""

    def __init__(self, lexicon: Optional[Lexicon] = None, rules: Optional[List[Rule]] = None):
        self.lexicon = lexicon or Lexicon.default()
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES

    def explain(self, text: str) -> Tuple[Classification, str]:
        """
        Classify text and report which rule decided it.

        Returns:
            (classification, rule name); rule name is "fallthrough" if no rule fired
        """
        features = extract_features(text, self.lexicon)
        for rule in self.rules:
            if rule.applies(features, self.lexicon):
                logger.debug(f"Rule {rule.name!r} -> {rule.outcome.value} for {features.text[:80]!r}")
                return rule.outcome, rule.name
        return Classification.NOT_A_LOG, "fallthrough"

    def classify(self, text: str) -> Classification:
        return self.explain(text)[0]


def classify(text: str, lexicon: Optional[Lexicon] = None) -> Classification:
    """Classify text as not-a-log, cardio or strength."""
    return MessageClassifier(lexicon).classify(text)
