"""Unit tests for the message classifier."""
import pytest

from modules.classifier import DEFAULT_RULES, MessageClassifier, Rule, classify
from modules.lexicon import Lexicon
from modules.models import Classification


@pytest.mark.unit
class TestMessageClassifier:
    """Rule order decides the outcome."""

    @pytest.fixture
    def classifier(self):
        return MessageClassifier(Lexicon.default())

    @pytest.mark.parametrize("message", [
        "Should I run 5k tomorrow?",
        "should i squat today",
        "Any advice on my bench press",
        "Planning to run 10k on Sunday",
        "Can you recommend a deadlift program",
        "Is it ok to lift twice a day",
    ])
    def test_questions_are_not_logs(self, classifier, message):
        assert classifier.classify(message) is Classification.NOT_A_LOG

    def test_question_gate_reports_its_rule(self, classifier):
        outcome, rule = classifier.explain("Should I run 5k tomorrow?")
        assert outcome is Classification.NOT_A_LOG
        assert rule == "question_phrase"

    def test_long_message_is_conversation(self, classifier):
        message = " ".join(["squat bench deadlift"] * 20)
        assert len(message.split()) == 60
        outcome, rule = classifier.explain(message)
        assert outcome is Classification.NOT_A_LOG
        assert rule == "too_long"

    def test_word_ceiling_is_inclusive(self):
        lexicon = Lexicon.from_config({"classifier": {"max_words": 3}})
        classifier = MessageClassifier(lexicon)
        assert classifier.classify("squat 315 today") is Classification.STRENGTH
        assert classifier.classify("squat 315 today again") is Classification.NOT_A_LOG

    @pytest.mark.parametrize("message", [
        "Slept 8 hours last night",
        "Had oatmeal and eggs",
        "",
    ])
    def test_no_workout_terms(self, classifier, message):
        assert classifier.classify(message) is Classification.NOT_A_LOG

    @pytest.mark.parametrize("message", [
        "Ran 5k in 27 minutes",
        "Jogged 3 miles",
        "Swim 1500m this morning",
        "Hiked 12km",
    ])
    def test_cardio(self, classifier, message):
        assert classifier.classify(message) is Classification.CARDIO

    @pytest.mark.parametrize("message", [
        "bench 225x10 3 sets",
        "Deadlift 405 for 3",
        "Leg day at the gym",
    ])
    def test_strength(self, classifier, message):
        assert classifier.classify(message) is Classification.STRENGTH

    def test_strength_wins_when_both_lexicons_match(self, classifier):
        # "row" is a cardio and a strength term
        outcome, rule = classifier.explain("row 2000m")
        assert outcome is Classification.STRENGTH
        assert rule == "strength_term"

    def test_ran_then_lifted_is_strength(self, classifier):
        assert classifier.classify("ran 2 miles then lifted") is Classification.STRENGTH

    def test_case_insensitive(self, classifier):
        assert classifier.classify("RAN 5K") is Classification.CARDIO


@pytest.mark.unit
class TestInjectedLexicon:
    """Lexicons and rules are data handed to the classifier."""

    def test_minimal_lexicon(self, minimal_lexicon):
        classifier = MessageClassifier(minimal_lexicon)
        assert classifier.classify("run now") is Classification.CARDIO
        assert classifier.classify("lift now") is Classification.STRENGTH
        assert classifier.classify("row now") is Classification.STRENGTH
        # "jog" is not in the minimal lexicon
        assert classifier.classify("jog now") is Classification.NOT_A_LOG

    def test_module_level_classify_uses_lexicon(self, minimal_lexicon):
        assert classify("swim 1k", minimal_lexicon) is Classification.NOT_A_LOG
        assert classify("swim 1k") is Classification.CARDIO

    def test_rule_order_is_the_policy(self, minimal_lexicon):
        # Put a cardio-wins rule ahead of the defaults' last two rules
        cardio_first = list(DEFAULT_RULES[:3]) + [
            Rule("cardio_term", lambda f, lex: f.cardio_term is not None, Classification.CARDIO),
        ] + list(DEFAULT_RULES[3:])
        classifier = MessageClassifier(minimal_lexicon, rules=cardio_first)
        assert classifier.classify("row now") is Classification.CARDIO

    def test_unknown_lexicon_table_rejected(self):
        with pytest.raises(ValueError):
            Lexicon.from_config({"lexicons": {"yoga_terms": ["yoga"]}})

    def test_config_overrides_one_table(self):
        lexicon = Lexicon.from_config({"lexicons": {"cardio_terms": ["Paddle "]}})
        assert lexicon.cardio_terms == ("paddle",)
        assert lexicon.strength_terms == Lexicon.default().strength_terms
