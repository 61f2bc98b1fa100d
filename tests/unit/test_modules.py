"""Unit tests for the workout and knowledge modules and message routing."""
from datetime import date, datetime

import pytest
import pytz

from modules.knowledge import KnowledgeModule, format_insight
from modules.models import WorkoutCategory
from modules.registry import ModuleRegistry
from modules.workout import WorkoutModule

CONFIG = {
    "modules": {
        "workout": {"enabled": True},
        "knowledge": {"enabled": True},
    },
    "retrieval": {"threshold": 0.7, "knowledge_paths": []},
}


def stored(when: datetime, text="ran 5k", category="cardio"):
    """A workout_logs document as MongoDB returns it (naive UTC)."""
    document = {"_id": "abc", "user_id": "u1", "date": when, "raw_text": text, "category": category}
    if category == "cardio":
        document["details"] = {"distance": 5.0, "distance_unit": "k"}
    else:
        document["exercises"] = [{"name": "squat", "weight": 315, "reps": 5}]
    return document


@pytest.fixture
def workout(mock_db, fixed_now):
    module = WorkoutModule(mock_db, {"enabled": True}, settings=CONFIG)
    module.extractor.clock = lambda: fixed_now
    module.get_today_in_timezone = lambda: fixed_now.date()
    return module


def set_stored_logs(mock_db, documents):
    mock_db["workout_logs"].find.return_value.sort.return_value = documents


@pytest.mark.unit
class TestWorkoutModule:

    def test_setup_creates_index(self, mock_db):
        WorkoutModule(mock_db, settings=CONFIG)
        mock_db["workout_logs"].create_index.assert_called_once_with([("user_id", 1), ("date", 1)])

    def test_logs_cardio_message(self, workout, mock_db, fixed_now):
        result = workout.handle_message("Ran 5k in 27 minutes", "u1")

        assert result["entry"].category is WorkoutCategory.CARDIO
        assert result["confirmation"].startswith("Workout logged!")
        assert "Distance: 5k" in result["confirmation"]
        assert result["streak"] == 0

        document = mock_db["workout_logs"].insert_one.call_args[0][0]
        assert document["user_id"] == "u1"
        assert document["date"] == fixed_now
        assert document["details"]["duration_minutes"] == 27

    def test_streak_line(self, workout, mock_db):
        set_stored_logs(mock_db, [
            stored(datetime(2026, 10, 13, 14, 0)),
            stored(datetime(2026, 10, 14, 16, 30)),
        ])
        result = workout.handle_message("Ran 5k", "u1")
        assert result["streak"] == 2
        assert result["confirmation"].endswith("2-day streak")

    def test_question_is_not_logged(self, workout, mock_db):
        assert workout.handle_message("Should I run today?", "u1") is None
        mock_db["workout_logs"].insert_one.assert_not_called()

    def test_strength_without_exercises_is_rejected(self, workout, mock_db):
        assert workout.handle_message("gym day, felt strong", "u1") is None
        mock_db["workout_logs"].insert_one.assert_not_called()

    def test_logs_are_converted_to_local_time(self, workout, mock_db):
        # 2026-10-13 03:00 UTC is the evening of 10-12 in Los Angeles
        set_stored_logs(mock_db, [
            stored(datetime(2026, 10, 13, 3, 0)),
            stored(datetime(2026, 10, 14, 1, 0), text="squat 315x5", category="strength"),
        ])
        entries = workout.get_logs_between("u1", date(2026, 10, 12), date(2026, 10, 18))

        assert [e.date.date() for e in entries] == [date(2026, 10, 12), date(2026, 10, 13)]
        assert entries[1].exercises[0].weight == 315

        query = mock_db["workout_logs"].find.call_args[0][0]
        assert query["user_id"] == "u1"
        # Monday 00:00 PDT is 07:00 UTC; the range ends at the next Monday
        assert query["date"]["$gte"].isoformat() == "2026-10-12T07:00:00+00:00"
        assert query["date"]["$lt"].isoformat() == "2026-10-19T07:00:00+00:00"

    def test_weekly_stats(self, workout, mock_db):
        set_stored_logs(mock_db, [
            stored(datetime(2026, 10, 12, 14, 0)),
            stored(datetime(2026, 10, 13, 14, 0)),
            stored(datetime(2026, 10, 14, 1, 0), category="strength"),
        ])
        stats = workout.get_weekly_stats("u1", prior_week_total=2, day=date(2026, 10, 14))
        assert stats.total_workouts == 3
        assert stats.active_day_count == 2
        assert stats.volume_change_percent == 50

    def test_archive_logs_tags_instead_of_deleting(self, workout, mock_db):
        mock_db["workout_logs"].update_many.return_value.modified_count = 4
        since = datetime(2026, 10, 12, 1, 0)
        until = datetime(2026, 10, 19, 1, 0)
        assert workout.archive_logs("u1", since, until, date(2026, 10, 12)) == 4

        selector, update = mock_db["workout_logs"].update_many.call_args[0]
        assert selector["user_id"] == "u1"
        assert selector["archived_week"] == {"$exists": False}
        assert update == {"$set": {"archived_week": "2026-10-12"}}
        mock_db["workout_logs"].delete_many.assert_not_called()

    def test_streak_spans_an_archived_week(self, workout, mock_db):
        # Oct 8-11 were reported on Sunday 10-11; Oct 12-14 are new
        documents = [stored(datetime(2026, 10, day, 15, 0)) for day in range(8, 15)]
        for document in documents[:4]:
            document["archived_week"] = "2026-10-05"
        set_stored_logs(mock_db, documents)

        assert workout.get_streak("u1") == 7
        query = mock_db["workout_logs"].find.call_args[0][0]
        assert "archived_week" not in query

    def test_unarchived_logs_query(self, workout, mock_db):
        since = datetime(2026, 10, 12, 1, 0)
        until = pytz.timezone("America/Los_Angeles").localize(datetime(2026, 10, 18, 18, 0))
        workout.get_unarchived_logs("u1", since, until)

        query = mock_db["workout_logs"].find.call_args[0][0]
        assert query["date"] == {"$gte": pytz.utc.localize(since), "$lt": until}
        assert query["archived_week"] == {"$exists": False}


@pytest.fixture
def corpus(knowledge_entry):
    return [
        knowledge_entry("caffeine", [0.0, 1.0, 0.0]),
        knowledge_entry("sleep", [0.9, 0.1, 0.0]),
    ]


@pytest.mark.unit
class TestKnowledgeModule:

    def test_match_builds_context(self, mock_db, corpus, mock_embedding_provider):
        module = KnowledgeModule(mock_db, settings=CONFIG, corpus=corpus,
                                 embedding_provider=mock_embedding_provider)
        result = module.handle_message("how much sleep do I need", "u1")

        mock_embedding_provider.embed_query.assert_called_once_with("how much sleep do I need")
        assert result["result"].entry.topic == "sleep"
        assert result["knowledge_context"] == (
            "\n\nRelevant research insight:\n"
            "Topic: sleep\n"
            "Source: sleep source\n"
            "Summary: sleep summary\n"
            "Action: sleep action"
        )

    def test_miss_returns_none(self, mock_db, corpus, mock_embedding_provider):
        mock_embedding_provider.embed_query.return_value = [0.0, 0.0, 1.0]
        module = KnowledgeModule(mock_db, settings=CONFIG, corpus=corpus,
                                 embedding_provider=mock_embedding_provider)
        assert module.handle_message("anything", "u1") is None

    def test_embedding_failure_returns_none(self, mock_db, corpus, mock_embedding_provider):
        mock_embedding_provider.embed_query.return_value = None
        module = KnowledgeModule(mock_db, settings=CONFIG, corpus=corpus,
                                 embedding_provider=mock_embedding_provider)
        assert module.find_insight("anything") is None

    def test_empty_corpus_skips_embedding(self, mock_db, mock_embedding_provider):
        module = KnowledgeModule(mock_db, settings=CONFIG, embedding_provider=mock_embedding_provider)
        assert module.corpus == []
        assert module.find_insight("anything") is None
        mock_embedding_provider.embed_query.assert_not_called()

    def test_no_provider(self, mock_db, corpus):
        module = KnowledgeModule(mock_db, settings=CONFIG, corpus=corpus)
        assert module.find_insight("anything") is None

    def test_format_insight_miss(self):
        assert format_insight(None) == ""

    def test_enrich(self, mock_db, corpus, mock_embedding_provider):
        module = KnowledgeModule(mock_db, settings=CONFIG, corpus=corpus,
                                 embedding_provider=mock_embedding_provider)
        assert "Topic: sleep" in module.enrich("sleep?")
        mock_embedding_provider.embed_query.return_value = None
        assert module.enrich("sleep?") == ""


@pytest.mark.unit
class TestModuleRegistry:

    def test_loads_enabled_modules_in_order(self, mock_db):
        registry = ModuleRegistry(mock_db, CONFIG)
        assert [m.get_name() for m in registry.get_all_modules()] == ["workout", "knowledge"]
        assert registry.get_module("workout") is not None
        assert registry.get_module("nutrition") is None

    def test_disabled_module_skipped(self, mock_db):
        config = dict(CONFIG, modules={"workout": {"enabled": True}})
        registry = ModuleRegistry(mock_db, config)
        assert [m.get_name() for m in registry.get_all_modules()] == ["workout"]

    def test_workout_wins_over_knowledge(self, mock_db, mock_embedding_provider):
        registry = ModuleRegistry(mock_db, CONFIG, embedding_provider=mock_embedding_provider)
        outcome = registry.route_message("Ran 5k", "u1")
        assert outcome["module"] == "workout"
        mock_embedding_provider.embed_query.assert_not_called()

    def test_unhandled_message(self, mock_db, mock_embedding_provider):
        registry = ModuleRegistry(mock_db, CONFIG, embedding_provider=mock_embedding_provider)
        assert registry.route_message("Should I run today?", "u1") == {"module": None}
