"""
Unit tests for the performance stores and the quiz-completion workflow.
"""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from wml.adaptive.models import Difficulty, PerformanceHistory
from wml.adaptive.workflow import QuizCompletionService
from wml.errors import StoreError
from wml.store import InMemoryPerformanceStore, JsonPerformanceStore, validate_learner_id


@pytest.fixture
def json_store(tmp_path):
    return JsonPerformanceStore(tmp_path / "records")


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryPerformanceStore()
    return JsonPerformanceStore(tmp_path / "records")


class TestLearnerIds:
    @pytest.mark.parametrize("learner_id", ["ada", "user_42", "kid@example.com", "a.b-c"])
    def test_valid(self, learner_id):
        assert validate_learner_id(learner_id) == learner_id

    @pytest.mark.parametrize("learner_id", ["", "../evil", "a/b", "a\\b", ".hidden", "x..y", None])
    def test_invalid(self, learner_id):
        with pytest.raises(StoreError):
            validate_learner_id(learner_id)


class TestStores:
    def test_missing_learner_loads_none(self, store):
        assert store.load("nobody") is None

    def test_save_load_delete(self, store):
        history = PerformanceHistory(total_lessons_completed=3, current_difficulty=Difficulty.INTERMEDIATE)
        store.save("ada", history)

        assert store.load("ada") == history
        assert store.list_learners() == ["ada"]
        assert store.delete("ada") is True
        assert store.delete("ada") is False
        assert store.load("ada") is None

    def test_rejects_path_traversal(self, store):
        with pytest.raises(StoreError):
            store.save("../escape", PerformanceHistory.default())


class TestJsonStore:
    def test_writes_camel_case_document(self, json_store):
        json_store.save("ada", PerformanceHistory(total_lessons_completed=2))

        data = json.loads((json_store.store_dir / "ada.json").read_text(encoding="utf-8"))
        assert data["totalLessonsCompleted"] == 2
        assert "modalityScores" in data

    def test_corrupt_file_loads_as_missing(self, json_store):
        (json_store.store_dir / "ada.json").write_text("{not json", encoding="utf-8")
        assert json_store.load("ada") is None

    def test_non_object_file_loads_as_missing(self, json_store):
        (json_store.store_dir / "ada.json").write_text("[1, 2, 3]", encoding="utf-8")
        assert json_store.load("ada") is None

    def test_no_temp_files_left_behind(self, json_store):
        json_store.save("ada", PerformanceHistory.default())
        assert sorted(p.name for p in json_store.store_dir.iterdir()) == ["ada.json"]

    def test_failed_save_cleans_up_temp_file(self, json_store):
        (json_store.store_dir / "ada.json").mkdir()

        with pytest.raises(StoreError):
            json_store.save("ada", PerformanceHistory.default())
        assert [p.name for p in json_store.store_dir.iterdir()] == ["ada.json"]

    def test_failed_delete_raises_store_error(self, json_store):
        (json_store.store_dir / "ada.json").mkdir()

        with pytest.raises(StoreError):
            json_store.delete("ada")

    def test_unwritable_directory_raises_store_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonPerformanceStore(blocker / "records")


class TestQuizCompletionService:
    def test_first_quiz_creates_record_with_timestamp(self, store, fixed_clock):
        service = QuizCompletionService(store, clock=fixed_clock)
        outcome = service.record_quiz("ada", 88, "visual", "volcanoes", {"currentStreak": 2})

        stored = store.load("ada")
        assert stored == outcome.updated
        assert stored.total_lessons_completed == 1
        assert stored.last_updated == fixed_clock()
        assert outcome.previous == PerformanceHistory.default()

    def test_corrupt_record_restarts_from_default(self, json_store, fixed_clock):
        (json_store.store_dir / "ada.json").write_text("garbage", encoding="utf-8")
        service = QuizCompletionService(json_store, clock=fixed_clock)

        outcome = service.record_quiz("ada", 70, "reading", "poetry")
        assert outcome.updated.total_lessons_completed == 1

    def test_outcome_flags_difficulty_change(self, store, fixed_clock):
        store.save(
            "ada",
            PerformanceHistory(total_lessons_completed=4, recent_quiz_scores=(60, 65, 70, 90)),
        )
        service = QuizCompletionService(store, clock=fixed_clock)

        outcome = service.record_quiz("ada", 95, "visual", "fractions", {"currentStreak": 4})
        assert outcome.difficulty_changed is True
        assert outcome.updated.current_difficulty == Difficulty.INTERMEDIATE

    def test_get_history_and_reset(self, store, fixed_clock):
        service = QuizCompletionService(store, clock=fixed_clock)
        assert service.get_history("ada") == PerformanceHistory.default()

        service.record_quiz("ada", 50, "visual", "x")
        assert service.reset("ada") is True
        assert service.get_history("ada") == PerformanceHistory.default()

    def test_concurrent_submissions_do_not_lose_updates(self, store, fixed_clock):
        service = QuizCompletionService(store, clock=fixed_clock)
        submissions = [("ada", 70), ("bob", 80)] * 25

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda s: service.record_quiz(s[0], s[1], "visual", "x"), submissions))

        assert store.load("ada").total_lessons_completed == 25
        assert store.load("bob").total_lessons_completed == 25
