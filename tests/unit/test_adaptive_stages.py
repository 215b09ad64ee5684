"""
Unit tests for the individual engine stages.

Each stage is a pure function, so these tests need no store or engine.
"""

import pytest

from wml.adaptive.history import append_to_window, cumulative_average
from wml.adaptive.modality import rank_modalities, update_modality_scores
from wml.adaptive.models import LearnerTier, Modality, ModalityScores, StreakHealth, Trend
from wml.adaptive.streak import evaluate_streak_health
from wml.adaptive.tier import blend_tier_evidence, classify_tier, update_tier_score
from wml.adaptive.topics import normalize_topic, track_topic
from wml.adaptive.trend import classify_trend


class TestModalityUpdate:
    def test_only_affected_modality_moves(self):
        scores = update_modality_scores(ModalityScores(), Modality.VISUAL, 100)

        assert scores.visual == pytest.approx(65.0)
        assert scores.reading == scores.handson == scores.listening == 50.0

    def test_single_outlier_moves_at_most_alpha_times_100(self):
        start = ModalityScores(reading=0)
        scores = update_modality_scores(start, Modality.READING, 100, alpha=0.3)
        assert scores.reading - start.reading == pytest.approx(30.0)

    def test_unknown_modality_leaves_scores_unchanged(self):
        start = ModalityScores(visual=70)
        assert update_modality_scores(start, None, 100) is start

    def test_converges_toward_evidence(self):
        scores = ModalityScores()
        for _ in range(20):
            scores = update_modality_scores(scores, Modality.LISTENING, 90)
        assert 89 < scores.listening <= 90


class TestModalityRanking:
    def test_ties_keep_declaration_order(self):
        assert rank_modalities(ModalityScores()) == list(Modality)

    def test_preference_bonus_outweighs_small_performance_gap(self):
        scores = ModalityScores(visual=80, handson=50)
        ranked = rank_modalities(scores, ["handson"])
        # handson: 30 + 40 = 70 vs visual 48
        assert ranked[0] == Modality.HANDSON
        assert ranked[1] == Modality.VISUAL

    def test_unknown_styles_are_ignored(self):
        scores = ModalityScores(reading=90)
        assert rank_modalities(scores, ["telepathy"])[0] == Modality.READING


class TestHistoryWindow:
    def test_fifo_eviction(self):
        assert append_to_window((1, 2, 3, 4, 5), 6) == (2, 3, 4, 5, 6)

    def test_grows_until_full(self):
        assert append_to_window((), 70) == (70,)
        assert append_to_window((70,), 80) == (70, 80)

    def test_cumulative_average_counts_every_quiz(self):
        assert cumulative_average(80, 4, 100) == pytest.approx(84.0)
        assert cumulative_average(0, 0, 70) == pytest.approx(70.0)


class TestTrendClassifier:
    @pytest.mark.parametrize("window", [(), (95,)])
    def test_short_window_is_low_confidence_stable(self, window):
        reading = classify_trend(window)
        assert reading.trend == Trend.STABLE
        assert reading.low_confidence is True

    def test_improving_window(self):
        reading = classify_trend((60, 65, 70, 90, 95))
        assert reading.trend == Trend.IMPROVING
        # Middle score belongs to the older half
        assert reading.older_mean == pytest.approx(65.0)
        assert reading.newer_mean == pytest.approx(92.5)

    def test_declining_window(self):
        assert classify_trend((65, 70, 90, 95, 30)).trend == Trend.DECLINING

    def test_difference_equal_to_threshold_is_stable(self):
        assert classify_trend((50, 58), threshold=8).trend == Trend.STABLE
        assert classify_trend((50, 58.5), threshold=8).trend == Trend.IMPROVING

    def test_flat_scores_are_stable(self):
        reading = classify_trend((70, 72, 69, 71))
        assert reading.trend == Trend.STABLE
        assert reading.low_confidence is False


class TestTierClassifier:
    def test_evidence_blend(self):
        # 0.6*80 + 0.3*50 + 0.1*100 (streak capped at 10)
        assert blend_tier_evidence(80, 0.5, 20) == pytest.approx(73.0)
        assert blend_tier_evidence(100, 1.0, 10) == pytest.approx(100.0)
        assert blend_tier_evidence(0, 0.0, 0) == pytest.approx(0.0)

    def test_streak_bonus_is_at_most_ten_points(self):
        assert blend_tier_evidence(0, 0.0, 365) == pytest.approx(10.0)
        assert blend_tier_evidence(0, 0.0, 5) == pytest.approx(5.0)

    def test_tier_score_is_smoothed(self):
        assert update_tier_score(80, 0) == pytest.approx(56.0)

    @pytest.mark.parametrize(
        "score, current, expected",
        [
            (39.99, LearnerTier.INTERMEDIATE, LearnerTier.BEGINNER),
            (40.0, LearnerTier.BEGINNER, LearnerTier.BEGINNER),
            (40.0, LearnerTier.INTERMEDIATE, LearnerTier.INTERMEDIATE),
            (40.01, LearnerTier.BEGINNER, LearnerTier.INTERMEDIATE),
            (75.0, LearnerTier.INTERMEDIATE, LearnerTier.INTERMEDIATE),
            (75.0, LearnerTier.ADVANCED, LearnerTier.ADVANCED),
            (75.01, LearnerTier.INTERMEDIATE, LearnerTier.ADVANCED),
            (74.99, LearnerTier.ADVANCED, LearnerTier.INTERMEDIATE),
        ],
    )
    def test_boundaries_require_strict_crossing(self, score, current, expected):
        assert classify_tier(score, current) == expected

    def test_exact_far_boundary_stops_at_adjacent_tier(self):
        assert classify_tier(40.0, LearnerTier.ADVANCED) == LearnerTier.INTERMEDIATE
        assert classify_tier(75.0, LearnerTier.BEGINNER) == LearnerTier.INTERMEDIATE


class TestStreakHealth:
    @pytest.mark.parametrize(
        "streak, expected",
        [
            (0, StreakHealth.AT_RISK),
            (1, StreakHealth.WARNING),
            (2, StreakHealth.WARNING),
            (3, StreakHealth.HEALTHY),
            (30, StreakHealth.HEALTHY),
            (-4, StreakHealth.AT_RISK),
            (None, StreakHealth.AT_RISK),
            ("soon", StreakHealth.AT_RISK),
        ],
    )
    def test_lookup(self, streak, expected):
        assert evaluate_streak_health(streak) == expected


class TestTopicTracker:
    def test_high_score_marks_strong(self):
        assert track_topic((), (), "Fractions", 90) == (("fractions",), ())

    def test_low_score_moves_topic_from_strong_to_weak(self):
        strong, weak = track_topic(("fractions",), (), "fractions", 30)
        assert strong == ()
        assert weak == ("fractions",)

    def test_middle_scores_change_nothing(self):
        assert track_topic(("a",), ("b",), "b", 60) == (("a",), ("b",))

    def test_thresholds_are_inclusive(self):
        assert track_topic((), (), "x", 85)[0] == ("x",)
        assert track_topic((), (), "x", 40)[1] == ("x",)
        assert track_topic((), (), "x", 41) == ((), ())

    def test_cap_evicts_least_recently_reinforced(self):
        strong = ("a", "b", "c", "d", "e")
        strong, _ = track_topic(strong, (), "a", 95)
        assert strong == ("b", "c", "d", "e", "a")

        strong, _ = track_topic(strong, (), "f", 95)
        assert strong == ("c", "d", "e", "a", "f")

    def test_labels_are_normalized(self):
        assert normalize_topic("  Ancient   EGYPT ") == "ancient egypt"
        strong, _ = track_topic(("ancient egypt",), (), "Ancient Egypt", 99)
        assert strong == ("ancient egypt",)

    @pytest.mark.parametrize("topic", ["", "   ", None])
    def test_blank_topic_is_ignored(self, topic):
        assert track_topic(("a",), (), topic, 100) == (("a",), ())
