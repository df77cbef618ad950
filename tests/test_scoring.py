import pytest

from conftest import horizontal, make_stroke
from scoring import (
    FeedbackTier,
    ScoreBreakdown,
    ScoreWeights,
    ScoringSystem,
    feedback_tier,
    proportion,
    score,
    score_feedback,
    score_percentage,
    smoothness,
    stroke_smoothness,
)

# (0,0) -> (1,0) -> (1,1): one 90 degree turn
corner = make_stroke((0, 0, 0), (1, 0, 0), (1, 1, 0))


def test_straight_stroke_is_smooth():
    line = make_stroke(*[(i, i, 0) for i in range(5)])
    assert stroke_smoothness(line) == pytest.approx(1.0)


@pytest.mark.parametrize("pts", [[(0, 0, 0)], [(0, 0, 0), (5, 1, 2)]])
def test_short_stroke_is_smooth(pts):
    assert stroke_smoothness(make_stroke(*pts)) == 1.0


def test_right_angle_halves_smoothness():
    assert stroke_smoothness(corner) == pytest.approx(0.5)


def test_reversal_is_not_smooth():
    assert stroke_smoothness(make_stroke((0, 0, 0), (1, 0, 0), (0, 0, 0))) == pytest.approx(0.0)


def test_smoothness_averages_strokes():
    assert smoothness([corner, horizontal()]) == pytest.approx(0.75)
    assert smoothness([]) == 0.0


@pytest.mark.parametrize("pts,expected", [
    ([(0, 0, 0), (1, 1, 0)], 1.0),
    ([(0, 0, 0), (2, 1, 0)], 0.0),
    ([(0, 0, 0), (1, 2, 0)], 0.5),
    ([(0, 0, 0), (4, 1, 0)], 0.0),
])
def test_proportion(pts, expected):
    assert proportion([make_stroke(*pts)]) == pytest.approx(expected)


def test_proportion_flat_is_zero():
    assert proportion([horizontal()]) == 0.0


def test_proportion_uses_all_strokes():
    a = make_stroke((0, 0, 0), (1, 0, 0))
    b = make_stroke((0, 0, 0), (0, 1, 0))
    assert proportion([a, b]) == pytest.approx(1.0)


def test_empty_trace_scores_zero():
    result = score([], "愛", "愛")
    assert result == ScoreBreakdown()
    assert result.composite == 0.0
    assert result.tier == FeedbackTier.KEEP_PRACTICING


@pytest.mark.parametrize("recognized", ["水", None])
def test_partial_credit(recognized):
    result = score([corner], "愛", recognized)
    assert result.composite == pytest.approx(min(1.0, max(0.0, 0.3 + 0.2 * smoothness([corner]))))
    assert result.composite == pytest.approx(0.4)
    assert not result.matched
    assert not result.passed
    assert (result.accuracy, result.stroke_order, result.proportion) == (0.0, 0.0, 0.0)


def test_matched_weighted_composite():
    result = score([corner], "口", "口")
    assert result.matched
    assert result.proportion == pytest.approx(1.0)
    assert result.smoothness == pytest.approx(0.5)
    assert result.composite == pytest.approx(0.8 * 0.4 + 0.7 * 0.3 + 1.0 * 0.2 + 0.5 * 0.1)
    assert result.percentage == 78
    assert result.tier == FeedbackTier.GREAT
    assert result.passed


def test_matched_composite_is_clamped():
    heavy = ScoreWeights(1.0, 1.0, 1.0, 1.0)
    result = score([corner], "口", "口", weights=heavy)
    assert result.composite == 1.0


def test_accuracy_and_order_are_injectable():
    result = score([corner], "口", "口", accuracy=0.2, stroke_order=0.1, min_pass_accuracy=0.6)
    assert result.accuracy == 0.2
    assert result.stroke_order == 0.1
    assert not result.passed


def test_negative_weight_rejected():
    with pytest.raises(ValueError):
        ScoreWeights(accuracy=-0.1)


@pytest.mark.parametrize("composite,tier", [
    (1.0, FeedbackTier.EXCELLENT),
    (0.9, FeedbackTier.EXCELLENT),
    (0.89, FeedbackTier.GREAT),
    (0.75, FeedbackTier.GREAT),
    (0.74, FeedbackTier.GOOD),
    (0.6, FeedbackTier.GOOD),
    (0.59, FeedbackTier.NEEDS_IMPROVEMENT),
    (0.4, FeedbackTier.NEEDS_IMPROVEMENT),
    (0.39, FeedbackTier.KEEP_PRACTICING),
    (0.0, FeedbackTier.KEEP_PRACTICING),
])
def test_feedback_tier_boundaries(composite, tier):
    assert feedback_tier(composite) == tier


def test_percentage_rounds():
    assert score_percentage(0.834) == 83
    assert score_percentage(0.836) == 84
    assert score_percentage(0.0) == 0


def test_feedback_messages():
    assert score_feedback(0.95) == "Excellent! Perfect calligraphy!"
    assert score_feedback(0.1) == "Keep practicing! Focus on stroke accuracy."


def test_scoring_system_uses_its_configuration():
    system = ScoringSystem(weights=ScoreWeights(0.0, 0.0, 0.0, 1.0))
    result = system.calculate_score([corner], "口", "口")
    assert result.composite == pytest.approx(0.5)
