"""
Scoring System
- Accuracy, stroke order, proportion and smoothness sub-scores
- Weighted composite in [0, 1]
- Percentage view and feedback tiers
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

import config
from geometry import angle_between_vectors, bounding_box, clamp01, vec_sub
from logging_config import get_logger
from strokes import Stroke

logger = get_logger("scoring")


class FeedbackTier(Enum):
    EXCELLENT = "excellent"
    GREAT = "great"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs_improvement"
    KEEP_PRACTICING = "keep_practicing"

    @property
    def min_percentage(self) -> int:
        return config.FEEDBACK_TIERS[self.value]

    @property
    def message(self) -> str:
        return config.FEEDBACK_MESSAGES[self.value]


@dataclass(frozen=True)
class ScoreWeights:
    accuracy: float = config.SCORE_WEIGHTS["accuracy"]
    stroke_order: float = config.SCORE_WEIGHTS["stroke_order"]
    proportion: float = config.SCORE_WEIGHTS["proportion"]
    smoothness: float = config.SCORE_WEIGHTS["smoothness"]

    def __post_init__(self):
        for name in ("accuracy", "stroke_order", "proportion", "smoothness"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} weight must be non-negative, got {getattr(self, name)}")


DEFAULT_WEIGHTS = ScoreWeights()


@dataclass(frozen=True)
class ScoreBreakdown:
    accuracy: float = 0.0
    stroke_order: float = 0.0
    proportion: float = 0.0
    smoothness: float = 0.0
    composite: float = 0.0
    matched: bool = False
    passed: bool = False

    @property
    def percentage(self) -> int:
        return score_percentage(self.composite)

    @property
    def tier(self) -> FeedbackTier:
        return feedback_tier(self.composite)

    @property
    def feedback(self) -> str:
        return self.tier.message


# ===============================
# Sub-scores
# ===============================

def stroke_smoothness(stroke: Stroke) -> float:
    """1 for a straight stroke, lower the more it turns between segments."""
    pts = stroke.points
    if len(pts) < 3:
        return 1.0  # too few points to judge

    angles = []
    for i in range(1, len(pts) - 1):
        prev_dir = vec_sub(pts[i], pts[i - 1])
        next_dir = vec_sub(pts[i + 1], pts[i])
        angles.append(angle_between_vectors(prev_dir, next_dir))

    avg_angle = float(np.mean(angles))
    return clamp01(1.0 - avg_angle / 180.0)


def smoothness(strokes: Sequence[Stroke]) -> float:
    if len(strokes) == 0:
        return 0.0
    return sum(stroke_smoothness(s) for s in strokes) / len(strokes)


def proportion(strokes: Sequence[Stroke]) -> float:
    """How close the bounding box of all points is to the ideal aspect ratio."""
    pts = [p for s in strokes for p in s.points]
    if not pts:
        return 0.0

    lo, hi = bounding_box(pts)
    width, height = hi[0] - lo[0], hi[1] - lo[1]
    if height == 0:
        return 0.0
    aspect_ratio = width / height
    return clamp01(1.0 - abs(aspect_ratio - config.IDEAL_ASPECT_RATIO))


def partial_score(strokes: Sequence[Stroke]) -> float:
    """Credit for trying when the character was not matched."""
    return clamp01(config.PARTIAL_BASE_SCORE
                   + smoothness(strokes) * config.PARTIAL_SMOOTHNESS_BONUS)


# ===============================
# Composite
# ===============================

def score(
    traced: Sequence[Stroke],
    target: str,
    recognized: Optional[str],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
    min_pass_accuracy: float = config.MIN_PASS_ACCURACY,
    accuracy: float = config.PLACEHOLDER_ACCURACY,
    stroke_order: float = config.PLACEHOLDER_STROKE_ORDER,
) -> ScoreBreakdown:
    """
    Score traced strokes against the target character.

    accuracy and stroke_order are taken as given; callers with a real
    per-stroke comparison pass their own values.
    """
    if len(traced) == 0:
        return ScoreBreakdown()

    if recognized is None or recognized != target:
        smooth = smoothness(traced)
        return ScoreBreakdown(smoothness=smooth, composite=partial_score(traced))

    prop = proportion(traced)
    smooth = smoothness(traced)
    total = (
        accuracy * weights.accuracy
        + stroke_order * weights.stroke_order
        + prop * weights.proportion
        + smooth * weights.smoothness
    )
    return ScoreBreakdown(
        accuracy=accuracy,
        stroke_order=stroke_order,
        proportion=prop,
        smoothness=smooth,
        composite=clamp01(total),
        matched=True,
        passed=accuracy >= min_pass_accuracy,
    )


def score_percentage(composite: float) -> int:
    # round() is half-to-even
    return int(round(composite * 100))


def feedback_tier(composite: float) -> FeedbackTier:
    percentage = score_percentage(composite)
    for tier in FeedbackTier:
        if percentage >= tier.min_percentage:
            return tier
    return FeedbackTier.KEEP_PRACTICING


def score_feedback(composite: float) -> str:
    return feedback_tier(composite).message


class ScoringSystem:
    """Scoring configuration bundled for the application context."""

    def __init__(
        self,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
        min_pass_accuracy: float = config.MIN_PASS_ACCURACY,
        accuracy: float = config.PLACEHOLDER_ACCURACY,
        stroke_order: float = config.PLACEHOLDER_STROKE_ORDER,
    ):
        self.weights = weights
        self.min_pass_accuracy = min_pass_accuracy
        self.accuracy = accuracy
        self.stroke_order = stroke_order

    def calculate_score(self, traced: Sequence[Stroke], target: str,
                        recognized: Optional[str]) -> ScoreBreakdown:
        breakdown = score(traced, target, recognized, self.weights,
                          self.min_pass_accuracy, self.accuracy, self.stroke_order)
        logger.info(
            "Score for %s (recognized %s): %d%% %s",
            target, recognized, breakdown.percentage, breakdown.tier.value,
        )
        return breakdown
