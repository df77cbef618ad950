"""
Stroke Recognition Engine
- Holds the character template library
- Compares traced strokes to templates (count, length and direction)
- Recognizes which character the user drew
"""

import json
import os
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

import config
from geometry import dot, normalize, polyline_length, vec_sub
from logging_config import get_logger
from strokes import Stroke, Template

logger = get_logger("stroke_engine")


# ===============================
# Stroke Comparison
# ===============================

def compare_lengths(traced: Sequence, reference: Sequence) -> float:
    """
    1 when the traced path is as long as the reference.

    Not clamped: a trace more than twice the reference length goes negative.
    """
    reference_length = polyline_length(reference)
    if reference_length == 0:
        return 0.0
    ratio = polyline_length(traced) / reference_length
    return 1.0 - abs(1.0 - ratio)


def compare_directions(traced: Sequence, reference: Sequence) -> float:
    """Start-to-end direction agreement mapped from [-1, 1] to [0, 1]."""
    if len(traced) < 2 or len(reference) < 2:
        return 0.0
    traced_dir = normalize(vec_sub(traced[-1], traced[0]))
    reference_dir = normalize(vec_sub(reference[-1], reference[0]))
    return (dot(traced_dir, reference_dir) + 1.0) / 2.0


def stroke_score(traced: Stroke, reference: Stroke) -> float:
    """Similarity of one traced stroke to one reference stroke."""
    if len(traced.points) == 0 or len(reference.points) == 0:
        return 0.0
    length_sim = compare_lengths(traced.points, reference.points)
    direction_sim = compare_directions(traced.points, reference.points)
    return length_sim * config.LENGTH_WEIGHT + direction_sim * config.DIRECTION_WEIGHT


def compare_stroke_shapes(traced: Sequence[Stroke], reference: Sequence[Stroke]) -> float:
    """Mean stroke score, pairing strokes by position (i-th with i-th)."""
    comparisons = min(len(traced), len(reference))
    if comparisons == 0:
        return 0.0
    total = 0.0
    for i in range(comparisons):
        total += stroke_score(traced[i], reference[i])
    return total / comparisons


def similarity(traced: Sequence[Stroke], reference: Sequence[Stroke]) -> float:
    """Similarity of a traced stroke sequence to a template's strokes."""
    if len(traced) == 0 or len(reference) == 0:
        return 0.0

    count_score = 1.0 - abs(len(traced) - len(reference)) / max(len(traced), len(reference))
    shape_score = compare_stroke_shapes(traced, reference)
    return count_score * config.COUNT_WEIGHT + shape_score * config.SHAPE_WEIGHT


def recognize(
    captured: Sequence[Stroke],
    templates: Sequence[Template],
    threshold: float = config.SIMILARITY_THRESHOLD,
) -> Optional[str]:
    """
    Label of the best matching template, or None.

    Ties keep the earlier template; the best one must also reach threshold.
    """
    if len(captured) == 0:
        return None

    best_label = None
    best_score = -np.inf
    for template in templates:
        score = similarity(captured, template.strokes)
        logger.debug("Template %s scored %.3f", template.label, score)
        if score > best_score:
            best_score = score
            best_label = template.label

    if best_label is None or best_score < threshold:
        return None
    return best_label


# ===============================
# Template Library
# ===============================

class TemplateLibrary:
    """Ordered, read-only collection of character templates."""

    def __init__(self, templates: Sequence[Template] = ()):
        self._templates: Tuple[Template, ...] = tuple(templates)

    @classmethod
    def from_dict(cls, data: Dict) -> "TemplateLibrary":
        """
        Build from ``{"characters": [{"char": "一", "strokes": [[[x, y, z], ...]]}]}``.

        2D points are accepted and get z = 0.
        """
        templates = []
        for char_data in data.get("characters", []):
            strokes = tuple(Stroke.from_points(pts) for pts in char_data.get("strokes", []))
            templates.append(Template(char_data["char"], strokes))
        return cls(templates)

    @classmethod
    def from_json(cls, json_path: str = config.CHARACTER_DB_PATH) -> "TemplateLibrary":
        """Load templates from JSON. A missing file gives an empty library."""
        if not os.path.exists(json_path):
            logger.warning("%s not found", json_path)
            return cls()

        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        library = cls.from_dict(data)
        logger.info("Loaded %d character templates from %s", len(library), json_path)
        return library

    @property
    def labels(self) -> List[str]:
        return [t.label for t in self._templates]

    def get(self, label: str) -> Optional[Template]:
        """First template with this label."""
        for template in self._templates:
            if template.label == label:
                return template
        return None

    def __len__(self):
        return len(self._templates)

    def __iter__(self) -> Iterator[Template]:
        return iter(self._templates)

    def __getitem__(self, idx):
        return self._templates[idx]


# ===============================
# Character Recognition
# ===============================

class CharacterRecognizer:
    """Recognizes characters from traced strokes against a template library."""

    def __init__(
        self,
        templates: Sequence[Template] = (),
        similarity_threshold: float = config.SIMILARITY_THRESHOLD,
    ):
        self.templates = templates
        self.similarity_threshold = similarity_threshold

    def recognize(self, strokes: Sequence[Stroke]) -> Optional[str]:
        label = recognize(strokes, list(self.templates), self.similarity_threshold)
        if label is None:
            logger.info("No character recognized from %d stroke(s)", len(strokes))
        else:
            logger.info("Recognized %s", label)
        return label

    def rank(self, strokes: Sequence[Stroke]) -> List[Dict]:
        """
        Every template with its similarity, best first.

        Returns list of {"character": str, "similarity": float}; equal scores
        keep library order.
        """
        results = [
            {"character": t.label, "similarity": similarity(strokes, t.strokes)}
            for t in self.templates
        ]
        results.sort(key=lambda x: x["similarity"], reverse=True)
        return results
