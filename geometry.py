"""
Geometry primitives
- Point3 value type
- Distance, normalization, dot product and angles in 3D
"""

from typing import NamedTuple, Sequence, Tuple

import numpy as np

# Vectors shorter than this normalize to the zero vector
EPSILON = 1e-6


class Point3(NamedTuple):
    """A position in tracking space. Immutable."""
    x: float
    y: float
    z: float = 0.0


def as_array(p) -> np.ndarray:
    return np.asarray(p, dtype=np.float64)


def to_point(v) -> Point3:
    """Convert any 2- or 3-element sequence into a Point3 (z defaults to 0)."""
    v = [float(c) for c in v]
    if len(v) == 2:
        return Point3(v[0], v[1], 0.0)
    return Point3(v[0], v[1], v[2])


def vec_sub(a, b) -> np.ndarray:
    return as_array(a) - as_array(b)


def vec_len(v) -> float:
    return float(np.linalg.norm(as_array(v)))


def dist(a, b) -> float:
    """Euclidean distance between two points."""
    return vec_len(vec_sub(a, b))


def dot(a, b) -> float:
    return float(np.dot(as_array(a), as_array(b)))


def normalize(v) -> np.ndarray:
    """Unit vector in the direction of v, or zero for a degenerate v."""
    v = as_array(v)
    length = float(np.linalg.norm(v))
    if length <= EPSILON:
        return np.zeros_like(v)
    return v / length


def angle_between_vectors(v1, v2) -> float:
    """Angle in degrees (0-180). Zero-length vectors give 0."""
    mag1 = vec_len(v1)
    mag2 = vec_len(v2)
    if mag1 * mag2 == 0:
        return 0.0
    v = dot(v1, v2) / (mag1 * mag2)
    v = max(min(v, 1.0), -1.0)
    return float(np.degrees(np.arccos(v)))


def clamp01(v: float) -> float:
    return max(0.0, min(1.0, v))


def polyline_length(pts: Sequence) -> float:
    """Total length of a polyline."""
    if len(pts) < 2:
        return 0.0
    arr = as_array(pts)
    return float(np.sum(np.linalg.norm(np.diff(arr, axis=0), axis=1)))


def bounding_box(pts: Sequence) -> Tuple[np.ndarray, np.ndarray]:
    """Axis-aligned (min, max) corners of a point cloud."""
    arr = as_array(pts)
    return np.min(arr, axis=0), np.max(arr, axis=0)
