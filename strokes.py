"""
Stroke & session model
- Calligraphy styles and game modes
- Finalized strokes, character templates and the capture session
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import config
from geometry import Point3, polyline_length, to_point


class CalligraphyStyle(Enum):
    SMOOTH = "smooth"          # 滑らか
    AGGRESSIVE = "aggressive"  # 激しい
    POWERFUL = "powerful"      # 力強い
    ABSTRACT = "abstract"      # 抽象的
    ARTISTIC = "artistic"      # 芸術的


class GameMode(Enum):
    SAMPLE_WORDS = "sample_words"  # pre-defined shuji words
    CUSTOM_NAME = "custom_name"    # name turned into kanji by an external service


def style_description(style: CalligraphyStyle) -> str:
    """Japanese description of a style."""
    return config.STYLE_DESCRIPTIONS_JA.get(style.value, config.DEFAULT_STYLE_JA)


def style_description_english(style: CalligraphyStyle) -> str:
    return config.STYLE_DESCRIPTIONS_EN.get(style.value, config.DEFAULT_STYLE_EN)


@dataclass(frozen=True)
class Stroke:
    """One pen-down to pen-up path. Never mutated once built."""
    points: Tuple[Point3, ...]
    style: CalligraphyStyle = CalligraphyStyle.SMOOTH
    start_time: float = 0.0
    end_time: float = 0.0

    @classmethod
    def from_points(cls, pts: Sequence, style: CalligraphyStyle = CalligraphyStyle.SMOOTH,
                    start_time: float = 0.0, end_time: float = 0.0) -> "Stroke":
        """Build a stroke from raw (x, y) or (x, y, z) coordinates."""
        return cls(tuple(to_point(p) for p in pts), style, start_time, end_time)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def path_length(self) -> float:
        return polyline_length(self.points)

    def __len__(self):
        return len(self.points)


@dataclass(frozen=True)
class Template:
    """Canonical reference strokes for one character."""
    label: str
    strokes: Tuple[Stroke, ...]

    @property
    def num_strokes(self) -> int:
        return len(self.strokes)


@dataclass
class ActiveStroke:
    """Stroke still being drawn; owned by the tracer until finalized."""
    points: List[Point3]
    style: CalligraphyStyle
    start_time: float

    def finalize(self, end_time: float) -> Stroke:
        return Stroke(tuple(self.points), self.style, self.start_time,
                      max(end_time, self.start_time))


@dataclass
class Session:
    """State of one capture, from start() to end()."""
    active: bool = False
    strokes: List[Stroke] = field(default_factory=list)
    current: Optional[ActiveStroke] = None
    last_point: Optional[Point3] = None

    def reset(self):
        self.strokes = []
        self.current = None
        self.last_point = None
