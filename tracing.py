"""
Tracing (capture) system
- Pulls one position per tick from a prioritized list of tracking sources
- Builds strokes with an anti-jitter distance filter
- Finalizes strokes on tracking loss and at the end of a session
"""

import time
from typing import Callable, Iterable, Optional, Protocol, Tuple

import config
from geometry import Point3, dist, to_point
from logging_config import get_logger
from strokes import ActiveStroke, CalligraphyStyle, Session, Stroke

logger = get_logger("tracing")


# ===============================
# Tracking Sources
# ===============================

class TrackingSource(Protocol):
    """Anything that can report the pen position for the current tick."""

    def get_position(self) -> Optional[Point3]:
        ...


class CallbackTrackingSource:
    """
    Wraps a device read callable (e.g. an XR controller pose query).

    Some runtimes report the origin instead of "nothing" when a device is
    not tracked; set zero_is_missing to treat (0, 0, 0) as no position.
    """

    def __init__(self, read: Callable[[], Optional[Iterable[float]]],
                 name: str = "controller", zero_is_missing: bool = False):
        self.read = read
        self.name = name
        self.zero_is_missing = zero_is_missing

    def get_position(self) -> Optional[Point3]:
        value = self.read()
        if value is None:
            return None
        p = to_point(value)
        if self.zero_is_missing and p == (0.0, 0.0, 0.0):
            return None
        return p


class PriorityTrackingSource:
    """Asks each source in order; the first valid position wins."""

    def __init__(self, sources: Iterable[TrackingSource]):
        self.sources = list(sources)
        self.last_source = None

    def get_position(self) -> Optional[Point3]:
        for source in self.sources:
            p = source.get_position()
            if p is not None:
                self.last_source = source
                return p
        self.last_source = None
        return None


# ===============================
# Capture State Machine
# ===============================

class TracingManager:
    """
    Idle --start()--> Tracing --end()--> Idle.

    While tracing, sample() is called once per tick with the pen position
    (or None when tracking is lost). Strokes are handed back by end() as an
    immutable tuple.
    """

    def __init__(
        self,
        source: Optional[TrackingSource] = None,
        min_stroke_distance: float = config.MIN_STROKE_DISTANCE,
        style: CalligraphyStyle = CalligraphyStyle.SMOOTH,
        clock: Callable[[], float] = time.monotonic,
    ):
        if min_stroke_distance < 0:
            raise ValueError(f"min_stroke_distance must be >= 0, got {min_stroke_distance}")
        self.source = source
        self.min_stroke_distance = min_stroke_distance
        self.style = style
        self.clock = clock
        self.session = Session()

    # ----------------------------
    # Inspection
    # ----------------------------

    @property
    def is_tracing(self) -> bool:
        return self.session.active

    @property
    def has_active_stroke(self) -> bool:
        return self.session.current is not None

    @property
    def strokes(self) -> Tuple[Stroke, ...]:
        """Strokes finalized so far in the current session."""
        return tuple(self.session.strokes)

    @property
    def active_points(self) -> Tuple[Point3, ...]:
        """Points of the stroke being drawn (for live ink)."""
        if self.session.current is None:
            return ()
        return tuple(self.session.current.points)

    def set_style(self, style: CalligraphyStyle):
        """Style for strokes started from now on."""
        self.style = style

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def start(self):
        if self.session.active:
            return
        self.session.active = True
        self.session.reset()
        logger.debug("Tracing started")

    def end(self, timestamp: Optional[float] = None) -> Tuple[Stroke, ...]:
        """Stop tracing and return the finalized strokes."""
        if not self.session.active:
            return ()
        if timestamp is None:
            timestamp = self.clock()

        current = self.session.current
        # Any stroke still open counts, even a single point
        if current is not None and len(current.points) > 0:
            self.session.strokes.append(current.finalize(timestamp))

        strokes = tuple(self.session.strokes)
        self.session.active = False
        self.session.reset()
        logger.debug("Tracing ended with %d stroke(s)", len(strokes))
        return strokes

    # ----------------------------
    # Per-tick input
    # ----------------------------

    def tick(self, timestamp: Optional[float] = None):
        """Read the tracking source once and feed the result to sample()."""
        if not self.session.active:
            return
        position = self.source.get_position() if self.source is not None else None
        self.sample(position, timestamp)

    def sample(self, position: Optional[Point3], timestamp: Optional[float] = None):
        if not self.session.active:
            return
        if timestamp is None:
            timestamp = self.clock()

        session = self.session
        if position is not None:
            position = to_point(position)
            if session.current is None:
                self._start_stroke(position, timestamp)
            elif dist(position, session.last_point) >= self.min_stroke_distance:
                session.current.points.append(position)
                session.last_point = position
        elif session.current is not None:
            self._finalize_stroke(timestamp)

    def _start_stroke(self, position: Point3, timestamp: float):
        self.session.current = ActiveStroke([position], self.style, timestamp)
        self.session.last_point = position

    def _finalize_stroke(self, timestamp: float):
        """Tracking lost: keep the stroke only if it became a visible line."""
        current = self.session.current
        if len(current.points) > 1:
            stroke = current.finalize(timestamp)
            self.session.strokes.append(stroke)
            logger.debug(
                "Stroke %d finalized: %d points, %.2fs",
                len(self.session.strokes), len(stroke.points), stroke.duration,
            )
        else:
            logger.debug("Discarded single-point stroke")
        self.session.current = None
        self.session.last_point = None
