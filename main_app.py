"""
Air Calligraphy Tutor - Application Context

Coordinates one tutor session: pick a word and style, trace it in the air,
then recognize and score the strokes. The context is owned by the caller
(UI, tests, the CLI below); nothing here is global.

Two input sources for the CLI:
1. demo: replays the target's template strokes as if they were traced
2. camera: MediaPipe hand tracking, pinch to draw
"""

import argparse
import logging
import sys
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import cv2

import config
from hand_tracking import HandTrackingSource, create_hand_landmarker
from logging_config import get_logger, setup_logging
from scoring import ScoreBreakdown, ScoringSystem
from stroke_engine import CharacterRecognizer, TemplateLibrary
from strokes import CalligraphyStyle, GameMode, Stroke, Template
from tracing import PriorityTrackingSource, TracingManager

logger = get_logger("app")


class CameraError(RuntimeError):
    """Camera or hand landmark model could not be started."""


@dataclass(frozen=True)
class EvaluationResult:
    target: str
    strokes: Tuple[Stroke, ...]
    recognized: Optional[str]
    breakdown: ScoreBreakdown

    @property
    def feedback(self) -> str:
        if self.recognized is None:
            return config.FEEDBACK_MESSAGES["unrecognized"]
        if self.recognized != self.target:
            return config.FEEDBACK_MESSAGES["wrong_character"].format(
                recognized=self.recognized, target=self.target
            )
        return self.breakdown.feedback


def default_target(templates: Sequence[Template]) -> str:
    """The configured default kanji if the library has it, else the first template."""
    labels = [t.label for t in templates]
    if not labels or config.DEFAULT_KANJI in labels:
        return config.DEFAULT_KANJI
    return labels[0]


# ===============================
# Application
# ===============================

class CalligraphyApp:
    def __init__(
        self,
        templates: Sequence[Template] = (),
        tracer: Optional[TracingManager] = None,
        recognizer: Optional[CharacterRecognizer] = None,
        scoring_system: Optional[ScoringSystem] = None,
        mode: GameMode = GameMode.SAMPLE_WORDS,
        style: CalligraphyStyle = CalligraphyStyle.SMOOTH,
    ):
        self.tracer = tracer or TracingManager(style=style)
        self.recognizer = recognizer or CharacterRecognizer(templates)
        self.scoring_system = scoring_system or ScoringSystem()

        self._mode = mode
        self._style = style
        self._word = self.current_kanji = default_target(templates)
        self.tracer.set_style(style)

        # Listeners, called only when the value actually changes
        self.on_mode_changed: List[Callable[[GameMode], None]] = []
        self.on_style_changed: List[Callable[[CalligraphyStyle], None]] = []
        self.on_word_changed: List[Callable[[str], None]] = []

        self.is_tracing = False
        self.is_processing = False

        # Feedback & scoring
        self.history: List[EvaluationResult] = []
        self.completed_characters = 0

    # ----------------------------
    # Mode / Style / Word
    # ----------------------------

    @property
    def mode(self) -> GameMode:
        return self._mode

    @mode.setter
    def mode(self, value: GameMode):
        if value != self._mode:
            self._mode = value
            logger.info("Game mode changed to: %s", config.MODE_NAMES[value.value])
            for callback in self.on_mode_changed:
                callback(value)

    @property
    def style(self) -> CalligraphyStyle:
        return self._style

    @style.setter
    def style(self, value: CalligraphyStyle):
        if value != self._style:
            self._style = value
            self.tracer.set_style(value)
            logger.info("Style changed to: %s", value.value)
            for callback in self.on_style_changed:
                callback(value)

    @property
    def word(self) -> str:
        return self._word

    @word.setter
    def word(self, value: str):
        if value != self._word:
            self._word = value
            logger.info("Word changed to: %s", value)
            for callback in self.on_word_changed:
                callback(value)

    def set_target(self, kanji: str, word: Optional[str] = None):
        """Character to practise, e.g. from a sample list or a name generator."""
        self.current_kanji = kanji
        self.word = word if word is not None else kanji

    def select_sample_word(self, kanji: str):
        """Practise one of the pre-defined words."""
        self.set_target(kanji)
        self.mode = GameMode.SAMPLE_WORDS

    def select_custom_name(self, name: str, kanji: str):
        """Practise the kanji generated for a user's name."""
        self.set_target(kanji, word=name)
        self.mode = GameMode.CUSTOM_NAME

    # ----------------------------
    # Tracing
    # ----------------------------

    def start_tracing(self):
        if self.is_tracing or self.is_processing:
            return
        self.is_tracing = True
        self.tracer.start()

    def end_tracing(self) -> Optional[EvaluationResult]:
        """Stop tracing, then recognize and score what was drawn."""
        if not self.is_tracing:
            return None

        self.is_tracing = False
        self.is_processing = True
        try:
            strokes = self.tracer.end()
            if len(strokes) == 0:
                logger.info(config.FEEDBACK_MESSAGES["no_strokes"])
                return None

            recognized = self.recognizer.recognize(strokes)
            breakdown = self.scoring_system.calculate_score(
                strokes, self.current_kanji, recognized
            )
            result = EvaluationResult(self.current_kanji, strokes, recognized, breakdown)
            self.history.append(result)
            if breakdown.passed:
                self.completed_characters += 1
            return result
        finally:
            self.is_processing = False


# ===============================
# Input Sources
# ===============================

def replay_template(app: CalligraphyApp, template: Template,
                    tick_seconds: float = config.DEMO_TICK_SECONDS) -> Optional[EvaluationResult]:
    """Feed a template's strokes through the tracer, lifting the pen between strokes."""
    t = 0.0
    app.start_tracing()
    for stroke in template.strokes:
        for p in stroke.points:
            app.tracer.sample(p, t)
            t += tick_seconds
        app.tracer.sample(None, t)
        t += tick_seconds
    return app.end_tracing()


def run_camera(app: CalligraphyApp, duration: float) -> Optional[EvaluationResult]:
    """Trace with the webcam for duration seconds. Raises CameraError if it can't start."""
    cap = cv2.VideoCapture(config.CAMERA_INDEX)
    try:
        if not cap.isOpened():
            raise CameraError("Camera failed to initialize. Check camera permissions in system settings.")
        try:
            detect = create_hand_landmarker()
        except (ImportError, OSError, RuntimeError) as e:
            raise CameraError(f"Hand landmarker unavailable: {e}") from e

        app.tracer.source = PriorityTrackingSource([HandTrackingSource(cap, detect)])
        app.start_tracing()
        deadline = time.monotonic() + duration
        while time.monotonic() < deadline:
            app.tracer.tick()
        return app.end_tracing()
    finally:
        cap.release()


def print_result(result: Optional[EvaluationResult]):
    if result is None:
        print(config.FEEDBACK_MESSAGES["no_strokes"])
        return
    b = result.breakdown
    print(f"Target:     {result.target}")
    print(f"Strokes:    {len(result.strokes)}")
    print(f"Recognized: {result.recognized or '-'}")
    print(f"Score:      {b.percentage}% ({b.tier.value})")
    if b.matched:
        print(f"  accuracy={b.accuracy:.2f} order={b.stroke_order:.2f} "
              f"proportion={b.proportion:.2f} smoothness={b.smoothness:.2f}")
    print(result.feedback)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=config.APP_NAME)
    parser.add_argument("--templates", default=config.CHARACTER_DB_PATH,
                        help="character template JSON")
    parser.add_argument("--target", default=None,
                        help="character to write (default: first template)")
    parser.add_argument("--source", choices=["demo", "camera"], default="demo")
    parser.add_argument("--style", choices=[s.value for s in CalligraphyStyle],
                        default=CalligraphyStyle.SMOOTH.value)
    parser.add_argument("--duration", type=float, default=config.CAPTURE_DURATION,
                        help="camera capture length in seconds")
    parser.add_argument("--debug", action="store_true", default=config.DEBUG_MODE)
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {config.APP_VERSION}")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else logging.INFO, config.LOG_FILE)

    library = TemplateLibrary.from_json(args.templates)
    app = CalligraphyApp(library, style=CalligraphyStyle(args.style))
    if args.target is not None:
        app.set_target(args.target)
    target = app.current_kanji

    if args.source == "demo":
        template = library.get(target)
        if template is None:
            logger.error("No template for %s in %s", target, args.templates)
            return 1
        result = replay_template(app, template)
    else:
        try:
            result = run_camera(app, args.duration)
        except CameraError as e:
            logger.error("%s", e)
            return 1

    print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
