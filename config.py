"""
Configuration file for Air Calligraphy Tutor
Easily customize capture, recognition thresholds and scoring
"""

# ===============================
# CAPTURE
# ===============================

# Minimum distance (world units, ~metres) between two recorded points.
# Samples closer than this to the last accepted point are dropped (jitter).
MIN_STROKE_DISTANCE = 0.001

# ===============================
# HAND DETECTION
# ===============================

# Camera settings
CAMERA_INDEX = 0  # 0 = default camera, adjust if needed
CAMERA_FPS = 30

# Hand detection sensitivity (detection confidence threshold)
HAND_DETECTION_CONFIDENCE = 0.7
HAND_TRACKING_CONFIDENCE = 0.7

# MediaPipe landmark indices
INDEX_FINGER_TIP = 8
THUMB_TIP = 4

# Index tip and thumb tip closer than this (normalized) = pen down
PINCH_THRESHOLD_NORM = 0.06

HAND_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)
HAND_LANDMARKER_MODEL_PATH = "models/hand_landmarker.task"

# ===============================
# CHARACTER RECOGNITION
# ===============================

# Minimum similarity (0-1) for a template to be reported as recognized
SIMILARITY_THRESHOLD = 0.7

# Similarity = count * COUNT_WEIGHT + shape * SHAPE_WEIGHT
COUNT_WEIGHT = 0.3
SHAPE_WEIGHT = 0.7

# Per-stroke score = length * LENGTH_WEIGHT + direction * DIRECTION_WEIGHT
LENGTH_WEIGHT = 0.5
DIRECTION_WEIGHT = 0.5

CHARACTER_DB_PATH = "characters.json"

# ===============================
# SCORING
# ===============================

SCORE_WEIGHTS = {
    "accuracy": 0.4,
    "stroke_order": 0.3,
    "proportion": 0.2,
    "smoothness": 0.1,
}

MIN_PASS_ACCURACY = 0.6

# Fixed sub-scores until a per-stroke comparison against the target exists
PLACEHOLDER_ACCURACY = 0.8
PLACEHOLDER_STROKE_ORDER = 0.7

# Partial credit for a wrong / unrecognized character
PARTIAL_BASE_SCORE = 0.3
PARTIAL_SMOOTHNESS_BONUS = 0.2

# Kanji are written in a roughly square box
IDEAL_ASPECT_RATIO = 1.0

# Lower bound (percentage) of each feedback tier, best first
FEEDBACK_TIERS = {
    "excellent": 90,
    "great": 75,
    "good": 60,
    "needs_improvement": 40,
    "keep_practicing": 0,
}

# ===============================
# FEEDBACK MESSAGES
# ===============================

FEEDBACK_MESSAGES = {
    "excellent": "Excellent! Perfect calligraphy!",
    "great": "Great job! Very well done!",
    "good": "Good work! Keep practicing!",
    "needs_improvement": "Not bad! Try to be more precise.",
    "keep_practicing": "Keep practicing! Focus on stroke accuracy.",
    "no_strokes": "Nothing was traced. Pinch and draw in the air!",
    "wrong_character": "That looked like {recognized}, not {target}. Try again!",
    "unrecognized": "Couldn't recognize that character. Try again!",
}

# ===============================
# STYLES & MODES
# ===============================

STYLE_DESCRIPTIONS_JA = {
    "smooth": "滑らか",
    "aggressive": "激しい",
    "powerful": "力強い",
    "abstract": "抽象的",
    "artistic": "芸術的",
}

STYLE_DESCRIPTIONS_EN = {
    "smooth": "Smooth",
    "aggressive": "Aggressive",
    "powerful": "Powerful",
    "abstract": "Abstract",
    "artistic": "Artistic",
}

DEFAULT_STYLE_JA = "標準"
DEFAULT_STYLE_EN = "Standard"

MODE_NAMES = {
    "sample_words": "Sample Words",
    "custom_name": "Custom Name",
}

# Default word: "Love"
DEFAULT_KANJI = "愛"

# ===============================
# DEBUG & DEVELOPMENT
# ===============================

# Enable debug output
DEBUG_MODE = False

LOG_FILE = None

# ===============================
# SYSTEM SETTINGS
# ===============================

APP_NAME = "Air Calligraphy Tutor"
APP_VERSION = "1.0.0"

# Demo replay: seconds between synthetic ticks
DEMO_TICK_SECONDS = 1.0 / 30

# Camera capture length when no duration is given (seconds)
CAPTURE_DURATION = 10.0


def get_config(key: str, default=None):
    """Get configuration value by key."""
    parts = key.split(".")
    obj = globals()

    for part in parts:
        if isinstance(obj, dict):
            obj = obj.get(part, default)
        else:
            return default

    return obj if obj is not None else default


if __name__ == "__main__":
    # Print all configuration
    print("Air Calligraphy Tutor Configuration")
    print("=" * 50)
    print(f"Min stroke distance: {MIN_STROKE_DISTANCE}")
    print(f"Similarity threshold: {SIMILARITY_THRESHOLD}")
    print(f"Score weights: {SCORE_WEIGHTS}")
    print(f"Min pass accuracy: {MIN_PASS_ACCURACY}")
    print(f"Character DB: {CHARACTER_DB_PATH}")
    print(f"Debug Mode: {DEBUG_MODE}")
