import json
import logging

import pytest

from conftest import horizontal, make_stroke, vertical
from stroke_engine import (
    CharacterRecognizer,
    TemplateLibrary,
    compare_directions,
    compare_lengths,
    recognize,
    similarity,
    stroke_score,
)
from strokes import Template


def test_identical_stroke_scores_one():
    s = horizontal()
    assert stroke_score(s, s) == pytest.approx(1.0)


def test_perpendicular_stroke():
    # same length, direction dot = 0 -> (0 + 1) / 2
    assert stroke_score(horizontal(), vertical()) == pytest.approx(0.75)


def test_reversed_stroke():
    reversed_line = make_stroke((0.3, 0, 0), (0, 0, 0))
    assert stroke_score(reversed_line, horizontal()) == pytest.approx(0.5)


def test_length_term_is_not_clamped():
    long_line = horizontal(length=1.2)
    assert compare_lengths(long_line.points, horizontal().points) == pytest.approx(-2.0)
    assert stroke_score(long_line, horizontal()) == pytest.approx(-0.5)
    assert similarity([long_line], [horizontal()]) == pytest.approx(0.3 - 0.35)


def test_zero_length_reference():
    dot = make_stroke((0, 0, 0), (0, 0, 0))
    assert compare_lengths(horizontal().points, dot.points) == 0.0


def test_single_point_has_no_direction():
    point = make_stroke((0, 0, 0))
    assert compare_directions(point.points, horizontal().points) == 0.0
    assert stroke_score(point, horizontal()) == pytest.approx(0.0)


def test_empty_stroke_scores_zero():
    empty = make_stroke()
    assert stroke_score(empty, horizontal()) == 0.0
    assert stroke_score(horizontal(), empty) == 0.0


def test_identical_beats_shorter_or_rotated_variant():
    s = horizontal()
    assert stroke_score(s, s) >= stroke_score(horizontal(length=0.2), s)
    assert stroke_score(s, s) >= stroke_score(vertical(), s)


def test_stroke_count_penalty(one, ten):
    # first stroke identical, one stroke missing
    assert similarity(ten.strokes[:1], ten.strokes) == pytest.approx(0.3 * 0.5 + 0.7)


def test_similarity_of_empty_sequences(one):
    assert similarity([], one.strokes) == 0.0
    assert similarity(one.strokes, []) == 0.0


def test_recognize_empty_capture(one):
    assert recognize([], [one], 0.0) is None


def test_recognize_empty_library():
    assert recognize([horizontal()], [], 0.0) is None


def test_recognize_best_template(one, ten):
    assert recognize(ten.strokes, [one, ten], 0.7) == "十"
    assert recognize(one.strokes, [ten, one], 0.7) == "一"


def test_recognize_below_threshold():
    reversed_line = make_stroke((0.3, 0, 0), (0, 0, 0))
    template = Template("一", (horizontal(),))
    assert similarity([reversed_line], template.strokes) == pytest.approx(0.65)
    assert recognize([reversed_line], [template], 0.7) is None
    assert recognize([reversed_line], [template], 0.6) == "一"


def test_recognize_ties_keep_first_template():
    a = Template("A", (horizontal(),))
    b = Template("B", (horizontal(),))
    assert recognize([horizontal()], [a, b], 0.5) == "A"
    assert recognize([horizontal()], [b, a], 0.5) == "B"


def test_recognize_only_returns_library_labels(one, ten):
    label = recognize([vertical()], [one, ten], 0.0)
    assert label in {"一", "十"}


def test_library_from_dict_accepts_2d_points():
    library = TemplateLibrary.from_dict({
        "characters": [
            {"char": "一", "strokes": [[[0, 0], [1, 0]]]},
            {"char": "十", "strokes": [[[0, 0, 1], [1, 0, 1]], [[0.5, 0.5, 1], [0.5, -0.5, 1]]]},
        ]
    })
    assert library.labels == ["一", "十"]
    assert library.get("十").num_strokes == 2
    assert library[0].strokes[0].points[1] == (1.0, 0.0, 0.0)
    assert library.get("水") is None


def test_library_from_json(tmp_path):
    path = tmp_path / "characters.json"
    path.write_text(json.dumps({"characters": [{"char": "人", "strokes": [[[0, 1], [1, 0]]]}]}),
                    encoding="utf-8")
    library = TemplateLibrary.from_json(str(path))
    assert len(library) == 1
    assert [t.label for t in library] == ["人"]


def test_library_missing_file_is_empty(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        library = TemplateLibrary.from_json(str(tmp_path / "missing.json"))
    assert len(library) == 0
    assert "not found" in caplog.text


def test_recognizer_with_library(one, ten):
    recognizer = CharacterRecognizer(TemplateLibrary([one, ten]), similarity_threshold=0.9)
    assert recognizer.recognize(one.strokes) == "一"
    assert recognizer.recognize([]) is None


def test_rank_sorted_best_first(one, ten):
    recognizer = CharacterRecognizer([one, ten])
    ranked = recognizer.rank(ten.strokes)
    assert [r["character"] for r in ranked] == ["十", "一"]
    assert ranked[0]["similarity"] == pytest.approx(1.0)
    assert ranked[1]["similarity"] == pytest.approx(0.85)


def test_threshold_is_inclusive(one, ten):
    exact = similarity(ten.strokes[:1], ten.strokes)
    assert recognize(ten.strokes[:1], [ten], exact) == "十"
    assert recognize(ten.strokes[:1], [ten], exact + 1e-9) is None


def test_recognizer_threshold_is_inclusive(ten):
    exact = similarity(ten.strokes[:1], ten.strokes)
    assert CharacterRecognizer([ten], exact).recognize(ten.strokes[:1]) == "十"
    assert CharacterRecognizer([ten], exact + 1e-9).recognize(ten.strokes[:1]) is None
