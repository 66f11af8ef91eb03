"""
Unit Tests for Exercise Models

Tests wire aliases and the answer-shape rule of the Exercise record.
"""

import pytest
from pydantic import ValidationError

from edugen.enums.exercise import ExerciseType
from edugen.models.exercise import (
    ToleranceAnswer,
    TranslationContent,
    answer_fits_type,
    leading_number,
)
from tests.conftest import build_exercise


class TestTranslationContent:
    """Tests for the register field, which keeps its wire name."""

    def test_register_alias(self) -> None:
        content = TranslationContent.model_validate(
            {"type": "translation", "sourceText": "Hallo", "register": "formal"}
        )

        assert content.register_ == "formal"
        assert content.model_dump(by_alias=True)["register"] == "formal"

    def test_register_through_exercise(self) -> None:
        exercise = build_exercise(
            ExerciseType.TRANSLATION,
            correct_answer="Good day",
            content={"sourceText": "Guten Tag", "register": "informal"},
        )

        assert exercise.problem.content.register_ == "informal"


class TestAnswerFitsType:
    """Tests for answer_fits_type."""

    @pytest.mark.parametrize(
        "exercise_type,answer,fits",
        [
            (ExerciseType.MULTIPLE_CHOICE, "b", True),
            (ExerciseType.MULTIPLE_CHOICE, ["b"], False),
            (ExerciseType.FILL_BLANK, ["x", "y"], True),
            (ExerciseType.FILL_BLANK, ["x", True], False),
            (ExerciseType.TRUE_FALSE, [True, False], True),
            (ExerciseType.TRUE_FALSE, ["true"], False),
            (ExerciseType.MATCHING, {"1": "a"}, True),
            (ExerciseType.MATCHING, "1-a", False),
            (ExerciseType.CALCULATION, 12.5, True),
            (ExerciseType.CALCULATION, "12.5 m", True),
            (ExerciseType.CALCULATION, ToleranceAnswer(value=1, tolerance=0), True),
            (ExerciseType.CALCULATION, float("nan"), False),
            (ExerciseType.CALCULATION, "1e999", False),
            (ExerciseType.CALCULATION, True, False),
            (ExerciseType.SHORT_ANSWER, ["any", "shape"], True),
        ],
    )
    def test_shapes(self, exercise_type, answer, fits) -> None:
        assert answer_fits_type(exercise_type, answer) is fits

    def test_exercise_rejects_misshapen_answer(self) -> None:
        with pytest.raises(ValidationError, match="does not fit a matching exercise"):
            build_exercise(ExerciseType.MATCHING, correct_answer="1-a")

    @pytest.mark.parametrize(
        "text,expected",
        [("60.3 km/h", 60.3), ("-2e3", -2000.0), (" .5", 0.5), ("km 5", None), ("", None)],
    )
    def test_leading_number(self, text, expected) -> None:
        assert leading_number(text) == expected
