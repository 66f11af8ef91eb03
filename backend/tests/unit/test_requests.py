"""
Unit Tests for Request Normalization

Tests that malformed requests are rejected up front with InvalidRequestError
and that defaults and subject shortcuts are applied.
"""

import pytest

from edugen.enums.exercise import DifficultyLevel, ExerciseType, ModelTier, Subject
from edugen.middleware.error_handling import InvalidRequestError
from edugen.services.exercises.requests import (
    apply_subject_shortcut,
    normalize_generation_request,
    normalize_submission,
)


class TestNormalizeGenerationRequest:
    """Tests for normalize_generation_request."""

    def test_defaults(self) -> None:
        request = normalize_generation_request({"subject": "mathematics", "topic": "Algebra"})

        assert request.subject == Subject.MATHEMATICS
        assert request.difficulty == DifficultyLevel.INTERMEDIATE
        assert request.count == 1
        assert request.options.include_hints is True
        assert request.options.hint_count == 3
        assert request.options.include_common_mistakes is True
        assert request.options.model == ModelTier.DEFAULT

    def test_options_override_defaults_field_by_field(self) -> None:
        request = normalize_generation_request(
            {"subject": "physics", "topic": "Waves", "options": {"hintCount": 1}}
        )

        assert request.options.hint_count == 1
        assert request.options.include_hints is True

    def test_null_fields_use_defaults(self) -> None:
        request = normalize_generation_request(
            {"subject": "physics", "topic": "Waves", "difficulty": None, "types": None}
        )

        assert request.difficulty == DifficultyLevel.INTERMEDIATE
        assert request.types is None

    @pytest.mark.parametrize(
        "payload",
        [{}, {"subject": "mathematics"}, {"topic": "Algebra"}, {"subject": "", "topic": "x"}],
    )
    def test_missing_subject_or_topic(self, payload) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            normalize_generation_request(payload)

        assert exc_info.value.message == "subject and topic are required"
        assert exc_info.value.status_code == 400

    def test_unsupported_subject(self) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            normalize_generation_request({"subject": "astrology", "topic": "Stars"})

        assert exc_info.value.message.startswith("Invalid subject. Supported: language")
        assert "computer-science" in exc_info.value.message

    @pytest.mark.parametrize(
        "extra",
        [
            {"difficulty": "impossible"},
            {"types": ["riddle"]},
            {"count": 0},
            {"options": {"hintCount": 50}},
            {"unexpected": True},
        ],
    )
    def test_invalid_values(self, extra) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            normalize_generation_request({"subject": "mathematics", "topic": "Algebra", **extra})

        assert exc_info.value.details["errors"]

    def test_non_object_body(self) -> None:
        with pytest.raises(InvalidRequestError):
            normalize_generation_request(["mathematics"])


class TestApplySubjectShortcut:
    """Tests for apply_subject_shortcut."""

    def test_language_defaults(self) -> None:
        payload = apply_subject_shortcut(Subject.LANGUAGE, None)

        request = normalize_generation_request(payload)

        assert request.subject == Subject.LANGUAGE
        assert request.topic == "general vocabulary"
        assert request.language == "en"
        assert request.types == [
            ExerciseType.MULTIPLE_CHOICE,
            ExerciseType.FILL_BLANK,
            ExerciseType.TRANSLATION,
        ]

    def test_mathematics_defaults(self) -> None:
        request = normalize_generation_request(
            apply_subject_shortcut(Subject.MATHEMATICS, {})
        )

        assert request.topic == "basic algebra"
        assert ExerciseType.PROOF in request.types

    def test_caller_values_win(self) -> None:
        payload = apply_subject_shortcut(
            Subject.LANGUAGE, {"topic": "Colors", "types": ["matching"], "subject": "history"}
        )

        assert payload["topic"] == "Colors"
        assert payload["types"] == ["matching"]
        assert payload["subject"] == "language"


class TestNormalizeSubmission:
    """Tests for normalize_submission."""

    def test_valid(self) -> None:
        submission = normalize_submission(
            {"exerciseId": "ex-1", "answer": ["a"], "hintsUsed": 2, "timeTaken": 12.5}
        )

        assert submission.exercise_id == "ex-1"
        assert submission.answer == ["a"]
        assert submission.hints_used == 2
        assert submission.time_taken == 12.5

    def test_falsy_answer_is_allowed(self) -> None:
        submission = normalize_submission({"exerciseId": "ex-1", "answer": False})

        assert submission.answer is False

    @pytest.mark.parametrize(
        "payload", [{}, {"exerciseId": "ex-1"}, {"answer": "a"}, {"exerciseId": "", "answer": "a"}]
    )
    def test_missing_fields(self, payload) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            normalize_submission(payload)

        assert exc_info.value.message == "exerciseId and answer are required"

    def test_negative_hints_rejected(self) -> None:
        with pytest.raises(InvalidRequestError):
            normalize_submission({"exerciseId": "ex-1", "answer": "a", "hintsUsed": -1})
