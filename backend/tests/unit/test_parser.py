"""
Unit Tests for the Generated Response Parser

Tests that model output is either turned into a complete Exercise or
rejected with None:
- Code fence stripping
- Required fields
- Type coercion and defaults
- Server-side content rating
"""

import json

import pytest

from edugen.config.catalog import get_subject_config
from edugen.enums.exercise import (
    ContentRating,
    DifficultyLevel,
    ExerciseType,
    Subject,
    SubjectCategory,
)
from edugen.models.exercise import GenerationRequest, ToleranceAnswer
from edugen.services.exercises.parser import parse_generated_exercise, strip_code_fences
from edugen.services.exercises.scoring import score_submission
from tests.conftest import generated_payload


@pytest.fixture
def math_config():
    return get_subject_config(Subject.MATHEMATICS)


def _parse(payload, request, config, model="fast-model"):
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return parse_generated_exercise(text, request, config, model)


class TestStripCodeFences:
    """Tests for fence removal."""

    def test_json_fence(self) -> None:
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self) -> None:
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self) -> None:
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


class TestParseGeneratedExercise:
    """Tests for parse_generated_exercise."""

    def test_valid_payload(self, generation_request, math_config) -> None:
        exercise = _parse(generated_payload(), generation_request, math_config)

        assert exercise is not None
        assert exercise.type == ExerciseType.MULTIPLE_CHOICE
        assert exercise.problem.content.type == "multiple-choice"
        assert exercise.solution.correct_answer == "b"
        assert exercise.subject == Subject.MATHEMATICS
        assert exercise.category == SubjectCategory.ARITHMETIC
        assert exercise.topic == "Addition"
        assert exercise.metadata.generated_by == "fast-model"
        assert exercise.metadata.fallback is False
        assert exercise.id.startswith("mat-ari-")

    def test_fenced_payload(self, generation_request, math_config) -> None:
        text = f"```json\n{json.dumps(generated_payload())}\n```"

        assert _parse(text, generation_request, math_config) is not None

    @pytest.mark.parametrize(
        "text",
        ["", "not json at all", "[1, 2, 3]", '"just a string"', '{"instruction": '],
    )
    def test_garbage_returns_none(self, text, generation_request, math_config) -> None:
        assert _parse(text, generation_request, math_config) is None

    @pytest.mark.parametrize("answer", [None, "", [], {}])
    def test_empty_correct_answer_rejected(
        self, answer, generation_request, math_config
    ) -> None:
        payload = generated_payload(
            solution={"correctAnswer": answer, "explanation": "x"}
        )

        assert _parse(payload, generation_request, math_config) is None

    def test_missing_correct_answer_rejected(
        self, generation_request, math_config
    ) -> None:
        payload = generated_payload(solution={"explanation": "x"})

        assert _parse(payload, generation_request, math_config) is None

    @pytest.mark.parametrize("field", ["instruction", "content", "solution"])
    def test_missing_required_field_rejected(
        self, field, generation_request, math_config
    ) -> None:
        payload = generated_payload()
        del payload[field]

        assert _parse(payload, generation_request, math_config) is None

    def test_content_not_matching_type_shape_rejected(
        self, generation_request, math_config
    ) -> None:
        payload = generated_payload(content={"type": "multiple-choice", "question": "?"})

        assert _parse(payload, generation_request, math_config) is None

    def test_unknown_type_becomes_short_answer(
        self, generation_request, math_config
    ) -> None:
        payload = generated_payload(
            content={"type": "essay-riddle", "question": "Why?"},
            solution={"correctAnswer": "Because", "explanation": ""},
        )

        exercise = _parse(payload, generation_request, math_config)

        assert exercise is not None
        assert exercise.type == ExerciseType.SHORT_ANSWER
        assert exercise.problem.content.type == "short-answer"

    def test_claimed_rating_is_ignored(self, math_config) -> None:
        request = GenerationRequest(
            subject=Subject.MATHEMATICS,
            topic="Differential equations",
            difficulty=DifficultyLevel.EXPERT,
        )
        content = {
            **generated_payload()["content"],
            "contentRating": "all-ages",
            "content_rating": "all-ages",
            "rating": "all-ages",
        }
        payload = generated_payload(
            content=content, metadata={"contentRating": "all-ages"}, contentRating="all-ages"
        )

        exercise = _parse(payload, request, math_config)

        assert exercise.metadata.content_rating == ContentRating.AGE_16_PLUS
        served = exercise.problem.content.model_dump(by_alias=True)
        assert not {"contentRating", "content_rating", "rating"} & served.keys()
        assert served["question"] == "What is 2 + 2?"

    def test_hints_trimmed_to_requested_count(self, math_config) -> None:
        request = GenerationRequest(
            subject=Subject.MATHEMATICS, topic="Addition", options={"hintCount": 2}
        )

        exercise = _parse(generated_payload(), request, math_config)

        assert exercise.hints == ["Count on your fingers", "It is even"]

    def test_hints_dropped_when_disabled(self, math_config) -> None:
        request = GenerationRequest(
            subject=Subject.MATHEMATICS, topic="Addition", options={"includeHints": False}
        )

        exercise = _parse(generated_payload(), request, math_config)

        assert exercise.hints == []

    def test_defaults_filled(self, generation_request, math_config) -> None:
        payload = generated_payload()
        del payload["tags"]
        del payload["estimatedTime"]

        exercise = _parse(payload, generation_request, math_config)

        assert exercise.metadata.tags == ["Addition", "mathematics"]
        assert exercise.metadata.estimated_time == 60
        assert exercise.problem.max_points == 10
        assert exercise.metadata.language == "en"

    def test_validation_comes_from_subject(self, generation_request, math_config) -> None:
        payload = generated_payload(validation={"passingScore": 1})

        exercise = _parse(payload, generation_request, math_config)

        assert exercise.validation.passing_score == 80
        assert exercise.validation.hint_penalty == 10

    def test_category_defaults_to_first_subject_category(self, math_config) -> None:
        request = GenerationRequest(subject=Subject.MATHEMATICS, topic="Addition")

        exercise = _parse(generated_payload(), request, math_config)

        assert exercise.category == SubjectCategory.ARITHMETIC
        assert exercise.id.startswith("mat-gen-")

    def test_plain_string_steps_are_numbered(
        self, generation_request, math_config
    ) -> None:
        payload = generated_payload(
            solution={"correctAnswer": "b", "steps": ["Add", "Check"]}
        )

        exercise = _parse(payload, generation_request, math_config)

        assert [s.step_number for s in exercise.solution.steps] == [1, 2]
        assert exercise.solution.steps[1].description == "Check"

    def test_lesson_title_recorded(self, math_config) -> None:
        request = GenerationRequest(
            subject=Subject.MATHEMATICS,
            topic="Addition",
            lessonContext={"title": "Lesson 1", "concepts": ["sums"]},
        )

        exercise = _parse(generated_payload(), request, math_config)

        assert exercise.metadata.source_lesson == "Lesson 1"

    def test_wire_round_trip(self, generation_request, math_config) -> None:
        exercise = _parse(generated_payload(), generation_request, math_config)

        wire = json.loads(exercise.model_dump_json(by_alias=True))

        assert wire["solution"]["correctAnswer"] == "b"
        assert wire["problem"]["content"]["multiSelect"] is False
        assert wire["metadata"]["generatedBy"] == "fast-model"


TRUE_FALSE = {
    "type": "true-false",
    "statements": [{"id": "1", "text": "2 is even"}, {"id": "2", "text": "3 is even"}],
}
FILL_BLANK = {"type": "fill-blank", "template": "[BLANK] + 1 = 2", "blankCount": 1}
MATCHING = {
    "type": "matching",
    "leftColumn": [{"id": "1", "text": "H2O"}],
    "rightColumn": [{"id": "a", "text": "water"}],
}
CALCULATION = {"type": "calculation", "problem": "Average speed?", "units": "km/h"}
MULTIPLE_CHOICE = generated_payload()["content"]


class TestAnswerShapes:
    """Tests that correctAnswer must have the shape its type is graded on."""

    @pytest.mark.parametrize(
        "content,answer,expected",
        [
            (TRUE_FALSE, [True, False], [True, False]),
            (TRUE_FALSE, ["true", " False"], [True, False]),
            (FILL_BLANK, ["1"], ["1"]),
            (FILL_BLANK, "1", ["1"]),
            (MATCHING, {"1": "a"}, {"1": "a"}),
            (CALCULATION, 60, 60),
            (CALCULATION, "60 km/h", "60 km/h"),
            (MULTIPLE_CHOICE, "b", "b"),
        ],
    )
    def test_accepted(self, content, answer, expected, generation_request, math_config) -> None:
        payload = generated_payload(content=content, solution={"correctAnswer": answer})

        exercise = _parse(payload, generation_request, math_config)

        assert exercise is not None
        assert exercise.solution.correct_answer == expected

    @pytest.mark.parametrize(
        "content,answer",
        [
            (TRUE_FALSE, ["yes", "no"]),
            (TRUE_FALSE, ["true", "maybe"]),
            (TRUE_FALSE, "true"),
            (FILL_BLANK, {"1": "a"}),
            (MATCHING, "1-a"),
            (MATCHING, ["1", "a"]),
            (CALCULATION, "about sixty"),
            (CALCULATION, [60]),
            (MULTIPLE_CHOICE, {"a": "b"}),
            (MULTIPLE_CHOICE, ["b"]),
        ],
    )
    def test_rejected(self, content, answer, generation_request, math_config) -> None:
        payload = generated_payload(content=content, solution={"correctAnswer": answer})

        assert _parse(payload, generation_request, math_config) is None

    def test_tolerance_answer(self, generation_request, math_config) -> None:
        payload = generated_payload(
            content=CALCULATION,
            solution={"correctAnswer": {"value": 9.81, "tolerance": 0.1}},
        )

        exercise = _parse(payload, generation_request, math_config)

        assert exercise.solution.correct_answer == ToleranceAnswer(value=9.81, tolerance=0.1)

    def test_true_false_answer_grades_correctly(
        self, generation_request, math_config
    ) -> None:
        payload = generated_payload(
            content=TRUE_FALSE, solution={"correctAnswer": ["true", "false"]}
        )

        exercise = _parse(payload, generation_request, math_config)
        result = score_submission(exercise, [True, False])

        assert result.score == 100
        assert result.passed is True
