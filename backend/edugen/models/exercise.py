"""
Exercise Models (Pydantic)

Request/response schemas for exercise generation and grading:
- Generation requests (with lesson context and generation options)
- The Exercise record and its type-tagged content payload
- Generation responses
- Submissions, grading results and hint reveals

ARCHITECTURE NOTE:
    The content payload is a closed tagged union keyed on ``type``. Each
    ExerciseType value belongs to exactly one content model, so parsing,
    prompting and scoring can dispatch exhaustively on the type.

    Wire names are camelCase (see models/base.py); Python attributes are
    snake_case.

Content / solution shapes:
    | type            | content fields                               | correctAnswer         |
    |-----------------|----------------------------------------------|-----------------------|
    | multiple-choice | question, options[{id,text}], multiSelect    | option id string      |
    | fill-blank      | template, blankCount, wordBank?              | list of strings       |
    | matching        | leftColumn[{id,text}], rightColumn[{id,text}]| {leftId: rightId}     |
    | true-false      | statements[{id,text}]                        | list of booleans      |
    | calculation     | problem, variables?, units?, sigFigs?        | number or {value,tol} |
    |                 |                                              | (or "60 km/h" string) |
    | others          | type-specific free-form fields               | free/structured text  |
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field, field_validator, model_validator

from edugen.enums.exercise import (
    ContentRating,
    DifficultyLevel,
    ExerciseType,
    ModelTier,
    Subject,
    SubjectCategory,
)
from edugen.models.base import StrictRequest, WireModel, WireRecord


# ===========================================
# Problem Content (tagged union on "type")
# ===========================================


class LabeledItem(WireModel):
    """An {id, text} pair used by options, columns, statements and items."""

    id: str
    text: str


class MultipleChoiceContent(WireModel):
    type: Literal["multiple-choice"] = "multiple-choice"
    question: str
    options: list[LabeledItem] = Field(..., min_length=1)
    multi_select: bool = False


class FillBlankContent(WireModel):
    type: Literal["fill-blank"] = "fill-blank"
    template: str = Field(..., description="Text with [BLANK] markers")
    blank_count: int = Field(1, ge=1)
    word_bank: Optional[list[str]] = None


class MatchingContent(WireModel):
    type: Literal["matching"] = "matching"
    left_column: list[LabeledItem]
    right_column: list[LabeledItem]


class OrderingContent(WireModel):
    type: Literal["ordering"] = "ordering"
    items: list[LabeledItem] = Field(default_factory=list)
    order_by: str = ""


class TrueFalseContent(WireModel):
    type: Literal["true-false"] = "true-false"
    statements: list[LabeledItem]


class ShortAnswerContent(WireModel):
    type: Literal["short-answer"] = "short-answer"
    question: str = ""
    max_length: Optional[int] = None


class LongAnswerContent(WireModel):
    type: Literal["long-answer"] = "long-answer"
    question: str = ""
    rubric_points: Optional[list[str]] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None


class ProofContent(WireModel):
    type: Literal["proof"] = "proof"
    statement: str = ""
    given: list[str] = Field(default_factory=list)
    proof_method: Optional[str] = None


class CalculationContent(WireModel):
    type: Literal["calculation"] = "calculation"
    problem: str
    variables: Optional[dict[str, Union[float, str]]] = None
    units: Optional[str] = None
    sig_figs: Optional[int] = None


class TranslationContent(WireModel):
    type: Literal["translation"] = "translation"
    source_text: str = ""
    source_language: str = ""
    target_language: str = ""
    register_: Optional[str] = Field(None, alias="register")


class ConjugationContent(WireModel):
    type: Literal["conjugation"] = "conjugation"
    verb: str = ""
    language: str = ""
    tense: str = ""
    mood: Optional[str] = None
    subjects: list[str] = Field(default_factory=list)


class CodingTestCase(WireModel):
    input: str = ""
    expected_output: str = ""
    hidden: bool = False


class CodingContent(WireModel):
    type: Literal["coding"] = "coding"
    description: str = ""
    language: str = ""
    starter_code: Optional[str] = None
    test_cases: list[CodingTestCase] = Field(default_factory=list)


class FreeFormContent(WireModel):
    """Diagram and derivation exercises carry only free-form fields."""

    type: Literal["diagram", "derivation"]


ProblemContent = Annotated[
    Union[
        MultipleChoiceContent,
        FillBlankContent,
        MatchingContent,
        OrderingContent,
        TrueFalseContent,
        ShortAnswerContent,
        LongAnswerContent,
        ProofContent,
        CalculationContent,
        TranslationContent,
        ConjugationContent,
        CodingContent,
        FreeFormContent,
    ],
    Field(discriminator="type"),
]


# ===========================================
# Solution
# ===========================================


class ToleranceAnswer(WireRecord):
    """Numeric answer with an absolute tolerance."""

    value: float
    tolerance: float = Field(..., ge=0)


SolutionAnswer = Union[
    ToleranceAnswer,
    dict[str, str],
    list[bool],
    list[str],
    float,
    str,
]

# Leading decimal number of a string; trailing text such as units is ignored
NUMBER_PREFIX = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def leading_number(text: str) -> Optional[float]:
    """Parse the number a string starts with ("60.3 km/h" -> 60.3), or None."""
    match = NUMBER_PREFIX.match(text.strip())
    return float(match.group(0)) if match else None


def answer_fits_type(exercise_type: ExerciseType, answer: Any) -> bool:
    """
    Whether a correct answer has the shape its exercise type is graded on.

    Types without a structured answer accept any shape.
    """
    match exercise_type:
        case ExerciseType.MULTIPLE_CHOICE:
            return isinstance(answer, str)
        case ExerciseType.FILL_BLANK:
            return isinstance(answer, list) and all(isinstance(a, str) for a in answer)
        case ExerciseType.TRUE_FALSE:
            return isinstance(answer, list) and all(isinstance(a, bool) for a in answer)
        case ExerciseType.MATCHING:
            return isinstance(answer, dict)
        case ExerciseType.CALCULATION:
            if isinstance(answer, ToleranceAnswer):
                return True
            if isinstance(answer, str):
                answer = leading_number(answer)
            elif isinstance(answer, bool) or not isinstance(answer, (int, float)):
                return False
            return answer is not None and math.isfinite(answer)
        case _:
            return True


class SolutionStep(WireRecord):
    step_number: int
    description: str
    formula: Optional[str] = None
    result: Optional[str] = None


class ExerciseSolution(WireRecord):
    correct_answer: SolutionAnswer
    explanation: str = ""
    steps: Optional[list[SolutionStep]] = None
    common_mistakes: Optional[list[str]] = None

    @field_validator("steps", mode="before")
    @classmethod
    def _number_plain_steps(cls, value: Any) -> Any:
        """Generated steps may be bare strings or lack numbers; number them."""
        if not isinstance(value, list):
            return value
        steps = []
        for i, step in enumerate(value, 1):
            if isinstance(step, str):
                step = {"stepNumber": i, "description": step}
            elif isinstance(step, dict) and not {"stepNumber", "step_number"} & step.keys():
                step = {**step, "stepNumber": i}
            steps.append(step)
        return steps


# ===========================================
# Validation Rules, Problem, Metadata
# ===========================================


class ValidationRules(WireRecord):
    """Pass/fail configuration applied when grading."""

    passing_score: int = Field(70, ge=0, le=100)
    allow_partial_credit: bool = True
    case_sensitive: bool = False
    alternatives: Optional[list[str]] = None
    tolerance: Optional[float] = Field(None, ge=0)
    hint_penalty: float = Field(5, ge=0)
    time_penalty: Optional[float] = Field(None, ge=0)


class ExerciseProblem(WireRecord):
    instruction: str
    content: ProblemContent
    context: Optional[str] = None
    time_limit: Optional[int] = Field(None, gt=0, description="Seconds")
    max_points: int = Field(..., ge=0)


class ExerciseMetadata(WireRecord):
    created_at: datetime
    generated_by: str
    content_rating: ContentRating
    source_lesson: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    estimated_time: int = Field(..., description="Seconds")
    language: str = "en"
    version: int = 1
    fallback: bool = False


class Exercise(WireRecord):
    """
    A generated exercise. Immutable once produced.

    ``type`` always equals ``problem.content.type``.
    """

    id: str
    subject: Subject
    category: SubjectCategory
    difficulty: DifficultyLevel
    type: ExerciseType
    topic: str
    problem: ExerciseProblem
    solution: ExerciseSolution
    hints: list[str] = Field(default_factory=list)
    validation: ValidationRules
    metadata: ExerciseMetadata
    related: Optional[list[str]] = None

    @model_validator(mode="after")
    def _type_matches_content(self) -> Exercise:
        if self.problem.content.type != self.type.value:
            raise ValueError(
                f"exercise type {self.type.value!r} does not match "
                f"content type {self.problem.content.type!r}"
            )
        if not answer_fits_type(self.type, self.solution.correct_answer):
            raise ValueError(
                f"correctAnswer {self.solution.correct_answer!r} does not fit "
                f"a {self.type.value} exercise"
            )
        return self


# ===========================================
# Generation Request / Response
# ===========================================


class LessonContext(StrictRequest):
    title: str
    concepts: list[str] = Field(default_factory=list)
    vocabulary: Optional[list[str]] = None
    formulas: Optional[list[str]] = None
    previous_exercises: Optional[list[str]] = None


class GenerationOptions(StrictRequest):
    include_hints: bool = True
    hint_count: int = Field(3, ge=0, le=10)
    model: ModelTier = ModelTier.DEFAULT
    include_common_mistakes: bool = True
    generate_related: bool = False
    custom_instructions: Optional[str] = None


class GenerationRequest(StrictRequest):
    """
    Request to generate new exercise(s).

    Note: Uses StrictRequest - unknown fields are rejected.
    """

    subject: Subject
    category: Optional[SubjectCategory] = None
    topic: str = Field(..., min_length=1)
    difficulty: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    types: Optional[list[ExerciseType]] = None
    count: int = Field(1, ge=1)
    lesson_context: Optional[LessonContext] = None
    language: Optional[str] = None
    target_language: Optional[str] = None
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class GenerationMeta(WireRecord):
    model: str
    generated_at: datetime
    cached: bool = False
    tokens_used: Optional[int] = None
    warning: Optional[str] = None


class GenerationResponse(WireRecord):
    exercises: list[Exercise]
    meta: GenerationMeta


# ===========================================
# Submission / Grading
# ===========================================


class SubmissionRequest(StrictRequest):
    """
    A learner's answer to a stored exercise.

    ``answer`` must have the shape of the exercise's correctAnswer; it is kept
    untyped here because its shape depends on the exercise.
    """

    exercise_id: str = Field(..., min_length=1)
    answer: Any
    time_taken: float = Field(0, ge=0, description="Seconds")
    hints_used: int = Field(0, ge=0)
    user_id: Optional[str] = None


class SubmissionResult(WireRecord):
    passed: bool
    score: int = Field(..., ge=0, le=100)
    points_earned: int = Field(..., ge=0)
    max_points: int
    feedback: str
    show_solution: bool


class HintReveal(WireRecord):
    exercise_id: str
    hints: list[str]
    has_more: bool
    total_hints: int
    penalty: float
