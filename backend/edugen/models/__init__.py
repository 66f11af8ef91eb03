"""Pydantic models for the application."""

from edugen.models.exercise import (
    Exercise,
    ExerciseMetadata,
    ExerciseProblem,
    ExerciseSolution,
    GenerationMeta,
    GenerationOptions,
    GenerationRequest,
    GenerationResponse,
    HintReveal,
    LessonContext,
    ProblemContent,
    SubmissionRequest,
    SubmissionResult,
    ValidationRules,
)

__all__ = [
    "Exercise",
    "ExerciseMetadata",
    "ExerciseProblem",
    "ExerciseSolution",
    "GenerationMeta",
    "GenerationOptions",
    "GenerationRequest",
    "GenerationResponse",
    "HintReveal",
    "LessonContext",
    "ProblemContent",
    "SubmissionRequest",
    "SubmissionResult",
    "ValidationRules",
]
