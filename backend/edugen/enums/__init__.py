"""
Centralized enum definitions for the application.

Usage:
    from edugen.enums import Subject, DifficultyLevel, ExerciseType
"""

from edugen.enums.exercise import (
    Subject,
    SubjectCategory,
    DifficultyLevel,
    ExerciseType,
    ContentRating,
    ModelTier,
    BackendErrorKind,
)

__all__ = [
    "Subject",
    "SubjectCategory",
    "DifficultyLevel",
    "ExerciseType",
    "ContentRating",
    "ModelTier",
    "BackendErrorKind",
]
