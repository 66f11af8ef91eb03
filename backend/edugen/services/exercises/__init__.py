"""
Exercise Services

Generation and grading of educational exercises.

Components:
- requests.py: Request normalization and subject shortcuts
- prompts.py: System/user prompt construction
- model_chain.py: Backend chain policy and error classification
- parser.py: Generated text → Exercise
- fallback.py: Static placeholder exercise
- cache.py: Fingerprint-keyed single-exercise cache
- generator.py: Orchestration (cache → chain → parser → fallback)
- rating.py: Content rating classifier
- scoring.py: Answer grading
- hints.py: Hint reveal
- store.py: Exercise persistence by id
"""

from edugen.services.exercises.cache import ExerciseCache, exercise_fingerprint
from edugen.services.exercises.fallback import build_fallback_exercise
from edugen.services.exercises.generator import ExerciseGenerator
from edugen.services.exercises.hints import reveal_hints
from edugen.services.exercises.model_chain import (
    build_model_chain,
    classify_backend_error,
    select_primary_model,
)
from edugen.services.exercises.parser import parse_generated_exercise
from edugen.services.exercises.prompts import build_generation_prompt
from edugen.services.exercises.rating import determine_content_rating
from edugen.services.exercises.requests import (
    apply_subject_shortcut,
    normalize_generation_request,
    normalize_submission,
)
from edugen.services.exercises.scoring import score_submission
from edugen.services.exercises.store import ExerciseStore

__all__ = [
    "ExerciseCache",
    "ExerciseGenerator",
    "ExerciseStore",
    "apply_subject_shortcut",
    "build_fallback_exercise",
    "build_generation_prompt",
    "build_model_chain",
    "classify_backend_error",
    "determine_content_rating",
    "exercise_fingerprint",
    "normalize_generation_request",
    "normalize_submission",
    "parse_generated_exercise",
    "reveal_hints",
    "score_submission",
    "select_primary_model",
]
