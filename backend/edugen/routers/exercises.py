"""
Exercises API Router

Endpoints for the subject catalog, exercise generation and grading.

Endpoints:
- GET /subjects - List subjects
- GET /subjects/{subject} - One subject with its validation defaults
- POST /generate - Generate exercise(s)
- POST /generate/language - Language shortcut (default topic and types)
- POST /generate/mathematics - Mathematics shortcut (default topic and types)
- POST /validate - Grade an answer to a stored exercise
- GET /solution/{exercise_id} - Reveal the solution of a stored exercise
- GET /hints/{exercise_id}?index= - Reveal hints up to an index

Generated exercises are stored by id so that /validate, /hints and /solution
can find them afterwards.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response

from edugen.config.catalog import SUBJECT_CONFIGS, get_subject_config
from edugen.dependencies import get_exercise_generator, get_exercise_store
from edugen.enums.exercise import DifficultyLevel, Subject
from edugen.middleware.error_handling import ErrorResponse, NotFoundError
from edugen.models.exercise import Exercise, GenerationResponse, HintReveal
from edugen.services.exercises import (
    ExerciseGenerator,
    ExerciseStore,
    apply_subject_shortcut,
    normalize_generation_request,
    normalize_submission,
    reveal_hints,
    score_submission,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["exercises"])

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# ===========================================
# Helpers
# ===========================================


async def _load_exercise(store: ExerciseStore, exercise_id: str) -> Exercise:
    exercise = await store.get(exercise_id)
    if exercise is None:
        raise NotFoundError("Exercise not found", details={"exerciseId": exercise_id})
    return exercise


async def _generate(
    payload: Any,
    response: Response,
    generator: ExerciseGenerator,
    store: ExerciseStore,
) -> GenerationResponse:
    request = normalize_generation_request(payload)
    result = await generator.generate(request)
    await store.save_all(result.exercises)

    response.headers["X-Exercises-Count"] = str(len(result.exercises))
    response.headers["X-Model-Used"] = result.meta.model
    response.headers["X-Cached"] = "true" if result.meta.cached else "false"
    return result


# ===========================================
# Subject Catalog
# ===========================================


@router.get("/subjects")
async def list_subjects() -> dict[str, Any]:
    """List every subject with its categories and supported exercise types."""
    subjects = [
        config.model_dump(mode="json", by_alias=True, exclude={"validation_defaults"})
        for config in SUBJECT_CONFIGS.values()
    ]
    return {
        "subjects": subjects,
        "difficulties": [level.value for level in DifficultyLevel],
        "count": len(subjects),
    }


@router.get("/subjects/{subject}", responses=ERROR_RESPONSES)
async def get_subject(subject: str) -> dict[str, Any]:
    """Get one subject including its validation defaults."""
    config = get_subject_config(subject)
    if config is None:
        raise NotFoundError("Subject not found", details={"subject": subject})
    return config.model_dump(mode="json", by_alias=True)


# ===========================================
# Generation
# ===========================================


@router.post("/generate", response_model=GenerationResponse, responses=ERROR_RESPONSES)
async def generate_exercises(
    response: Response,
    payload: Any = Body(None),
    generator: ExerciseGenerator = Depends(get_exercise_generator),
    store: ExerciseStore = Depends(get_exercise_store),
) -> GenerationResponse:
    """
    Generate exercises for a topic.

    Backend failures never fail the request: exercises that could not be
    generated are replaced by placeholders and ``meta.warning`` is set.
    """
    return await _generate(payload, response, generator, store)


@router.post("/generate/language", response_model=GenerationResponse, responses=ERROR_RESPONSES)
async def generate_language_exercises(
    response: Response,
    payload: Any = Body(None),
    generator: ExerciseGenerator = Depends(get_exercise_generator),
    store: ExerciseStore = Depends(get_exercise_store),
) -> GenerationResponse:
    """Generate language exercises (default topic: general vocabulary)."""
    return await _generate(
        apply_subject_shortcut(Subject.LANGUAGE, payload), response, generator, store
    )


@router.post(
    "/generate/mathematics", response_model=GenerationResponse, responses=ERROR_RESPONSES
)
async def generate_mathematics_exercises(
    response: Response,
    payload: Any = Body(None),
    generator: ExerciseGenerator = Depends(get_exercise_generator),
    store: ExerciseStore = Depends(get_exercise_store),
) -> GenerationResponse:
    """Generate mathematics exercises (default topic: basic algebra)."""
    return await _generate(
        apply_subject_shortcut(Subject.MATHEMATICS, payload), response, generator, store
    )


# ===========================================
# Grading, Hints, Solutions
# ===========================================


@router.post("/validate", responses=ERROR_RESPONSES)
async def validate_answer(
    payload: Any = Body(None),
    store: ExerciseStore = Depends(get_exercise_store),
) -> dict[str, Any]:
    """
    Grade an answer to a stored exercise.

    The solution is included when the answer passed or scored below 30.
    """
    submission = normalize_submission(payload)
    exercise = await _load_exercise(store, submission.exercise_id)

    result = score_submission(
        exercise,
        submission.answer,
        hints_used=submission.hints_used,
        time_taken=submission.time_taken,
    )
    logger.info(
        f"Graded {exercise.id}: score={result.score} passed={result.passed}"
    )

    if submission.user_id:
        await store.record_submission(
            submission.user_id, exercise.id, result, submission.answer
        )

    body = {"exerciseId": exercise.id, **result.model_dump(mode="json", by_alias=True)}
    if result.show_solution:
        body["solution"] = exercise.solution.model_dump(mode="json", by_alias=True)
    return body


@router.get("/solution/{exercise_id}", responses=ERROR_RESPONSES)
async def get_solution(
    exercise_id: str,
    store: ExerciseStore = Depends(get_exercise_store),
) -> dict[str, Any]:
    """Reveal the solution and problem of a stored exercise."""
    exercise = await _load_exercise(store, exercise_id)
    return {
        "exerciseId": exercise.id,
        "solution": exercise.solution.model_dump(mode="json", by_alias=True),
        "problem": exercise.problem.model_dump(mode="json", by_alias=True),
    }


@router.get("/hints/{exercise_id}", response_model=HintReveal, responses=ERROR_RESPONSES)
async def get_hints(
    exercise_id: str,
    index: int = Query(0, ge=0),
    store: ExerciseStore = Depends(get_exercise_store),
) -> HintReveal:
    """Reveal hints 0..index of a stored exercise."""
    exercise = await _load_exercise(store, exercise_id)
    return reveal_hints(exercise, index=index)
