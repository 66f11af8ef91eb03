"""
Generated Response Parser

Turns raw model output into a validated Exercise, or None.

The parser never raises: anything that is not a structurally valid exercise
is logged and discarded so the generator can try the next backend.

Rules:
    - Optional ```json / ``` fences around the payload are stripped
    - ``instruction``, ``content`` (object) and a non-empty
      ``solution.correctAnswer`` are required
    - An unknown or missing ``content.type`` becomes ``short-answer``
    - Tags, hints and estimated time default from the request or the
      difficulty table when the payload lacks them
    - Validation rules always come from the subject catalog
    - ``correctAnswer`` must have the shape its type is graded on;
      "true"/"false" strings and a bare fill-blank string are coerced first
    - Content rating is always computed server-side; a rating present in
      the payload, including one inside ``content``, is ignored
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from edugen.config.catalog import SubjectConfig
from edugen.enums.exercise import ExerciseType
from edugen.models.exercise import Exercise, GenerationRequest
from edugen.services.exercises.defaults import (
    DEFAULT_ESTIMATED_TIME,
    DIFFICULTY_POINTS,
    exercise_language,
    generate_exercise_id,
    resolve_category,
)
from edugen.services.exercises.rating import determine_content_rating

logger = logging.getLogger(__name__)

KNOWN_TYPES = {t.value for t in ExerciseType}

# Characters of raw output included in parse-failure logs
RAW_LOG_LIMIT = 500

# Rating claims a model may place inside content; ratings are computed here
CONTENT_RATING_KEYS = ("contentRating", "content_rating", "rating")

BOOLEAN_WORDS = {"true": True, "false": False}


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def _string_list(value: Any) -> Optional[list[str]]:
    """Return value if it is a list of strings, else None."""
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    return None


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value) if value > 0 else None


def _normalize_answer(exercise_type: str, answer: Any) -> Any:
    """
    Coerce near-miss answer shapes: "true"/"false" strings in a true-false
    answer and a bare string for a fill-blank answer. Anything else is left
    for exercise validation to accept or reject.
    """
    if exercise_type == ExerciseType.TRUE_FALSE.value and isinstance(answer, list):
        return [
            BOOLEAN_WORDS.get(item.strip().lower(), item) if isinstance(item, str) else item
            for item in answer
        ]
    if exercise_type == ExerciseType.FILL_BLANK.value and isinstance(answer, str):
        return [answer]
    return answer


def _hint_limit(request: GenerationRequest) -> int:
    options = request.options
    return options.hint_count if options.include_hints else 0


def _missing_required(parsed: dict[str, Any]) -> Optional[str]:
    """Name the first missing required field, or None if all are present."""
    instruction = parsed.get("instruction")
    if not isinstance(instruction, str) or not instruction.strip():
        return "instruction"
    if not isinstance(parsed.get("content"), dict):
        return "content"
    solution = parsed.get("solution")
    if not isinstance(solution, dict):
        return "solution"
    answer = solution.get("correctAnswer")
    if answer is None or answer == "" or answer == [] or answer == {}:
        return "solution.correctAnswer"
    return None


def parse_generated_exercise(
    text: str,
    request: GenerationRequest,
    subject_config: SubjectConfig,
    model: str,
) -> Optional[Exercise]:
    """
    Parse model output into an Exercise.

    Args:
        text: Raw generated text
        request: The request the text was generated for
        subject_config: Catalog entry for the request's subject
        model: Backend that produced the text (recorded as generatedBy)

    Returns:
        Exercise, or None if the text is not a structurally valid exercise
    """
    try:
        parsed = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        logger.warning(f"Generated text from {model} is not valid JSON: {e}")
        logger.debug(f"Raw response: {text[:RAW_LOG_LIMIT]}")
        return None

    if not isinstance(parsed, dict):
        logger.warning(f"Generated JSON from {model} is not an object")
        return None

    missing = _missing_required(parsed)
    if missing:
        logger.warning(f"Generated exercise from {model} is missing {missing}")
        return None

    content = {
        key: value
        for key, value in parsed["content"].items()
        if key not in CONTENT_RATING_KEYS
    }
    if content.get("type") not in KNOWN_TYPES:
        content["type"] = ExerciseType.SHORT_ANSWER.value

    solution = parsed["solution"]
    hints = _string_list(parsed.get("hints")) or []
    now = datetime.now(timezone.utc)
    category = resolve_category(request, subject_config)

    payload = {
        "id": generate_exercise_id(
            request.subject.value,
            request.category.value if request.category else None,
            now,
        ),
        "subject": request.subject,
        "category": category,
        "difficulty": request.difficulty,
        "type": content["type"],
        "topic": request.topic,
        "problem": {
            "instruction": parsed["instruction"],
            "content": content,
            "context": parsed.get("context") if isinstance(parsed.get("context"), str) else None,
            "timeLimit": _positive_int(parsed.get("timeLimit")),
            "maxPoints": DIFFICULTY_POINTS[request.difficulty],
        },
        "solution": {
            "correctAnswer": _normalize_answer(content["type"], solution["correctAnswer"]),
            "explanation": solution.get("explanation") or "",
            "steps": solution.get("steps") or None,
            "commonMistakes": _string_list(solution.get("commonMistakes")),
        },
        "hints": hints[: _hint_limit(request)],
        "validation": subject_config.validation_defaults,
        "metadata": {
            "createdAt": now,
            "generatedBy": model,
            "contentRating": determine_content_rating(
                request.subject, category, request.topic
            ),
            "sourceLesson": request.lesson_context.title if request.lesson_context else None,
            "tags": _string_list(parsed.get("tags")) or [request.topic, request.subject.value],
            "estimatedTime": _positive_int(parsed.get("estimatedTime"))
            or DEFAULT_ESTIMATED_TIME[request.difficulty],
            "language": exercise_language(request),
            "version": 1,
            "fallback": False,
        },
    }

    try:
        return Exercise.model_validate(payload)
    except ValidationError as e:
        logger.warning(
            f"Generated exercise from {model} failed validation: "
            f"{e.error_count()} error(s), first: {e.errors()[0]['msg']}"
        )
        return None
