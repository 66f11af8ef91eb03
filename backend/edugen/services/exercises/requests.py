"""
Request Normalization

Turns raw wire payloads into validated request models before anything else
runs. Missing or unsupported subjects, missing topics and invalid values are
reported here as InvalidRequestError (HTTP 400) and never reach generation.

Subject shortcuts pre-fill the subject, a default topic and a default type
set for the language and mathematics endpoints.
"""

import logging
from typing import Any

from pydantic import ValidationError

from edugen.config.catalog import SUBJECT_CONFIGS
from edugen.enums.exercise import ExerciseType, Subject
from edugen.middleware.error_handling import InvalidRequestError
from edugen.models.exercise import GenerationRequest, SubmissionRequest

logger = logging.getLogger(__name__)


# ===========================================
# Subject Shortcuts
# ===========================================

LANGUAGE_SHORTCUT_DEFAULTS: dict[str, Any] = {
    "topic": "general vocabulary",
    "types": [
        ExerciseType.MULTIPLE_CHOICE.value,
        ExerciseType.FILL_BLANK.value,
        ExerciseType.TRANSLATION.value,
    ],
    "language": "en",
}

MATHEMATICS_SHORTCUT_DEFAULTS: dict[str, Any] = {
    "topic": "basic algebra",
    "types": [
        ExerciseType.CALCULATION.value,
        ExerciseType.MULTIPLE_CHOICE.value,
        ExerciseType.PROOF.value,
    ],
}

SHORTCUT_DEFAULTS: dict[Subject, dict[str, Any]] = {
    Subject.LANGUAGE: LANGUAGE_SHORTCUT_DEFAULTS,
    Subject.MATHEMATICS: MATHEMATICS_SHORTCUT_DEFAULTS,
}


def _validation_details(exc: ValidationError) -> dict[str, Any]:
    """Flatten pydantic errors into a JSON-safe details dict."""
    return {
        "errors": [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
    }


def normalize_generation_request(payload: Any) -> GenerationRequest:
    """
    Validate a raw generation payload and apply defaults.

    Defaults: difficulty ``intermediate``, count 1, options
    ``includeHints=True``, ``hintCount=3``, ``includeCommonMistakes=True``
    (caller options override them field by field).

    Args:
        payload: Decoded JSON body

    Returns:
        Validated GenerationRequest

    Raises:
        InvalidRequestError: If subject/topic are missing, the subject is
            unsupported, or any field fails validation
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    if not payload.get("subject") or not payload.get("topic"):
        raise InvalidRequestError("subject and topic are required")

    supported = [subject.value for subject in SUBJECT_CONFIGS]
    if payload["subject"] not in supported:
        raise InvalidRequestError(
            f"Invalid subject. Supported: {', '.join(supported)}",
            details={"subject": payload["subject"]},
        )

    # Null fields mean "use the default"
    cleaned = {key: value for key, value in payload.items() if value is not None}

    try:
        request = GenerationRequest.model_validate(cleaned)
    except ValidationError as e:
        logger.debug(f"Rejected generation request: {e.error_count()} error(s)")
        raise InvalidRequestError(
            "Invalid generation request", details=_validation_details(e)
        ) from e

    return request


def apply_subject_shortcut(subject: Subject, payload: Any) -> dict[str, Any]:
    """
    Build a full generation payload for a subject-specific endpoint.

    The subject is fixed; topic and types (and, for language, the
    source language) fall back to the subject's shortcut defaults.

    Args:
        subject: Subject the endpoint is bound to
        payload: Decoded JSON body (may be empty)

    Returns:
        Payload ready for normalize_generation_request()
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    merged = {key: value for key, value in payload.items() if value is not None}
    for key, default in SHORTCUT_DEFAULTS.get(subject, {}).items():
        if not merged.get(key):
            merged[key] = default
    merged["subject"] = subject.value
    return merged


def normalize_submission(payload: Any) -> SubmissionRequest:
    """
    Validate a raw answer submission.

    Raises:
        InvalidRequestError: If exerciseId or answer is missing or a field is invalid
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    exercise_id = payload.get("exerciseId", payload.get("exercise_id"))
    if not exercise_id or "answer" not in payload:
        raise InvalidRequestError("exerciseId and answer are required")

    try:
        return SubmissionRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(
            "Invalid submission", details=_validation_details(e)
        ) from e
