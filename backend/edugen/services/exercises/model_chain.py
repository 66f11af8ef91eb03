"""
Model Chain Policy

Decides which backends are tried, in which order, for one generation unit,
and how a backend failure is classified.

Chain: [policy-selected primary, DEFAULT_MODEL, LIGHT_MODEL], de-duplicated
with order preserved. The primary is picked by:
    1. explicit ``options.model`` preference (reasoning / quality)
    2. mathematics/physics requests asking for proofs or derivations → reasoning
    3. otherwise the default fast model
"""

from dataclasses import dataclass
from typing import Optional

from edugen.config.settings import Settings
from edugen.enums.exercise import BackendErrorKind, ExerciseType, ModelTier, Subject
from edugen.models.exercise import GenerationRequest

REASONING_SUBJECTS = {Subject.MATHEMATICS, Subject.PHYSICS}
REASONING_TYPES = {ExerciseType.PROOF, ExerciseType.DERIVATION}

TRANSIENT_MARKERS = ("rate", "limit", "quota")
UNAVAILABLE_MARKERS = ("not found", "invalid model")


@dataclass(frozen=True)
class GenerationAttempt:
    """Outcome of one backend attempt, kept for logs and diagnostics."""

    model: str
    succeeded: bool
    error_kind: Optional[BackendErrorKind] = None
    reason: str = ""


def select_primary_model(request: GenerationRequest, settings: Settings) -> str:
    """
    Pick the first backend to try for a request.

    Args:
        request: Normalized generation request
        settings: Settings holding the model identifiers

    Returns:
        Model identifier
    """
    preference = request.options.model
    if preference == ModelTier.REASONING:
        return settings.REASONING_MODEL
    if preference == ModelTier.QUALITY:
        return settings.QUALITY_MODEL

    if request.subject in REASONING_SUBJECTS and request.types:
        if REASONING_TYPES.intersection(request.types):
            return settings.REASONING_MODEL

    return settings.DEFAULT_MODEL


def build_model_chain(request: GenerationRequest, settings: Settings) -> list[str]:
    """
    Build the ordered, de-duplicated backend chain for one generation unit.

    Returns:
        Model identifiers in the order they should be tried
    """
    candidates = [
        select_primary_model(request, settings),
        settings.DEFAULT_MODEL,
        settings.LIGHT_MODEL,
    ]
    # dict preserves insertion order
    return list(dict.fromkeys(model for model in candidates if model))


def classify_backend_error(error: BaseException) -> BackendErrorKind:
    """
    Classify a failed inference call by its message.

    Every kind advances the chain; the kind only changes what is logged.
    """
    message = str(error).lower()
    if any(marker in message for marker in TRANSIENT_MARKERS):
        return BackendErrorKind.TRANSIENT
    if any(marker in message for marker in UNAVAILABLE_MARKERS):
        return BackendErrorKind.UNAVAILABLE
    return BackendErrorKind.UNKNOWN
