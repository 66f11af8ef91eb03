"""
Exercise Defaults

Difficulty-keyed lookup tables and the identifier/metadata helpers shared by
the response parser and the static fallback generator.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from edugen.config.catalog import SubjectConfig
from edugen.enums.exercise import DifficultyLevel, SubjectCategory
from edugen.models.exercise import GenerationRequest

DIFFICULTY_POINTS: dict[DifficultyLevel, int] = {
    DifficultyLevel.BEGINNER: 10,
    DifficultyLevel.ELEMENTARY: 15,
    DifficultyLevel.INTERMEDIATE: 20,
    DifficultyLevel.ADVANCED: 30,
    DifficultyLevel.EXPERT: 50,
}

# Seconds
DEFAULT_ESTIMATED_TIME: dict[DifficultyLevel, int] = {
    DifficultyLevel.BEGINNER: 60,
    DifficultyLevel.ELEMENTARY: 90,
    DifficultyLevel.INTERMEDIATE: 120,
    DifficultyLevel.ADVANCED: 180,
    DifficultyLevel.EXPERT: 300,
}

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_exercise_id(
    subject: str, category: Optional[str], now: Optional[datetime] = None
) -> str:
    """
    Mint an exercise id: ``{subj}-{cat}-{base36 ms timestamp}-{random}``.

    Uniqueness is probabilistic (millisecond timestamp plus 6 random chars).

    Args:
        subject: Subject wire value
        category: Category wire value, or None ("gen" is used)
        now: Timestamp override

    Returns:
        Exercise id, e.g. ``mat-alg-lq2x9k1c-3f9a0b``
    """
    now = now or datetime.now(timezone.utc)
    millis = int(now.timestamp() * 1000)
    suffix = uuid.uuid4().hex[:6]
    return f"{subject[:3]}-{(category or 'gen')[:3]}-{_to_base36(millis)}-{suffix}"


def resolve_category(
    request: GenerationRequest, subject_config: SubjectConfig
) -> SubjectCategory:
    """Requested category, else the subject's first catalog category."""
    return request.category or subject_config.categories[0]


def exercise_language(request: GenerationRequest) -> str:
    return request.language or "en"
