"""
Exercise Store

Persists served exercises so answers, hints and solutions can be looked up
by exercise id later. Entries live under ``exercise:{id}`` and expire after
EXERCISE_STORE_TTL_SECONDS.

Graded submissions of identified learners are kept under
``progress:{userId}:{exerciseId}``.

Unlike the cache, store failures are not swallowed: an exercise that cannot
be looked up cannot be graded.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from edugen.db.redis import PROGRESS_PREFIX, STORE_PREFIX, RedisCache
from edugen.models.exercise import Exercise, SubmissionResult
from edugen.services.exercises.cache import KeyValueStore

logger = logging.getLogger(__name__)


class ExerciseStore:
    """Exercise persistence keyed by exercise id."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        progress_store: Optional[KeyValueStore] = None,
        ttl_seconds: int = 604800,
    ):
        self.store = store if store is not None else RedisCache(prefix=STORE_PREFIX)
        self.progress_store = (
            progress_store if progress_store is not None else RedisCache(prefix=PROGRESS_PREFIX)
        )
        self.ttl_seconds = ttl_seconds

    async def save(self, exercise: Exercise) -> None:
        """Store an exercise under its id."""
        await self.store.put(
            exercise.id, exercise.model_dump_json(by_alias=True), self.ttl_seconds
        )

    async def save_all(self, exercises: list[Exercise]) -> None:
        for exercise in exercises:
            await self.save(exercise)

    async def get(self, exercise_id: str) -> Optional[Exercise]:
        """
        Load an exercise.

        Returns:
            Exercise, or None if unknown, expired or unreadable
        """
        raw = await self.store.get(exercise_id)
        if raw is None:
            return None
        try:
            return Exercise.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Stored exercise {exercise_id} is unreadable: {e.error_count()} error(s)")
            return None

    async def record_submission(
        self,
        user_id: str,
        exercise_id: str,
        result: SubmissionResult,
        answer: Any,
    ) -> None:
        """Keep a learner's graded submission."""
        record = {
            **result.model_dump(mode="json", by_alias=True),
            "answer": answer,
            "submittedAt": datetime.now(timezone.utc).isoformat(),
        }
        await self.progress_store.put(
            f"{user_id}:{exercise_id}", json.dumps(record, default=str), self.ttl_seconds
        )
