"""
Exercise Cache

Single-exercise cache keyed by a normalized request fingerprint. Only
requests for exactly one exercise are cached; fallback exercises are never
stored.

Cache failures never fail a request: read errors, write errors and corrupt
entries are logged and treated as a miss.

There is no single-flight guarantee. Two concurrent identical requests may
both miss and both generate; the later write wins.
"""

import logging
import re
from typing import Optional, Protocol

from pydantic import ValidationError

from edugen.db.redis import RedisCache
from edugen.models.exercise import Exercise, GenerationRequest

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9:-]")


class KeyValueStore(Protocol):
    """String key-value store with per-entry expiry."""

    async def get(self, key: str) -> Optional[str]: ...

    async def put(self, key: str, value: str, ttl_seconds: int) -> None: ...


def exercise_fingerprint(request: GenerationRequest) -> str:
    """
    Build the cache key for a request.

    Format: ``ex:{subject}:{category|any}:{topic}:{difficulty}:{types|any}``
    with types sorted and joined by ``-``, lowercased, and every character
    outside ``[a-z0-9:-]`` replaced by ``-``.
    """
    category = request.category.value if request.category else "any"
    types = "-".join(sorted(t.value for t in request.types)) if request.types else "any"
    key = (
        f"ex:{request.subject.value}:{category}:{request.topic}:"
        f"{request.difficulty.value}:{types}"
    )
    return _UNSAFE_KEY_CHARS.sub("-", key.lower())


class ExerciseCache:
    """Read-through cache of generated exercises on a KeyValueStore."""

    def __init__(self, store: Optional[KeyValueStore] = None, ttl_seconds: int = 86400):
        """
        Initialize the cache.

        Args:
            store: Backing store (defaults to un-prefixed Redis storage)
            ttl_seconds: Expiry of every cache entry
        """
        self.store = store if store is not None else RedisCache()
        self.ttl_seconds = ttl_seconds

    async def get(self, key: str) -> Optional[Exercise]:
        """Return the cached exercise, or None on miss, error or corrupt entry."""
        try:
            raw = await self.store.get(key)
        except Exception as e:
            logger.warning(f"Exercise cache read failed for {key}: {e}")
            return None

        if raw is None:
            return None

        try:
            return Exercise.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Discarding corrupt exercise cache entry {key}: {e.error_count()} error(s)"
            )
            return None

    async def put(self, key: str, exercise: Exercise) -> None:
        """Store an exercise. Failures are logged and ignored."""
        try:
            await self.store.put(
                key, exercise.model_dump_json(by_alias=True), self.ttl_seconds
            )
        except Exception as e:
            logger.warning(f"Exercise cache write failed for {key}: {e}")
