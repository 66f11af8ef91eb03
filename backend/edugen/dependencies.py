"""
FastAPI Dependencies

Service providers injected into the routers. Tests override these through
``app.dependency_overrides``.
"""

from fastapi import Depends

from edugen.config import settings
from edugen.services.exercises import ExerciseCache, ExerciseGenerator, ExerciseStore
from edugen.services.llm.client import get_llm_client


async def get_exercise_cache() -> ExerciseCache:
    """Get the exercise cache (Redis-backed)."""
    return ExerciseCache(ttl_seconds=settings.CACHE_TTL_SECONDS)


async def get_exercise_store() -> ExerciseStore:
    """Get the exercise store (Redis-backed)."""
    return ExerciseStore(ttl_seconds=settings.EXERCISE_STORE_TTL_SECONDS)


async def get_exercise_generator(
    cache: ExerciseCache = Depends(get_exercise_cache),
) -> ExerciseGenerator:
    """Get the exercise generator wired to the shared LLM client."""
    llm_client = get_llm_client()  # Synchronous - returns singleton
    return ExerciseGenerator(llm_client, cache, settings)
