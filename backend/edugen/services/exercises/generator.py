"""
Exercise Generator Service

Orchestrates exercise generation for one request:

    cache lookup (count == 1 only)
        └─ hit  → return cached exercise, nothing else runs
        └─ miss → for each requested unit, strictly one at a time:
                    build prompts
                    for each model in the chain, strictly in order:
                        invoke → empty text?        → next model
                               → raised?            → classify, next model
                               → unparseable text?  → next model
                               → valid exercise     → done with this unit
                    chain exhausted → static fallback exercise
                  store in cache (count == 1, never a fallback)

Backend failures never propagate to the caller. When any unit had to fall
back, the response carries a warning.

Usage:
    from edugen.services.exercises import ExerciseGenerator

    generator = ExerciseGenerator(get_llm_client(), ExerciseCache())
    response = await generator.generate(request)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from edugen.config.catalog import SubjectConfig, get_subject_config
from edugen.config.settings import Settings, get_settings
from edugen.middleware.error_handling import InvalidRequestError
from edugen.models.exercise import (
    Exercise,
    GenerationMeta,
    GenerationRequest,
    GenerationResponse,
)
from edugen.services.exercises.cache import ExerciseCache, exercise_fingerprint
from edugen.services.exercises.fallback import FALLBACK_MODEL, build_fallback_exercise
from edugen.services.exercises.model_chain import (
    GenerationAttempt,
    build_model_chain,
    classify_backend_error,
)
from edugen.services.exercises.parser import parse_generated_exercise
from edugen.services.exercises.prompts import GenerationPrompt, build_generation_prompt
from edugen.services.llm.client import InferenceBackend, InferenceRequest

logger = logging.getLogger(__name__)

FALLBACK_WARNING = (
    "All generation backends failed for {count} of {total} exercise(s); "
    "placeholder exercises were returned."
)


@dataclass
class UnitOutcome:
    """Result of generating one exercise: the exercise plus its attempt log."""

    exercise: Exercise
    attempts: list[GenerationAttempt]
    tokens_used: Optional[int] = None

    @property
    def fell_back(self) -> bool:
        return self.exercise.metadata.fallback


class ExerciseGenerator:
    """
    Generates exercises through the model fallback chain.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(
        self,
        llm: InferenceBackend,
        cache: Optional[ExerciseCache] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the generator.

        Args:
            llm: Inference backend used for every model in the chain
            cache: Exercise cache (None disables caching)
            settings: Settings for model ids and limits (defaults to app settings)
        """
        self.llm = llm
        self.cache = cache
        self.settings = settings or get_settings()

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """
        Generate the exercises for a request.

        Args:
            request: Normalized generation request

        Returns:
            GenerationResponse; always contains ``count`` exercises (capped
            at MAX_EXERCISES_PER_REQUEST)

        Raises:
            InvalidRequestError: If the subject has no catalog entry
        """
        subject_config = get_subject_config(request.subject)
        if subject_config is None:
            raise InvalidRequestError(f"Unsupported subject: {request.subject}")

        count = min(request.count, self.settings.MAX_EXERCISES_PER_REQUEST)
        cache_key = exercise_fingerprint(request) if count == 1 else None

        if cache_key and self.cache is not None:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                logger.info(f"Exercise cache hit: {cache_key}")
                return GenerationResponse(
                    exercises=[cached],
                    meta=GenerationMeta(
                        model=cached.metadata.generated_by,
                        generated_at=datetime.now(timezone.utc),
                        cached=True,
                    ),
                )

        outcomes: list[UnitOutcome] = []
        for index in range(count):
            outcome = await self.generate_unit(request, subject_config)
            logger.info(
                f"Exercise {index + 1}/{count} for '{request.topic}' "
                f"produced by {outcome.exercise.metadata.generated_by} "
                f"after {len(outcome.attempts)} attempt(s)"
            )
            outcomes.append(outcome)

        exercises = [outcome.exercise for outcome in outcomes]

        if cache_key and self.cache is not None and not outcomes[0].fell_back:
            await self.cache.put(cache_key, exercises[0])

        return GenerationResponse(exercises=exercises, meta=self._build_meta(outcomes))

    async def generate_unit(
        self, request: GenerationRequest, subject_config: SubjectConfig
    ) -> UnitOutcome:
        """
        Produce one exercise, walking the model chain until one succeeds.

        Never raises for backend or parsing failures; an exhausted chain
        yields the static fallback exercise.
        """
        prompt = build_generation_prompt(request, subject_config)
        attempts: list[GenerationAttempt] = []
        tokens_used: Optional[int] = None

        for model in build_model_chain(request, self.settings):
            exercise, attempt, tokens = await self._attempt(
                model, prompt, request, subject_config
            )
            attempts.append(attempt)
            if tokens is not None:
                tokens_used = (tokens_used or 0) + tokens
            if exercise is not None:
                return UnitOutcome(exercise, attempts, tokens_used)

        logger.warning(
            f"Model chain exhausted for '{request.topic}' "
            f"({', '.join(f'{a.model}: {a.reason}' for a in attempts)}); "
            "serving static fallback"
        )
        return UnitOutcome(
            build_fallback_exercise(request, subject_config), attempts, tokens_used
        )

    async def _attempt(
        self,
        model: str,
        prompt: GenerationPrompt,
        request: GenerationRequest,
        subject_config: SubjectConfig,
    ) -> tuple[Optional[Exercise], GenerationAttempt, Optional[int]]:
        """Run one backend attempt and record how it ended."""
        inference_request = InferenceRequest(
            system_message=prompt.system_prompt,
            user_message=prompt.user_prompt,
            max_tokens=self.settings.GENERATION_MAX_TOKENS,
            temperature=self.settings.GENERATION_TEMPERATURE,
        )

        try:
            result = await self.llm.invoke(model, inference_request)
        except Exception as e:
            kind = classify_backend_error(e)
            logger.warning(f"Backend {model} failed ({kind.value}): {e}")
            return None, GenerationAttempt(model, False, kind, str(e)), None

        if not result.text or not result.text.strip():
            logger.warning(f"Backend {model} returned empty text")
            return None, GenerationAttempt(model, False, reason="empty response"), result.tokens_used

        exercise = parse_generated_exercise(result.text, request, subject_config, model)
        if exercise is None:
            return None, GenerationAttempt(model, False, reason="unparseable response"), result.tokens_used

        logger.debug(f"Backend {model} produced exercise {exercise.id}")
        return exercise, GenerationAttempt(model, True, reason="ok"), result.tokens_used

    def _build_meta(self, outcomes: list[UnitOutcome]) -> GenerationMeta:
        successful = [o for o in outcomes if not o.fell_back]
        fallback_count = len(outcomes) - len(successful)

        tokens = [o.tokens_used for o in outcomes if o.tokens_used is not None]

        return GenerationMeta(
            model=successful[-1].exercise.metadata.generated_by if successful else FALLBACK_MODEL,
            generated_at=datetime.now(timezone.utc),
            cached=False,
            tokens_used=sum(tokens) if tokens else None,
            warning=(
                FALLBACK_WARNING.format(count=fallback_count, total=len(outcomes))
                if fallback_count
                else None
            ),
        )
