"""
Inference Client (LiteLLM)

The generator needs exactly one operation from a text-generation provider:
run a named model on a system + user message and get the text back. This
module defines that boundary (``InferenceBackend``) and its production
implementation on LiteLLM, which addresses 100+ providers with
"provider/model-name" ids (see https://docs.litellm.ai/).

Provider errors are raised unchanged and never retried here. The generator
reacts to a failure by trying the next model of its chain, so one call costs
at most one request of provider quota.

Usage:
    from edugen.services.llm import InferenceRequest, get_llm_client

    result = await get_llm_client().invoke(
        "cloudflare/@cf/meta/llama-3.2-3b-instruct",
        InferenceRequest(system_message="You are a teacher.", user_message="..."),
    )
    result.text, result.tokens_used
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import litellm
from litellm import acompletion

from edugen.config.settings import settings
from edugen.middleware.error_handling import LLMError

logger = logging.getLogger(__name__)

# Unsupported sampling params are dropped per provider rather than rejected
litellm.drop_params = True
if settings.DEBUG:
    os.environ["LITELLM_LOG"] = "DEBUG"

# Provider name in the model id → settings field holding its API key
PROVIDER_KEY_SETTINGS = {
    "cloudflare": "CLOUDFLARE_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

CLOUDFLARE_API_BASE = "https://api.cloudflare.com/client/v4/accounts/{account_id}/ai/run/"


# ===========================================
# Inference Boundary
# ===========================================


@dataclass(frozen=True)
class InferenceRequest:
    """Prompts and sampling parameters for one generation call."""

    system_message: str
    user_message: str
    max_tokens: int = settings.GENERATION_MAX_TOKENS
    temperature: float = settings.GENERATION_TEMPERATURE


@dataclass(frozen=True)
class InferenceResult:
    text: str
    tokens_used: Optional[int] = None  # None when the provider reports no usage


class InferenceBackend(Protocol):
    """Runs a named model. Raises on any provider failure."""

    async def invoke(
        self, model_id: str, request: InferenceRequest
    ) -> InferenceResult: ...


# ===========================================
# Request Helpers
# ===========================================


def build_messages(
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[dict[str, str]]:
    """Chat messages for a user prompt, preceded by the system prompt if any."""
    system = [{"role": "system", "content": system_prompt}] if system_prompt else []
    return [*system, {"role": "user", "content": prompt}]


def _adjust_temperature_for_model(model: str, temperature: float) -> float:
    """
    Gemini 3 models degrade (and can loop) below temperature 1.0, so they
    always get 1.0; every other model keeps the requested value.
    """
    return 1.0 if "gemini-3" in model.lower() else temperature


def _provider_credentials(model: str) -> dict[str, str]:
    """
    Explicit ``api_key`` / ``api_base`` for the model's provider.

    Empty when settings hold nothing for it; LiteLLM then reads the
    provider's usual environment variables.
    """
    provider = model.split("/", 1)[0].lower()
    credentials: dict[str, str] = {}

    key_setting = PROVIDER_KEY_SETTINGS.get(provider)
    api_key = getattr(settings, key_setting) if key_setting else ""
    if api_key:
        credentials["api_key"] = api_key

    if provider == "cloudflare" and settings.CLOUDFLARE_ACCOUNT_ID:
        credentials["api_base"] = CLOUDFLARE_API_BASE.format(
            account_id=settings.CLOUDFLARE_ACCOUNT_ID
        )
    return credentials


def _extract_tokens(response: Any) -> Optional[int]:
    usage = getattr(response, "usage", None)
    total = getattr(usage, "total_tokens", None) if usage is not None else None
    return int(total) if total is not None else None


# ===========================================
# LiteLLM Client
# ===========================================


class LLMClient:
    """
    InferenceBackend on LiteLLM ``acompletion``.

    Runs exactly the model it is given; choosing models is the generator's job.
    """

    def __init__(self):
        self._log_configured_providers()

    def _log_configured_providers(self) -> None:
        configured = [
            provider
            for provider, key_setting in PROVIDER_KEY_SETTINGS.items()
            if os.getenv(key_setting) or getattr(settings, key_setting)
        ]
        if configured:
            logger.info(f"Inference client ready, credentials for: {', '.join(configured)}")
        else:
            logger.warning(
                "No provider API keys configured; every generation will fall back. "
                f"Set one of: {', '.join(PROVIDER_KEY_SETTINGS.values())}"
            )

    async def invoke(
        self, model_id: str, request: InferenceRequest
    ) -> InferenceResult:
        """
        Run one completion.

        Args:
            model_id: LiteLLM model id ("provider/model-name")
            request: Prompts and sampling parameters

        Returns:
            InferenceResult; ``text`` is "" when the choice carried no content

        Raises:
            LLMError: If the response has no choices
            Exception: Provider errors, unchanged
        """
        started = time.perf_counter()
        try:
            response = await acompletion(
                model=model_id,
                messages=build_messages(request.user_message, request.system_message),
                temperature=_adjust_temperature_for_model(model_id, request.temperature),
                max_tokens=request.max_tokens,
                **_provider_credentials(model_id),
            )
        except Exception as e:
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            logger.warning(f"Completion on {model_id} failed after {elapsed_ms}ms: {e}")
            raise

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        choices = getattr(response, "choices", None)
        if not choices:
            raise LLMError(
                f"Completion on {model_id} returned no choices",
                details={"model": model_id},
            )

        tokens_used = _extract_tokens(response)
        logger.debug(f"Completion on {model_id}: {tokens_used} tokens in {elapsed_ms}ms")
        return InferenceResult(text=choices[0].message.content or "", tokens_used=tokens_used)


_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Process-wide LLMClient, created on first use."""
    global _client
    if _client is None:
        _client = LLMClient()
    return _client


def reset_llm_client() -> None:
    """Forget the shared client (tests)."""
    global _client
    _client = None
