"""
LLM Service Module

Provides the inference boundary used by exercise generation, backed by
LiteLLM for access to multiple providers.

Key Components:
- client.py: InferenceBackend protocol and the LiteLLM-based LLMClient

Usage:
    from edugen.services.llm import InferenceRequest, get_llm_client

    client = get_llm_client()
    result = await client.invoke(model_id, InferenceRequest(...))
"""

from edugen.services.llm.client import (
    InferenceBackend,
    InferenceRequest,
    InferenceResult,
    LLMClient,
    build_messages,
    get_llm_client,
    reset_llm_client,
)

__all__ = [
    "InferenceBackend",
    "InferenceRequest",
    "InferenceResult",
    "LLMClient",
    "build_messages",
    "get_llm_client",
    "reset_llm_client",
]
