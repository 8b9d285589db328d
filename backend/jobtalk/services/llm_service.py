"""
LLM Service — unified interface to the chat-completion providers via LiteLLM.

Responsibilities:
  • Resolve a provider/model key pair to a LiteLLM model id
  • Merge per-prompt defaults (temperature, max_tokens) with explicit overrides
  • Send one chat completion and return the raw assistant text

Parsing and validation of the text is left to the calling service; each
call is an independent round-trip with no conversation memory.
"""

from __future__ import annotations

import logging
from typing import Any

import litellm
from litellm import acompletion

from jobtalk.config import MODELS, PROMPT_CONFIG
from jobtalk.services.exceptions import LLMRequestFailed

logger = logging.getLogger(__name__)

# Silence verbose LiteLLM logs in dev
litellm.suppress_debug_info = True


# ── Helpers ──────────────────────────────────────────────────────────────────


def resolve_model_id(provider: str, model_key: str) -> str:
    """Look up the LiteLLM model_id from our registry."""
    provider_models = MODELS.get(provider)
    if not provider_models:
        raise ValueError(f"Unknown provider: {provider}")
    model_entry = provider_models.get(model_key)
    if not model_entry:
        raise ValueError(f"Unknown model: {model_key} for provider {provider}")
    return model_entry["model_id"]


# ── Core Completion ──────────────────────────────────────────────────────────


async def complete(
    *,
    provider: str,
    model_key: str,
    api_key: str,
    messages: list[dict[str, str]],
    prompt_name: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    json_mode: bool = False,
) -> str:
    """
    Send a chat completion request via LiteLLM.

    Args:
        provider:    "openai" | "groq"
        model_key:   Key from MODELS registry (e.g. "gpt-4o-mini")
        api_key:     API key for the provider
        messages:    Role-tagged prompt segments (OpenAI message format)
        prompt_name: Optional key into PROMPT_CONFIG for default temp/tokens
        temperature: Override temperature (takes precedence over prompt_name)
        max_tokens:  Override max_tokens (takes precedence over prompt_name)
        json_mode:   If True, request a JSON object response

    Returns:
        The assistant's response text ("" when the provider returns no content).
    """
    model_id = resolve_model_id(provider, model_key)

    config = PROMPT_CONFIG.get(prompt_name, {}) if prompt_name else {}
    temp = temperature if temperature is not None else config.get("temperature", 0.3)
    tokens = max_tokens if max_tokens is not None else config.get("max_tokens", 1500)

    kwargs: dict[str, Any] = {
        "model": model_id,
        "messages": messages,
        "temperature": temp,
        "max_tokens": tokens,
        "api_key": api_key,
    }

    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    logger.info(f"LLM call: prompt={prompt_name} model={model_id} temp={temp} tokens={tokens}")

    try:
        response = await acompletion(**kwargs)
    except Exception as e:
        logger.error(f"LLM error ({provider}/{model_key}): {e}")
        raise LLMRequestFailed("LLM request failed", detail=str(e)) from e

    content = response.choices[0].message.content or ""
    logger.info(f"LLM response: {len(content)} chars, usage={getattr(response, 'usage', None)}")
    return content
