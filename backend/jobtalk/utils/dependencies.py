"""
Request-scoped helpers — extract LLM API keys from headers, fall back to server keys.
"""

from __future__ import annotations

from fastapi import Header, HTTPException
from typing import Optional

from jobtalk.config import settings


class APIKeys:
    """Container for the LLM API keys usable by the current request."""

    def __init__(
        self,
        openai: str | None = None,
        groq: str | None = None,
    ):
        self.openai = openai
        self.groq = groq

    def get_key(self, provider: str) -> str | None:
        """Get the key for a specific provider."""
        return getattr(self, provider, None)

    def has_any(self) -> bool:
        return bool(self.openai or self.groq)

    def resolve(self, provider: str) -> str:
        """Return the key for ``provider`` or raise 400 when none is configured."""
        key = self.get_key(provider)
        if not key:
            raise HTTPException(
                status_code=400,
                detail=f"No API key available for provider '{provider}'.",
            )
        return key


async def get_api_keys(
    x_openai_key: Optional[str] = Header(None, alias="X-OpenAI-Key"),
    x_groq_key: Optional[str] = Header(None, alias="X-Groq-Key"),
) -> APIKeys:
    """FastAPI dependency: header keys win, server settings fill the gaps."""
    return APIKeys(
        openai=x_openai_key or settings.openai_api_key or None,
        groq=x_groq_key or settings.groq_api_key or None,
    )
