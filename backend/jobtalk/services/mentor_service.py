"""
Mentor Service — career counseling chat and conversation summaries.
"""

from __future__ import annotations

import json
import logging

from jobtalk.models.chat_models import ChatMessage
from jobtalk.prompts import career_mentor, conversation_summary
from jobtalk.services.exceptions import InvalidQuery, LLMRequestFailed
from jobtalk.services.llm_service import complete
from jobtalk.utils.text_cleanup import normalize_message

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Conversation summary unavailable"


async def ask_mentor(
    *,
    message: str,
    history: list[ChatMessage],
    provider: str,
    model_key: str,
    api_key: str,
) -> str:
    """Send the user's message, with prior turns, to the career mentor."""
    text = normalize_message(message or "")
    if not text:
        raise InvalidQuery("Please enter a message")

    messages = [{"role": "system", "content": career_mentor.SYSTEM_PROMPT}]
    messages.extend({"role": turn.role, "content": turn.content} for turn in history)
    messages.append({"role": "user", "content": text})

    logger.info(f"Mentor chat: {len(history)} prior turns, {len(text)} chars")
    return await complete(
        provider=provider,
        model_key=model_key,
        api_key=api_key,
        messages=messages,
        prompt_name="career_mentor",
    )


async def summarize_conversation(
    *,
    conversation: list[ChatMessage],
    provider: str,
    model_key: str,
    api_key: str,
) -> str:
    """
    Condense a mentor conversation into 3-5 sentences.

    Returns SUMMARY_FALLBACK when the LLM call fails.
    """
    if not conversation:
        raise InvalidQuery("Conversation cannot be empty")

    conversation_json = json.dumps(
        [turn.model_dump() for turn in conversation], ensure_ascii=False
    )
    try:
        summary = await complete(
            provider=provider,
            model_key=model_key,
            api_key=api_key,
            messages=[
                {"role": "system", "content": conversation_summary.SYSTEM_PROMPT},
                {"role": "user", "content": conversation_summary.USER_PROMPT_TEMPLATE.format(
                    conversation_json=conversation_json,
                )},
            ],
            prompt_name="conversation_summary",
        )
    except LLMRequestFailed as e:
        logger.warning(f"Conversation summary failed: {e.detail}")
        return SUMMARY_FALLBACK

    return summary.strip() or SUMMARY_FALLBACK
