"""Domain exceptions raised by the JobTalk services."""

from __future__ import annotations

from typing import Any


class JobTalkError(Exception):
    """Base exception for errors that reach the HTTP caller."""

    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class InvalidQuery(JobTalkError):
    """Raised when the caller supplied no usable input."""

    status_code = 400


class UpstreamRequestFailed(JobTalkError):
    """Raised when CareerNet or Q-Net fails; aborts the whole operation."""

    status_code = 500


class LLMRequestFailed(JobTalkError):
    """Raised when the LLM provider call itself errors out."""

    status_code = 502


class RoadmapGenerationFailed(JobTalkError):
    """Raised when every roadmap attempt was declined or malformed."""

    status_code = 500

    def __init__(self, message: str, *, last_raw_text: str | None, attempts: int):
        super().__init__(message, detail=last_raw_text)
        self.last_raw_text = last_raw_text
        self.attempts = attempts
