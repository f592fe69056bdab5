"""Map call failures to the action the retry loop should take."""

from __future__ import annotations

import asyncio
from enum import Enum

import httpx

from botkit.errors import AbortError, UpstreamError


class FailureAction(str, Enum):
    ABORT = "abort"
    FALLBACK = "fallback"
    RETRY = "retry"


_FALLBACK_MARKERS = ("model unavailable", "model not found", "overloaded")
_ABORT_MARKERS = ("quota exhausted (terminal)", "permission", "invalid argument")


def classify_status(status_code: int) -> FailureAction:
    if status_code in (408, 429):
        return FailureAction.RETRY
    if status_code >= 500:
        return FailureAction.FALLBACK
    if status_code >= 400:
        return FailureAction.ABORT
    return FailureAction.RETRY


def get_action_from_error(err: BaseException) -> FailureAction:
    if isinstance(err, (AbortError, asyncio.CancelledError)):
        return FailureAction.ABORT
    if isinstance(err, UpstreamError):
        if err.action in {action.value for action in FailureAction}:
            return FailureAction(err.action)
        if err.status_code is not None:
            return classify_status(err.status_code)
    if isinstance(err, httpx.HTTPStatusError):
        return classify_status(err.response.status_code)
    if isinstance(err, httpx.TransportError):
        return FailureAction.RETRY

    lower = str(err).lower()
    if any(marker in lower for marker in _FALLBACK_MARKERS):
        return FailureAction.FALLBACK
    if any(marker in lower for marker in _ABORT_MARKERS):
        return FailureAction.ABORT
    return FailureAction.RETRY
