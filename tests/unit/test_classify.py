import asyncio

import httpx

from botkit.cognitive.classify import FailureAction, classify_status, get_action_from_error
from botkit.errors import AbortError, UpstreamError


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "http://platform.local/actions")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError("failed", request=request, response=response)


def test_status_classification() -> None:
    assert classify_status(400) is FailureAction.ABORT
    assert classify_status(401) is FailureAction.ABORT
    assert classify_status(429) is FailureAction.RETRY
    assert classify_status(408) is FailureAction.RETRY
    assert classify_status(500) is FailureAction.FALLBACK
    assert classify_status(503) is FailureAction.FALLBACK


def test_cancellation_aborts() -> None:
    assert get_action_from_error(AbortError()) is FailureAction.ABORT
    assert get_action_from_error(asyncio.CancelledError()) is FailureAction.ABORT


def test_upstream_error_action_wins_over_status() -> None:
    err = UpstreamError("x", status_code=500, action="retry")
    assert get_action_from_error(err) is FailureAction.RETRY
    assert get_action_from_error(UpstreamError("x", status_code=502)) is FailureAction.FALLBACK


def test_httpx_errors() -> None:
    assert get_action_from_error(_status_error(403)) is FailureAction.ABORT
    assert get_action_from_error(_status_error(502)) is FailureAction.FALLBACK
    assert get_action_from_error(httpx.ConnectError("refused")) is FailureAction.RETRY
    assert get_action_from_error(httpx.ReadTimeout("slow")) is FailureAction.RETRY


def test_message_heuristics() -> None:
    assert get_action_from_error(RuntimeError("Model unavailable")) is FailureAction.FALLBACK
    assert get_action_from_error(RuntimeError("server overloaded")) is FailureAction.FALLBACK
    assert get_action_from_error(RuntimeError("permission denied")) is FailureAction.ABORT
    assert get_action_from_error(RuntimeError("something odd")) is FailureAction.RETRY
