"""Action invoker over the platform's HTTP actions endpoint."""

from __future__ import annotations

from typing import Any

import httpx

from botkit.cognitive.base import ActionResult
from botkit.cognitive.classify import FailureAction, classify_status
from botkit.cognitive.signal import AbortSignal
from botkit.config import Settings
from botkit.errors import AbortError, UpstreamError


class HttpActionClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 120,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._headers = dict(headers or {})
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> HttpActionClient:
        return cls(
            settings.api_base_url,
            timeout_seconds=settings.api_timeout_seconds,
            transport=transport,
        )

    def clone(self) -> HttpActionClient:
        return HttpActionClient(
            self.base_url,
            timeout_seconds=self.timeout_seconds,
            headers=self._headers,
            transport=self._transport,
        )

    def _timeout_for(self, signal: AbortSignal | None) -> float:
        if signal is None:
            return self.timeout_seconds
        signal.throw_if_aborted()
        remaining = signal.remaining()
        if remaining is None:
            return self.timeout_seconds
        return min(self.timeout_seconds, remaining)

    @staticmethod
    def _error_from_response(action_type: str, response: httpx.Response) -> UpstreamError:
        message = response.reason_phrase or "request failed"
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            message = payload["message"]
        action = classify_status(response.status_code)
        return UpstreamError(
            f"{action_type} failed with {response.status_code}: {message}",
            status_code=response.status_code,
            action=action.value,
            retryable=action is not FailureAction.ABORT,
        )

    async def call_action(
        self,
        type: str,
        input: dict[str, Any],
        *,
        signal: AbortSignal | None = None,
    ) -> ActionResult:
        timeout = self._timeout_for(signal)
        endpoint = f"{self.base_url}/actions"
        try:
            async with httpx.AsyncClient(
                timeout=timeout, headers=self._headers, transport=self._transport
            ) as client:
                response = await client.post(endpoint, json={"type": type, "input": input})
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise self._error_from_response(type, exc.response) from exc
        except httpx.TimeoutException as exc:
            if signal is not None and signal.aborted:
                raise AbortError(f"{type} aborted", reason=signal.reason) from exc
            raise UpstreamError(f"{type} timed out", action=FailureAction.RETRY.value) from exc
        except httpx.TransportError as exc:
            raise UpstreamError(
                f"{type} transport error: {exc.__class__.__name__}: {exc}",
                action=FailureAction.RETRY.value,
            ) from exc

        payload = response.json()
        if not isinstance(payload, dict):
            raise UpstreamError(f"{type} response is not an object")
        output = payload.get("output")
        meta = payload.get("meta")
        return ActionResult(
            output=output if isinstance(output, dict) else {},
            meta=meta if isinstance(meta, dict) else {},
        )
