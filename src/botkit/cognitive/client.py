"""Completion client with model selection, downtime tracking and classified retries."""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, NoReturn

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from botkit.cognitive.base import (
    ActionClient,
    ActionResult,
    Cost,
    ModelProvider,
    Request,
    Response,
    ResponseMeta,
    Tokens,
)
from botkit.cognitive.classify import FailureAction, get_action_from_error
from botkit.cognitive.events import EventEmitter, Handler, Unsubscribe
from botkit.cognitive.interceptors import InterceptorManager
from botkit.cognitive.models import (
    BEST,
    FAST,
    Downtime,
    Model,
    ModelPreferences,
    ModelSelection,
    get_best_models,
    get_fast_models,
    parse_ref,
    pick_model,
)
from botkit.cognitive.providers import RemoteModelProvider
from botkit.cognitive.signal import AbortSignal
from botkit.cognitive.state import SelectionState
from botkit.config import Settings, get_settings
from botkit.errors import AbortError, NotFoundError
from botkit.logging import bind_context, unbind_context

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Interceptors:
    request: InterceptorManager[Request] = field(default_factory=InterceptorManager)
    response: InterceptorManager[Response] = field(default_factory=InterceptorManager)


class _RetryAttempt(Exception):
    """Marks a failed attempt the retry loop should try again."""

    def __init__(self, error: Exception) -> None:
        super().__init__(str(error))
        self.error = error


class Cognitive:
    _IS_COGNITIVE = True

    def __init__(
        self,
        client: ActionClient,
        provider: ModelProvider | None = None,
        *,
        timeout_ms: int | None = None,
        max_retries: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client
        self._provider = provider or RemoteModelProvider.from_settings(client, self._settings)
        self._timeout_ms = (
            timeout_ms if timeout_ms is not None else self._settings.cognitive_timeout_ms
        )
        self._max_retries = (
            max_retries if max_retries is not None else self._settings.cognitive_max_retries
        )
        self._models: list[Model] = []
        self._state = SelectionState(self._settings.cognitive_downtime_threshold_minutes)
        self._events = EventEmitter()
        self.interceptors = Interceptors()

    @staticmethod
    def is_cognitive_client(obj: object) -> bool:
        return getattr(obj, "_IS_COGNITIVE", False) is True

    @property
    def client(self) -> ActionClient:
        return self._client

    def clone(self) -> Cognitive:
        """Copy caches and settings; interceptor managers are shared, subscribers are not."""
        duplicate = Cognitive(
            self._client.clone(),
            self._provider,
            timeout_ms=self._timeout_ms,
            max_retries=self._max_retries,
            settings=self._settings,
        )
        duplicate._models = list(self._models)
        duplicate._state = self._state.copy()
        duplicate.interceptors = self.interceptors
        return duplicate

    def on(self, kind: str, handler: Handler) -> Unsubscribe:
        return self._events.subscribe(kind, handler)

    subscribe = on

    async def fetch_installed_models(self) -> list[Model]:
        if not self._models:
            self._models = list(await self._provider.fetch_installed_models())
            logger.debug("Fetched %d installed models", len(self._models))
        return list(self._models)

    async def fetch_preferences(self) -> ModelPreferences:
        cached = self._state.preferences
        if cached is not None:
            return cached

        persisted = await self._provider.fetch_model_preferences()
        if persisted is not None:
            self._state.replace_preferences(persisted)
            return persisted

        models = await self.fetch_installed_models()
        defaults = ModelPreferences(
            best=[model.ref for model in get_best_models(models)],
            fast=[model.ref for model in get_fast_models(models)],
            downtimes=[],
        )
        self._state.replace_preferences(defaults)
        await self._provider.save_model_preferences(defaults)
        logger.info(
            "Initialized model preferences from %d installed models", len(models)
        )
        return defaults.model_copy(deep=True)

    async def set_preferences(self, preferences: ModelPreferences, save: bool = False) -> None:
        self._state.replace_preferences(preferences)
        if save:
            await self._provider.save_model_preferences(preferences)

    async def _select_model(self, ref: str) -> ModelSelection:
        preferences = await self.fetch_preferences()
        now = datetime.now(UTC)
        downtimes = self._state.active_downtimes(now)

        if ref == BEST:
            candidates = preferences.best
        elif ref == FAST:
            candidates = preferences.fast
        else:
            candidates = [ref, *preferences.best, *preferences.fast]

        picked = pick_model(
            candidates,
            downtimes,
            now=now,
            threshold_minutes=self._state.threshold_minutes,
        )
        if picked != candidates[0]:
            logger.info("Model %s is down; selected %s", candidates[0], picked)
        return parse_ref(picked)

    async def get_model_details(self, ref: str) -> Model:
        models = await self.fetch_installed_models()
        selection = await self._select_model(ref)
        for model in models:
            if model.integration == selection.integration and selection.model in (
                model.name,
                model.id,
            ):
                return model
        raise NotFoundError(f"Model {selection.model} not found")

    async def generate_content(
        self, input: dict[str, Any], *, signal: AbortSignal | None = None
    ) -> Response:
        start = time.monotonic()
        if signal is None:
            signal = AbortSignal.timeout(self._timeout_ms / 1000)
        request = Request(input=copy.deepcopy(input))
        bind_context(cognitive_request_id=request.id)
        try:
            self._events.emit("request", request)
            result, selection, request = await self._call_with_retries(input, request, signal)
            usage = result.output.get("usage") or {}
            response = Response(
                output=result.output,
                meta=ResponseMeta(
                    cached=bool(result.meta.get("cached", False)),
                    model=selection,
                    latency=int((time.monotonic() - start) * 1000),
                    cost=Cost(
                        input=float(usage.get("inputCost") or 0.0),
                        output=float(usage.get("outputCost") or 0.0),
                    ),
                    tokens=Tokens(
                        input=int(usage.get("inputTokens") or 0),
                        output=int(usage.get("outputTokens") or 0),
                    ),
                ),
            )
            self._events.emit("response", request, response)
            return await self.interceptors.response.run(response, signal)
        finally:
            unbind_context("cognitive_request_id")

    async def _call_with_retries(
        self, input: dict[str, Any], request: Request, signal: AbortSignal
    ) -> tuple[ActionResult, ModelSelection, Request]:
        backoff_min = self._settings.cognitive_backoff_min_ms / 1000
        backoff_max = self._settings.cognitive_backoff_max_ms / 1000
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_exponential(multiplier=backoff_min, min=backoff_min, max=backoff_max),
            retry=retry_if_exception_type(_RetryAttempt),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    outcome = await self._attempt(
                        input, request, signal, attempt.retry_state.attempt_number
                    )
        except _RetryAttempt as exc:
            raise exc.error
        return outcome

    async def _attempt(
        self,
        input: dict[str, Any],
        request: Request,
        signal: AbortSignal,
        attempt_number: int,
    ) -> tuple[ActionResult, ModelSelection, Request]:
        if signal.aborted:
            err = AbortError(f"operation aborted: {signal.reason}", reason=signal.reason)
            self._events.emit("aborted", request, err)
            raise err

        try:
            selection = await self._select_model(input.get("model") or BEST)
        except Exception as exc:
            self._events.emit("error", request, exc)
            raise

        try:
            request = await self.interceptors.request.run(
                Request(input=copy.deepcopy(input), id=request.id), signal
            )
            result = await self._client.call_action(
                f"{selection.integration}:generateContent",
                {**request.input, "model": {"id": selection.model}},
                signal=signal,
            )
        except Exception as exc:
            await self._on_attempt_failed(exc, request, selection, signal, attempt_number)
        return result, selection, request

    async def _on_attempt_failed(
        self,
        exc: Exception,
        request: Request,
        selection: ModelSelection,
        signal: AbortSignal,
        attempt_number: int,
    ) -> NoReturn:
        if signal.aborted:
            self._events.emit("aborted", request, exc)
            if isinstance(exc, AbortError):
                raise exc
            raise AbortError(f"operation aborted: {signal.reason}", reason=signal.reason) from exc

        if attempt_number > self._max_retries:
            logger.error(
                "Giving up on %s after %d attempts: %s", selection.ref, attempt_number, exc
            )
            self._events.emit("error", request, exc)
            raise exc

        action = get_action_from_error(exc)
        if action is FailureAction.ABORT:
            logger.error("Call to %s failed and will not be retried: %s", selection.ref, exc)
            self._events.emit("error", request, exc)
            raise exc

        if action is FailureAction.FALLBACK:
            await self._record_downtime(selection)
            logger.warning("Model %s is down, falling back: %s", selection.ref, exc)
            self._events.emit("fallback", request, exc)
        else:
            logger.warning(
                "Attempt %d on %s failed, retrying: %s", attempt_number, selection.ref, exc
            )
            self._events.emit("retry", request, exc)
        raise _RetryAttempt(exc) from exc

    async def _record_downtime(self, selection: ModelSelection) -> None:
        now = datetime.now(UTC)
        self._state.record_downtime(
            Downtime(ref=selection.ref, started_at=now, reason="Model is down")
        )
        self._state.prune_downtimes(now)
        await self._provider.save_model_preferences(self._state.merged_preferences(now))
