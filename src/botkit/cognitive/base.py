"""Completion client contracts and per-call envelopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import uuid4

from botkit.cognitive.models import Model, ModelPreferences, ModelSelection
from botkit.cognitive.signal import AbortSignal


@dataclass(slots=True)
class ActionResult:
    output: dict[str, Any]
    meta: dict[str, Any] = field(default_factory=dict)


class ActionClient(Protocol):
    async def call_action(
        self,
        type: str,
        input: dict[str, Any],
        *,
        signal: AbortSignal | None = None,
    ) -> ActionResult: ...

    def clone(self) -> ActionClient: ...


class ModelProvider(Protocol):
    async def fetch_installed_models(self) -> list[Model]: ...

    async def fetch_model_preferences(self) -> ModelPreferences | None: ...

    async def save_model_preferences(self, preferences: ModelPreferences) -> None: ...


@dataclass(slots=True)
class Request:
    input: dict[str, Any]
    id: str = field(default_factory=lambda: f"req_{uuid4().hex}")


@dataclass(slots=True)
class Cost:
    input: float = 0.0
    output: float = 0.0


@dataclass(slots=True)
class Tokens:
    input: int = 0
    output: int = 0


@dataclass(slots=True)
class ResponseMeta:
    model: ModelSelection
    latency: int
    cost: Cost
    tokens: Tokens
    cached: bool = False


@dataclass(slots=True)
class Response:
    output: dict[str, Any]
    meta: ResponseMeta
