"""Model catalogue types, ranking and downtime-aware picking."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from botkit.errors import NoModelAvailableError

DOWNTIME_THRESHOLD_MINUTES = 5

BEST = "best"
FAST = "fast"

ModelRef = str

_BEST_TAG_WEIGHTS = {
    "recommended": 10,
    "general-purpose": 5,
    "reasoning": 3,
    "low-cost": -3,
    "preview": -5,
}
_FAST_TAG_WEIGHTS = {
    "low-cost": 10,
    "recommended": 5,
    "general-purpose": 2,
    "preview": -3,
    "reasoning": -5,
}


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Model(_WireModel):
    id: str
    name: str
    integration: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    input_cost: float = 0.0
    output_cost: float = 0.0
    max_input_tokens: int | None = None
    max_output_tokens: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_limits(cls, data: Any) -> Any:
        # listLanguageModels reports {"input": {"costPer1MTokens", "maxTokens"}, "output": {...}}.
        if not isinstance(data, dict):
            return data
        out = dict(data)
        for side in ("input", "output"):
            nested = out.pop(side, None)
            if not isinstance(nested, dict):
                continue
            if "costPer1MTokens" in nested:
                out.setdefault(f"{side}_cost", nested["costPer1MTokens"])
            if "maxTokens" in nested:
                out.setdefault(f"max_{side}_tokens", nested["maxTokens"])
        return out

    @property
    def ref(self) -> ModelRef:
        return f"{self.integration}:{self.id}"

    @property
    def total_cost(self) -> float:
        return self.input_cost + self.output_cost


class Downtime(_WireModel):
    ref: ModelRef
    started_at: datetime
    reason: str = "Model is down"

    @field_validator("started_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def is_active(
        self, now: datetime | None = None, threshold_minutes: int = DOWNTIME_THRESHOLD_MINUTES
    ) -> bool:
        now = now or datetime.now(UTC)
        return now - self.started_at <= timedelta(minutes=threshold_minutes)


class ModelPreferences(_WireModel):
    best: list[ModelRef] = Field(default_factory=list)
    fast: list[ModelRef] = Field(default_factory=list)
    downtimes: list[Downtime] = Field(default_factory=list)

    @field_validator("best", "fast", "downtimes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


@dataclass(slots=True, frozen=True)
class ModelSelection:
    integration: str
    model: str

    @property
    def ref(self) -> ModelRef:
        return f"{self.integration}:{self.model}"


def parse_ref(ref: ModelRef) -> ModelSelection:
    integration, _, model = ref.partition(":")
    return ModelSelection(integration=integration, model=model)


def _score(model: Model, weights: dict[str, int]) -> int:
    return sum(weights.get(tag, 0) for tag in model.tags)


def _usable(models: Iterable[Model]) -> list[Model]:
    return [model for model in models if "deprecated" not in model.tags]


def get_best_models(models: Iterable[Model]) -> list[Model]:
    """Most capable first: tag score, then the pricier model on ties."""
    return sorted(_usable(models), key=lambda m: (-_score(m, _BEST_TAG_WEIGHTS), -m.total_cost))


def get_fast_models(models: Iterable[Model]) -> list[Model]:
    """Cheapest and quickest first: tag score, then the cheaper model on ties."""
    return sorted(_usable(models), key=lambda m: (-_score(m, _FAST_TAG_WEIGHTS), m.total_cost))


def pick_model(
    refs: Sequence[ModelRef],
    downtimes: Iterable[Downtime],
    *,
    now: datetime | None = None,
    threshold_minutes: int = DOWNTIME_THRESHOLD_MINUTES,
) -> ModelRef:
    now = now or datetime.now(UTC)
    down = {d.ref for d in downtimes if d.is_active(now, threshold_minutes)}
    for ref in refs:
        if ref not in down:
            return ref
    if not refs:
        raise NoModelAvailableError("no model candidates configured")
    raise NoModelAvailableError(f"all candidate models are down: {', '.join(refs)}")
