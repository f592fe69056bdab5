import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from botkit.cognitive.base import ActionResult
from botkit.cognitive.models import Model, ModelPreferences
from botkit.cognitive.providers import RemoteModelProvider, StaticModelProvider
from botkit.cognitive.signal import AbortSignal
from botkit.config import get_settings
from botkit.errors import UpstreamError


class ListingClient:
    def __init__(self, listings: dict[str, Any]) -> None:
        self.listings = listings
        self.calls: list[str] = []

    async def call_action(
        self, type: str, input: dict[str, Any], *, signal: AbortSignal | None = None
    ) -> ActionResult:
        self.calls.append(type)
        listing = self.listings[type]
        if isinstance(listing, Exception):
            raise listing
        return ActionResult(output=listing)

    def clone(self) -> "ListingClient":
        return self


@pytest.mark.asyncio
async def test_static_provider_returns_copies() -> None:
    model = Model(id="gpt-1", name="gpt", integration="openai")
    provider = StaticModelProvider([model])
    assert await provider.fetch_model_preferences() is None

    await provider.save_model_preferences(ModelPreferences(best=["openai:gpt-1"]))
    stored = await provider.fetch_model_preferences()
    stored.best.clear()
    assert (await provider.fetch_model_preferences()).best == ["openai:gpt-1"]
    assert await provider.fetch_installed_models() == [model]


@pytest.mark.asyncio
async def test_remote_provider_lists_models_per_integration(tmp_path: Path) -> None:
    client = ListingClient(
        {
            "openai:listLanguageModels": {
                "models": [
                    {"id": "gpt-1", "name": "GPT 1", "tags": ["recommended"]},
                    {"name": "missing id"},
                ]
            },
            "anthropic:listLanguageModels": UpstreamError("integration offline", status_code=503),
            "groq:listLanguageModels": {
                "models": [{"id": "llama:70b", "name": "Llama", "input": {"costPer1MTokens": 0.5}}]
            },
        }
    )
    provider = RemoteModelProvider(
        client, ["openai", "anthropic", "groq"], tmp_path / "prefs.json"
    )
    models = await provider.fetch_installed_models()
    assert [m.ref for m in models] == ["openai:gpt-1", "groq:llama:70b"]
    assert models[1].input_cost == 0.5
    assert client.calls == [
        "openai:listLanguageModels",
        "anthropic:listLanguageModels",
        "groq:listLanguageModels",
    ]


@pytest.mark.asyncio
async def test_remote_provider_persists_preferences_as_json() -> None:
    settings = get_settings()
    provider = RemoteModelProvider.from_settings(ListingClient({}), settings)
    assert await provider.fetch_model_preferences() is None

    await provider.save_model_preferences(ModelPreferences(best=["openai:gpt-1"], fast=["openai:gpt-1"]))
    payload = json.loads(Path(settings.cognitive_preferences_path).read_text(encoding="utf-8"))
    assert payload == {"best": ["openai:gpt-1"], "fast": ["openai:gpt-1"], "downtimes": []}

    loaded = await provider.fetch_model_preferences()
    assert loaded == ModelPreferences(best=["openai:gpt-1"], fast=["openai:gpt-1"])


@pytest.mark.asyncio
async def test_remote_provider_ignores_malformed_preferences(tmp_path: Path) -> None:
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")
    provider = RemoteModelProvider(ListingClient({}), [], path)
    assert await provider.fetch_model_preferences() is None

    path.write_text(json.dumps(["wrong", "shape"]), encoding="utf-8")
    assert await provider.fetch_model_preferences() is None


@pytest.mark.asyncio
async def test_remote_provider_file_io_runs_in_worker_thread(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    offloaded: list[str] = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func: Any, /, *args: Any, **kwargs: Any) -> Any:
        offloaded.append(func.__name__)
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr("botkit.cognitive.providers.asyncio.to_thread", recording_to_thread)
    provider = RemoteModelProvider(ListingClient({}), [], tmp_path / "nested" / "prefs.json")

    await provider.save_model_preferences(ModelPreferences(best=["openai:gpt-1"]))
    loaded = await provider.fetch_model_preferences()

    assert loaded is not None and loaded.best == ["openai:gpt-1"]
    assert offloaded == ["_write_preferences", "_read_preferences"]
