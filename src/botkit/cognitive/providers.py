"""Model providers: where installed models come from and where preferences live."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from botkit.cognitive.base import ActionClient
from botkit.cognitive.models import Model, ModelPreferences
from botkit.config import Settings
from botkit.errors import UpstreamError

logger = logging.getLogger(__name__)


class StaticModelProvider:
    """Fixed model list with in-memory preferences."""

    def __init__(
        self, models: Sequence[Model], preferences: ModelPreferences | None = None
    ) -> None:
        self._models = list(models)
        self._preferences = preferences.model_copy(deep=True) if preferences else None

    async def fetch_installed_models(self) -> list[Model]:
        return list(self._models)

    async def fetch_model_preferences(self) -> ModelPreferences | None:
        if self._preferences is None:
            return None
        return self._preferences.model_copy(deep=True)

    async def save_model_preferences(self, preferences: ModelPreferences) -> None:
        self._preferences = preferences.model_copy(deep=True)


class RemoteModelProvider:
    """Lists models from installed LLM integrations; keeps preferences in a JSON file."""

    def __init__(
        self,
        client: ActionClient,
        integrations: Sequence[str],
        preferences_path: str | Path,
    ) -> None:
        self._client = client
        self.integrations = list(integrations)
        self.preferences_path = Path(preferences_path).expanduser()

    @classmethod
    def from_settings(cls, client: ActionClient, settings: Settings) -> RemoteModelProvider:
        return cls(
            client,
            settings.cognitive_integration_names,
            settings.cognitive_preferences_path,
        )

    async def fetch_installed_models(self) -> list[Model]:
        models: list[Model] = []
        for integration in self.integrations:
            try:
                result = await self._client.call_action(f"{integration}:listLanguageModels", {})
            except UpstreamError as exc:
                logger.warning("Skipping models of %s: %s", integration, exc)
                continue
            raw_models = result.output.get("models", [])
            if not isinstance(raw_models, list):
                logger.warning("Integration %s returned a malformed model list", integration)
                continue
            for item in raw_models:
                if not isinstance(item, dict):
                    continue
                try:
                    models.append(Model.model_validate({**item, "integration": integration}))
                except ValidationError as exc:
                    logger.warning("Ignoring invalid model from %s: %s", integration, exc)
        return models

    async def fetch_model_preferences(self) -> ModelPreferences | None:
        return await asyncio.to_thread(self._read_preferences)

    async def save_model_preferences(self, preferences: ModelPreferences) -> None:
        payload = preferences.model_dump(mode="json", by_alias=True)
        await asyncio.to_thread(self._write_preferences, payload)

    def _read_preferences(self) -> ModelPreferences | None:
        path = self.preferences_path
        if not path.exists():
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            return ModelPreferences.model_validate(payload)
        except (json.JSONDecodeError, OSError, ValidationError) as exc:
            logger.warning("Ignoring unreadable model preferences at %s: %s", path, exc)
            return None

    def _write_preferences(self, payload: dict[str, Any]) -> None:
        path = self.preferences_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
