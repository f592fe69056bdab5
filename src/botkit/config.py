"""Application configuration contract."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from botkit.errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    api_base_url: str = Field(alias="API_BASE_URL", default="http://localhost:3000/v1/chat")
    api_timeout_seconds: int = Field(alias="API_TIMEOUT_SECONDS", default=120)

    cognitive_timeout_ms: int = Field(alias="COGNITIVE_TIMEOUT_MS", default=5 * 60 * 1000)
    cognitive_max_retries: int = Field(alias="COGNITIVE_MAX_RETRIES", default=5)
    cognitive_backoff_min_ms: int = Field(alias="COGNITIVE_BACKOFF_MIN_MS", default=100)
    cognitive_backoff_max_ms: int = Field(alias="COGNITIVE_BACKOFF_MAX_MS", default=10_000)
    cognitive_downtime_threshold_minutes: int = Field(
        alias="COGNITIVE_DOWNTIME_THRESHOLD_MINUTES", default=5
    )
    cognitive_integrations: str = Field(alias="COGNITIVE_INTEGRATIONS", default="")
    cognitive_preferences_path: str = Field(
        alias="COGNITIVE_PREFERENCES_PATH",
        default="~/.config/botkit/models.config.json",
    )

    @property
    def cognitive_integration_names(self) -> list[str]:
        return [item.strip() for item in self.cognitive_integrations.split(",") if item.strip()]


def validate_settings(settings: Settings) -> None:
    invalid: list[str] = []
    if settings.cognitive_timeout_ms <= 0:
        invalid.append("COGNITIVE_TIMEOUT_MS")
    if settings.cognitive_max_retries < 0:
        invalid.append("COGNITIVE_MAX_RETRIES")
    if settings.cognitive_backoff_min_ms < 0:
        invalid.append("COGNITIVE_BACKOFF_MIN_MS")
    if settings.cognitive_backoff_max_ms < settings.cognitive_backoff_min_ms:
        invalid.append("COGNITIVE_BACKOFF_MAX_MS(must be >= COGNITIVE_BACKOFF_MIN_MS)")
    if settings.cognitive_downtime_threshold_minutes <= 0:
        invalid.append("COGNITIVE_DOWNTIME_THRESHOLD_MINUTES")
    if settings.api_timeout_seconds <= 0:
        invalid.append("API_TIMEOUT_SECONDS")

    if settings.app_env == "prod":
        if not settings.api_base_url.startswith("https://"):
            invalid.append("API_BASE_URL(https required)")
        if not settings.cognitive_integration_names:
            invalid.append("COGNITIVE_INTEGRATIONS")

    if invalid:
        keys = ", ".join(sorted(set(invalid)))
        raise ConfigError(f"invalid configuration: {keys}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
