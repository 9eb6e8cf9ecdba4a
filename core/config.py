"""Monitor configuration."""

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.modes import Mode

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Bot server
    api_base_url: str = Field(default="http://localhost:8080/api", alias="BOT_API_URL")
    request_timeout_s: float = Field(default=10.0, alias="REQUEST_TIMEOUT_S")

    # Sync
    poll_interval_ms: int = Field(default=5000, alias="POLL_INTERVAL_MS")
    default_mode: Mode = Field(default=Mode.TRAINING, alias="DEFAULT_MODE")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("default_mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        return Mode.parse(value)

    @field_validator("poll_interval_ms")
    @classmethod
    def _positive_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("poll_interval_ms must be positive")
        return value

    @property
    def poll_interval_s(self) -> float:
        return self.poll_interval_ms / 1000.0


settings = Settings()
