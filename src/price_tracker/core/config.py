"""Configuration management for the tracker client."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, ClassVar, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, HttpUrl
from pydantic import ValidationError as SchemaError

from .errors import ConfigurationError, ErrorCode

# Ensure .env values are loaded before settings initialisation.
load_dotenv()


class Settings(BaseModel):
    """Client settings loaded from environment variables."""

    ENV_PREFIX: ClassVar[str] = "PRICE_TRACKER_"

    model_config = ConfigDict(extra="ignore")

    backend_url: HttpUrl = Field(description="Base URL of the price backend.")
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for each backend request.",
    )
    discard_stale_responses: bool = Field(
        default=True,
        description=(
            "Drop list responses issued for a filter that has since changed. When disabled "
            "the last response to arrive always wins."
        ),
    )
    site_name: str = Field(default="Flipkart", description="Store name used in link labels.")
    environment: Literal["development", "production", "test"] = Field(
        default="development",
        description="Runtime environment used for logging and diagnostics.",
    )
    log_level: str = Field(default="INFO", description="Python logging level for the client.")

    def __init__(self, **data: Any) -> None:  # noqa: D401 - inherited docstring
        env_values = type(self)._load_environment_values()
        env_values.update(data)
        super().__init__(**env_values)

    @classmethod
    def _load_environment_values(cls) -> dict[str, Any]:
        """Return field values sourced from the current environment."""

        values: dict[str, Any] = {}
        for field_name in cls.model_fields:
            env_key = f"{cls.ENV_PREFIX}{field_name.upper()}"
            if env_key in os.environ:
                values[field_name] = os.environ[env_key]
        return values


def load_settings(**overrides: Any) -> Settings:
    """Build :class:`Settings`, turning schema failures into startup errors."""

    try:
        return Settings(**overrides)
    except SchemaError as exc:
        missing = [
            ".".join(str(part) for part in error["loc"])
            for error in exc.errors()
            if error["type"] == "missing"
        ]
        if missing:
            names = ", ".join(f"{Settings.ENV_PREFIX}{name.upper()}" for name in missing)
            raise ConfigurationError(
                f"Missing required setting(s): {names}", code=ErrorCode.CONFIG_MISSING
            ) from exc
        raise ConfigurationError(
            f"Invalid configuration: {exc.errors()[0]['msg']}", code=ErrorCode.CONFIG_INVALID
        ) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a singleton instance of :class:`Settings`."""

    return load_settings()


__all__ = ["Settings", "get_settings", "load_settings"]
