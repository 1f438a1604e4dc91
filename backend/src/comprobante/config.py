"""
Application configuration loaded from environment variables.

All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from comprobante.helpers import DEFAULT_GATEWAY_ROOT


class Settings(BaseSettings):
    """
    Application settings with validation.

    Every setting is read from the environment variable of the same name
    prefixed with ``COMPROBANTE_`` (e.g. ``COMPROBANTE_DEFAULT_CURRENCY``).
    Use a .env file for local development.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPROBANTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Documents
    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO 4217 currency applied by gateways to new documents",
    )

    # Gateway registry
    gateway_root: str = Field(
        default=DEFAULT_GATEWAY_ROOT,
        description="Package under which short gateway names are resolved",
    )
    supported_gateways: list[str] = Field(
        default_factory=lambda: ["Offline", "FacturacionModerna"],
        description="Gateway short names checked by GatewayFactory.find()",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level for the API process",
    )

    # Server
    debug: bool = Field(
        default=False,
        description="Enable debug mode with detailed error messages",
    )

    @field_validator("default_currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once at startup and cached for subsequent calls.
    This ensures consistent configuration across the application lifecycle.
    """
    return Settings()
