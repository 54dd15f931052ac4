"""
Configuration module for the Flutterwave Transfer Proxy.

This module uses Pydantic Settings to load and validate environment variables
for the upstream credential, caller authentication, CORS and server settings.

Environment variables are loaded from .env file or system environment.
"""

from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loaded once at process start and frozen afterwards. A missing
    FLUTTERWAVE_SECRET_KEY or PROXY_AUTH_TOKEN is accepted here; the proxy
    then rejects every POST instead of refusing to start.
    """

    # =========================================================================
    # Upstream (Flutterwave) Configuration
    # =========================================================================

    FLUTTERWAVE_SECRET_KEY: Optional[str] = Field(
        None,
        description="Flutterwave secret key sent upstream as a Bearer credential",
    )

    UPSTREAM_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Total timeout for the outbound Flutterwave call in seconds",
        gt=0,
    )

    # =========================================================================
    # Caller Authentication
    # =========================================================================

    PROXY_AUTH_TOKEN: Optional[str] = Field(
        None,
        description="Bearer token callers must present to use the proxy",
    )

    # =========================================================================
    # CORS Configuration
    # =========================================================================

    ALLOWED_ORIGINS: Optional[str] = Field(
        None,
        description="Comma-separated list of allowed CORS origins (defaults to '*')",
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================

    PROXY_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the proxy server",
    )

    PROXY_PORT: int = Field(
        default=8080,
        description="Port to bind the proxy server",
        ge=1,
        le=65535,
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # =========================================================================
    # Pydantic Settings Configuration
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse and return ALLOWED_ORIGINS as a list.

        Returns:
            List of allowed origins, or ["*"] if nothing is configured.
        """
        if not self.ALLOWED_ORIGINS:
            return ["*"]

        origins = [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]
        return origins or ["*"]

    @property
    def has_upstream_secret(self) -> bool:
        return bool(self.FLUTTERWAVE_SECRET_KEY)

    @property
    def has_proxy_token(self) -> bool:
        return bool(self.PROXY_AUTH_TOKEN)


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    Cached so the environment is read only once per process.

    Raises:
        ValidationError: If an environment variable has an invalid value.
    """
    return Settings()


# =============================================================================
# Configuration Helpers
# =============================================================================

def validate_configuration(settings: Settings) -> Dict[str, Any]:
    """
    Validate critical configuration settings and return a status report.

    The report never contains secret values, only whether they are set.

    Example:
        >>> status = validate_configuration(get_settings())
        >>> if not status["valid"]:
        ...     print(status["errors"])
    """
    errors = []
    warnings = []

    if not settings.has_upstream_secret:
        errors.append(
            "FLUTTERWAVE_SECRET_KEY is not set (all transfer requests will fail with 500)"
        )

    if not settings.has_proxy_token:
        errors.append(
            "PROXY_AUTH_TOKEN is not set (all transfer requests will fail with 403)"
        )

    if "*" in settings.allowed_origins_list:
        warnings.append("ALLOWED_ORIGINS allows any origin ('*')")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "allowed_origins": settings.allowed_origins_list,
        "upstream_timeout_seconds": settings.UPSTREAM_TIMEOUT_SECONDS,
    }
