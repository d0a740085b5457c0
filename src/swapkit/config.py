"""SDK configuration using Pydantic Settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from swapkit.constants import API_URL, DEFAULT_NETWORK


class Settings(BaseSettings):
    """Client settings loaded from SWAPKIT_* environment variables."""

    # Pricing API
    network: int = Field(
        default=DEFAULT_NETWORK,
        ge=1,
        description="EVM chain id the pricing API is queried for. Default: 1 (mainnet)",
    )
    api_url: str = API_URL

    # Transport
    http_timeout_seconds: float = Field(
        default=10.0,
        ge=1,
        le=120,
        description="Timeout applied to the default httpx client (min: 1, max: 120)",
    )

    # Logging
    log_json: bool = True

    @field_validator("api_url", mode="before")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate api_url is an absolute http(s) URL.

        Args:
            v: The api_url value to validate

        Returns:
            str: The api_url without a trailing slash

        Raises:
            ValueError: If api_url is empty or not http(s)
        """
        if not v:
            raise ValueError("api_url cannot be empty")

        if not v.startswith(("http://", "https://")):
            raise ValueError(
                "api_url must be an absolute URL (e.g., 'https://apiv5.paraswap.io')"
            )

        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="SWAPKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Module-level singleton instance
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get SDK settings instance (singleton pattern)."""
    global _settings_instance
    if _settings_instance is None:
        try:
            _settings_instance = Settings()
        except Exception as e:
            msg = (
                "Failed to initialize settings. "
                "Check SWAPKIT_* environment variables."
            )
            raise RuntimeError(msg) from e
    return _settings_instance
