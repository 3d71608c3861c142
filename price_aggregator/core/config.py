"""
Configuration management for Crypto Price Aggregator Service.
Uses pydantic-settings for environment variable management.
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application metadata
    app_name: str = Field(default="Crypto Price Aggregator", env="APP_NAME")
    app_version: str = Field(default="1.0.0", env="APP_VERSION")
    debug: bool = Field(default=False, env="DEBUG")

    # Server configuration
    server_host: str = Field(default="0.0.0.0", env="SERVER_HOST")
    server_port: int = Field(default=8080, env="SERVER_PORT")

    # Per-exchange timeout for a single price fetch (in seconds), <= 0 disables it
    source_timeout: float = Field(default=10.0, env="SOURCE_TIMEOUT")

    # Include the underlying error text in the placeholder price of a failed source
    expose_source_errors: bool = Field(default=False, env="EXPOSE_SOURCE_ERRORS")

    # Exchange API base URLs (public endpoints - no key required)
    binance_api_url: str = Field(default="https://api.binance.com/api/v3", env="BINANCE_API_URL")
    coingecko_api_url: str = Field(default="https://api.coingecko.com/api/v3", env="COINGECKO_API_URL")
    kraken_api_url: str = Field(default="https://api.kraken.com/0", env="KRAKEN_API_URL")
    coinbase_api_url: str = Field(default="https://api.coinbase.com/v2", env="COINBASE_API_URL")

    # Logging configuration
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="json", env="LOG_FORMAT")

    @validator('log_level')
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(valid_levels))}")
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = {'json', 'text'}
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {', '.join(sorted(valid_formats))}")
        return v.lower()

    @validator('binance_api_url', 'coingecko_api_url', 'kraken_api_url', 'coinbase_api_url')
    def strip_trailing_slash(cls, v: str) -> str:
        """Base URLs are joined with a leading '/' path."""
        return v.rstrip('/')

    def get_source_timeout(self):
        """Get the per-source timeout, or None when disabled."""
        return self.source_timeout if self.source_timeout > 0 else None

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
