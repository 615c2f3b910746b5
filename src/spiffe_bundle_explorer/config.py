"""Configuration for the bundle explorer service."""

from pydantic_settings import BaseSettings


class ExplorerConfig(BaseSettings):
    """Explorer service configuration via environment variables."""

    # API settings
    api_port: int = 8080
    api_host: str = "0.0.0.0"

    # Bundle fetching
    fetch_timeout: float = 10.0
    cors_proxy_url: str = "https://api.cors.lol/?url="

    # Certificates with this many days left or fewer are "expiring soon"
    expiring_soon_days: int = 30

    # Logging
    log_level: str = "INFO"

    model_config = {"env_prefix": "BUNDLE_EXPLORER_", "env_file": ".env", "extra": "ignore"}
