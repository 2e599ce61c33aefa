from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://fcm.googleapis.com/fcm/send"
DEFAULT_TIMEOUT = 30.0  # seconds


class Settings(BaseSettings):
    """Client settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="FCM_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    service_name: str = "fcm-client"
    log_level: str = "INFO"

    # Authentication: a credentials file selects the SDK transport
    api_key: str = ""
    credentials_path: str = ""

    # Direct HTTP transport
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT

    # Retry backoff, in seconds
    retry_min_backoff: float = 0.1
    retry_max_backoff: float = 60.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
