from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class CursorSettings(BaseSettings):
    """Cursor codec settings loaded from environment variables with PAGECURSOR_ prefix."""

    # Route payloads that are not JSON to the legacy ``value?KIND`` decoder
    legacy_decode_enabled: bool = True
    # Substitute the current UTC time for unparsable legacy timestamps
    legacy_time_fallback: bool = True

    model_config = SettingsConfigDict(env_prefix="PAGECURSOR_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> CursorSettings:
    """Return cached cursor settings instance."""
    return CursorSettings()
