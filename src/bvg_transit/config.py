"""Settings for BVG transit queries, read from environment and .env."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings; environment variables use the BVG_TRANSIT_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="BVG_TRANSIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(default="http://mobil.bvg.de", description="Service host")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    encoding: str = Field(
        default="ISO-8859-1", description="Character set the service delivers pages in"
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (Linux; Android 2.2) AppleWebKit/533.1 (KHTML, like Gecko) Mobile Safari/533.1",
        description="User-Agent header sent with every request",
    )
    retry_attempts: int = Field(
        default=3, description="Attempts per retrieval when the caller retries (CLI)"
    )
    retry_wait_min: int = Field(default=1, description="Minimum retry wait in seconds")
    retry_wait_max: int = Field(default=10, description="Maximum retry wait in seconds")

    @property
    def api_base(self) -> str:
        return f"{self.base_url}/Fahrinfo/bin/"


@lru_cache
def get_settings() -> Settings:
    return Settings()
