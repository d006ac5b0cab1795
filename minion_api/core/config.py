from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from minion import __version__


class Settings(BaseSettings):
    app_name: str = "Minion API"
    version: str = __version__
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MINION_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
