from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MinionSettings(BaseSettings):
    restaurant_source: Literal["file", "database"] = "file"
    config_path: str = "config.json"
    database_url: str | None = None
    aws_region: str = "eu-west-1"
    aws_secret_name: str = "ProdEnvs"
    extension_years: int = Field(default=2, ge=1)
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    max_workers: int = Field(default=1, ge=1)
    http_host: str = "0.0.0.0"
    http_port: int = 3000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MINION_", extra="ignore")

    @model_validator(mode="after")
    def check_secret_store(self) -> "MinionSettings":
        if self.restaurant_source == "database" and not self.database_url:
            if not self.aws_region:
                raise ValueError("aws_region must not be empty")
            if not self.aws_secret_name:
                raise ValueError("aws_secret_name must not be empty")
        return self


@lru_cache
def get_settings() -> MinionSettings:
    return MinionSettings()
