from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from minion.errors import SourceError
from minion.models import RestaurantConfig
from minion.sources.base import RestaurantSource


class RestaurantEntry(BaseModel):
    name: str
    base_url: str = Field(min_length=1)
    login: str
    password: str
    enabled: bool = False


class RestaurantFile(BaseModel):
    extension_years: int = Field(default=0, ge=0)
    restaurants: list[RestaurantEntry] = Field(default_factory=list)


class FileRestaurantSource(RestaurantSource):
    """Restaurants listed in a JSON file (``config.json`` by default)."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[RestaurantConfig]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SourceError(f"Cannot read restaurant file {self.path}: {exc}") from exc

        try:
            payload = RestaurantFile.model_validate_json(text)
        except ValidationError as exc:
            raise SourceError(f"Invalid restaurant file {self.path}: {exc}") from exc

        # Zero or missing falls back to the configured default.
        self.extension_years = payload.extension_years or None
        return [
            RestaurantConfig(
                name=entry.name,
                base_url=entry.base_url,
                login=entry.login,
                password=entry.password,
                enabled=entry.enabled,
            )
            for entry in payload.restaurants
        ]
