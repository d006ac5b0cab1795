from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from minion.sources.base import RestaurantSource
from minion.sources.database import DatabaseRestaurantSource
from minion.sources.file import FileRestaurantSource
from minion.sources.secrets import DatabaseCredentials, fetch_database_credentials

if TYPE_CHECKING:
    from minion.config import MinionSettings


def build_source(settings: MinionSettings) -> RestaurantSource:
    if settings.restaurant_source == "file":
        return FileRestaurantSource(settings.config_path)

    if settings.database_url:
        return DatabaseRestaurantSource(database_url=settings.database_url)
    return DatabaseRestaurantSource(
        credentials_loader=partial(fetch_database_credentials, settings.aws_region, settings.aws_secret_name),
    )


__all__ = [
    "DatabaseCredentials",
    "DatabaseRestaurantSource",
    "FileRestaurantSource",
    "RestaurantSource",
    "build_source",
    "fetch_database_credentials",
]
