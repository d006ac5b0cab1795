from __future__ import annotations

from abc import ABC, abstractmethod

from minion.models import RestaurantConfig


class RestaurantSource(ABC):
    # Set by sources that carry their own policy alongside the restaurant list.
    extension_years: int | None = None

    @abstractmethod
    def load(self) -> list[RestaurantConfig]:
        raise NotImplementedError
