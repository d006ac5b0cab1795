from __future__ import annotations

import logging
from collections.abc import Callable

from minion.client import DEFAULT_TIMEOUT_SECONDS, IikoClient
from minion.errors import MinionError
from minion.expiration import extend_expiration
from minion.models import RestaurantConfig

ClientFactory = Callable[..., IikoClient]

logger = logging.getLogger(__name__)


class RestaurantProcessor:
    """Runs one maintenance operation against a single restaurant.

    Login and listing failures propagate to the caller and abort the
    restaurant. Failures on an individual key or menu are logged and that
    item is skipped.
    """

    def __init__(
        self,
        client_factory: ClientFactory = IikoClient,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.client_factory = client_factory
        self.timeout = timeout

    def extend_keys(self, restaurant: RestaurantConfig, years: int) -> int:
        with self.client_factory(restaurant.base_url, timeout=self.timeout) as client:
            session = client.authenticate(restaurant.login, restaurant.password)
            logger.info("Authenticated against %s", restaurant.name)

            api_keys = client.list_api_keys(session)
            logger.info("%s: found %d API keys", restaurant.name, len(api_keys))

            updated = 0
            for api_key in api_keys:
                if not api_key.is_active:
                    logger.info("%s: API key %s is inactive, skipping", restaurant.name, api_key.name)
                    continue
                try:
                    detail = client.get_api_key_detail(session, api_key.id)
                    extension = extend_expiration(detail.expiration_date, years)
                    if not extension.changed:
                        logger.info(
                            "%s: API key %s already expires at %s, skipping",
                            restaurant.name,
                            api_key.name,
                            detail.expiration_date,
                        )
                        continue
                    client.save_api_key_detail(session, detail.with_expiration_date(extension.value))
                except MinionError as exc:
                    logger.warning("%s: API key %s skipped: %s", restaurant.name, api_key.name, exc)
                    continue

                logger.info(
                    "%s: API key %s extended %s -> %s",
                    restaurant.name,
                    api_key.name,
                    detail.expiration_date,
                    extension.value,
                )
                updated += 1
            return updated

    def refresh_menus(self, restaurant: RestaurantConfig) -> int:
        with self.client_factory(restaurant.base_url, timeout=self.timeout) as client:
            session = client.authenticate(restaurant.login, restaurant.password)
            logger.info("Authenticated against %s", restaurant.name)

            menus = client.list_external_menus(session)
            logger.info("%s: found %d external menus", restaurant.name, len(menus))

            updated = 0
            for menu in menus:
                try:
                    client.refresh_external_menu(session, menu.id)
                except MinionError as exc:
                    logger.warning("%s: menu %s (id=%s) skipped: %s", restaurant.name, menu.name, menu.id, exc)
                    continue
                logger.info("%s: menu %s (id=%s) refreshed", restaurant.name, menu.name, menu.id)
                updated += 1
            return updated
