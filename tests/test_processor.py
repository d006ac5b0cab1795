import re
from datetime import datetime, timedelta, timezone

import pytest

from fakes import api_login, api_login_info
from minion.errors import ApiError, AuthError
from minion.expiration import format_expiration
from minion.processor import RestaurantProcessor

CANONICAL = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}$")


def test_extend_keys_updates_only_stale_active_keys(make_console, client_factory, restaurant):
    now = datetime.now(timezone.utc)
    one_year_out = format_expiration(now + timedelta(days=365))
    five_years_out = format_expiration(now + timedelta(days=5 * 366))
    console = make_console(
        api_logins=[
            api_login("k1", "Delivery", expiration=one_year_out),
            api_login("k2", "Kiosk", active=False),
            api_login("k3", "Loyalty", expiration=five_years_out),
        ],
        details={
            "k1": api_login_info("k1", "Delivery", expiration=one_year_out),
            "k2": api_login_info("k2", "Kiosk"),
            "k3": api_login_info("k3", "Loyalty", expiration=five_years_out),
        },
    )

    updated = RestaurantProcessor(client_factory=client_factory).extend_keys(restaurant, 2)

    assert updated == 1
    assert [saved["id"] for saved in console.saved] == ["k1"]
    assert CANONICAL.match(console.saved[0]["expirationDate"])
    fetched = [request.content for request in console.requests if request.url.path.endswith("/api-logins/get")]
    assert all(b"k2" not in body for body in fetched)
    assert len(fetched) == 2


def test_item_failure_skips_only_that_key(make_console, client_factory, restaurant):
    console = make_console(
        api_logins=[
            api_login("k1", "Broken date"),
            api_login("k2", "Missing detail"),
            api_login("k3", "Delivery"),
        ],
        details={
            "k1": api_login_info("k1", "Broken date", expiration="31/12/2020"),
            "k3": api_login_info("k3", "Delivery"),
        },
    )

    updated = RestaurantProcessor(client_factory=client_factory).extend_keys(restaurant, 2)

    assert updated == 1
    assert [saved["id"] for saved in console.saved] == ["k3"]


def test_login_failure_propagates(make_console, client_factory, restaurant):
    console = make_console(login_status=403)

    with pytest.raises(AuthError):
        RestaurantProcessor(client_factory=client_factory).extend_keys(restaurant, 2)
    assert console.paths() == ["/api/auth/login"]


def test_listing_failure_propagates(make_console, client_factory, restaurant):
    make_console(failing_paths={"/api/external-menu"})

    with pytest.raises(ApiError):
        RestaurantProcessor(client_factory=client_factory).refresh_menus(restaurant)


def test_refresh_menus_counts_successful_refreshes(make_console, client_factory, restaurant):
    console = make_console(
        menus=[{"id": 1, "name": "Main"}, {"id": 2, "name": "Bar"}, {"id": 3, "name": "Breakfast"}],
        failing_paths={"/api/external-menu/refresh-menu/2"},
    )

    updated = RestaurantProcessor(client_factory=client_factory).refresh_menus(restaurant)

    assert updated == 2
    assert [menu_id for menu_id, _ in console.refreshed] == [1, 3]


def test_refresh_menus_with_no_menus(make_console, client_factory, restaurant):
    make_console()
    assert RestaurantProcessor(client_factory=client_factory).refresh_menus(restaurant) == 0


def test_far_future_offset_extends_to_hard_ceiling(make_console, client_factory, restaurant):
    console = make_console(
        api_logins=[api_login("k1", "Delivery")],
        details={"k1": api_login_info("k1", "Delivery")},
    )

    updated = RestaurantProcessor(client_factory=client_factory).extend_keys(restaurant, 8000)

    assert updated == 1
    assert console.saved[0]["expirationDate"] == "2099-12-31 00:00:00.000"
