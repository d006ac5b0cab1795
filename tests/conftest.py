import pytest

from fakes import FakeConsole
from minion.client import IikoClient
from minion.models import RestaurantConfig


@pytest.fixture()
def consoles() -> dict[str, FakeConsole]:
    return {}


@pytest.fixture()
def make_console(consoles):
    def _make(**kwargs) -> FakeConsole:
        console = FakeConsole(**kwargs)
        consoles[console.base_url] = console
        return console

    return _make


@pytest.fixture()
def client_factory(consoles):
    def _factory(base_url: str, timeout: float = 30.0) -> IikoClient:
        return IikoClient(base_url, timeout=timeout, transport=consoles[base_url].transport())

    return _factory


@pytest.fixture()
def restaurant() -> RestaurantConfig:
    return RestaurantConfig(name="Cafe One", base_url="https://r1.example.com/", login="admin", password="secret")
