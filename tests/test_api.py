import pytest
from fastapi.testclient import TestClient

from fakes import StaticSource, api_login, api_login_info
from minion.config import MinionSettings
from minion.errors import SourceError
from minion.models import RestaurantConfig
from minion.orchestrator import BatchOrchestrator
from minion.processor import RestaurantProcessor
from minion.sources.base import RestaurantSource
from minion_api.api.deps import get_orchestrator
from minion_api.core.errors import ErrorBody
from minion_api.main import create_app


class BrokenSource(RestaurantSource):
    def load(self):
        raise SourceError("database unreachable")


@pytest.fixture()
def app(tmp_path):
    settings = MinionSettings(
        config_path=str(tmp_path / "config.json"),
        database_url="postgresql://user:hunter2@db/app",
        extension_years=3,
    )
    return create_app(settings)


@pytest.fixture()
def orchestrator(make_console, client_factory):
    make_console(
        base_url="https://r1.example.com",
        api_logins=[api_login("k1", "Delivery"), api_login("k2", "Kiosk", active=False)],
        details={"k1": api_login_info("k1", "Delivery")},
        menus=[{"id": 1, "name": "Main"}, {"id": 2, "name": "Bar"}],
    )
    make_console(base_url="https://r2.example.com", login_status=401)
    return BatchOrchestrator(
        StaticSource(
            [
                RestaurantConfig(name="Cafe One", base_url="https://r1.example.com", login="a", password="p"),
                RestaurantConfig(name="Cafe Two", base_url="https://r2.example.com", login="a", password="p"),
            ]
        ),
        processor=RestaurantProcessor(client_factory=client_factory),
    )


@pytest.fixture()
def client(app, orchestrator) -> TestClient:
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_index_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"]["extend_keys"] == "POST /api/extend-keys"


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["status"] == "healthy"
    assert payload["data"]["version"] == "2.1.0"


def test_config_hides_secrets(client):
    response = client.get("/api/config")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["restaurant_source"] == "file"
    assert data["extension_years"] == 3
    assert data["aws_secret_name"] == "ProdEnvs"
    assert "hunter2" not in response.text


def test_extend_keys(client):
    response = client.post("/api/extend-keys", params={"years": 2})
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["operation"] == "extend-keys"
    assert data["processed_restaurants"] == 2
    assert data["successful"] == 1
    assert data["failed"] == 1
    assert data["total_updated"] == 1
    assert data["duration"].endswith("s")
    first, second = data["details"]
    assert first == {"name": "Cafe One", "success": True, "updated": 1, "message": "Updated 1 API keys", "error": None}
    assert second["success"] is False
    assert second["updated"] == 0


def test_refresh_menus(client):
    response = client.post("/api/refresh-menus")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["operation"] == "refresh-menus"
    assert data["total_updated"] == 2
    assert data["details"][0]["message"] == "Updated 2 menus"


def test_years_must_be_positive(client):
    response = client.post("/api/extend-keys", params={"years": 0})
    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_source_failure_returns_500(app):
    app.dependency_overrides[get_orchestrator] = lambda: BatchOrchestrator(BrokenSource())
    with TestClient(app) as c:
        response = c.post("/api/refresh-menus")
    app.dependency_overrides.clear()

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["code"] == "restaurant_source_unavailable"
    assert detail["details"]["reason"] == "database unreachable"


def test_default_orchestrator_reads_app_settings(app, tmp_path):
    (tmp_path / "config.json").write_text('{"restaurants": []}', encoding="utf-8")
    with TestClient(app) as c:
        response = c.post("/api/extend-keys")

    assert response.status_code == 200
    assert response.json()["data"]["processed_restaurants"] == 0


def test_error_body_omits_empty_details():
    assert ErrorBody(code="x", message="y").to_dict() == {"code": "x", "message": "y"}
    assert ErrorBody(code="x", message="y", details={"a": 1}).to_dict()["details"] == {"a": 1}
