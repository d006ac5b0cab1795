from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any

import httpx

from minion.errors import ApiError, AuthError, DecodeError
from minion.models import ApiKeyDetail, ApiKeyRecord, ExternalMenu, Session

SESSION_COOKIE = "PHPSESSID"
DEFAULT_TIMEOUT_SECONDS = 30.0
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/137.0.0.0 Safari/537.36"
)

# Fixed refresh policy for external menus; name/description and images are never refreshed.
MENU_REFRESH_FLAGS: dict[str, bool] = {
    "refreshNameAndDescription": False,
    "refreshPrice": True,
    "refreshImages": False,
    "refreshModifiersNumber": True,
    "refreshNutritionPerHundredGrams": True,
    "refreshAllergens": True,
    "refreshCombos": True,
}

logger = logging.getLogger(__name__)


class Console(str, Enum):
    INTEGRATION_MANAGEMENT = "integration-management"
    EXTERNAL_MENU = "external-menu"


class IikoClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> IikoClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def authenticate(self, login: str, password: str) -> Session:
        try:
            response = self.client.post(
                "/api/auth/login",
                json={"login": login, "password": password},
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise AuthError(f"Login request to {self.base_url} failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise AuthError(f"Login rejected with status {response.status_code}")

        token = response.cookies.get(SESSION_COOKIE)
        # The jar would otherwise leak the cookie into requests made without a session.
        self.client.cookies.clear()
        if not token:
            raise AuthError(f"{SESSION_COOKIE} cookie missing from login response")
        return Session(base_url=self.base_url, token=token)

    def call(
        self,
        session: Session,
        method: str,
        path: str,
        *,
        console: Console,
        json: Any = None,
    ) -> httpx.Response:
        if session.base_url != self.base_url:
            raise ValueError(f"Session for {session.base_url} cannot be used against {self.base_url}")

        headers = self._console_headers(console)
        headers["Cookie"] = f"{SESSION_COOKIE}={session.token}"
        if json is not None:
            headers["Content-Type"] = "application/json"

        try:
            response = self.client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            raise ApiError(f"{method} {path} failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise ApiError(f"{method} {path} returned status {response.status_code}", status=response.status_code)
        return response

    def list_api_keys(self, session: Session) -> list[ApiKeyRecord]:
        response = self.call(
            session, "GET", "/api/integration-management/api-logins/get-all", console=Console.INTEGRATION_MANAGEMENT
        )
        payload = self._decode(response)
        if not isinstance(payload, dict) or "apiLogins" not in payload:
            raise DecodeError(f"Response from {response.request.url} has no 'apiLogins'")
        items = payload["apiLogins"] or []
        try:
            return [ApiKeyRecord.from_payload(item) for item in items]
        except (KeyError, TypeError, AttributeError) as exc:
            raise DecodeError(f"Malformed API login entry: {exc}") from exc

    def get_api_key_detail(self, session: Session, api_key_id: str) -> ApiKeyDetail:
        response = self.call(
            session,
            "POST",
            "/api/integration-management/api-logins/get",
            console=Console.INTEGRATION_MANAGEMENT,
            json={"apiLoginId": api_key_id},
        )
        return ApiKeyDetail(payload=self._decode_key(response, "apiLoginInfo", dict))

    def save_api_key_detail(self, session: Session, detail: ApiKeyDetail) -> None:
        self.call(
            session,
            "POST",
            "/api/integration-management/save-api-login",
            console=Console.INTEGRATION_MANAGEMENT,
            json=detail.payload,
        )

    def list_external_menus(self, session: Session) -> list[ExternalMenu]:
        response = self.call(session, "GET", "/api/external-menu", console=Console.EXTERNAL_MENU)
        payload = self._decode(response)
        if not isinstance(payload, dict):
            raise DecodeError("External menu response is not a JSON object")
        if payload.get("error"):
            raise ApiError("External menu listing reported an error", status=response.status_code)

        items = payload.get("data") or []
        if not isinstance(items, list):
            raise DecodeError("External menu 'data' is not a list")
        try:
            return [ExternalMenu.from_payload(item) for item in items]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise DecodeError(f"Malformed external menu entry: {exc}") from exc

    def refresh_external_menu(self, session: Session, menu_id: int) -> None:
        self.call(
            session,
            "POST",
            f"/api/external-menu/refresh-menu/{menu_id}",
            console=Console.EXTERNAL_MENU,
            json=dict(MENU_REFRESH_FLAGS),
        )

    def _console_headers(self, console: Console) -> dict[str, str]:
        headers = {
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": "ru_RU",
            "Referer": f"{self.base_url}/{console.value}/index.html",
        }
        if console is Console.INTEGRATION_MANAGEMENT:
            headers["Origin"] = self.base_url
        else:
            headers["User-Agent"] = BROWSER_USER_AGENT
        return headers

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"Malformed JSON from {response.request.url}: {exc}") from exc

    def _decode_key(self, response: httpx.Response, key: str, expected: type) -> Any:
        payload = self._decode(response)
        if not isinstance(payload, dict) or not isinstance(payload.get(key), expected):
            raise DecodeError(f"Response from {response.request.url} has no {key!r} {expected.__name__}")
        return payload[key]
