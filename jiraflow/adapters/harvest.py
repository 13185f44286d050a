"""Harvest v2 API client (authentication check only)."""

from typing import Any, Dict

import requests

from jiraflow import __version__
from jiraflow.errors import RemoteServiceError
from jiraflow.models import HarvestUser

HARVEST_API_URL = "https://api.harvestapp.com/v2"


class HarvestError(RemoteServiceError):
    """Raised when a Harvest API call fails."""

    pass


class HarvestClient:
    """Minimal Harvest client: authenticates an account id + personal token."""

    def __init__(self, api_url: str = HARVEST_API_URL) -> None:
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers["User-Agent"] = f"jiraflow/{__version__}"
        self._session.headers["Accept"] = "application/json"

    def _request(self, method: str, path: str, params: Dict[str, Any] | None = None) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, params=params, timeout=30)
        except requests.RequestException as e:
            raise HarvestError(f"Harvest request failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                body = resp.json()
                msg = body.get("error_description") or body.get("message") or msg
            except ValueError:
                pass
            raise HarvestError(f"{resp.status_code}: {msg}")
        return resp

    def authenticate(self, account_id: str, token: str) -> HarvestUser:
        """Attach credentials to the session and verify them via users/me."""
        self._session.headers["Harvest-Account-Id"] = str(account_id)
        self._session.headers["Authorization"] = f"Bearer {token}"
        return self.me()

    def me(self) -> HarvestUser:
        data = self._request("GET", "/users/me").json()
        return HarvestUser(
            id=data["id"],
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            email=data.get("email") or "",
        )
