from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import requests


logger = logging.getLogger(__name__)


class BridgeError(RuntimeError):
    pass


@dataclass
class BridgeClient:
    """Client for the roster bridge web app.

    The bridge pulls student records out of the school's roster system, archives
    the raw export in a storage folder and hands the records back. Two actions
    are exposed: `sync` (roster system -> archive -> caller) and `fetch_latest`
    (latest archived export -> caller).
    """

    url: str | None
    folder_id: str | None = None
    api_key: str | None = None
    domain: str | None = None

    def is_configured(self) -> bool:
        return bool(self.url and self.folder_id)

    def sync(self, timeout_s: int = 60) -> list[dict[str, Any]]:
        if not self.api_key or not self.domain:
            raise BridgeError("Bridge sync needs BRIDGE_API_KEY and BRIDGE_DOMAIN")
        return self._post(
            {
                "action": "sync",
                "domain": self.domain,
                "apiKey": self.api_key,
                "folderId": self.folder_id,
            },
            timeout_s=timeout_s,
        )

    def fetch_latest(self, timeout_s: int = 30) -> list[dict[str, Any]]:
        return self._post({"action": "fetch_latest", "folderId": self.folder_id}, timeout_s=timeout_s)

    def _post(self, body: dict[str, Any], timeout_s: int) -> list[dict[str, Any]]:
        if not self.is_configured():
            raise BridgeError("BRIDGE_URL and BRIDGE_FOLDER_ID not configured")

        action = body["action"]
        try:
            resp = requests.post(self.url, data=json.dumps(body), timeout=timeout_s)
        except requests.RequestException as e:
            raise BridgeError(f"Bridge {action} failed: {e}")

        if resp.status_code != 200:
            raise BridgeError(f"Bridge {action} error {resp.status_code}: {resp.text[:500]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise BridgeError(f"Bridge {action} did not return valid JSON: {e}. Raw: {resp.text[:500]}")

        if not isinstance(data, dict):
            raise BridgeError(f"Unexpected bridge response shape: {type(data).__name__}")
        if data.get("status") == "error":
            raise BridgeError(f"Bridge {action} failed: {data.get('message', 'unknown error')}")

        students = data.get("students") or []
        if not isinstance(students, list):
            raise BridgeError("Bridge response 'students' must be a list")

        logger.info("Bridge %s returned %s records", action, len(students))
        return students
