"""
FILE: taskpad/core/remote.py
PURPOSE: HTTP client for the remote record-oriented CRUD service
EXPORTS:
  - AuthSession (credentials + is_authenticated gate)
  - RecordClient (fetch/create/update records over httpx)
DEPENDENCIES:
  - httpx (HTTP transport)
  - taskpad.core.exceptions (RemoteError)
NOTES:
  - Every transport-level problem (timeout, connection, HTTP status,
    bad JSON, top-level success=false) is raised as RemoteError
  - Per-record failures are NOT checked here; callers inspect results[]
  - Pass transport=httpx.MockTransport(...) in tests
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .exceptions import RemoteError


logger = logging.getLogger(__name__)


class AuthSession:
    """Credentials for the remote service plus a logged-in flag."""

    def __init__(self, project_id: Optional[str], public_key: Optional[str]):
        self.project_id = project_id
        self.public_key = public_key

    @property
    def is_authenticated(self) -> bool:
        return bool(self.project_id and self.public_key)

    def headers(self) -> Dict[str, str]:
        if not self.is_authenticated:
            raise RemoteError("Not authenticated with the remote task service")
        return {
            "X-Project-Id": self.project_id,
            "Authorization": f"Bearer {self.public_key}",
        }

    def logout(self) -> None:
        """Drop credentials; later remote calls fail until re-authenticated."""
        self.project_id = None
        self.public_key = None
        logger.info("Logged out of remote task service")


class RecordClient:
    """
    Thin client for a record service exposing per-table endpoints.

    Endpoints:
        POST  /tables/{table}/fetch     {fields, where, orderBy} -> {data: [...]}
        POST  /tables/{table}/records   {records: [...]}         -> {results: [...]}
        PATCH /tables/{table}/records   {records: [...]}         -> {results: [...]}
    """

    def __init__(
        self,
        base_url: str,
        auth: AuthSession,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.auth = auth
        self._client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def __enter__(self) -> "RecordClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        self._client.close()

    def fetch_records(
        self,
        table: str,
        fields: List[str],
        where: Optional[List[Dict[str, Any]]] = None,
        order_by: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        """Query records. Returns the response envelope with a 'data' list."""
        payload = {
            "fields": fields,
            "where": where or [],
            "orderBy": order_by or [],
        }
        return self._request("POST", f"/tables/{table}/fetch", payload)

    def create_records(self, table: str, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Create records. Returns the envelope with per-record 'results'."""
        return self._request("POST", f"/tables/{table}/records", {"records": records})

    def update_records(self, table: str, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Update records by Id. Returns the envelope with per-record 'results'."""
        return self._request("PATCH", f"/tables/{table}/records", {"records": records})

    def _request(self, method: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = self.auth.headers()

        try:
            response = self._client.request(method, path, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            logger.error("Remote request timed out: %s %s", method, path)
            raise RemoteError(f"Request to task service timed out: {e}")
        except httpx.HTTPError as e:
            logger.error("Remote request failed: %s %s: %s", method, path, e)
            raise RemoteError(f"Could not reach task service: {e}")

        if response.status_code in (401, 403):
            raise RemoteError(f"Task service rejected credentials (HTTP {response.status_code})")
        if response.status_code >= 400:
            logger.error("Remote request %s %s returned HTTP %s", method, path, response.status_code)
            raise RemoteError(f"Task service returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            raise RemoteError("Task service returned a non-JSON response")

        if not isinstance(body, dict):
            raise RemoteError("Task service returned an unexpected response")
        if body.get("success") is False:
            raise RemoteError(body.get("message") or "Task service reported a failure")

        return body
