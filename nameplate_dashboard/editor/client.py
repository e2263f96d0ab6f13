# nameplate_dashboard/editor/client.py
from typing import Any, Dict, Optional

import httpx

from nameplate_dashboard.auth import TOKEN_COOKIE
from nameplate_dashboard.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class ApiError(Exception):
    """Non-2xx response, or a body with ``success: false``."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body or {}


class NameplateApiClient:
    """
    Talks to the dashboard API on behalf of the editor.

    ``transport`` is passed through to httpx so tests can use
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)
        if token:
            self._client.cookies.set(TOKEN_COOKIE, token)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _parse(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            raise ApiError(f"Invalid JSON response: {response.text[:200]}", response.status_code)
        if response.is_error:
            raise ApiError(f"HTTP {response.status_code}: {body.get('error') or 'Unknown error'}",
                           response.status_code, body)
        if not body.get("success"):
            raise ApiError(body.get("error") or "API returned success: false", response.status_code, body)
        return body

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in; the session cookie is kept on the client."""
        body = self._parse(self._client.post("/api/auth/login", json={"email": email, "password": password}))
        if body.get("token"):
            self._client.cookies.set(TOKEN_COOKIE, body["token"])
        return body["user"]

    def me(self) -> Dict[str, Any]:
        return self._parse(self._client.get("/api/auth/me"))["user"]

    def upload_image(self, png: bytes, *, identifier: str) -> str:
        """Upload rendered PNG bytes, return the public URL."""
        response = self._client.post(
            "/api/upload",
            files={"file": (f"{identifier or 'nameplate'}.png", png, "image/png")},
            data={"identifier": identifier},
        )
        return self._parse(response)["url"]

    def create_nameplate(self, officer: str, lot: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self._client.post(f"/api/{officer}/lots/{lot}/createNameplate", json=payload)
        body = self._parse(response)
        logger.info(f"nameplate saved id={body.get('data', {}).get('id')} officer={officer} lot={lot}")
        return body["data"]
