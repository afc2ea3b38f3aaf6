"""Admin dashboard API client.

A thin wrapper around the REST API for scripts and tests that drive the
dashboard backend over HTTP.  It uses the ``requests`` library
internally and never raises for HTTP or network failures: every method
returns a tuple ``(data, error)`` where exactly one side is set.

The bearer token returned by :meth:`login`, :meth:`register` and
:meth:`refresh` is remembered and sent with every later request.  A 401
response clears it, so callers can tell they have to log in again by
checking :attr:`token`.

Example::

    client = AdminDashboardClient(base_url="http://localhost:5000")
    user, error = client.login("admin@example.com", "admin123")
    products, error = client.list_products(search="lamp", limit=5)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class AdminDashboardClient:
    """Client for the admin dashboard API (``/api/v1``)."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Server root, e.g. ``http://localhost:5000``.  The
                ``/api/v1`` prefix is appended automatically.
            token: Optional bearer token from an earlier login or from
                ``create_token.py``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/") + "/api/v1"
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Result:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)``.  ``data`` is the parsed JSON body
            on success.  On failure ``data`` is ``None`` and ``error`` is
            a dictionary with ``status_code`` and ``message`` (plus
            ``errors`` for validation failures).
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                files=files,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            error: Dict[str, Any] = {"status_code": status, "message": ""}
            if exc.response is not None:
                try:
                    body = exc.response.json()
                    error["message"] = body.get("message") or body.get("detail") or str(body)
                    if body.get("errors"):
                        error["errors"] = body["errors"]
                except ValueError:
                    error["message"] = exc.response.text
            if not error["message"]:
                error["message"] = str(exc)
            if status == 401:
                self.token = None
            logger.error("API request failed (%s): %s", status, error["message"])
            return None, error
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _data(result: Result) -> Result:
        body, error = result
        if error is not None:
            return None, error
        return (body or {}).get("data"), None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> Result:
        """Log in and remember the token.  Returns the public account."""
        body, error = self._request("POST", "/auth/login", json_body={"email": email, "password": password})
        if error is not None:
            return None, error
        self.token = body["token"]
        return body["user"], None

    def register(self, name: str, email: str, password: str) -> Result:
        body, error = self._request(
            "POST", "/auth/register", json_body={"name": name, "email": email, "password": password}
        )
        if error is not None:
            return None, error
        self.token = body["token"]
        return body["user"], None

    def refresh(self) -> Result:
        """Swap the current token for a fresh one.  Returns the new token."""
        body, error = self._request("POST", "/auth/refresh")
        if error is not None:
            return None, error
        self.token = body["token"]
        return self.token, None

    def me(self) -> Result:
        return self._request("GET", "/auth/me")

    def logout(self) -> Result:
        body, error = self._request("POST", "/auth/logout")
        self.token = None
        return body, error

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def list_users(self, **params: Any) -> Result:
        """List accounts.

        Keyword arguments are passed as query parameters: ``page``,
        ``limit``, ``search``, ``role``, ``status``, ``sortBy`` and
        ``sortOrder``.  Returns the full envelope with ``pagination``.
        """
        return self._request("GET", "/users", params=params)

    def get_user(self, user_id: int) -> Result:
        return self._data(self._request("GET", f"/users/{user_id}"))

    def create_user(self, payload: Dict[str, Any]) -> Result:
        return self._data(self._request("POST", "/users", json_body=payload))

    def update_user(self, user_id: int, payload: Dict[str, Any]) -> Result:
        return self._data(self._request("PUT", f"/users/{user_id}", json_body=payload))

    def delete_user(self, user_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/users/{user_id}")
        return error is None, error

    def change_password(
        self, user_id: int, new_password: str, current_password: Optional[str] = None
    ) -> Tuple[bool, Optional[Dict[str, Any]]]:
        payload = {"newPassword": new_password}
        if current_password is not None:
            payload["currentPassword"] = current_password
        _, error = self._request("PUT", f"/users/{user_id}/password", json_body=payload)
        return error is None, error

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    def list_products(self, **params: Any) -> Result:
        """List products; returns the envelope with ``filters`` and ``pagination``."""
        return self._request("GET", "/products", params=params)

    def category_stats(self) -> Result:
        return self._data(self._request("GET", "/products/categories/stats"))

    def get_product(self, product_id: int) -> Result:
        return self._data(self._request("GET", f"/products/{product_id}"))

    def create_product(self, payload: Dict[str, Any]) -> Result:
        return self._data(self._request("POST", "/products", json_body=payload))

    def update_product(self, product_id: int, payload: Dict[str, Any]) -> Result:
        return self._data(self._request("PUT", f"/products/{product_id}", json_body=payload))

    def delete_product(self, product_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/products/{product_id}")
        return error is None, error

    def upload_product_image(self, product_id: int, filename: str, content: bytes, content_type: str) -> Result:
        files = {"image": (filename, content, content_type)}
        return self._data(self._request("POST", f"/products/{product_id}/image", files=files))

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------
    def dashboard_stats(self) -> Result:
        return self._data(self._request("GET", "/dashboard/stats"))

    def dashboard_charts(self) -> Result:
        return self._data(self._request("GET", "/dashboard/charts"))

    def recent_activities(self, limit: int = 20) -> Result:
        return self._data(self._request("GET", "/dashboard/activities", params={"limit": limit}))

    def health(self) -> Result:
        return self._request("GET", "/health")
