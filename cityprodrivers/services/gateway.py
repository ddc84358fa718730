"""
Remote Data Gateway — the hosted backend (auth + `profiles`/`bookings` tables).

The portal only depends on `RemoteGateway`. `SupabaseGateway` talks to the
hosted platform's REST surface over httpx:
  - /auth/v1/*   sign-up, sign-in, email OTP, password recovery
  - /rest/v1/*   row select / insert / update keyed by id

Failures are mapped onto the portal taxonomy:
  transport → NetworkError, auth rejection → AuthError, anything else → GatewayError
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from cityprodrivers.exceptions import AuthError, GatewayError, NetworkError

logger = logging.getLogger(__name__)


class RemoteGateway(ABC):
    """Async interface consumed by the session container and dashboards."""

    # ── Authentication ─────────────────────────────────────

    @abstractmethod
    async def sign_up(self, email: str, password: str, role: str, name: str, phone: str = "") -> dict:
        """Create the account and its profile row; returns the profile row."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> dict:
        """Returns the profile row of the authenticated account."""

    @abstractmethod
    async def send_otp(self, email: str) -> None:
        ...

    @abstractmethod
    async def verify_otp(self, email: str, code: str) -> None:
        ...

    @abstractmethod
    async def request_password_reset(self, email: str) -> None:
        ...

    @abstractmethod
    async def reset_password(self, email: str, code: str, new_password: str) -> None:
        ...

    # ── Records ────────────────────────────────────────────

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: dict | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        """
        Filters map column → value (equality) or column → (operator, value),
        e.g. {"role": "driver", "created_at": ("gte", "2025-01-01T00:00:00")}.
        """

    @abstractmethod
    async def get(self, table: str, record_id: str) -> dict | None:
        ...

    @abstractmethod
    async def insert(self, table: str, values: dict) -> dict:
        ...

    @abstractmethod
    async def update(self, table: str, record_id: str, values: dict) -> dict:
        ...

    async def close(self) -> None:
        return None


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:200] or f"HTTP {resp.status_code}"
    if isinstance(data, dict):
        for key in ("error_description", "msg", "message", "error"):
            if data.get(key):
                return str(data[key])
    return f"HTTP {resp.status_code}"


def _filter_value(value: Any) -> str:
    """Encode a filter as a PostgREST `operator.value` query parameter."""
    op = "eq"
    if isinstance(value, tuple):
        op, value = value
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"{op}.{value}"


class SupabaseGateway(RemoteGateway):
    """RemoteGateway over the hosted platform's HTTP API."""

    def __init__(self, url: str, anon_key: str, client: httpx.AsyncClient | None = None):
        self._url = url.rstrip("/")
        self._key = anon_key
        self._http = client
        if not anon_key:
            logger.warning("SUPABASE_ANON_KEY is not set — remote calls will be rejected")

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=10.0)
        return self._http

    def _headers(self) -> dict:
        return {
            "apikey": self._key,
            "Authorization": f"Bearer {self._key}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        auth: bool = False,
        json: dict | None = None,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> Any:
        http = await self._get_http()
        try:
            resp = await http.request(
                method,
                f"{self._url}{path}",
                json=json,
                params=params,
                headers={**self._headers(), **(headers or {})},
            )
        except httpx.HTTPError as e:
            logger.error("Gateway transport error: %s %s → %s", method, path, e)
            raise NetworkError("Could not reach the server. Please try again.") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("Gateway error: %s %s → %s %s", method, path, resp.status_code, message)
            if auth and resp.status_code in (400, 401, 403, 422):
                raise AuthError(message)
            raise GatewayError(message)

        if not resp.content:
            return None
        return resp.json()

    # ── Authentication ─────────────────────────────────────

    async def sign_up(self, email: str, password: str, role: str, name: str, phone: str = "") -> dict:
        data = await self._request(
            "POST",
            "/auth/v1/signup",
            auth=True,
            json={
                "email": email,
                "password": password,
                "data": {"name": name, "role": role, "phone": phone},
            },
        ) or {}
        user = data.get("user") or data
        user_id = user.get("id")
        if not user_id:
            raise GatewayError("Sign-up did not return an account id.")

        profile = await self.insert("profiles", {
            "id": user_id,
            "name": name,
            "email": email,
            "phone": phone,
            "role": role,
            "is_verified": False,
        })
        logger.info("Account created: id=%s role=%s", user_id, role)
        return profile

    async def sign_in(self, email: str, password: str) -> dict:
        data = await self._request(
            "POST",
            "/auth/v1/token",
            auth=True,
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        ) or {}
        user = data.get("user") or {}
        if not user.get("id"):
            raise AuthError("Invalid login credentials")

        profile = await self.get("profiles", user["id"])
        if profile is None:
            # Profile row missing: fall back to the account metadata
            profile = {"id": user["id"], "email": user.get("email"), **(user.get("user_metadata") or {})}
        return profile

    async def send_otp(self, email: str) -> None:
        await self._request("POST", "/auth/v1/otp", auth=True, json={"email": email, "create_user": False})

    async def verify_otp(self, email: str, code: str) -> None:
        await self._request(
            "POST", "/auth/v1/verify", auth=True,
            json={"email": email, "token": code, "type": "email"},
        )

    async def request_password_reset(self, email: str) -> None:
        await self._request("POST", "/auth/v1/recover", auth=True, json={"email": email})

    async def reset_password(self, email: str, code: str, new_password: str) -> None:
        data = await self._request(
            "POST", "/auth/v1/verify", auth=True,
            json={"email": email, "token": code, "type": "recovery"},
        ) or {}
        token = data.get("access_token")
        if not token:
            raise AuthError("Reset code is invalid or has expired.")
        await self._request(
            "PUT", "/auth/v1/user", auth=True,
            json={"password": new_password},
            headers={"Authorization": f"Bearer {token}"},
        )

    # ── Records ────────────────────────────────────────────

    async def select(
        self,
        table: str,
        filters: dict | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        params = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = _filter_value(value)
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        return await self._request("GET", f"/rest/v1/{table}", params=params) or []

    async def get(self, table: str, record_id: str) -> dict | None:
        rows = await self.select(table, {"id": record_id})
        return rows[0] if rows else None

    async def insert(self, table: str, values: dict) -> dict:
        rows = await self._request(
            "POST", f"/rest/v1/{table}",
            json=values,
            headers={"Prefer": "return=representation"},
        ) or []
        return rows[0] if rows else dict(values)

    async def update(self, table: str, record_id: str, values: dict) -> dict:
        rows = await self._request(
            "PATCH", f"/rest/v1/{table}",
            params={"id": f"eq.{record_id}"},
            json=values,
            headers={"Prefer": "return=representation"},
        ) or []
        if not rows:
            raise GatewayError(f"No {table} record with id {record_id}.")
        return rows[0]

    async def close(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None
