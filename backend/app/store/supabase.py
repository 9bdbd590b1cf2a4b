"""Record store speaking to the hosted Supabase REST and auth APIs."""
from __future__ import annotations

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

import httpx

from app.core.config import Settings
from app.store.base import CurrentUser, Query, RecordStore, StoreError

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"
AUTH_USER_PATH = "/auth/v1/user"


def _encode(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    return value


def _eq_params(filters: Mapping[str, Any]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for column, value in filters.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        params[column] = f"eq.{_encode(value)}"
    return params


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    # Non-integer numbers become Decimal so currency never goes through float.
    return json.loads(response.text, parse_float=Decimal)


class SupabaseStore(RecordStore):
    """PostgREST client acting with the caller's access token.

    Without an access token requests go out with the anon key and there is
    no current user.
    """

    def __init__(self, client: httpx.AsyncClient, *, access_token: Optional[str] = None) -> None:
        self._client = client
        self._access_token = access_token

    async def select(self, query: Query) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"select": query.select_clause()}
        params.update(_eq_params(query.filters))
        if query.order_by:
            params["order"] = f"{query.order_by}.{'desc' if query.descending else 'asc'}"
        if query.limit is not None:
            params["limit"] = str(query.limit)
        response = await self._request("GET", f"{REST_PREFIX}/{query.table}", params=params)
        return _decode(response) or []

    async def insert(self, table: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            f"{REST_PREFIX}/{table}",
            body={key: _encode(value) for key, value in values.items()},
            headers={"Prefer": "return=representation"},
        )
        rows = _decode(response) or []
        if not rows:
            raise StoreError(f"Insert into {table} returned no row", status_code=response.status_code)
        return rows[0]

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Mapping[str, Any],
    ) -> List[Dict[str, Any]]:
        response = await self._request(
            "PATCH",
            f"{REST_PREFIX}/{table}",
            params=_eq_params(filters),
            body={key: _encode(value) for key, value in values.items()},
            headers={"Prefer": "return=representation"},
        )
        return _decode(response) or []

    async def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        response = await self._request(
            "DELETE",
            f"{REST_PREFIX}/{table}",
            params=_eq_params(filters),
            headers={"Prefer": "return=representation"},
        )
        return len(_decode(response) or [])

    async def get_current_user(self) -> Optional[CurrentUser]:
        if not self._access_token:
            return None
        try:
            response = await self._client.get(AUTH_USER_PATH, headers=self._auth_headers())
        except httpx.HTTPError as exc:
            logger.warning("Could not resolve current user: %s", exc)
            return None
        if response.status_code != 200:
            logger.info("Access token rejected by auth API (status=%s)", response.status_code)
            return None
        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("Auth API returned a non-JSON user body: %s", exc)
            return None
        user_id = body.get("id") if isinstance(body, dict) else None
        if not user_id:
            return None
        return CurrentUser(id=str(user_id), email=body.get("email"))

    async def aclose(self) -> None:
        await self._client.aclose()

    def _auth_headers(self) -> Dict[str, str]:
        if self._access_token:
            return {"Authorization": f"Bearer {self._access_token}"}
        return {}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        merged = self._auth_headers()
        merged.update(headers or {})
        try:
            response = await self._client.request(method, path, params=params, json=body, headers=merged)
        except httpx.HTTPError as exc:
            raise StoreError(f"{method} {path} failed: {exc}", details=exc.__class__.__name__) from exc

        if response.is_success:
            return response
        raise self._error_from(response)

    @staticmethod
    def _error_from(response: httpx.Response) -> StoreError:
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            return StoreError(
                response.text or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return StoreError(
            body.get("message") or body.get("msg") or f"Request failed with status {response.status_code}",
            code=body.get("code"),
            details=body.get("details"),
            hint=body.get("hint"),
            status_code=response.status_code,
        )


def create_supabase_store(
    settings: Settings,
    *,
    access_token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SupabaseStore:
    """Build a store with its own HTTP client; callers must ``aclose`` it."""
    headers = {"Accept": "application/json"}
    if settings.supabase_anon_key:
        headers["apikey"] = settings.supabase_anon_key
        headers["Authorization"] = f"Bearer {settings.supabase_anon_key}"
    client = httpx.AsyncClient(
        base_url=settings.supabase_url.rstrip("/"),
        headers=headers,
        timeout=settings.supabase_timeout_seconds,
        transport=transport,
    )
    return SupabaseStore(client, access_token=access_token)
