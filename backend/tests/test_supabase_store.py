"""Tests for the PostgREST-backed record store using a mock transport."""
from __future__ import annotations

import asyncio
import json
from decimal import Decimal
from typing import List

import httpx
import pytest

from app.core.config import Settings
from app.services.dashboard import queries
from app.store.base import StoreError
from app.store.supabase import create_supabase_store


def _settings() -> Settings:
    return Settings(supabase_url="https://popwork.supabase.test/", supabase_anon_key="anon-key")


def _store(handler, access_token=None):
    return create_supabase_store(_settings(), access_token=access_token, transport=httpx.MockTransport(handler))


def test_select_sends_postgrest_query_and_parses_decimals() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            text='[{"id": "i1", "amount": 1234.56, "companies": [{"name": "Acme"}]}]',
            headers={"Content-Type": "application/json"},
        )

    async def scenario():
        store = _store(handler, access_token="user-token")
        try:
            return await store.select(queries.TASKS_QUERY)
        finally:
            await store.aclose()

    rows = asyncio.run(scenario())

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/tasks"
    assert request.url.params["select"] == queries.TASKS_QUERY.select_clause()
    assert request.url.params["order"] == "created_at.desc"
    assert request.url.params["limit"] == "20"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer user-token"
    assert rows[0]["amount"] == Decimal("1234.56")
    assert isinstance(rows[0]["amount"], Decimal)


def test_anon_key_is_used_without_access_token() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async def scenario():
        store = _store(handler)
        try:
            return await store.select(queries.PROJECTS_QUERY), await store.get_current_user()
        finally:
            await store.aclose()

    rows, user = asyncio.run(scenario())

    assert rows == []
    assert user is None
    assert len(seen) == 1
    assert seen[0].headers["Authorization"] == "Bearer anon-key"


def test_error_body_becomes_store_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={
                "code": "PGRST200",
                "message": "Could not find a relationship between 'tasks' and 'projects'",
                "details": None,
                "hint": "Check the embed name",
            },
        )

    async def scenario():
        store = _store(handler)
        try:
            await store.select(queries.TASKS_QUERY)
        finally:
            await store.aclose()

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(scenario())

    error = excinfo.value
    assert error.code == "PGRST200"
    assert error.status_code == 400
    assert error.hint == "Check the embed name"
    assert error.payload["message"].startswith("Could not find a relationship")


def test_transport_failure_becomes_store_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        store = _store(handler)
        try:
            await store.select(queries.INVOICES_QUERY)
        finally:
            await store.aclose()

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(scenario())

    assert "connection refused" in str(excinfo.value)
    assert excinfo.value.details == "ConnectError"


def test_current_user_resolution() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers["Authorization"] == "Bearer good":
            return httpx.Response(200, json={"id": "8a5b", "email": "ada@popwork.test"})
        return httpx.Response(401, json={"msg": "invalid JWT"})

    async def scenario():
        good = _store(handler, access_token="good")
        bad = _store(handler, access_token="expired")
        try:
            return await good.get_current_user(), await bad.get_current_user()
        finally:
            await good.aclose()
            await bad.aclose()

    user, missing = asyncio.run(scenario())

    assert user.id == "8a5b"
    assert user.email == "ada@popwork.test"
    assert missing is None


def test_update_filters_and_representation_header() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "n1", "read": True}])

    async def scenario():
        store = _store(handler, access_token="token")
        try:
            return await store.update("notifications", {"read": True}, {"id": "n1", "user_id": "u1"})
        finally:
            await store.aclose()

    rows = asyncio.run(scenario())

    request = seen[0]
    assert request.method == "PATCH"
    assert request.url.params["id"] == "eq.n1"
    assert request.url.params["user_id"] == "eq.u1"
    assert request.headers["Prefer"] == "return=representation"
    assert json.loads(request.content) == {"read": True}
    assert rows == [{"id": "n1", "read": True}]


def test_delete_counts_returned_rows() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["read"] == "eq.false"
        return httpx.Response(200, json=[{"id": "n1"}, {"id": "n2"}])

    async def scenario():
        store = _store(handler, access_token="token")
        try:
            return await store.delete("notifications", {"read": False})
        finally:
            await store.aclose()

    assert asyncio.run(scenario()) == 2


def test_non_json_user_body_resolves_to_no_user() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>", headers={"Content-Type": "text/html"})

    async def scenario():
        store = _store(handler, access_token="token")
        try:
            return await store.get_current_user()
        finally:
            await store.aclose()

    assert asyncio.run(scenario()) is None
