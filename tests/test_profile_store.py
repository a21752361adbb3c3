# tests/test_profile_store.py

"""
Tests for SupabaseProfileStore against a mocked supabase-py query chain.
"""

import pytest
from unittest.mock import AsyncMock, Mock
from postgrest.exceptions import APIError

from services.profile_store import Found, NotFound, StoreError, SupabaseProfileStore


def make_client(data=None, error=None):
    client = Mock()
    query = Mock()
    query.eq.return_value = query
    query.order.return_value = query
    query.limit.return_value = query
    query.execute = AsyncMock(return_value=Mock(data=data), side_effect=error)
    client.table.return_value.select.return_value = query
    return client, query


@pytest.mark.asyncio
async def test_found_returns_first_row():
    client, query = make_client(data=[{"id": "p1", "full_name": "A"}])
    store = SupabaseProfileStore(client)

    outcome = await store.find_first(
        "residents", "id, full_name", {"auth_user_id": "u1", "is_active": True}
    )

    assert outcome == Found(row={"id": "p1", "full_name": "A"})
    client.table.assert_called_once_with("residents")
    client.table.return_value.select.assert_called_once_with("id, full_name")
    query.eq.assert_any_call("auth_user_id", "u1")
    query.eq.assert_any_call("is_active", True)
    query.order.assert_called_once_with("id")
    query.limit.assert_called_once_with(1)


@pytest.mark.asyncio
async def test_empty_result_is_not_found():
    client, _ = make_client(data=[])

    outcome = await SupabaseProfileStore(client).find_first("residents", "id", {"email": "x"})

    assert isinstance(outcome, NotFound)


@pytest.mark.asyncio
async def test_pgrst116_is_not_found():
    error = APIError({"code": "PGRST116", "message": "JSON object requested, multiple (or no) rows returned"})
    client, _ = make_client(error=error)

    outcome = await SupabaseProfileStore(client).find_first("residents", "id", {"email": "x"})

    assert isinstance(outcome, NotFound)


@pytest.mark.asyncio
async def test_connection_error_is_store_error():
    client, _ = make_client(error=ConnectionError("connection refused"))

    outcome = await SupabaseProfileStore(client).find_first("residents", "id", {"auth_user_id": "u1"})

    assert isinstance(outcome, StoreError)
    assert outcome.detail == "connection refused"


@pytest.mark.asyncio
async def test_permission_error_is_store_error():
    error = APIError({"code": "42501", "message": "permission denied for table residents"})
    client, _ = make_client(error=error)

    outcome = await SupabaseProfileStore(client).find_first("residents", "id", {"auth_user_id": "u1"})

    assert isinstance(outcome, StoreError)
    assert "permission denied" in outcome.detail
