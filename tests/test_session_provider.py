# tests/test_session_provider.py

import pytest
from unittest.mock import AsyncMock, Mock

from models.enums import ResolutionErrorKind, SessionEvent
from models.session import SessionIdentity
from services.identity_resolution import IdentityResolutionService
from services.lookup import ResidentLookup
from services.session_provider import (
    SupabaseSessionProvider,
    TokenSessionProvider,
    to_session_event,
)


def auth_response(user_id, email=None):
    return Mock(user=Mock(id=user_id, email=email))


@pytest.mark.asyncio
async def test_supabase_provider_reads_current_user():
    client = Mock()
    client.auth.get_user = AsyncMock(return_value=auth_response("u1", "a@x.com"))

    identity = await SupabaseSessionProvider(client).get_current_session()

    assert identity == SessionIdentity(id="u1", email="a@x.com")


@pytest.mark.asyncio
async def test_supabase_provider_without_session():
    client = Mock()
    client.auth.get_user = AsyncMock(return_value=None)

    assert await SupabaseSessionProvider(client).get_current_session() is None


def test_supabase_provider_translates_auth_events():
    client = Mock()
    subscription = Mock()
    client.auth.on_auth_state_change.return_value = subscription
    received = []

    handle = SupabaseSessionProvider(client).on_session_change(
        lambda event, identity: received.append((event, identity))
    )
    callback = client.auth.on_auth_state_change.call_args[0][0]
    callback("SIGNED_IN", Mock(user=Mock(id="u2", email=None)))
    callback("SIGNED_OUT", None)

    assert handle is subscription
    assert received == [
        (SessionEvent.signed_in, SessionIdentity(id="u2")),
        (SessionEvent.signed_out, None),
    ]


@pytest.mark.asyncio
async def test_supabase_provider_sign_out():
    client = Mock()
    client.auth.sign_out = AsyncMock()

    await SupabaseSessionProvider(client).sign_out()

    client.auth.sign_out.assert_awaited_once()


def test_unknown_auth_event_maps_by_identity():
    assert to_session_event("MFA_CHALLENGE_VERIFIED", SessionIdentity(id="u1")) == SessionEvent.user_updated
    assert to_session_event("SOMETHING_NEW", None) == SessionEvent.signed_out


@pytest.mark.asyncio
async def test_token_provider_without_token_skips_gotrue():
    client = Mock()
    client.auth.get_user = AsyncMock()

    assert await TokenSessionProvider(client, None).get_current_session() is None
    client.auth.get_user.assert_not_called()


@pytest.mark.asyncio
async def test_token_provider_validates_token_once():
    client = Mock()
    client.auth.get_user = AsyncMock(return_value=auth_response("u1", "a@x.com"))
    provider = TokenSessionProvider(client, "jwt-token")

    first = await provider.get_current_session()
    second = await provider.get_current_session()

    assert first == second == SessionIdentity(id="u1", email="a@x.com")
    client.auth.get_user.assert_awaited_once_with("jwt-token")


@pytest.mark.asyncio
async def test_invalid_token_resolves_to_not_authenticated(profile_store):
    client = Mock()
    client.auth.get_user = AsyncMock(side_effect=Exception("invalid JWT"))
    service = IdentityResolutionService(
        TokenSessionProvider(client, "expired"),
        ResidentLookup(profile_store),
        is_production=True,
    )

    result = await service.resolve()

    assert result.error == ResolutionErrorKind.not_authenticated
    assert profile_store.calls == []
