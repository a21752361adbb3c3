# services/session_provider.py

from typing import Callable, Optional, Protocol

from supabase import AsyncClient

from core.logging_config import logger
from models.enums import SessionEvent
from models.session import SessionIdentity


SessionListener = Callable[[SessionEvent, Optional[SessionIdentity]], None]


class SessionSubscription(Protocol):
    def unsubscribe(self) -> None:
        ...


class SessionProvider(Protocol):
    """
    Source of the caller's session identity.

    `get_current_session` returns None when nobody is signed in (it may also
    raise; callers treat that the same as no session). `on_session_change`
    registers a listener and returns a handle whose `unsubscribe()` removes it.
    """

    async def get_current_session(self) -> Optional[SessionIdentity]:
        ...

    def on_session_change(self, listener: SessionListener) -> SessionSubscription:
        ...


def to_session_event(event, identity: Optional[SessionIdentity]) -> SessionEvent:
    """Map a GoTrue AuthChangeEvent string onto SessionEvent."""
    try:
        return SessionEvent(str(event))
    except ValueError:
        logger.debug(f"Unmapped auth event {event!r}")
        return SessionEvent.user_updated if identity else SessionEvent.signed_out


# ============================================================
# Supabase Auth (client-side session, e.g. a signed-in worker)
# ============================================================

class SupabaseSessionProvider:
    """Wraps AsyncClient.auth: get_user() + on_auth_state_change()."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def get_current_session(self) -> Optional[SessionIdentity]:
        response = await self.client.auth.get_user()
        if not response:
            return None
        return SessionIdentity.from_auth_user(response.user)

    def on_session_change(self, listener: SessionListener) -> SessionSubscription:
        def _callback(event, session):
            user = getattr(session, "user", None) if session else None
            identity = SessionIdentity.from_auth_user(user)
            listener(to_session_event(event, identity), identity)

        return self.client.auth.on_auth_state_change(_callback)

    async def sign_out(self) -> None:
        await self.client.auth.sign_out()


# ============================================================
# Bearer token (request-scoped, never changes)
# ============================================================

class _NoopSubscription:
    def unsubscribe(self) -> None:
        pass


class TokenSessionProvider:
    """
    Session identity taken from a bearer token.
    The token is validated against GoTrue once per provider instance.
    """

    def __init__(self, client: AsyncClient, token: Optional[str]):
        self.client = client
        self.token = token
        self._identity: Optional[SessionIdentity] = None

    async def get_current_session(self) -> Optional[SessionIdentity]:
        if not self.token:
            return None
        if self._identity is None:
            response = await self.client.auth.get_user(self.token)
            self._identity = SessionIdentity.from_auth_user(response.user if response else None)
        return self._identity

    def on_session_change(self, listener: SessionListener) -> SessionSubscription:
        return _NoopSubscription()
