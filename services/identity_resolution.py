# services/identity_resolution.py

"""
Identity Resolution Service.

Binds the current session identity to a profile (resident or employee) and
keeps the outcome available as a subscribable ResolutionResult.

States: idle → loading → resolved | error, and back to loading whenever the
session changes. Every failure is turned into an error state; nothing raised
by the session provider, the store or the lookup pipeline reaches consumers.

Attempts are tagged with the session epoch they started in (and the session
id they resolved for). A session-change notification advances the epoch, so
a slow attempt for the previous session can finish but never overwrites the
newer result.
"""

import asyncio
from typing import Callable, List, Optional

from core.errors import extract_supabase_error
from core.logging_config import logger
from models.enums import ResolutionErrorKind, SessionEvent
from models.profile import ResolutionResult
from models.session import SessionIdentity
from services.session_provider import SessionProvider, SessionSubscription


ResultListener = Callable[[ResolutionResult], None]

# Errors the development fallback may paper over
MOCKABLE_ERRORS = (
    ResolutionErrorKind.not_authenticated,
    ResolutionErrorKind.profile_not_found,
    ResolutionErrorKind.profile_not_linked,
)

_UNKNOWN = object()


class _Attempt:
    __slots__ = ("epoch", "session_id")

    def __init__(self, epoch: int):
        self.epoch = epoch
        self.session_id: Optional[str] = None


class IdentityResolutionService:
    def __init__(self, session_provider: SessionProvider, pipeline, *, is_production: bool):
        """
        Args:
            session_provider: where the session identity comes from
            pipeline: ResidentLookup / EmployeeLookup (anything with
                `result_model` and `async lookup(identity)`)
            is_production: hard gate for resolve_with_dev_fallback
        """
        self.session_provider = session_provider
        self.pipeline = pipeline
        self.is_production = bool(is_production)

        self._result: ResolutionResult = pipeline.result_model.idle()
        self._listeners: List[ResultListener] = []
        self._subscription: Optional[SessionSubscription] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: set = set()

        self._epoch = 0
        self._known_session = _UNKNOWN

    # ============================================================
    # Reactive read
    # ============================================================
    @property
    def result(self) -> ResolutionResult:
        return self._result

    @property
    def is_active(self) -> bool:
        return self._subscription is not None

    def subscribe(self, listener: ResultListener) -> Callable[[], None]:
        """Call `listener` on every published result. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, result: ResolutionResult):
        self._result = result
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception as e:
                logger.error(f"Resolution listener failed: {e}", exc_info=True)

    # ============================================================
    # Lifecycle
    # ============================================================
    async def activate(self) -> ResolutionResult:
        """Register the session listener (once) and run the initial resolution."""
        if self._subscription is not None:
            return self._result

        self._loop = asyncio.get_running_loop()
        self._known_session = _UNKNOWN
        self._subscription = self.session_provider.on_session_change(self._on_session_change)
        self._publish(self.pipeline.result_model.loading())
        return await self.resolve()

    def deactivate(self):
        """Deregister the session listener. In-flight attempts finish but are discarded."""
        if self._subscription is None:
            return

        self._subscription.unsubscribe()
        self._subscription = None
        self._known_session = _UNKNOWN
        self._epoch += 1

    async def __aenter__(self):
        await self.activate()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.deactivate()

    # ============================================================
    # Session notifications
    # ============================================================
    def _on_session_change(self, event: SessionEvent, identity: Optional[SessionIdentity]):
        if self._subscription is None:
            return

        self._epoch += 1

        if identity is None or event == SessionEvent.signed_out:
            logger.info("Session ended; clearing resolved profile")
            self._known_session = None
            self._publish(
                self.pipeline.result_model.failed(ResolutionErrorKind.not_authenticated)
            )
            return

        logger.info(f"Session change ({event}) for {identity.id}; re-resolving profile")
        self._known_session = identity.id
        self._publish(self.pipeline.result_model.loading(session_id=identity.id))

        task = self._loop.create_task(self.resolve())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _is_stale(self, attempt: _Attempt) -> bool:
        if attempt.epoch != self._epoch:
            return True
        if self._known_session is _UNKNOWN or attempt.session_id is None:
            return False
        return attempt.session_id != self._known_session

    # ============================================================
    # Resolution
    # ============================================================
    async def _attempt(self, attempt: _Attempt) -> ResolutionResult:
        model = self.pipeline.result_model

        try:
            identity = await self.session_provider.get_current_session()
        except Exception as e:
            logger.warning(f"Session lookup failed: {extract_supabase_error(e)}")
            identity = None

        if identity is None:
            return model.failed(ResolutionErrorKind.not_authenticated)

        attempt.session_id = identity.id

        try:
            return await self.pipeline.lookup(identity)
        except Exception as e:
            logger.error(
                f"Error resolving profile for {identity.id}: {extract_supabase_error(e)}",
                exc_info=True,
            )
            return model.failed(ResolutionErrorKind.store_failure, session_id=identity.id)

    async def resolve(self) -> ResolutionResult:
        """
        Resolve the current session to a profile and publish the result.
        Never raises. If the session changed while the attempt was in
        flight, its result is dropped and the current result is returned.
        """
        attempt = _Attempt(self._epoch)
        result = await self._attempt(attempt)

        if self._is_stale(attempt):
            logger.debug(f"Discarding stale resolution for session {attempt.session_id}")
            return self._result

        self._publish(result)
        return result

    async def refresh(self) -> ResolutionResult:
        """Re-resolve unconditionally (e.g. after profile linkage changed)."""
        return await self.resolve()

    # ============================================================
    # Development fallback
    # ============================================================
    def apply_dev_fallback(
        self, result: ResolutionResult, mock_id: Optional[str]
    ) -> ResolutionResult:
        if self.is_production or not mock_id:
            return result
        if result.is_loading or result.error not in MOCKABLE_ERRORS:
            return result

        logger.warning(f"Using mock profile id {mock_id} ({result.error})")
        return result.as_mock(mock_id)

    async def resolve_with_dev_fallback(self, mock_id: Optional[str] = None) -> ResolutionResult:
        """
        resolve(), then outside production substitute `mock_id` when nobody
        is signed in or no profile matched. The published result is left
        untouched; the substitute is only returned.

        If the attempt was superseded by a session change, resolve() hands
        back the current result, which may still be loading; a loading
        result is returned as-is, never mocked.
        """
        result = await self.resolve()
        return self.apply_dev_fallback(result, mock_id)
