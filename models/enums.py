from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# SESSION EVENT
# -----------------------------------------------------
class SessionEvent(BaseStrEnum):
    """Auth state transitions reported by Supabase GoTrue."""

    initial_session = "INITIAL_SESSION"
    signed_in = "SIGNED_IN"
    signed_out = "SIGNED_OUT"
    token_refreshed = "TOKEN_REFRESHED"
    user_updated = "USER_UPDATED"
    password_recovery = "PASSWORD_RECOVERY"


# -----------------------------------------------------
# RESOLUTION ERROR KIND
# -----------------------------------------------------
class ResolutionErrorKind(BaseStrEnum):
    """Why a session identity could not be bound to a profile."""

    not_authenticated = "not_authenticated"
    profile_not_found = "profile_not_found"
    profile_not_linked = "profile_not_linked"  # employees: users row without employee_id
    store_failure = "store_failure"


# -----------------------------------------------------
# RESOLUTION STATE
# -----------------------------------------------------
class ResolutionState(BaseStrEnum):
    idle = "idle"
    loading = "loading"
    resolved = "resolved"
    error = "error"
