# -------------------------
# Session
# -------------------------
from .session import SessionIdentity

# -------------------------
# Profile records + resolution results
# -------------------------
from .profile import (
    ResidentRecord,
    UserRecord,
    EmployeeRecord,
    GuardRecord,
    ResolutionResult,
    ResidentResolution,
    EmployeeResolution,
)

# -------------------------
# Enums
# -------------------------
from .enums import (
    SessionEvent,
    ResolutionErrorKind,
    ResolutionState,
)
