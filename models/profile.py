# models/profile.py

from typing import ClassVar, Optional
from pydantic import BaseModel, Field, validator

from models.enums import ResolutionErrorKind, ResolutionState


ERROR_MESSAGES = {
    ResolutionErrorKind.not_authenticated: "Not authenticated",
    ResolutionErrorKind.profile_not_found: "No resident profile found. Please contact support.",
    ResolutionErrorKind.profile_not_linked: "No employee record linked",
    ResolutionErrorKind.store_failure: "Failed to load profile",
}


def _str_or_none(v):
    return None if v is None else str(v)


# ===============================================================
# STORE RECORDS (Supabase rows → typed records)
# ===============================================================

class ResidentRecord(BaseModel):
    """
    One row of the `residents` table.

    `auth_user_id` is the new-schema link to auth.users; rows created before
    that column existed are matched by `email` instead.
    """
    profile_id: str = Field(alias="id")
    display_code: Optional[str] = Field(None, alias="resident_code")
    full_name: Optional[str] = None
    parent_unit_id: Optional[str] = Field(None, alias="flat_id")
    linked_session_id: Optional[str] = Field(None, alias="auth_user_id")
    contact_email: Optional[str] = Field(None, alias="email")
    is_active: bool = True

    # UUID → str always
    @validator("profile_id", "parent_unit_id", "linked_session_id", pre=True)
    def normalize_ids(cls, v):
        return _str_or_none(v)

    class Config:
        populate_by_name = True


class UserRecord(BaseModel):
    """Row of the `users` table with the embedded `roles(role_name)` relation."""
    id: str
    employee_id: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = Field(None, alias="roles")

    @validator("id", "employee_id", pre=True)
    def normalize_ids(cls, v):
        return _str_or_none(v)

    # PostgREST returns the embed as an object (many-to-one) or a list
    @validator("role", pre=True)
    def extract_role_name(cls, v):
        if isinstance(v, list):
            v = v[0] if v else None
        if isinstance(v, dict):
            return v.get("role_name")
        return v

    class Config:
        populate_by_name = True


class EmployeeRecord(BaseModel):
    id: str
    employee_code: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @validator("id", pre=True)
    def normalize_id(cls, v):
        return _str_or_none(v)

    @property
    def full_name(self) -> Optional[str]:
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return " ".join(parts) or None


class GuardRecord(BaseModel):
    id: str
    guard_code: Optional[str] = None

    @validator("id", pre=True)
    def normalize_id(cls, v):
        return _str_or_none(v)


# ===============================================================
# RESOLUTION RESULTS (component-owned, never persisted)
# ===============================================================

class ResolutionResult(BaseModel):
    """
    Materialized outcome of binding a session identity to a profile.

    Subclasses declare PROFILE_KEY, the field that carries the profile's
    primary id (and receives the mock id in development).
    """
    PROFILE_KEY: ClassVar[str] = ""

    is_loading: bool = False
    error: Optional[ResolutionErrorKind] = None
    error_message: Optional[str] = None
    is_mock: bool = False
    session_id: Optional[str] = None

    @property
    def profile_key_value(self) -> Optional[str]:
        return getattr(self, self.PROFILE_KEY, None)

    @property
    def state(self) -> ResolutionState:
        if self.is_loading:
            return ResolutionState.loading
        if self.error is not None:
            return ResolutionState.error
        if self.profile_key_value is not None:
            return ResolutionState.resolved
        return ResolutionState.idle

    # -------------------------------------------------
    # Constructors
    # -------------------------------------------------
    @classmethod
    def idle(cls):
        return cls()

    @classmethod
    def loading(cls, session_id: Optional[str] = None):
        return cls(is_loading=True, session_id=session_id)

    @classmethod
    def failed(cls, kind: ResolutionErrorKind, session_id: Optional[str] = None,
               message: Optional[str] = None, **fields):
        return cls(
            is_loading=False,
            error=kind,
            error_message=message or ERROR_MESSAGES[kind],
            session_id=session_id,
            **fields,
        )

    def as_mock(self, mock_id: str):
        """Development substitute: keep everything else, swap in the mock id."""
        return self.model_copy(update={
            self.PROFILE_KEY: mock_id,
            "is_loading": False,
            "error": None,
            "error_message": None,
            "is_mock": True,
        })


class ResidentResolution(ResolutionResult):
    PROFILE_KEY: ClassVar[str] = "profile_id"

    profile_id: Optional[str] = None
    display_code: Optional[str] = None
    full_name: Optional[str] = None
    parent_unit_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: ResidentRecord, session_id: Optional[str] = None):
        return cls(
            profile_id=record.profile_id,
            display_code=record.display_code,
            full_name=record.full_name,
            parent_unit_id=record.parent_unit_id,
            is_loading=False,
            session_id=session_id,
        )


class EmployeeResolution(ResolutionResult):
    PROFILE_KEY: ClassVar[str] = "employee_id"

    employee_id: Optional[str] = None
    guard_id: Optional[str] = None
    guard_code: Optional[str] = None
    employee_code: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_guard(self) -> bool:
        return self.guard_id is not None
