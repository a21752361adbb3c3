# services/lookup.py

from typing import Optional

from pydantic import ValidationError

from core.config import settings
from core.logging_config import logger
from models.enums import ResolutionErrorKind
from models.profile import (
    EmployeeRecord,
    EmployeeResolution,
    GuardRecord,
    ResidentRecord,
    ResidentResolution,
    UserRecord,
)
from models.session import SessionIdentity
from services.profile_store import Found, LookupOutcome, NotFound, ProfileStore, StoreError


def parse_row(outcome: LookupOutcome, model) -> LookupOutcome:
    """Turn Found(row) into Found(record); a row that fails validation is a StoreError."""
    if not isinstance(outcome, Found):
        return outcome
    try:
        return Found(row=model.model_validate(outcome.row))
    except ValidationError as e:
        logger.error(f"Unexpected {model.__name__} row shape: {e}")
        return StoreError(detail=str(e), error=e)


# ============================================================
# Residents: auth_user_id first, email as legacy fallback
# ============================================================

class ResidentLookup:
    """
    Two-stage resident resolution.

    1. Primary: active resident whose auth_user_id is the session id.
    2. Fallback (legacy rows without auth_user_id): active resident whose
       email is the session email. Runs only when stage 1 found nothing;
       a store failure in stage 1 is reported as-is.
    """

    result_model = ResidentResolution
    COLUMNS = "id, resident_code, full_name, flat_id, auth_user_id, email, is_active"

    def __init__(self, store: ProfileStore, table: Optional[str] = None):
        self.store = store
        self.table = table or settings.RESIDENTS_TABLE

    async def by_session(self, identity: SessionIdentity) -> LookupOutcome:
        outcome = await self.store.find_first(
            self.table,
            self.COLUMNS,
            {"auth_user_id": identity.id, "is_active": True},
        )
        return parse_row(outcome, ResidentRecord)

    async def by_email(self, identity: SessionIdentity) -> LookupOutcome:
        if not identity.email:
            return NotFound()

        outcome = parse_row(
            await self.store.find_first(
                self.table,
                self.COLUMNS,
                {"email": identity.email, "is_active": True},
            ),
            ResidentRecord,
        )

        # A row already claimed by another auth user is not ours to bind
        if isinstance(outcome, Found):
            linked = outcome.row.linked_session_id
            if linked is not None and linked != identity.id:
                logger.warning(
                    f"Resident {outcome.row.profile_id} matches email of session {identity.id} "
                    f"but is linked to session {linked}; refusing email match"
                )
                return NotFound()

        return outcome

    async def lookup(self, identity: SessionIdentity) -> ResidentResolution:
        primary = await self.by_session(identity)

        if isinstance(primary, Found):
            return ResidentResolution.from_record(primary.row, session_id=identity.id)

        if isinstance(primary, StoreError):
            logger.error(f"Error fetching resident profile for {identity.id}: {primary.detail}")
            return ResidentResolution.failed(
                ResolutionErrorKind.store_failure, session_id=identity.id
            )

        fallback = await self.by_email(identity)

        if isinstance(fallback, Found):
            logger.info(f"Resident {fallback.row.profile_id} resolved by legacy email match")
            return ResidentResolution.from_record(fallback.row, session_id=identity.id)

        if isinstance(fallback, StoreError):
            logger.error(f"Error in email fallback for {identity.id}: {fallback.detail}")
            return ResidentResolution.failed(
                ResolutionErrorKind.store_failure, session_id=identity.id
            )

        return ResidentResolution.failed(
            ResolutionErrorKind.profile_not_found, session_id=identity.id
        )


# ============================================================
# Employees: users → employees → security_guards
# ============================================================

class EmployeeLookup:
    """
    Resolve the employee (and guard, if any) behind a session.

    users.id is the auth user id. A user without employee_id is reported as
    profile_not_linked, keeping full_name and role. Not being a guard is
    normal; only a failing guard query is an error.
    """

    result_model = EmployeeResolution
    USER_COLUMNS = "id, employee_id, full_name, roles(role_name)"
    EMPLOYEE_COLUMNS = "id, employee_code, first_name, last_name"
    GUARD_COLUMNS = "id, guard_code"

    NOT_SET_UP = "User profile not set up. Please contact admin."

    def __init__(self, store: ProfileStore):
        self.store = store

    def _store_failure(self, identity: SessionIdentity, stage: str, detail: str):
        logger.error(f"Error fetching {stage} for {identity.id}: {detail}")
        return EmployeeResolution.failed(
            ResolutionErrorKind.store_failure, session_id=identity.id
        )

    async def lookup(self, identity: SessionIdentity) -> EmployeeResolution:
        user = parse_row(
            await self.store.find_first(
                settings.USERS_TABLE, self.USER_COLUMNS, {"id": identity.id}
            ),
            UserRecord,
        )
        if isinstance(user, NotFound):
            return EmployeeResolution.failed(
                ResolutionErrorKind.profile_not_found,
                session_id=identity.id,
                message=self.NOT_SET_UP,
            )
        if isinstance(user, StoreError):
            return self._store_failure(identity, "user record", user.detail)

        user_record: UserRecord = user.row
        if not user_record.employee_id:
            return EmployeeResolution.failed(
                ResolutionErrorKind.profile_not_linked,
                session_id=identity.id,
                full_name=user_record.full_name,
                role=user_record.role,
            )

        employee = parse_row(
            await self.store.find_first(
                settings.EMPLOYEES_TABLE,
                self.EMPLOYEE_COLUMNS,
                {"id": user_record.employee_id},
            ),
            EmployeeRecord,
        )
        # users.employee_id points at nothing: broken data, not a missing profile
        if isinstance(employee, NotFound):
            return self._store_failure(
                identity, "employee", f"employee {user_record.employee_id} does not exist"
            )
        if isinstance(employee, StoreError):
            return self._store_failure(identity, "employee", employee.detail)

        guard = parse_row(
            await self.store.find_first(
                settings.GUARDS_TABLE,
                self.GUARD_COLUMNS,
                {"employee_id": user_record.employee_id},
            ),
            GuardRecord,
        )
        if isinstance(guard, StoreError):
            return self._store_failure(identity, "guard", guard.detail)

        employee_record: EmployeeRecord = employee.row
        guard_record: Optional[GuardRecord] = guard.row if isinstance(guard, Found) else None

        return EmployeeResolution(
            employee_id=user_record.employee_id,
            guard_id=guard_record.id if guard_record else None,
            guard_code=guard_record.guard_code if guard_record else None,
            employee_code=employee_record.employee_code,
            full_name=employee_record.full_name,
            role=user_record.role,
            is_loading=False,
            session_id=identity.id,
        )
