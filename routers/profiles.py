# routers/profiles.py

from typing import Optional
from fastapi import APIRouter, Depends, Query

from core.config import settings
from dependencies.auth import get_profile_store, get_session_provider
from models.profile import EmployeeResolution, ResidentResolution
from services.identity_resolution import IdentityResolutionService
from services.lookup import EmployeeLookup, ResidentLookup
from services.profile_store import ProfileStore
from services.session_provider import SessionProvider


router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
)


# -------------------------------------------------------------
# Shared: one-shot resolution for the caller's bearer token
# -------------------------------------------------------------
async def resolve_for_request(
    session_provider: SessionProvider,
    pipeline,
    mock_id: Optional[str],
):
    service = IdentityResolutionService(
        session_provider,
        pipeline,
        is_production=not settings.is_development,
    )
    return await service.resolve_with_dev_fallback(mock_id)


# -------------------------------------------------------------
# GET /profiles/resident/me
# -------------------------------------------------------------
@router.get(
    "/resident/me",
    response_model=ResidentResolution,
    summary="Resident profile for the authenticated user",
)
async def read_resident_profile(
    mock_id: Optional[str] = Query(None, description="Development only; ignored in production"),
    session_provider: SessionProvider = Depends(get_session_provider),
    store: ProfileStore = Depends(get_profile_store),
):
    """
    Resolves auth user → resident (auth_user_id, then legacy email match).
    Failures are reported in `error` / `error_message`, never as HTTP errors.
    """
    return await resolve_for_request(
        session_provider,
        ResidentLookup(store),
        mock_id or settings.DEV_MOCK_RESIDENT_ID,
    )


# -------------------------------------------------------------
# GET /profiles/employee/me
# -------------------------------------------------------------
@router.get(
    "/employee/me",
    response_model=EmployeeResolution,
    summary="Employee / guard profile for the authenticated user",
)
async def read_employee_profile(
    mock_id: Optional[str] = Query(None, description="Development only; ignored in production"),
    session_provider: SessionProvider = Depends(get_session_provider),
    store: ProfileStore = Depends(get_profile_store),
):
    return await resolve_for_request(
        session_provider,
        EmployeeLookup(store),
        mock_id or settings.DEV_MOCK_EMPLOYEE_ID,
    )
