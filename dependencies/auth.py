from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import AsyncClient

from core.supabase_client import get_supabase_client
from services.profile_store import ProfileStore, SupabaseProfileStore
from services.session_provider import SessionProvider, TokenSessionProvider


# Missing Authorization header is allowed: the caller simply has no session
optional_bearer = HTTPBearer(auto_error=False)


# ============================================================
# BEARER TOKEN (optional)
# ============================================================
def get_optional_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer),
) -> Optional[str]:
    if not credentials:
        return None
    return credentials.credentials


# ============================================================
# SUPABASE CLIENT
# ============================================================
async def get_client() -> AsyncClient:
    client = await get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return client


# ============================================================
# SESSION PROVIDER + PROFILE STORE (request-scoped)
# ============================================================
async def get_session_provider(
    token: Optional[str] = Depends(get_optional_token),
    client: AsyncClient = Depends(get_client),
) -> SessionProvider:
    return TokenSessionProvider(client, token)


async def get_profile_store(
    client: AsyncClient = Depends(get_client),
) -> ProfileStore:
    return SupabaseProfileStore(client)
