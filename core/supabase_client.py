# core/supabase_client.py

from typing import Optional

from supabase import acreate_client, AsyncClient
from core.config import settings
from core.logging_config import logger


# ============================================================
# Supabase Client Factory (ALWAYS service role)
# ============================================================

async def get_supabase_client() -> Optional[AsyncClient]:
    """
    Creates an async Supabase client using the SERVICE ROLE KEY.
    Used for:
        - auth.get_user(token) (bearer validation)
        - read-only lookups on residents / users / employees / security_guards

    Returns None when credentials are missing so callers can answer 500
    instead of crashing at import time.
    """
    try:
        supabase_url = settings.SUPABASE_URL
        supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY  # MUST be service-role

        if not supabase_url or not supabase_key:
            logger.error("Missing Supabase credentials")
            logger.error(f"   URL: {supabase_url}")
            logger.error(f"   SERVICE ROLE KEY: {'SET' if supabase_key else 'MISSING'}")
            return None

        return await acreate_client(supabase_url, supabase_key)

    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


# ============================================================
# Ping Supabase for health checks
# ============================================================

async def ping_supabase() -> dict:
    """
    Simple connectivity check against the profile tables.
    Does NOT query auth tables.
    """
    try:
        client = await get_supabase_client()
        if client is None:
            return {"service": "Supabase", "status": "not_configured"}

        tables = [
            settings.RESIDENTS_TABLE,
            settings.USERS_TABLE,
            settings.EMPLOYEES_TABLE,
            settings.GUARDS_TABLE,
        ]
        results = {}

        for t in tables:
            try:
                res = await client.table(t).select("id").limit(1).execute()
                results[t] = {
                    "status": "ok",
                    "rows_found": len(res.data or [])
                }
            except Exception as err:
                results[t] = {"status": "error", "detail": str(err)}

        status = "ok" if all(r["status"] == "ok" for r in results.values()) else "degraded"

        return {
            "service": "Supabase",
            "status": status,
            "tables": results,
        }

    except Exception as e:
        logger.error(f"Supabase Ping Error: {e}", exc_info=True)
        return {"service": "Supabase", "status": "error", "detail": str(e)}
