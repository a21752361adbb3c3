# services/profile_store.py

"""
Read-only access to the profile tables (residents, users, employees,
security_guards).

Every lookup answers with one of three tagged outcomes so callers can tell
"no rows" apart from a real failure:

    Found(row)        – first matching row, lowest primary key wins
    NotFound()        – zero rows (or PostgREST PGRST116)
    StoreError(detail) – anything else (network, permission, schema, timeout)

Duplicate rows are treated as a data-integrity problem in the store: the
lookup never merges them, it takes the first by `id` ascending.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Protocol, Union

from supabase import AsyncClient

from core.errors import extract_supabase_error, is_not_found_error
from core.logging_config import logger


# ============================================================
# Tagged outcomes
# ============================================================

@dataclass(frozen=True)
class Found:
    row: Any


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class StoreError:
    detail: str
    error: Exception = field(default=None, compare=False, repr=False)


LookupOutcome = Union[Found, NotFound, StoreError]


# ============================================================
# Store interface
# ============================================================

class ProfileStore(Protocol):
    async def find_first(
        self, table: str, columns: str, filters: Dict[str, Any]
    ) -> LookupOutcome:
        """Equality-filtered SELECT returning at most one row."""
        ...


# ============================================================
# Supabase implementation
# ============================================================

class SupabaseProfileStore:
    """ProfileStore backed by a supabase-py AsyncClient (PostgREST)."""

    ORDER_COLUMN = "id"

    def __init__(self, client: AsyncClient):
        self.client = client

    async def find_first(
        self, table: str, columns: str, filters: Dict[str, Any]
    ) -> LookupOutcome:
        try:
            query = self.client.table(table).select(columns)
            for key, val in filters.items():
                query = query.eq(key, val)

            result = await query.order(self.ORDER_COLUMN).limit(1).execute()

        except Exception as e:
            if is_not_found_error(e):
                return NotFound()

            detail = extract_supabase_error(e)
            logger.error(f"Profile store query on {table} failed: {detail}")
            return StoreError(detail=detail, error=e)

        rows = result.data or []
        if not rows:
            return NotFound()

        return Found(row=rows[0])
