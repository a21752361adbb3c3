# models/session.py

from typing import Optional
from pydantic import BaseModel, validator


class SessionIdentity(BaseModel):
    """
    The identity Supabase Auth established for the caller.
    Only `id` and `email` matter for profile resolution.
    """
    id: str
    email: Optional[str] = None

    @validator("id", pre=True)
    def normalize_id(cls, v):
        return str(v)

    # Blank email → None so the fallback lookup is skipped
    @validator("email", pre=True)
    def normalize_email(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @classmethod
    def from_auth_user(cls, user) -> Optional["SessionIdentity"]:
        """Build from a supabase_auth User (or anything with .id / .email)."""
        if user is None or not getattr(user, "id", None):
            return None
        return cls(id=user.id, email=getattr(user, "email", None))
