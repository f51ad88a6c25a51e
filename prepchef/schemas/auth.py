"""
Schemas for the authenticated identity and auth helper results.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """
    The authenticated caller's session principal.

    Built from the Supabase auth ``User`` object; only the fields this layer
    reads are kept.
    """
    id: str = Field(..., description="auth.users id (equivalent to auth.uid())")
    email: Optional[str] = None
    role: Optional[str] = Field(None, description="Auth role, e.g. 'authenticated'")
    user_metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_user(cls, user: Any) -> Optional["Identity"]:
        """Build an Identity from a Supabase ``User`` (or any object with an id)."""
        if user is None or not getattr(user, "id", None):
            return None
        return cls(
            id=str(user.id),
            email=getattr(user, "email", None),
            role=getattr(user, "role", None),
            user_metadata=dict(getattr(user, "user_metadata", None) or {}),
        )

    @property
    def full_name(self) -> Optional[str]:
        value = self.user_metadata.get("full_name")
        return str(value) if value else None


class AuthResult(BaseModel):
    """Outcome of sign up / sign in / sign out. Auth failures are reported, not raised."""
    success: bool
    error: Optional[str] = None
