"""
Pydantic schemas for user profiles.

Profiles are 1:1 with auth.users (user_profiles.id = auth user id) and carry
the company_id that scopes shared data.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from prepchef.schemas.common import as_str

# Profile role enum (matches DB CHECK constraint)
ProfileRole = Literal["user", "admin", "owner"]
PROFILE_ROLES = ("user", "admin", "owner")


class UserProfile(BaseModel):
    """
    Row of the user_profiles table.
    """
    id: str = Field(..., description="User UUID (from auth.users)")
    email: str = Field("", description="Login email")
    full_name: Optional[str] = Field(None, description="Display name")
    company_id: Optional[str] = Field(None, description="Company the user belongs to")
    avatar_url: Optional[str] = Field(None, description="Public URL to user's avatar image")
    role: ProfileRole = Field("user", description="Role within the company")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value: Any) -> str:
        return as_str(value)

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, value: Any) -> Any:
        return value if value in PROFILE_ROLES else "user"


class ProfileUpdate(BaseModel):
    """
    Fields a user may change on their own profile.

    Only fields that were explicitly set are sent to the backend.
    """
    full_name: Optional[str] = Field(None, max_length=200)
    company_id: Optional[str] = None
    avatar_url: Optional[str] = None
