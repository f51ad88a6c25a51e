"""
User profile service.

Handles fetching, creating and updating rows of the user_profiles table.
Profiles are 1:1 with auth.users and carry the company_id used for sharing.

The row helpers take a Supabase client directly (they are used by the
SessionManager's profile cache); the public operations take the
DatabaseService.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union, cast

from supabase import AsyncClient

from prepchef.errors import AuthRequiredError, ValidationError
from prepchef.schemas.profile import ProfileUpdate, UserProfile

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)

PROFILES_TABLE = "user_profiles"


def profile_from_row(row: Mapping[str, Any]) -> UserProfile:
    """Map a user_profiles row to a UserProfile."""
    return UserProfile(
        id=str(row.get("id") or ""),
        email=row.get("email"),
        full_name=row.get("full_name"),
        company_id=row.get("company_id"),
        avatar_url=row.get("avatar_url"),
        role=row.get("role"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def fetch_profile_row(
    supabase_client: AsyncClient,
    user_id: str
) -> Optional[Dict[str, Any]]:
    """
    Fetch the profile row for a user.

    Args:
        supabase_client: Supabase client with the user's session
        user_id: The authenticated user's ID

    Returns:
        The profile row, or None if not found

    Security:
        - RLS enforces id = auth.uid()
    """
    logger.debug(f"Fetching profile for user {user_id}")

    result = await (
        supabase_client.table(PROFILES_TABLE)
        .select("*")
        .eq("id", user_id)
        .limit(1)
        .execute()
    )

    if not result.data:
        logger.info(f"Profile not found for user {user_id}")
        return None

    return cast(Dict[str, Any], result.data[0])


async def upsert_profile_row(
    supabase_client: AsyncClient,
    profile_data: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Create the profile row, converging with concurrent creators on the id.

    Args:
        supabase_client: Supabase client with the user's session
        profile_data: Row to write; must contain "id"

    Returns:
        The stored profile row

    Raises:
        Exception: If the backend returns no row
    """
    logger.info(f"Creating profile for user {profile_data.get('id')}")

    result = await (
        supabase_client.table(PROFILES_TABLE)
        .upsert(profile_data, on_conflict="id")
        .execute()
    )

    if not result.data:
        raise Exception("Failed to create profile: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def get_user_profile(db: "DatabaseService") -> Optional[UserProfile]:
    """
    Current user's profile, created on first access.

    Returns:
        The profile, or None when signed out or the profile cannot be loaded
    """
    if db.session.identity is None:
        return None
    return await db.session.ensure_profile()


def get_current_user_profile(db: "DatabaseService") -> Optional[UserProfile]:
    """Cached profile only; never touches the network."""
    return db.session.profile


async def update_user_profile(
    db: "DatabaseService",
    updates: Union[ProfileUpdate, Mapping[str, Any]]
) -> UserProfile:
    """
    Update the current user's full_name, company_id and avatar_url.

    Args:
        db: The DatabaseService
        updates: Fields to change; unset fields are left alone

    Returns:
        The updated profile (also stored in the session cache)

    Raises:
        AuthRequiredError: If no user is signed in
        ValidationError: If no updatable field was provided
    """
    identity = db.session.identity
    if identity is None:
        raise AuthRequiredError("Authentication required to update profile")

    if not isinstance(updates, ProfileUpdate):
        updates = ProfileUpdate.model_validate(dict(updates))
    changes = updates.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No profile fields provided to update")

    async def _update() -> UserProfile:
        logger.info(f"Updating profile for user {identity.id}: {list(changes.keys())}")
        result = await (
            db.require_client().table(PROFILES_TABLE)
            .update(changes)
            .eq("id", identity.id)
            .execute()
        )
        if not result.data:
            raise Exception("Failed to update profile: no data returned")
        profile = profile_from_row(cast(Dict[str, Any], result.data[0]))
        db.session.profile = profile
        return profile

    return await db.execute("update_user_profile", _update)


async def get_users_by_company(db: "DatabaseService", company_id: str) -> List[UserProfile]:
    """
    Profiles of everyone in a company (as far as RLS lets the caller see).

    Raises:
        AuthRequiredError: If no user is signed in
        ValidationError: If company_id is blank
    """
    if db.session.identity is None:
        raise AuthRequiredError("Authentication required")
    company_id = (company_id or "").strip()
    if not company_id:
        raise ValidationError("Valid company ID required")

    async def _load() -> List[UserProfile]:
        result = await (
            db.require_client().table(PROFILES_TABLE)
            .select("*")
            .eq("company_id", company_id)
            .execute()
        )
        rows = cast(List[Dict[str, Any]], result.data or [])
        return [profile_from_row(row) for row in rows if row and row.get("id")]

    return await db.execute("get_users_by_company", _load)
