"""
Authentication helpers.

Thin wrappers over Supabase Auth. Auth failures are reported through
AuthResult rather than raised, so sign-in forms can show the message
directly. Successful transitions reset the session caches.
"""

import logging
from typing import TYPE_CHECKING, Optional

from prepchef.errors import error_message
from prepchef.schemas.auth import AuthResult, Identity

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)


async def sign_up(
    db: "DatabaseService",
    email: str,
    password: str,
    full_name: Optional[str] = None
) -> AuthResult:
    """
    Register a new user and create their profile when a user is returned.

    Args:
        db: The DatabaseService
        email: Login email
        password: Plain password (never logged)
        full_name: Stored in user metadata and copied to the profile

    Returns:
        AuthResult(success=True) or AuthResult(success=False, error=...)
    """
    try:
        response = await db.require_client().auth.sign_up({
            "email": email,
            "password": password,
            "options": {"data": {"full_name": full_name}},
        })
    except Exception as exc:
        logger.error(f"Sign up failed: {error_message(exc)}")
        return AuthResult(success=False, error=error_message(exc))

    identity = Identity.from_user(getattr(response, "user", None))
    if identity is not None and getattr(response, "session", None) is not None:
        db.session.set_identity(identity)
        await db.session.ensure_profile()
    else:
        # Email confirmation pending: no session yet, profile is created on first sign in
        db.session.reset_connection()

    logger.info("Sign up succeeded")
    return AuthResult(success=True)


async def sign_in(db: "DatabaseService", email: str, password: str) -> AuthResult:
    """
    Sign in with email and password.

    Returns:
        AuthResult(success=True) or AuthResult(success=False, error=...)
    """
    try:
        response = await db.require_client().auth.sign_in_with_password({
            "email": email,
            "password": password,
        })
    except Exception as exc:
        logger.error(f"Sign in failed: {error_message(exc)}")
        return AuthResult(success=False, error=error_message(exc))

    identity = Identity.from_user(getattr(response, "user", None))
    db.session.set_identity(identity)
    if identity is not None:
        await db.session.ensure_profile()

    logger.info(f"Sign in succeeded for user {identity.id if identity else 'unknown'}")
    return AuthResult(success=True)


async def sign_out(db: "DatabaseService") -> AuthResult:
    """Sign out and drop identity, profile and connection caches."""
    try:
        await db.require_client().auth.sign_out()
    except Exception as exc:
        logger.error(f"Sign out failed: {error_message(exc)}")
        return AuthResult(success=False, error=error_message(exc))

    db.session.set_identity(None)
    logger.info("Signed out")
    return AuthResult(success=True)


def get_current_user(db: "DatabaseService") -> Optional[Identity]:
    return db.session.identity
