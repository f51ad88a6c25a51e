"""
Session manager.

Tracks the signed-in identity, memoizes the "connection is usable" check and
caches the user's profile. All three caches are dropped on every auth-state
transition.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from postgrest.exceptions import APIError
from supabase import AsyncClient

from prepchef.config import Settings
from prepchef.errors import error_message, is_rls_error
from prepchef.schemas.auth import Identity
from prepchef.schemas.profile import UserProfile
from prepchef.services.profile_service import (
    fetch_profile_row,
    profile_from_row,
    upsert_profile_row,
)

logger = logging.getLogger(__name__)

# Table probed by the connection check
PROBE_TABLE = "prep_lists"


class SessionManager:
    """
    Identity, connection memo and profile cache for one process.

    Args:
        client: Supabase client, or None when configuration is missing
        settings: Application settings (used to detect missing secrets)
        on_invalidate: Called after every auth transition, after the
            session's own caches are cleared
    """

    def __init__(
        self,
        client: Optional[AsyncClient],
        settings: Settings,
        on_invalidate: Optional[Callable[[], None]] = None,
    ) -> None:
        self.client = client
        self.settings = settings
        self.profile: Optional[UserProfile] = None
        self._identity: Optional[Identity] = None
        self._on_invalidate = on_invalidate
        self._initialized = False
        self._init_lock = asyncio.Lock()
        self._connection: Optional["asyncio.Task[bool]"] = None
        self._subscription: Any = None

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Load the current session and subscribe to auth changes, once.

        Raises:
            Exception: Whatever the session fetch raised. The manager stays
                uninitialized so a later call can retry.
        """
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            if self.client is None:
                logger.warning("SessionManager initialized without a Supabase client")
                self._initialized = True
                return

            try:
                session = await self.client.auth.get_session()
            except Exception as exc:
                logger.error(f"Initialization failed: {error_message(exc)}")
                raise

            self._identity = Identity.from_user(getattr(session, "user", None))
            self._subscription = self.client.auth.on_auth_state_change(self.handle_auth_change)
            self._initialized = True
            logger.info("SessionManager initialized successfully")

    def handle_auth_change(self, event: Any, session: Any) -> None:
        """Auth-state listener: replace identity and drop every cache."""
        self._identity = Identity.from_user(getattr(session, "user", None))
        self.invalidate()
        logger.info(f"Auth state changed: {getattr(event, 'value', event)}")

    def set_identity(self, identity: Optional[Identity]) -> None:
        """Replace the identity directly (after sign in / sign out)."""
        self._identity = identity
        self.invalidate()

    def invalidate(self) -> None:
        self.profile = None
        self._connection = None
        if self._on_invalidate is not None:
            self._on_invalidate()

    def reset_connection(self) -> None:
        """Forget the connection check result; the next call re-probes."""
        self._connection = None

    async def ensure_connected(self) -> bool:
        """
        Check that the backend is reachable.

        Concurrent callers share one probe. A successful result is reused
        until the next auth transition or reset_connection(); failures are
        not remembered.

        Raises:
            Exception: If initialization fails (see initialize())
        """
        if self._connection is None:
            self._connection = asyncio.ensure_future(self._check_connection())
        return await asyncio.shield(self._connection)

    async def _check_connection(self) -> bool:
        connected = False
        try:
            await self.initialize()
            connected = await self._probe()
            return connected
        finally:
            if not connected and self._connection is asyncio.current_task():
                self._connection = None

    async def _probe(self) -> bool:
        if self.client is None or not self.settings.is_configured():
            logger.error("Missing Supabase configuration")
            return False

        try:
            await self.client.table(PROBE_TABLE).select("id").limit(1).execute()
        except APIError as exc:
            if is_rls_error(exc):
                logger.warning(
                    "RLS policy restricting access "
                    "(this is expected for unauthenticated users)"
                )
                user = self._identity.email if self._identity else "anonymous"
                logger.info(f"Connection successful, RLS policies active (user={user})")
                return True
            logger.error(f"Connection test failed: code={exc.code} message={error_message(exc)}")
            return False
        except Exception as exc:
            logger.error(f"Connection test error: {error_message(exc)}")
            return False

        logger.info("Connection test successful")
        return True

    async def ensure_profile(self) -> Optional[UserProfile]:
        """
        Fetch, or create, the signed-in user's profile.

        Returns:
            The profile; None when signed out or when the backend fails
            (a missing profile is never fatal to the caller)
        """
        identity = self._identity
        if identity is None:
            return None
        if self.profile is not None:
            return self.profile
        if self.client is None:
            return None

        try:
            row = await fetch_profile_row(self.client, identity.id)
            if row is None:
                row = await upsert_profile_row(
                    self.client,
                    {
                        "id": identity.id,
                        "email": identity.email or "",
                        "full_name": identity.full_name,
                        "role": "user",
                    },
                )
            profile = profile_from_row(row)
        except Exception as exc:
            logger.error(
                f"Error ensuring user profile for user {identity.id}: "
                f"code={getattr(exc, 'code', None)} message={error_message(exc)}"
            )
            return None

        # Only cache if nobody signed in or out meanwhile
        if self._identity is identity:
            self.profile = profile
        return profile
