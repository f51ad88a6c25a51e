"""
DatabaseService: the single entry point to the hosted backend.

One instance is created at process start (see prepchef.main) with the
Supabase client injected, then ``initialize()`` is called once. Entity
services receive the instance as their first argument.

Every remote operation goes through ``execute()``, which:
1. Ensures the backend is reachable (memoized per session)
2. Ensures the signed-in user has a profile row
3. Runs the operation
4. Logs and reclassifies backend failures into RemoteOperationError
"""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, TypeVar, cast

from pydantic import ValidationError as PydanticValidationError
from supabase import AsyncClient

from prepchef.config import Settings, settings as default_settings
from prepchef.db.client import create_supabase_client
from prepchef.errors import (
    AuthRequiredError,
    ConnectionUnavailableError,
    DataServiceError,
    RemoteOperationError,
    ValidationError,
    classify_remote_error,
    error_message,
)
from prepchef.schemas.auth import Identity
from prepchef.services.mapping import is_complete_row
from prepchef.services.operation_guard import OperationGuard, derive_operation_key
from prepchef.services.session import SessionManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseService:
    """
    Owns the Supabase client, the session manager and the operation guard.

    Args:
        client: Supabase AsyncClient (a fake in tests), or None when the
            process is not configured
        settings: Application settings
        clock: Monotonic clock used by the duplicate-suppression window
    """

    def __init__(
        self,
        client: Optional[AsyncClient],
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.settings = settings or default_settings
        self.guard = OperationGuard(self.settings.DUPLICATE_WINDOW_MS, clock=clock)
        self.session = SessionManager(client, self.settings, on_invalidate=self.guard.reset)

    @classmethod
    async def create(cls, settings: Optional[Settings] = None) -> "DatabaseService":
        """Build the client from settings and wrap it. Does not initialize."""
        settings = settings or default_settings
        client = await create_supabase_client(settings)
        return cls(client, settings)

    async def initialize(self) -> None:
        """Load the current session and subscribe to auth changes (once per process)."""
        await self.session.initialize()

    @property
    def current_identity(self) -> Optional[Identity]:
        return self.session.identity

    def require_client(self) -> AsyncClient:
        if self.client is None:
            raise ConnectionUnavailableError(
                "Database connection not available. Please check your Supabase configuration."
            )
        return self.client

    def require_identity(self, action: str) -> Identity:
        identity = self.session.identity
        if identity is None:
            raise AuthRequiredError(f"Authentication required to {action}")
        return identity

    def _user_label(self) -> str:
        identity = self.session.identity
        return identity.id if identity else "unauthenticated"

    async def execute(self, operation: str, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Run a remote operation with the connection / profile pre-flight.

        Args:
            operation: Name used in logs, e.g. "save_prep_list"
            fn: Coroutine function issuing the backend call(s)

        Returns:
            Whatever ``fn`` returns

        Raises:
            ConnectionUnavailableError: If the reachability check fails
            DataServiceError: Local errors raised by ``fn`` pass through
            RemoteOperationError: Any backend failure, reclassified
        """
        try:
            if not await self.session.ensure_connected():
                raise ConnectionUnavailableError(
                    "Database connection not available. "
                    "Please check your Supabase configuration."
                )
            if self.session.identity is not None:
                await self.session.ensure_profile()
            return await fn()
        except DataServiceError as exc:
            logger.warning(f"[{operation}] {exc.__class__.__name__}: {exc} (user={self._user_label()})")
            raise
        except Exception as exc:
            logger.error(
                f"[{operation}] Operation failed: "
                f"code={getattr(exc, 'code', None)} "
                f"message={error_message(exc)} "
                f"details={getattr(exc, 'details', None)} "
                f"hint={getattr(exc, 'hint', None)} "
                f"user={self._user_label()}"
            )
            raise classify_remote_error(exc) from exc

    async def upsert_row(
        self,
        operation: str,
        table: str,
        row: Dict[str, Any],
        key: str,
        duplicate_result: T,
        from_row: Callable[[Mapping[str, Any]], T],
    ) -> T:
        """
        Guarded upsert-by-id of an already sanitized row.

        Returns:
            from_row(stored row), or ``duplicate_result`` if the same row was
            written under the same key inside the duplicate window
        """
        async def _upsert() -> T:
            result = await (
                self.require_client().table(table)
                .upsert(row, on_conflict="id", ignore_duplicates=False)
                .execute()
            )
            if not result.data:
                raise RemoteOperationError(f"Upsert into {table} returned no data")
            logger.info(f"[{operation}] Saved {table} row {row.get('id')}")
            return from_row(cast(Dict[str, Any], result.data[0]))

        async def _write() -> T:
            return await self.execute(operation, _upsert)

        return await self.guard.run_write(key, row, _write, duplicate_result, entity_id=row.get("id"))

    async def select_rows(
        self,
        operation: str,
        table: str,
        order_by: str,
        from_row: Callable[[Mapping[str, Any]], T],
    ) -> List[T]:
        """
        Select every visible row, newest first.

        Rows without an id or name, and rows that fail mapping, are skipped
        and logged; they never fail the whole load.

        Returns:
            Mapped entities; [] for an empty table or an RLS-filtered result
        """
        async def _select() -> List[T]:
            if self.session.identity is None:
                logger.warning(
                    f"Loading {table} without authentication - "
                    "may return empty results due to RLS"
                )
            result = await (
                self.require_client().table(table)
                .select("*")
                .order(order_by, desc=True)
                .execute()
            )
            rows = cast(List[Dict[str, Any]], result.data or [])
            entities: List[T] = []
            for row in rows:
                if not is_complete_row(row):
                    continue
                try:
                    entities.append(from_row(row))
                except PydanticValidationError as exc:
                    logger.warning(
                        f"[{operation}] Skipped {table} row {row.get('id')}: "
                        f"{exc.error_count()} invalid field(s)"
                    )
            skipped = len(rows) - len(entities)
            if skipped:
                logger.warning(f"[{operation}] Skipped {skipped} incomplete or invalid {table} rows")
            logger.info(f"[{operation}] Loaded {len(entities)} {table} rows")
            return entities

        return await self.execute(operation, _select)

    async def delete_row(self, operation: str, table: str, entity_id: Any) -> None:
        """
        Guarded delete by id.

        Raises:
            ValidationError: If the id is blank
            AuthRequiredError: If no user is signed in
        """
        entity_id = str(entity_id).strip() if entity_id is not None else ""
        if not entity_id:
            raise ValidationError("Valid ID required for deletion")
        self.require_identity(f"delete from {table}")

        async def _delete() -> None:
            await self.require_client().table(table).delete().eq("id", entity_id).execute()
            # A later re-save of this id must not be mistaken for a duplicate
            self.guard.forget_entity(entity_id)
            logger.info(f"[{operation}] Deleted {table} row {entity_id}")

        key = derive_operation_key(operation, entity_id)
        await self.guard.execute_with_lock(key, lambda: self.execute(operation, _delete))
