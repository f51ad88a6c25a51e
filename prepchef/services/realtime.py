"""
Realtime change subscriptions.

Subscribes a callback to every postgres change event (INSERT, UPDATE,
DELETE) on one public table. Delivery is handled entirely by Supabase
Realtime; RLS still decides which rows the caller hears about.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from prepchef.errors import error_message

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)


async def create_realtime_channel(
    db: "DatabaseService",
    table: str,
    callback: Callable[[Dict[str, Any]], None],
) -> Any:
    """
    Open channel ``public:<table>`` and forward change payloads to ``callback``.

    Args:
        db: The DatabaseService
        table: Table name in the public schema
        callback: Receives each change payload

    Returns:
        The subscribed channel (call ``unsubscribe()`` on it to stop)

    Raises:
        Exception: Channel creation or subscription errors, after logging
    """
    def _on_status(status: Any, err: Optional[Exception] = None) -> None:
        status_label = getattr(status, "value", status)
        if err is not None:
            logger.error(f"Realtime channel for '{table}': {status_label} ({error_message(err)})")
        else:
            logger.info(f"Realtime channel for '{table}': {status_label}")

    try:
        channel = db.require_client().channel(f"public:{table}")
        channel.on_postgres_changes("*", schema="public", table=table, callback=callback)
        await channel.subscribe(_on_status)
    except Exception as exc:
        logger.error(f"Failed to create realtime channel for '{table}': {error_message(exc)}")
        raise

    return channel
