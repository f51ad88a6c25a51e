"""
Operation guard for entity-mutating calls.

Two protections against bursts of identical calls (double-submit UI events,
client retries):

- In-flight de-duplication: at most one call per operation key is pending.
  A second caller with the same key awaits the first caller's result instead
  of issuing its own remote call.
- Recent-duplicate suppression: after a successful write, the payload
  fingerprint is remembered for a short window. An identical write under the
  same key inside that window is skipped.

The window is a heuristic, not a consistency protocol: it does not order
out-of-order network responses and a genuine edit repeated inside the window
is dropped. Keep it short and configurable.
"""

import asyncio
import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Length of the payload digest used when an operation has no stable id
PAYLOAD_DIGEST_LENGTH = 16


def fingerprint_payload(payload: Any) -> str:
    """Canonical JSON serialization used to compare payloads."""
    return json.dumps(payload, sort_keys=True, default=str, separators=(",", ":"))


def derive_operation_key(
    operation: str,
    entity_id: Optional[str] = None,
    fingerprint: Optional[str] = None,
    payload: Any = None,
) -> str:
    """
    Build the lock / de-duplication key for an operation.

    Args:
        operation: Operation name, e.g. "save_prep_list"
        entity_id: Natural identity of the target row
        fingerprint: Extra content component (e.g. the name) appended to the id
        payload: Used only when there is no entity_id; hashed to a bounded key

    Returns:
        "operation:id", "operation:id:fingerprint", or "operation:#<digest>"

    Example:
        >>> derive_operation_key("save_prep_list", "p1", "Dinner Prep")
        'save_prep_list:p1:Dinner Prep'
    """
    entity_id = str(entity_id).strip() if entity_id is not None else ""
    if entity_id:
        if fingerprint:
            return f"{operation}:{entity_id}:{fingerprint}"
        return f"{operation}:{entity_id}"

    digest = hashlib.sha256(fingerprint_payload(payload).encode("utf-8")).hexdigest()
    return f"{operation}:#{digest[:PAYLOAD_DIGEST_LENGTH]}"


@dataclass
class RecentOperation:
    """A completed write remembered for duplicate suppression."""
    timestamp: float
    fingerprint: str
    entity_id: Optional[str] = None


class OperationGuard:
    """
    Per-key in-flight lock plus a short duplicate-suppression window.

    State is process-local and never persisted. ``reset()`` is called on every
    auth transition.
    """

    def __init__(
        self,
        duplicate_window_ms: int = 2000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.duplicate_window = max(duplicate_window_ms, 0) / 1000.0
        self._clock = clock
        self._in_flight: Dict[str, "asyncio.Task[Any]"] = {}
        self._recent: Dict[str, RecentOperation] = {}

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    async def execute_with_lock(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``fn`` unless a call with the same key is already pending.

        Args:
            key: Operation key from derive_operation_key
            fn: Zero-argument coroutine function performing the remote call

        Returns:
            The result of the single in-flight call for this key. Failures
            propagate to every caller waiting on it.
        """
        pending = self._in_flight.get(key)
        if pending is not None:
            logger.info(f"Operation {key} already in flight, joining pending call")
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._run(key, fn))
        self._in_flight[key] = task
        # Waiters are shielded: once issued, the remote call runs to completion
        return await asyncio.shield(task)

    async def _run(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            return await fn()
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

    def is_recent_duplicate(self, key: str, fingerprint: str) -> bool:
        """
        Check the duplicate window for ``key``.

        Expired entries are evicted here, on lookup; there is no sweeper.
        """
        entry = self._recent.get(key)
        if entry is None:
            return False
        if self._clock() - entry.timestamp >= self.duplicate_window:
            del self._recent[key]
            return False
        return entry.fingerprint == fingerprint

    def record(self, key: str, fingerprint: str, entity_id: Optional[str] = None) -> None:
        """
        Remember a successful write.

        Older records for the same entity are dropped first: after this write
        they no longer describe the stored row (e.g. rename A -> B -> A).
        """
        if entity_id:
            self.forget_entity(entity_id)
        self._recent[key] = RecentOperation(
            timestamp=self._clock(),
            fingerprint=fingerprint,
            entity_id=entity_id or None,
        )

    async def run_write(
        self,
        key: str,
        payload: Any,
        fn: Callable[[], Awaitable[T]],
        duplicate_result: T,
        entity_id: Optional[str] = None,
    ) -> T:
        """
        Guarded write: skip recent duplicates, then run under the key lock.

        Args:
            key: Operation key
            payload: Row about to be written; its fingerprint detects repeats
            fn: Coroutine function performing the write
            duplicate_result: Returned as-is when the write is suppressed
            entity_id: Id of the written row, if it has one

        Returns:
            The write result, or ``duplicate_result`` for a suppressed repeat
        """
        fingerprint = fingerprint_payload(payload)
        if self.is_recent_duplicate(key, fingerprint):
            logger.info(f"Skipping duplicate {key} inside {self.duplicate_window:.1f}s window")
            return duplicate_result

        async def _write() -> T:
            result = await fn()
            self.record(key, fingerprint, entity_id)
            return result

        return await self.execute_with_lock(key, _write)

    def forget_entity(self, entity_id: str) -> None:
        """Drop recent-write records for one entity id (after a delete or a newer write)."""
        stale = [k for k, entry in self._recent.items() if entry.entity_id == entity_id]
        for key in stale:
            del self._recent[key]

    def reset(self) -> None:
        """Forget recent writes. In-flight calls finish normally."""
        self._recent.clear()
