"""In-memory verification-code store using cachetools.TLRUCache.

Process-wide and non-persistent: codes are lost on restart, which only
means users must request a new one.  Suitable for a single-worker
deployment; swap for a networked store via ``ICodeStore`` when scaling out.

``TLRUCache`` gives each entry its own expiry (``ttu``) and hides lapsed
entries from lookups.  ``get`` additionally purges them so an expired code
never lingers in memory.  Concurrent ``set`` calls for the same email race
last-writer-wins, which is acceptable because a newer request legitimately
supersedes an unused older code.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import structlog
from cachetools import TLRUCache

from src.interfaces.code_store import ICodeStore
from src.models.recovery import VerificationCodeEntry

logger = structlog.get_logger(logger_name=__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


# TLRUCache drops an entry once timer() >= ttu; a code is still live at
# exactly expires_at and lapses one tick later.
_EXPIRY_TICK = timedelta(microseconds=1)


def _entry_expiry(_key: str, entry: VerificationCodeEntry, _now: float) -> float:
    return (entry.expires_at + _EXPIRY_TICK).timestamp()


class MemoryCodeStore(ICodeStore):
    """Expiring email → code mapping held in process memory.

    Parameters
    ----------
    max_size:
        Upper bound on pending codes.  When full, the least-recently-used
        entry is evicted (its owner simply requests a new code).
    clock:
        Returns the current aware datetime.  Injected so tests can move
        time without sleeping.
    """

    def __init__(
        self,
        max_size: int = 10000,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._clock = clock or _utc_now
        self._cache: TLRUCache[str, VerificationCodeEntry] = TLRUCache(
            maxsize=max_size,
            ttu=_entry_expiry,
            timer=self._timestamp,
        )

    def _timestamp(self) -> float:
        return self._clock().timestamp()

    @staticmethod
    def _key(email: str) -> str:
        return email.lower()

    # ------------------------------------------------------------------
    # ICodeStore implementation
    # ------------------------------------------------------------------

    async def set(self, email: str, code: str, ttl_minutes: int) -> None:
        """Store *code* for *email*; any previous code stops validating."""
        key = self._key(email)
        entry = VerificationCodeEntry(
            email=key,
            code=code,
            expires_at=self._clock() + timedelta(minutes=ttl_minutes),
        )
        self._cache[key] = entry
        logger.debug("code_set", email=key, expires_at=entry.expires_at.isoformat())

    async def get(self, email: str) -> str | None:
        """Return the live code for *email* without consuming it."""
        entry = self._cache.get(self._key(email))
        if entry is None:
            # Drop anything that lapsed, including this email's old entry.
            self._cache.expire()
            return None
        return entry.code

    async def delete(self, email: str) -> None:
        """Remove the code for *email* (no-op if absent)."""
        self._cache.pop(self._key(email), None)
        logger.debug("code_delete", email=self._key(email))

    def __len__(self) -> int:
        """Number of entries not yet purged (live or lapsed-but-unswept)."""
        return len(self._cache)
