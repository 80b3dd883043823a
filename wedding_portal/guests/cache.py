"""Per-process cache of loaded guest bundles.

Entries are keyed by identity and bound to the session they were loaded
under: a different session for the same identity, or an entry older than
the TTL, is treated as a miss and dropped.
"""

import hashlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from wedding_portal.config.settings import settings
from wedding_portal.guests.dtos import GuestBundleDTO

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def session_fingerprint(token: str) -> str:
    """Hash of the bearer token so raw tokens are never kept in memory."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class _CacheEntry:
    session_id: str
    stored_at: datetime
    bundle: GuestBundleDTO


class GuestDataCache:
    def __init__(self, ttl: timedelta, clock: Clock = utc_now) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[UUID, _CacheEntry] = {}

    def get(self, identity_id: UUID, session_id: str) -> GuestBundleDTO | None:
        entry = self._entries.get(identity_id)
        if entry is None:
            return None
        if entry.session_id != session_id:
            logger.debug("Guest data cache session mismatch for %s", identity_id)
            self.invalidate(identity_id)
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            logger.debug("Guest data cache expired for %s", identity_id)
            self.invalidate(identity_id)
            return None
        return entry.bundle

    def put(self, identity_id: UUID, session_id: str, bundle: GuestBundleDTO) -> None:
        self._entries[identity_id] = _CacheEntry(
            session_id=session_id, stored_at=self._clock(), bundle=bundle
        )

    def invalidate(self, identity_id: UUID) -> None:
        self._entries.pop(identity_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


guest_data_cache = GuestDataCache(ttl=timedelta(seconds=settings.guest_data_cache_ttl_seconds))


def get_guest_data_cache() -> GuestDataCache:
    """Dependency to get the process-wide guest data cache."""
    return guest_data_cache
