"""Process-local, non-blocking lock per campaign.

The daily quota check reads the publication ledger and then writes to it with
no transaction in between. Two overlapping distribution passes in the same
process would both see the same "distributed today" set, so a pass that finds
a campaign already locked skips it instead of waiting.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class CampaignLockRegistry:
    """Entries exist only while a campaign is held."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def try_acquire(self, campaign_id: str) -> bool:
        # Non-blocking, so acquiring under the guard cannot stall other campaigns
        with self._guard:
            return self._locks.setdefault(campaign_id, threading.Lock()).acquire(blocking=False)

    def release(self, campaign_id: str) -> None:
        with self._guard:
            lock = self._locks.pop(campaign_id, None)
            if lock is not None and lock.locked():
                lock.release()

    def is_locked(self, campaign_id: str) -> bool:
        with self._guard:
            lock = self._locks.get(campaign_id)
            return lock is not None and lock.locked()

    @contextmanager
    def hold(self, campaign_id: str) -> Iterator[bool]:
        """Yield True when the lock was obtained; the caller skips otherwise."""
        acquired = self.try_acquire(campaign_id)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(campaign_id)

    def snapshot(self) -> dict[str, bool]:
        with self._guard:
            return {k: v.locked() for k, v in self._locks.items()}


GLOBAL_CAMPAIGN_LOCKS = CampaignLockRegistry()

__all__ = ["CampaignLockRegistry", "GLOBAL_CAMPAIGN_LOCKS"]
