from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from .model import Role
from .repository import RoleRepository

log = logging.getLogger(__name__)


class RoleCache:
    """Read-through cache of Role values keyed by id.

    A stale entry that over-grants is worse than a miss, so administrative
    changes must call invalidate(); a fetch that races with an invalidation
    is returned to its caller but never stored.
    """

    def __init__(
        self,
        roles: RoleRepository,
        *,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._roles = roles
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[int, tuple[float, Role]] = {}
        self._generation = 0

    def get(self, role_id: int) -> Optional[Role]:
        role_id = int(role_id)
        with self._lock:
            hit = self._entries.get(role_id)
            if hit and hit[0] > self._clock():
                return hit[1]
            generation = self._generation

        role = self._roles.get_by_id(role_id)

        with self._lock:
            if role is None:
                self._entries.pop(role_id, None)
            elif self._ttl > 0 and generation == self._generation:
                self._entries[role_id] = (self._clock() + self._ttl, role)
        return role

    def invalidate(self, role_id: int) -> None:
        with self._lock:
            self._generation += 1
            self._entries.pop(int(role_id), None)
        log.info("Role cache invalidated for role %s", role_id)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
