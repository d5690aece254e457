"""Bounded DNS resolution cache with per-entry TTL."""
import threading
import time
from collections import OrderedDict
from typing import Optional
from .config import logger, DNS_CACHE_ENABLED, DNS_CACHE_MAX_ITEMS, DNS_CACHE_TTL


class DNSCache:
    """
    In-memory hostname -> IPv4 cache with TTL and a fixed size bound.

    When full, the entry inserted longest ago is evicted. Expired entries are
    dropped lazily on read (or by ``prune``); there is no background sweeper.

    Concurrent misses for the same host are not coalesced: each caller may
    resolve and ``set`` independently, and the last write wins.
    """

    def __init__(self, max_items: int = DNS_CACHE_MAX_ITEMS, default_ttl: float = DNS_CACHE_TTL):
        if max_items < 1:
            raise ValueError("max_items must be >= 1")
        self.max_items = max_items
        self.default_ttl = default_ttl
        # host -> (address, inserted_at, ttl), oldest insertion first
        self._cache = OrderedDict()
        self._lock = threading.Lock()

    def get(self, host: str) -> Optional[str]:
        """Return the cached address for host, or None if missing or expired."""
        if not DNS_CACHE_ENABLED:
            return None
        with self._lock:
            entry = self._cache.get(host)
            if entry is None:
                return None
            address, inserted_at, ttl = entry
            if time.time() - inserted_at > ttl:
                del self._cache[host]  # Lazy cleanup
                return None
            return address

    def set(self, host: str, address: str, ttl: Optional[float] = None):
        """Cache an address for host, evicting the oldest entry if full."""
        if not DNS_CACHE_ENABLED:
            return
        if ttl is None:
            ttl = self.default_ttl
        with self._lock:
            if host in self._cache:
                del self._cache[host]
            elif len(self._cache) >= self.max_items:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug(f"DNS cache full, evicted {evicted}")
            self._cache[host] = (address, time.time(), ttl)

    def prune(self) -> int:
        """Remove every expired entry. Returns how many were removed."""
        now = time.time()
        with self._lock:
            keys_to_remove = [k for k, v in self._cache.items() if now - v[1] > v[2]]
            for k in keys_to_remove:
                del self._cache[k]
        if keys_to_remove:
            logger.debug(f"Pruned {len(keys_to_remove)} expired DNS cache entries")
        return len(keys_to_remove)

    def clear(self):
        with self._lock:
            self._cache.clear()

    def __len__(self):
        with self._lock:
            return len(self._cache)

    def __contains__(self, host):
        with self._lock:
            return host in self._cache
