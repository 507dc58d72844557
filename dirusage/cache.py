import logging
import math
import os
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from pathlib import Path

from cachetools import Cache

from .config import CacheConfig
from .errors import DirUsageError, InvalidDirectory, WalkFailed
from .walker import read_mtime_ns, walk_tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    path: str
    size_bytes: int
    observed_mtime_ns: int


@dataclass
class _KeyLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    walks: int = 0
    failures: int = 0


class DirectoryUsageCache:
    """
    Cache of recursive directory sizes keyed by canonical path.

    Thread-safe cache that reuses a computed size for as long as the
    directory's own modification time has not advanced. A stale or missing
    entry triggers a full walk of the subtree.

    Known blind spots:
        - Directory mtimes usually change only when direct children are
          added, removed or renamed. Rewriting a nested file in place does
          not advance any ancestor's mtime, so the cached size stays stale.
        - The mtime is read before the walk. A change made while the walk
          runs may be missing from the stored size until the directory's
          mtime advances again.
    """

    def __init__(
        self,
        per_directory_locks: bool = True,
        walker: Callable[[str], int] = walk_tree,
    ):
        self.per_directory_locks = per_directory_locks
        self._walker = walker
        # Entries are never evicted.
        self._cache: Cache = Cache(maxsize=math.inf)
        self._stats = CacheStats()
        self._lock = threading.Lock()
        self._global_lock = threading.Lock()
        self._key_locks: dict[str, _KeyLock] = {}

    @classmethod
    def from_config(
        cls, config: CacheConfig, walker: Callable[[str], int] = walk_tree
    ) -> "DirectoryUsageCache":
        """Build a cache from the [cache] configuration section."""
        return cls(per_directory_locks=config.per_directory_locks, walker=walker)

    def get_usage(self, directory: str | os.PathLike) -> int:
        """
        Return the total size of regular files under a directory.

        Args:
            directory: Path of the directory to measure.

        Returns:
            The size in bytes, from the cache if the directory is unchanged.

        Raises:
            InvalidDirectory: If the path is missing or not a directory.
            AccessDenied: If the directory's metadata cannot be read.
            WalkFailed: If the recursive walk fails. The previous entry, if
                any, is left in place.
        """
        key = self._canonical(directory)

        with self._locked(key):
            current_mtime = read_mtime_ns(key)

            with self._lock:
                entry = self._cache.get(key)

            if entry is not None and current_mtime <= entry.observed_mtime_ns:
                with self._lock:
                    self._stats.hits += 1
                logger.debug("Cache hit for %s: %d bytes", key, entry.size_bytes)
                return entry.size_bytes

            if entry is None:
                logger.debug("Cache miss for %s", key)
            else:
                logger.debug(
                    "Cache entry for %s is stale (mtime %d > %d)",
                    key,
                    current_mtime,
                    entry.observed_mtime_ns,
                )

            with self._lock:
                self._stats.misses += 1
                self._stats.walks += 1

            started = time.perf_counter()
            try:
                size_bytes = self._walker(key)
            except DirUsageError as e:
                self._record_failure(key, e)
                raise
            except Exception as e:
                self._record_failure(key, e)
                raise WalkFailed(f"Failed to walk {key}: {e}", key) from e

            logger.debug(
                "Walked %s in %.3fs: %d bytes", key, time.perf_counter() - started, size_bytes
            )

            with self._lock:
                self._cache[key] = CacheEntry(
                    path=key, size_bytes=size_bytes, observed_mtime_ns=current_mtime
                )
            return size_bytes

    def get_entry(self, directory: str | os.PathLike) -> CacheEntry | None:
        """
        Look up the stored entry for a directory without refreshing it.

        Args:
            directory: Path of the directory.

        Returns:
            The stored CacheEntry, or None if the directory was never measured.
        """
        key = self._canonical(directory)
        with self._lock:
            return self._cache.get(key)

    def stats(self) -> CacheStats:
        """Return a snapshot of the hit/miss/walk counters."""
        with self._lock:
            return replace(self._stats)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, directory) -> bool:
        return self.get_entry(directory) is not None

    @contextmanager
    def _locked(self, key: str) -> Iterator[None]:
        """
        Hold the lock that serializes queries for a key.

        Per-directory locks are reference counted. A lock is dropped once no
        thread holds or waits on it and the key has no cache entry, so failed
        queries for missing paths leave nothing behind.
        """
        if not self.per_directory_locks:
            with self._global_lock:
                yield
            return

        with self._lock:
            slot = self._key_locks.get(key)
            if slot is None:
                slot = self._key_locks[key] = _KeyLock()
            slot.users += 1
        try:
            with slot.lock:
                yield
        finally:
            with self._lock:
                slot.users -= 1
                if slot.users == 0 and key not in self._cache:
                    del self._key_locks[key]

    def _record_failure(self, key: str, error: Exception) -> None:
        with self._lock:
            self._stats.failures += 1
        logger.warning("Could not compute usage for %s: %s", key, error)

    @staticmethod
    def _canonical(directory: str | os.PathLike) -> str:
        """Resolve a path to the absolute form used as the cache key."""
        try:
            return str(Path(os.fspath(directory)).resolve())
        except (OSError, RuntimeError) as e:
            # RuntimeError is how Path.resolve reports symlink loops before 3.13
            raise InvalidDirectory(f"Cannot resolve {directory}: {e}", os.fspath(directory)) from e
