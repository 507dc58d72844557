__version__ = "0.1.0"

# Public API exports
from .cache import CacheEntry, CacheStats, DirectoryUsageCache
from .config import AppConfig, CacheConfig, LogConfig, load_config
from .errors import AccessDenied, DirUsageError, InvalidDirectory, WalkFailed
from .walker import read_mtime_ns, walk_tree

__all__ = [
    "__version__",
    # Configuration
    "AppConfig",
    "CacheConfig",
    "LogConfig",
    "load_config",
    # Cache
    "CacheEntry",
    "CacheStats",
    "DirectoryUsageCache",
    # Walking
    "read_mtime_ns",
    "walk_tree",
    # Errors
    "DirUsageError",
    "InvalidDirectory",
    "AccessDenied",
    "WalkFailed",
]
