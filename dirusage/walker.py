"""
Recursive size computation for a directory subtree.

Only regular files count toward the total. Symbolic links are neither
followed nor counted, and sockets, FIFOs and device nodes are skipped.
"""

import errno
import logging
import os
import stat

from .errors import AccessDenied, InvalidDirectory, WalkFailed

logger = logging.getLogger(__name__)


def read_mtime_ns(directory: str) -> int:
    """
    Read a directory's own last-modification time in nanoseconds.

    Args:
        directory: Path of the directory.

    Returns:
        The directory's st_mtime_ns.

    Raises:
        InvalidDirectory: If the path is missing or not a directory.
        AccessDenied: If the metadata read is refused.
    """
    try:
        st = os.stat(directory)
    except FileNotFoundError as e:
        raise InvalidDirectory(f"No such directory: {directory}", directory) from e
    except PermissionError as e:
        raise AccessDenied(f"Permission denied: {directory}", directory) from e
    except OSError as e:
        if e.errno == errno.ENOTDIR:
            raise InvalidDirectory(f"Not a directory: {directory}", directory) from e
        if e.errno == errno.ELOOP:
            raise InvalidDirectory(f"Symlink loop at {directory}", directory) from e
        raise AccessDenied(f"Cannot read metadata for {directory}: {e}", directory) from e

    if not stat.S_ISDIR(st.st_mode):
        raise InvalidDirectory(f"Not a directory: {directory}", directory)
    return st.st_mtime_ns


def walk_tree(directory: str) -> int:
    """
    Sum the sizes of all regular files below a directory.

    Traversal is depth-first over an explicit stack. Any failure to list a
    directory or stat an entry aborts the walk; nothing is skipped.

    Args:
        directory: Root of the subtree.

    Returns:
        Total size in bytes, 0 if the subtree holds no regular files.

    Raises:
        WalkFailed: If any directory or entry cannot be read.
    """
    total = 0
    pending = [directory]

    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    entry_path = entry.path
                    st = entry.stat(follow_symlinks=False)
                    if stat.S_ISDIR(st.st_mode):
                        pending.append(entry_path)
                    elif stat.S_ISREG(st.st_mode):
                        total += st.st_size
        except OSError as e:
            failed_path = e.filename or current
            logger.debug("Walk of %s failed at %s: %s", directory, failed_path, e)
            raise WalkFailed(f"Failed to walk {failed_path}: {e}", os.fsdecode(failed_path)) from e

    return total
