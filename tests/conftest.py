"""
Shared pytest fixtures for dirusage tests.
"""

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest

from dirusage.walker import walk_tree


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Creates a directory holding 10, 20 and 5 byte files at different depths.

    Layout:
        tree/a.bin            (10 bytes)
        tree/sub/b.bin        (20 bytes)
        tree/sub/deep/c.bin   (5 bytes)
        tree/empty/
    """
    root = tmp_path / "tree"
    (root / "sub" / "deep").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.bin").write_bytes(b"x" * 10)
    (root / "sub" / "b.bin").write_bytes(b"y" * 20)
    (root / "sub" / "deep" / "c.bin").write_bytes(b"z" * 5)
    return root


@pytest.fixture
def empty_tree(tmp_path: Path) -> Path:
    """Creates a directory containing only empty subdirectories."""
    root = tmp_path / "empty_tree"
    (root / "one" / "two").mkdir(parents=True)
    (root / "three").mkdir()
    return root


class CountingWalker:
    """Wraps walk_tree and records every directory it is asked to walk."""

    def __init__(self, fail: bool = False):
        self.calls: list[str] = []
        self.fail = fail

    def __call__(self, directory: str) -> int:
        self.calls.append(directory)
        if self.fail:
            raise PermissionError(13, "Permission denied", directory)
        return walk_tree(directory)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def counting_walker() -> CountingWalker:
    """Creates a walker that counts its invocations."""
    return CountingWalker()


def _bump_mtime(directory: Path, seconds: int = 1) -> None:
    st = os.stat(directory)
    os.utime(directory, ns=(st.st_atime_ns, st.st_mtime_ns + seconds * 1_000_000_000))


@pytest.fixture
def bump_mtime():
    """Advances a directory's mtime so the change shows at any timestamp granularity."""
    return _bump_mtime


@pytest.fixture
def tmp_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Creates a temporary INI configuration file for config tests.

    Returns:
        Path to the temporary config file.
    """
    config_content = """[cache]
per_directory_locks = false

[logging]
level = DEBUG
file = test.log
console = false
"""
    config_path = tmp_path / "test_config.ini"
    config_path.write_text(config_content, encoding="utf-8")
    yield config_path


@pytest.fixture
def reset_root_logger() -> Generator[None, None, None]:
    """Restores the root logger's handlers and level after a test."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in saved_handlers:
            handler.close()
    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)
