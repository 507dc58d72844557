"""
dirusage - Main Entry Point

Measures a directory's disk usage twice with an optional pause in between,
showing whether the second query was served from the cache or recomputed.
"""

import argparse
import logging
import sys
import time

import humanize

from .cache import DirectoryUsageCache
from .config import load_config
from .errors import DirUsageError
from .logger import setup_logging

logger = logging.getLogger(__name__)

USAGE = "Usage: dirusage <directory_path> [sleep_seconds]"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirusage",
        description="dirusage - Cached recursive directory size",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dirusage /var/log
  dirusage ~/projects 10
  dirusage ~/projects 10 --config dirusage.ini --verbose
        """,
    )
    parser.add_argument("directory", nargs="?", help="Directory to measure")
    parser.add_argument(
        "sleep_seconds",
        nargs="?",
        default="0",
        help="Seconds to wait between the two measurements (default: 0)",
    )
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _timed_usage(cache: DirectoryUsageCache, directory: str) -> tuple[int, float]:
    started = time.perf_counter()
    size_bytes = cache.get_usage(directory)
    return size_bytes, time.perf_counter() - started


def _report(directory: str, size_bytes: int, suffix: str = "") -> None:
    human = humanize.naturalsize(size_bytes, binary=True)
    print(f"Disk space usage for '{directory}'{suffix}: {size_bytes} bytes ({human})")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if not args.directory:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        sleep_seconds = int(args.sleep_seconds)
    except ValueError:
        print(f"[ERROR] Invalid sleep_seconds: '{args.sleep_seconds}'", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1
    if sleep_seconds < 0:
        print(f"[ERROR] sleep_seconds must not be negative: {sleep_seconds}", file=sys.stderr)
        return 1

    try:
        config = load_config(config_path=args.config, debug=args.verbose)
    except (ValueError, FileNotFoundError) as e:
        print(f"[ERROR] Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging)
    from . import __version__

    logger.info("Starting dirusage v%s", __version__)

    cache = DirectoryUsageCache.from_config(config.cache)
    directory = args.directory

    try:
        size_bytes, elapsed = _timed_usage(cache, directory)
        _report(directory, size_bytes)
        print(f"Time elapsed for first call: {elapsed:.6f}s")

        if sleep_seconds:
            logger.info("Sleeping %ds before the second measurement", sleep_seconds)
        time.sleep(sleep_seconds)

        size_bytes, elapsed = _timed_usage(cache, directory)
        _report(directory, size_bytes, " (after sleep)")
        print(f"Time elapsed for second call: {elapsed:.6f}s")
    except DirUsageError as e:
        logger.error("Aborting: %s", e)
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    stats = cache.stats()
    logger.info("Cache stats: %d hit(s), %d walk(s)", stats.hits, stats.walks)
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
