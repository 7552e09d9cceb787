"""Module: __main__.py

Date: 2026-10-19

Maintenance command line for the tagcache stores.

Usage:
    python -m tagcache stats
    python -m tagcache clear [--kind ExifCache|ThumbnailCache]
    python -m tagcache compact
    python -m tagcache prune
    python -m tagcache --cache-dir /tmp/cache stats
"""

from __future__ import annotations

import argparse
import dataclasses
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from tagcache.config import APP_NAME, EXIF_CACHE_DIR_NAME, LOG_TO_FILE, THUMBNAIL_CACHE_DIR_NAME
from tagcache.config.resolution import CacheSettings, load_preferences
from tagcache.core.application_context import CacheContext
from tagcache.core.errors import StorageUnavailable
from tagcache.core.maintenance import cache_statistics, compact_all, prune_all
from tagcache.utils.logging.logger_setup import init_logging
from tagcache.utils.paths import AppPaths


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME, description="Inspect and maintain the tagcache stores"
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=None,
        help="Cache root directory (default: TAGCACHE_CACHE_ROOT, preferences, platform cache)",
    )
    parser.add_argument(
        "--log-level", default=None, help="Console log level (default: from settings)"
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("stats", help="Show record counts and file sizes")
    clear = commands.add_parser("clear", help="Remove every cached record")
    clear.add_argument(
        "--kind",
        choices=[EXIF_CACHE_DIR_NAME, THUMBNAIL_CACHE_DIR_NAME],
        default=None,
        help="Clear only this cache",
    )
    commands.add_parser("compact", help="Reclaim disk space (VACUUM)")
    commands.add_parser("prune", help="Remove records of files that no longer exist")
    return parser


def resolve_settings(cache_dir: Path | None) -> CacheSettings:
    """Settings from environment and stored preferences, with --cache-dir on top."""
    settings = CacheSettings.resolve(os.environ)
    root = cache_dir or settings.cache_root
    preferences = load_preferences(AppPaths.get_preferences_path(root))
    settings = CacheSettings.resolve(os.environ, preferences)
    if cache_dir is not None:
        settings = dataclasses.replace(settings, cache_root=cache_dir)
    return settings


def _format_size(size: int) -> str:
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def run(args: argparse.Namespace, context: CacheContext) -> int:
    if args.command == "stats":
        for name, stats in cache_statistics(context).items():
            print(f"{name}: {stats['records']} records, {_format_size(stats['size_bytes'])}")
            print(f"  {stats['path']}")
    elif args.command == "clear":
        if args.kind:
            provider = context.registry.get(args.kind)
            results = {args.kind: provider.clear()} if provider is not None else {}
        else:
            results = context.registry.clear_all()
        for name, removed in results.items():
            print(f"{name}: cleared {removed} records")
    elif args.command == "compact":
        failed = [name for name, ok in compact_all(context).items() if not ok]
        for name in context.caches():
            print(f"{name}: {'FAILED' if name in failed else 'compacted'}")
        if failed:
            return 1
    elif args.command == "prune":
        for name, removed in prune_all(context).items():
            print(f"{name}: pruned {removed} orphaned records")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = resolve_settings(args.cache_dir)

    root = settings.cache_root or AppPaths.get_cache_root()
    try:
        log_dir = AppPaths.get_logs_dir(root)
    except OSError:
        # Unusable cache root; CacheContext.create reports it below
        log_dir = None
    init_logging(
        APP_NAME,
        log_dir=str(log_dir or "."),
        console_level=args.log_level or settings.log_level,
        file_enabled=LOG_TO_FILE and log_dir is not None,
    )

    try:
        context = CacheContext.create(settings)
    except StorageUnavailable as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    with context:
        return run(args, context)


if __name__ == "__main__":
    sys.exit(main())
