"""Maintenance CLI for a storefront data directory.

Usage:
    storefront-admin stats
    storefront-admin products
    storefront-admin orders --user 1718000000123
    storefront-admin check-remote
    storefront-admin set-remote https://script.google.com/macros/s/.../exec
    storefront-admin reset

Configuration comes from ``--config`` (or ~/.storefront/settings.yaml when
present), otherwise from STOREFRONT_* environment variables.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import DEFAULT_SETTINGS_PATH, StoreConfig
from .logging_utils import configure_structured_logging, get_storage_logger
from .repository import SyncRepository

logger = get_storage_logger("cli")


def load_config(config_path: Path | None, data_dir: Path | None = None) -> StoreConfig:
    """Settings file if one exists, environment otherwise."""
    path = config_path or DEFAULT_SETTINGS_PATH
    config = StoreConfig.from_file(path) if path.exists() else StoreConfig.from_environment()
    if data_dir is not None:
        config.data_dir = data_dir
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storefront-admin",
        description="Inspect and maintain storefront storage",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("--data-dir", type=Path, help="Override the data directory")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines on stderr")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("stats", help="Local record counts")
    sub.add_parser("users", help="Merged user list")
    sub.add_parser("products", help="Merged product list")
    orders = sub.add_parser("orders", help="Merged, enriched order list")
    orders.add_argument("--user", help="Only orders placed by this user id")
    sub.add_parser("reset", help="Delete all local data (re-seeded on next start)")
    sub.add_parser("check-remote", help="Check that the remote mirror endpoint answers")
    set_remote = sub.add_parser("set-remote", help="Save the remote mirror URL")
    set_remote.add_argument("url", help="Remote mirror endpoint URL")
    return parser


def _configure_logging(json_logs: bool, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    if json_logs:
        configure_structured_logging(level=level)
    else:
        logging.basicConfig(level=level, format="%(levelname)s  %(name)s  %(message)s")


async def run(args: argparse.Namespace) -> tuple[int, Any]:
    """Execute one command. Returns (exit code, JSON-serializable output)."""
    config = load_config(args.config, args.data_dir)

    if args.command == "set-remote":
        config.remote_url = args.url
        path = config.save(args.config or DEFAULT_SETTINGS_PATH)
        logger.info(f"Remote URL saved to {path}")
        return 0, {"remote_url": args.url, "settings": str(path)}

    async with await SyncRepository.create(config) as repo:
        if args.command == "stats":
            return 0, repo.stats()

        if args.command == "users":
            return 0, [u.public_dict() for u in await repo.list_users()]

        if args.command == "products":
            return 0, [p.to_dict() for p in await repo.list_products()]

        if args.command == "orders":
            if args.user:
                details = await repo.list_user_orders(args.user)
            else:
                details = await repo.list_orders()
            return 0, [d.to_dict() for d in details]

        if args.command == "reset":
            await repo.reset()
            return 0, {"reset": True, "data_dir": str(config.data_dir)}

        if args.command == "check-remote":
            if repo.remote is None:
                return 1, {"configured": False, "ok": False}
            result = await repo.remote.ping()
            return (0 if result.ok else 1), {
                "configured": True,
                "ok": result.ok,
                "error": result.error,
            }

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.json_logs, args.verbose)

    exit_code, output = asyncio.run(run(args))
    json.dump(output, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
