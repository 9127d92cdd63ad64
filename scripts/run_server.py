#!/usr/bin/env python3
"""
Start the personal cloud API server.

Settings come from data/config.json (see src/personal_cloud/settings);
command line flags override the storage root only.

Example:
  python3 scripts/run_server.py --host 0.0.0.0 --port 5000
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

import uvicorn

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.personal_cloud.app import create_app  # noqa: E402
from src.personal_cloud.settings.store import SettingsStore  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Personal cloud file storage API")
    p.add_argument("--host", default="localhost")
    p.add_argument("--port", type=int, default=5000)
    p.add_argument(
        "--config",
        type=Path,
        default=REPO_ROOT / "data" / "config.json",
        help="Settings file (default: data/config.json)",
    )
    p.add_argument("--storage-root", default=None, help="Override the storage root directory")
    p.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = SettingsStore(path=args.config).load()
    if args.storage_root:
        settings = dataclasses.replace(settings, storage_root=args.storage_root)

    app = create_app(settings, repo_root=REPO_ROOT, config_path=args.config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
