"""Top-level Google Drive manager command line interface."""

from __future__ import annotations

import argparse
from typing import Sequence

from drive_manager.jobs.manage_drive import run as run_manage


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="google-drive-manager",
        description="Remove Google Drive from this Mac and optionally install the latest version. Requires sudo.",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Only uninstall; do not offer to install the latest version afterwards",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return run_manage(skip_install=args.skip_install)


if __name__ == "__main__":
    raise SystemExit(main())
