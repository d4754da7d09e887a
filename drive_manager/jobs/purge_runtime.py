"""Purge the installer scratch directory from local disk."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

DEFAULT_SCRATCH_DIR = "/tmp/googledrive_install"


def purge_scratch_dir(root: Path) -> bool:
    """Delete ``root`` if present; return whether anything was removed."""
    if not (root.exists() or root.is_symlink()):
        return False
    if root.is_dir() and not root.is_symlink():
        shutil.rmtree(root)
    else:
        root.unlink()
    return True


def main() -> None:
    root = Path(os.getenv("DRIVE_MANAGER_SCRATCH_DIR", DEFAULT_SCRATCH_DIR))
    if purge_scratch_dir(root):
        print(f"Purged {root}")
    else:
        print(f"No scratch directory present at {root}")


if __name__ == "__main__":
    main()
