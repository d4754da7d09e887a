from __future__ import annotations

import os
import pwd
from pathlib import Path
from typing import Callable

from drive_manager.domain.errors import ConsoleUserError, InsufficientPrivilegeError
from drive_manager.domain.models import ConsoleUser

DEFAULT_CONSOLE_DEVICE = "/dev/console"


def require_admin(geteuid: Callable[[], int] = os.geteuid) -> None:
    if geteuid() != 0:
        raise InsufficientPrivilegeError("Please run this script with sudo privileges")


def resolve_console_user(
    console_device: str | Path = DEFAULT_CONSOLE_DEVICE,
    *,
    getpwuid: Callable[[int], pwd.struct_passwd] = pwd.getpwuid,
) -> ConsoleUser:
    """Return the owner of the console session, never the privileged invoker.

    The process runs as root, so ``$HOME`` and ``Path.home()`` point at root's
    home. The console device is owned by whoever is logged in at the GUI.
    """
    try:
        owner_uid = os.stat(console_device).st_uid
        entry = getpwuid(owner_uid)
    except (OSError, KeyError) as exc:
        raise ConsoleUserError(f"Could not resolve the owner of {console_device}: {exc}") from exc

    if entry.pw_uid == 0:
        raise ConsoleUserError(
            f"{console_device} is owned by {entry.pw_name}; log in as the user whose data should be removed."
        )
    return ConsoleUser(name=entry.pw_name, uid=entry.pw_uid, home=Path(entry.pw_dir))
