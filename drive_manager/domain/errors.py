from __future__ import annotations


class DriveManagerError(RuntimeError):
    """Base class for failures surfaced by the manager."""


class InsufficientPrivilegeError(DriveManagerError):
    """Raised when the process is not running with root privileges."""


class ConsoleUserError(DriveManagerError):
    """Raised when no logged-in console user can be resolved."""


class RemovalFailure(DriveManagerError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path} ({reason})")
        self.path = path
        self.reason = reason


class ProvisioningError(DriveManagerError):
    """A step of the install flow reported a non-zero status."""

    step = "provision"

    def __init__(self, status: int, detail: str = "") -> None:
        message = f"{self.step} failed with exit code {status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.status = status
        self.detail = detail


class DownloadFailure(ProvisioningError):
    step = "download"


class MountFailure(ProvisioningError):
    step = "mount"


class InstallerFailure(ProvisioningError):
    step = "install"


class UnmountFailure(ProvisioningError):
    step = "unmount"
