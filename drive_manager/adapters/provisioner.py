"""External tooling behind the install flow: download, hdiutil and installer."""

from __future__ import annotations

import http.client
import os
import shutil
import subprocess
import urllib.error
import urllib.request
from pathlib import Path
from typing import Protocol

from drive_manager.domain.models import ProvisionResult, RunConfig

DOWNLOAD_FAILED_STATUS = 1
TOOL_MISSING_STATUS = 127
USER_AGENT = "google-drive-mac-manager"


class PackageProvisioner(Protocol):
    def fetch(self) -> ProvisionResult: ...

    def mount(self) -> ProvisionResult: ...

    def install(self) -> ProvisionResult: ...

    def unmount(self) -> ProvisionResult: ...


class DiskImageProvisioner:
    """Provision a package shipped inside a disk image."""

    def __init__(
        self,
        *,
        download_url: str,
        disk_image: Path,
        volume_path: Path,
        package_path: Path,
        install_target: str = "/",
    ) -> None:
        self.download_url = download_url
        self.disk_image = disk_image
        self.volume_path = volume_path
        self.package_path = package_path
        self.install_target = install_target

    @classmethod
    def from_config(cls, config: RunConfig) -> DiskImageProvisioner:
        return cls(
            download_url=config.download_url,
            disk_image=config.disk_image,
            volume_path=config.volume_path,
            package_path=config.package_path,
        )

    def _run(self, step: str, command: list[str]) -> ProvisionResult:
        try:
            completed = subprocess.run(command, capture_output=True, text=True)
        except OSError as exc:
            return ProvisionResult(step=step, status=TOOL_MISSING_STATUS, detail=str(exc))
        detail = (completed.stderr or completed.stdout or "").strip()
        return ProvisionResult(step=step, status=completed.returncode, detail=detail)

    def fetch(self) -> ProvisionResult:
        tmp = self.disk_image.with_suffix(self.disk_image.suffix + ".tmp")
        try:
            self.disk_image.parent.mkdir(parents=True, exist_ok=True)
            req = urllib.request.Request(self.download_url, headers={"User-Agent": USER_AGENT})
            with urllib.request.urlopen(req) as resp:
                with tmp.open("wb") as f:
                    shutil.copyfileobj(resp, f)
            os.replace(tmp, self.disk_image)
        except urllib.error.URLError as e:
            return ProvisionResult(step="download", status=DOWNLOAD_FAILED_STATUS, detail=str(e.reason))
        except (OSError, http.client.HTTPException, ValueError) as e:
            return ProvisionResult(step="download", status=DOWNLOAD_FAILED_STATUS, detail=str(e))
        finally:
            tmp.unlink(missing_ok=True)
        return ProvisionResult(step="download", status=0, detail=str(self.disk_image))

    def mount(self) -> ProvisionResult:
        return self._run("mount", ["hdiutil", "mount", "-nobrowse", str(self.disk_image)])

    def install(self) -> ProvisionResult:
        return self._run(
            "install",
            ["installer", "-pkg", str(self.package_path), "-target", self.install_target],
        )

    def unmount(self) -> ProvisionResult:
        return self._run("unmount", ["hdiutil", "unmount", f"{self.volume_path}/", "-force"])
