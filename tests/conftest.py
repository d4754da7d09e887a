import io
from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

from drive_manager.domain.models import ConsoleUser, ProvisionResult, RunConfig, TerminationReport
from drive_manager.jobs.manage_drive import build_run_config
from drive_manager.utils.logging import configure_run_logger

GROUP_CONTAINER = "EQHXZ8M8AV.group.com.google.drivefs"


class FakeProcesses:
    """In-memory stand-in for the psutil process table."""

    def __init__(self, *, running: bool = False, survives_kill: bool = False) -> None:
        self.running = running
        self.survives_kill = survives_kill
        self.terminate_calls: list[str] = []

    def terminate(self, match: str) -> TerminationReport:
        self.terminate_calls.append(match)
        if not self.running:
            return TerminationReport()
        if self.survives_kill:
            return TerminationReport(failed=[4242])
        self.running = False
        return TerminationReport(killed=[4242])

    def is_running(self, match: str) -> bool:
        return self.running


class FakeProvisioner:
    def __init__(self, scratch_dir: Path, statuses: dict[str, int] | None = None, on_install: Callable[[], None] | None = None) -> None:
        self.scratch_dir = scratch_dir
        self.statuses = statuses or {}
        self.on_install = on_install
        self.calls: list[str] = []

    def _result(self, step: str) -> ProvisionResult:
        self.calls.append(step)
        return ProvisionResult(step=step, status=self.statuses.get(step, 0))

    def fetch(self) -> ProvisionResult:
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        (self.scratch_dir / "GoogleDrive.dmg").write_bytes(b"dmg")
        return self._result("download")

    def mount(self) -> ProvisionResult:
        return self._result("mount")

    def install(self) -> ProvisionResult:
        result = self._result("install")
        if result.ok and self.on_install:
            self.on_install()
        return result

    def unmount(self) -> ProvisionResult:
        return self._result("unmount")


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def plain_console(console_output: io.StringIO) -> Console:
    return Console(file=console_output, force_terminal=False, color_system=None, width=240)


@pytest.fixture
def console_user(tmp_path: Path) -> ConsoleUser:
    home = tmp_path / "root" / "Users" / "jane"
    home.mkdir(parents=True)
    return ConsoleUser(name="jane", uid=501, home=home)


@pytest.fixture
def run_config(tmp_path: Path, console_user: ConsoleUser, monkeypatch: pytest.MonkeyPatch) -> RunConfig:
    monkeypatch.setenv("DRIVE_MANAGER_SCRATCH_DIR", str(tmp_path / "scratch"))
    return build_run_config(
        started_at=datetime(2025, 3, 13, 9, 30, 0),
        console_user=console_user,
        log_path=tmp_path / "logs" / "run.log",
        system_root=tmp_path / "root",
    )


@pytest.fixture
def run_logger(run_config: RunConfig, plain_console: Console):
    return configure_run_logger(log_path=run_config.log_path, console=plain_console)


def _touch(path: Path, content: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def stage_installation(config: RunConfig) -> dict[str, Path]:
    """Create every artifact a Google Drive install leaves behind."""
    root = config.system_root
    home = config.user_home
    staged = {
        "bundle": _touch(config.app_bundle / "Contents" / "Info.plist"),
        "system_agent": _touch(root / "Library" / "LaunchAgents" / "com.google.drivefs.helper.plist"),
        "system_support": _touch(root / "Library" / "Application Support" / "Google" / "DriveFS" / "state.db"),
        "receipt": _touch(root / "var" / "db" / "receipts" / "com.google.drivefs.bom"),
        "user_agent": _touch(home / "Library" / "LaunchAgents" / "com.google.drivefs.plist"),
        "user_support": _touch(home / "Library" / "Application Support" / "Google" / "DriveFS" / "prefs"),
        "cache": _touch(home / "Library" / "Caches" / "com.google.drivefs" / "blob"),
        "preference": _touch(home / "Library" / "Preferences" / "com.google.drivefs.settings.plist"),
        "group_container": _touch(home / "Library" / "Group Containers" / GROUP_CONTAINER / "data"),
        "unrelated_agent": _touch(root / "Library" / "LaunchAgents" / "com.apple.unrelated.plist"),
        "unrelated_preference": _touch(home / "Library" / "Preferences" / "com.apple.finder.plist"),
    }
    return staged


@pytest.fixture
def staged_install(run_config: RunConfig) -> dict[str, Path]:
    return stage_installation(run_config)
