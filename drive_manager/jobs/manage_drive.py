"""Runtime entrypoint: uninstall Google Drive and optionally reinstall it."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable

from rich.console import Console

from drive_manager.adapters.processes import ProcessController
from drive_manager.adapters.provisioner import DiskImageProvisioner, PackageProvisioner
from drive_manager.domain.errors import ConsoleUserError, InsufficientPrivilegeError
from drive_manager.domain.models import ConsoleUser, RunConfig
from drive_manager.jobs.purge_runtime import DEFAULT_SCRATCH_DIR
from drive_manager.utils.logging import (
    LogLevel,
    build_log_path,
    configure_run_logger,
    log_event,
    log_section,
)
from drive_manager.utils.privileges import DEFAULT_CONSOLE_DEVICE, require_admin, resolve_console_user
from drive_manager.utils.prompt import confirm_from_tty
from drive_manager.workflows.cleanup import ProcessTable, run_cleanup
from drive_manager.workflows.install import run_install_flow

DEFAULT_DOWNLOAD_URL = "https://dl.google.com/drive-file-stream/GoogleDrive.dmg"
DEFAULT_LOG_DIR = "/tmp"
INSTALL_QUESTION = "Would you like to install the latest version of Google Drive? (y/n): "

EXIT_OK = 0
EXIT_FAILURE = 1

ConfirmFn = Callable[[str], bool]
ProvisionerFactory = Callable[[RunConfig], PackageProvisioner]


def build_run_config(
    *,
    started_at: datetime,
    console_user: ConsoleUser,
    log_path: Path | None = None,
    system_root: Path = Path("/"),
) -> RunConfig:
    if log_path is None:
        log_path = build_log_path(started_at, os.getenv("DRIVE_MANAGER_LOG_DIR", DEFAULT_LOG_DIR))
    return RunConfig(
        started_at=started_at,
        console_user=console_user,
        log_path=log_path,
        download_url=os.getenv("DRIVE_MANAGER_DOWNLOAD_URL", DEFAULT_DOWNLOAD_URL),
        scratch_dir=Path(os.getenv("DRIVE_MANAGER_SCRATCH_DIR", DEFAULT_SCRATCH_DIR)),
        system_root=system_root,
    )


def execute(
    config: RunConfig,
    *,
    run_logger: logging.Logger,
    processes: ProcessTable,
    skip_install: bool = False,
    confirm: ConfirmFn = confirm_from_tty,
    provisioner_factory: ProvisionerFactory = DiskImageProvisioner.from_config,
) -> int:
    """Run cleanup, then the optional install flow, and return the exit code."""
    cleanup = run_cleanup(config, processes=processes, logger=run_logger)
    cleanup_status = EXIT_FAILURE if cleanup.status.incomplete else EXIT_OK

    if skip_install:
        return cleanup_status

    log_section(run_logger, "Installation Options")
    if not confirm(INSTALL_QUESTION):
        log_event(run_logger, LogLevel.INFO, f"User chose not to install {config.app_name}.")
        return cleanup_status

    install_status = run_install_flow(config, provisioner_factory(config), run_logger)
    return install_status or cleanup_status


def run(
    *,
    skip_install: bool = False,
    system_root: Path = Path("/"),
    console: Console | None = None,
    processes: ProcessTable | None = None,
    confirm: ConfirmFn = confirm_from_tty,
    provisioner_factory: ProvisionerFactory = DiskImageProvisioner.from_config,
    geteuid: Callable[[], int] = os.geteuid,
    console_device: str | Path = DEFAULT_CONSOLE_DEVICE,
) -> int:
    """Gate on privileges, resolve the console user once, then execute."""
    try:
        require_admin(geteuid)
    except InsufficientPrivilegeError as exc:
        console_logger = configure_run_logger(console=console)
        log_event(console_logger, LogLevel.ERROR, f"ERROR: {exc}")
        return EXIT_FAILURE

    started_at = datetime.now()
    log_path = build_log_path(started_at, os.getenv("DRIVE_MANAGER_LOG_DIR", DEFAULT_LOG_DIR))
    run_logger = configure_run_logger(log_path=log_path, console=console)
    log_section(run_logger, "Starting Google Drive uninstallation process...")

    try:
        console_user = resolve_console_user(console_device)
    except ConsoleUserError as exc:
        log_event(run_logger, LogLevel.ERROR, f"ERROR: {exc}")
        return EXIT_FAILURE

    config = build_run_config(
        started_at=started_at,
        console_user=console_user,
        log_path=log_path,
        system_root=system_root,
    )
    log_event(
        run_logger,
        LogLevel.INFO,
        f"Detected current user: {console_user.name} (home: {console_user.home})",
    )

    return execute(
        config,
        run_logger=run_logger,
        processes=processes or ProcessController(),
        skip_install=skip_install,
        confirm=confirm,
        provisioner_factory=provisioner_factory,
    )
