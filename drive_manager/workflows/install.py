"""Confirmation-gated reinstall from the vendor disk image."""

from __future__ import annotations

import logging

from drive_manager.adapters.provisioner import PackageProvisioner
from drive_manager.domain.errors import (
    DownloadFailure,
    InstallerFailure,
    MountFailure,
    ProvisioningError,
    UnmountFailure,
)
from drive_manager.domain.models import ProvisionResult, RunConfig
from drive_manager.jobs.purge_runtime import purge_scratch_dir
from drive_manager.utils.logging import LogLevel, log_event, log_section

EXIT_FAILURE = 1
SIGNAL_EXIT_BASE = 128


def exit_status(status: int) -> int:
    """Map a tool status to a process exit code.

    Rules:
    - a tool killed by signal N (negative status) exits 128 + N, as a shell does
    - zero or a status outside 1..255 exits 1
    """
    if status < 0:
        status = SIGNAL_EXIT_BASE - status
    if 0 < status < 256:
        return status
    return EXIT_FAILURE


def _check(result: ProvisionResult, error_cls: type[ProvisioningError]) -> None:
    if not result.ok:
        raise error_cls(result.status, result.detail)


def _provision(config: RunConfig, provisioner: PackageProvisioner, logger: logging.Logger) -> None:
    log_event(logger, LogLevel.INFO, f"Downloading {config.app_name}...")
    _check(provisioner.fetch(), DownloadFailure)

    log_event(logger, LogLevel.INFO, f"Mounting {config.app_name} disk image...")
    _check(provisioner.mount(), MountFailure)

    log_event(logger, LogLevel.INFO, f"Installing {config.app_name} package...")
    installed = provisioner.install()

    log_event(logger, LogLevel.INFO, f"Unmounting {config.app_name} disk image...")
    unmounted = provisioner.unmount()

    _check(installed, InstallerFailure)
    _check(unmounted, UnmountFailure)


def run_install_flow(config: RunConfig, provisioner: PackageProvisioner, logger: logging.Logger) -> int:
    """Download, mount, install and unmount; return the process exit code.

    Download and mount failures exit 1. Installer and unmount failures exit
    with the tool's own status, or 128 + N when the tool died on signal N.
    Removal of the scratch directory is always attempted; a failure there is
    logged and does not change the exit code.
    """
    log_section(logger, f"User chose to install {config.app_name}. Starting installation...")
    try:
        _provision(config, provisioner, logger)
    except (DownloadFailure, MountFailure) as exc:
        log_event(logger, LogLevel.ERROR, f"ERROR: Failed to {exc.step} {config.app_name}: {exc}")
        return EXIT_FAILURE
    except ProvisioningError as exc:
        log_event(
            logger,
            LogLevel.ERROR,
            f"ERROR: {config.app_name} installation failed with exit code {exc.status} ({exc.step})",
        )
        log_event(
            logger,
            LogLevel.ERROR,
            f"{config.app_name} installation FAILED. Check log at {config.log_path} for details.",
        )
        return exit_status(exc.status)
    finally:
        log_event(logger, LogLevel.INFO, "Cleaning up temporary files...")
        try:
            purge_scratch_dir(config.scratch_dir)
        except OSError as exc:
            log_event(
                logger,
                LogLevel.ERROR,
                f"ERROR: Failed to remove temporary files at {config.scratch_dir}: {exc}",
            )

    log_event(logger, LogLevel.SUCCESS, f"{config.app_name} installation SUCCESSFUL!")
    return 0
