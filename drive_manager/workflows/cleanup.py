"""Terminate, remove and verify: the uninstall half of a run."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from drive_manager.domain.catalog import build_catalog
from drive_manager.domain.errors import RemovalFailure
from drive_manager.domain.models import (
    ArtifactKind,
    ArtifactTarget,
    CatalogSection,
    CompletionStatus,
    RemovalOutcome,
    RemovalRecord,
    RunConfig,
    TerminationReport,
)
from drive_manager.reporting.summary import compute_summary, format_summary
from drive_manager.utils.logging import LogLevel, log_event, log_section
from drive_manager.utils.paths import expand_pattern, name_matcher


class ProcessTable(Protocol):
    def terminate(self, match: str) -> TerminationReport: ...

    def is_running(self, match: str) -> bool: ...


@dataclass(slots=True)
class CleanupResult:
    records: list[RemovalRecord] = field(default_factory=list)
    status: CompletionStatus = field(default_factory=CompletionStatus)
    summary: dict[str, Any] = field(default_factory=dict)


def terminate_processes(config: RunConfig, processes: ProcessTable, logger: logging.Logger) -> TerminationReport:
    match = config.process_match
    log_section(logger, f"Force killing all '{match}' processes...")
    report = processes.terminate(match)

    if report.killed:
        log_event(logger, LogLevel.SUCCESS, f"All '{match}' processes force killed (pids: {_pids(report.killed)})")
    elif not report.failed:
        log_event(logger, LogLevel.INFO, f"No '{match}' processes found to force kill")
    if report.failed:
        log_event(logger, LogLevel.ERROR, f"Failed to force kill '{match}' processes (pids: {_pids(report.failed)})")
    return report


def _pids(pids: list[int]) -> str:
    return ", ".join(str(pid) for pid in pids)


def _exists(path: Path) -> bool:
    try:
        path.lstat()
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as exc:
        raise RemovalFailure(str(path), exc.strerror or str(exc)) from exc
    return True


def _delete(path: Path) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        raise RemovalFailure(str(path), exc.strerror or str(exc)) from exc


def _failed(logger: logging.Logger, exc: RemovalFailure) -> RemovalRecord:
    log_event(logger, LogLevel.ERROR, f"Failed to remove: {exc}")
    return RemovalRecord(path=exc.path, outcome=RemovalOutcome.FAILED, reason=exc.reason)


def remove_artifact(path: Path, logger: logging.Logger) -> RemovalRecord:
    """Remove one concrete path and log exactly one outcome line for it."""
    try:
        if not _exists(path):
            log_event(logger, LogLevel.WARNING, f"Not found: {path}")
            return RemovalRecord(path=str(path), outcome=RemovalOutcome.NOT_FOUND)
        _delete(path)
    except RemovalFailure as exc:
        return _failed(logger, exc)

    log_event(logger, LogLevel.SUCCESS, f"Removed: {path}")
    return RemovalRecord(path=str(path), outcome=RemovalOutcome.REMOVED)


def expand_target(target: ArtifactTarget) -> list[ArtifactTarget]:
    if target.kind is not ArtifactKind.PATTERN:
        return [target]
    predicate = name_matcher(target.pattern, target.match_kind)
    try:
        return [
            ArtifactTarget(path=match, kind=target.match_kind)
            for match in expand_pattern(target.path, predicate)
        ]
    except OSError as exc:
        raise RemovalFailure(target.display, exc.strerror or str(exc)) from exc


def remove_catalog(sections: tuple[CatalogSection, ...], logger: logging.Logger) -> list[RemovalRecord]:
    records: list[RemovalRecord] = []
    seen: set[Path] = set()

    for section in sections:
        log_section(logger, section.title)
        for target in section.targets:
            try:
                concrete = expand_target(target)
            except RemovalFailure as exc:
                records.append(_failed(logger, exc))
                continue
            if not concrete:
                log_event(logger, LogLevel.WARNING, f"Not found: {target.display}")
                records.append(RemovalRecord(path=target.display, outcome=RemovalOutcome.NOT_FOUND))
                continue

            for item in concrete:
                if item.path in seen:
                    continue
                seen.add(item.path)
                records.append(remove_artifact(item.path, logger))

    return records


def is_installed(config: RunConfig, processes: ProcessTable) -> bool:
    return config.app_bundle.is_dir() or processes.is_running(config.process_match)


def check_postconditions(config: RunConfig, processes: ProcessTable, logger: logging.Logger) -> CompletionStatus:
    log_section(logger, "Performing final check...")
    status = CompletionStatus(
        bundle_present=config.app_bundle.is_dir(),
        process_running=processes.is_running(config.process_match),
    )
    if status.bundle_present:
        log_event(logger, LogLevel.ERROR, f"WARNING: {config.app_bundle.name} still exists")
    if status.process_running:
        log_event(logger, LogLevel.ERROR, f"WARNING: {config.app_name} processes are still running")
    return status


def run_cleanup(config: RunConfig, *, processes: ProcessTable, logger: logging.Logger) -> CleanupResult:
    """Kill matching processes, remove every catalog target, then verify."""
    terminate_processes(config, processes, logger)

    if not is_installed(config, processes):
        log_event(
            logger,
            LogLevel.WARNING,
            f"{config.app_name} does not appear to be installed, but continuing cleanup.",
        )

    records = remove_catalog(build_catalog(config), logger)
    status = check_postconditions(config, processes, logger)

    summary = compute_summary(records)
    log_event(logger, LogLevel.INFO, format_summary(summary))

    if status.incomplete:
        log_event(
            logger,
            LogLevel.ERROR,
            f"WARNING: Some {config.app_name} components could not be removed. Manual intervention may be required.",
        )
        log_event(
            logger,
            LogLevel.ERROR,
            f"{config.app_name} uninstallation INCOMPLETE. Check log at {config.log_path} for details.",
        )
    else:
        log_event(logger, LogLevel.SUCCESS, f"{config.app_name} has been successfully uninstalled!")
        log_event(
            logger,
            LogLevel.SUCCESS,
            f"{config.app_name} uninstallation SUCCESSFUL! Log saved to {config.log_path}",
        )

    return CleanupResult(records=records, status=status, summary=summary)
