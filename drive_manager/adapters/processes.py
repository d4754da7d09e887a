from __future__ import annotations

import os
from typing import Iterator

import psutil

from drive_manager.domain.models import TerminationReport

PROCESS_ATTRS = ["pid", "name", "cmdline"]


class ProcessController:
    """psutil-backed equivalent of ``pkill -9 -f`` / ``pgrep -f``."""

    def __init__(self, own_pid: int | None = None) -> None:
        self.own_pid = os.getpid() if own_pid is None else own_pid

    def _matching(self, match: str) -> Iterator[psutil.Process]:
        for proc in psutil.process_iter(PROCESS_ATTRS):
            if proc.pid == self.own_pid:
                continue
            info = proc.info
            command_line = " ".join(info.get("cmdline") or [])
            name = info.get("name") or ""
            if match in command_line or match in name:
                yield proc

    def terminate(self, match: str) -> TerminationReport:
        report = TerminationReport()
        for proc in self._matching(match):
            try:
                proc.kill()
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied:
                report.failed.append(proc.pid)
                continue
            report.killed.append(proc.pid)
        return report

    def is_running(self, match: str) -> bool:
        for proc in self._matching(match):
            try:
                if proc.is_running() and proc.status() != psutil.STATUS_ZOMBIE:
                    return True
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied:
                return True
        return False
