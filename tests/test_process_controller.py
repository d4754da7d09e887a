from __future__ import annotations

import psutil
import pytest

from drive_manager.adapters.processes import ProcessController


class FakeProc:
    def __init__(self, pid, name, cmdline, *, deny=False, gone=False, zombie=False):
        self.pid = pid
        self.info = {"pid": pid, "name": name, "cmdline": cmdline}
        self.deny = deny
        self.gone = gone
        self.zombie = zombie
        self.killed = False

    def kill(self):
        if self.gone:
            raise psutil.NoSuchProcess(self.pid)
        if self.deny:
            raise psutil.AccessDenied(self.pid)
        self.killed = True

    def is_running(self):
        return not self.gone

    def status(self):
        return psutil.STATUS_ZOMBIE if self.zombie else psutil.STATUS_RUNNING


@pytest.fixture
def table(monkeypatch: pytest.MonkeyPatch):
    procs = [
        FakeProc(100, "Google Drive", ["/Applications/Google Drive.app/Contents/MacOS/Google Drive"]),
        FakeProc(101, "crashpad_handler", ["/Applications/Google Drive.app/Contents/Frameworks/crashpad_handler"]),
        FakeProc(102, "Finder", ["/System/Library/CoreServices/Finder.app/Contents/MacOS/Finder"]),
        FakeProc(103, "python3", ["python3", "-c", "print('Google Drive')"]),
    ]
    monkeypatch.setattr(psutil, "process_iter", lambda attrs=None: iter(procs))
    return procs


def test_terminate_kills_matching_processes_except_self(table) -> None:
    controller = ProcessController(own_pid=103)

    report = controller.terminate("Google Drive")

    assert report.killed == [100, 101]
    assert report.failed == []
    assert [proc.killed for proc in table] == [True, True, False, False]


def test_terminate_reports_processes_it_cannot_signal(table) -> None:
    table[0].deny = True
    table[1].gone = True

    report = ProcessController(own_pid=103).terminate("Google Drive")

    assert report.killed == []
    assert report.failed == [100]


def test_is_running_matches_command_line_and_name(table) -> None:
    controller = ProcessController(own_pid=1)
    assert controller.is_running("Google Drive") is True
    assert controller.is_running("Dropbox") is False


def test_is_running_ignores_zombies(table) -> None:
    for proc in table:
        proc.zombie = True
    assert ProcessController(own_pid=1).is_running("Google Drive") is False
