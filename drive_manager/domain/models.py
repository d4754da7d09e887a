from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path


class ArtifactKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    PATTERN = "pattern"


class RemovalOutcome(str, Enum):
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ArtifactTarget:
    path: Path
    kind: ArtifactKind
    pattern: str | None = None
    match_kind: ArtifactKind | None = None

    def __post_init__(self) -> None:
        if self.kind is ArtifactKind.PATTERN:
            if not self.pattern or self.match_kind not in (ArtifactKind.FILE, ArtifactKind.DIRECTORY):
                raise ValueError("Pattern targets need a name pattern and a file/directory match kind.")

    @property
    def display(self) -> str:
        if self.kind is ArtifactKind.PATTERN:
            return f"{self.path}/{self.pattern}"
        return str(self.path)


@dataclass(frozen=True, slots=True)
class CatalogSection:
    title: str
    targets: tuple[ArtifactTarget, ...]


@dataclass(slots=True)
class RemovalRecord:
    path: str
    outcome: RemovalOutcome
    reason: str | None = None


@dataclass(slots=True)
class CompletionStatus:
    bundle_present: bool = False
    process_running: bool = False

    @property
    def incomplete(self) -> bool:
        return self.bundle_present or self.process_running


@dataclass(slots=True)
class TerminationReport:
    killed: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ProvisionResult:
    step: str
    status: int
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 0


@dataclass(frozen=True, slots=True)
class ConsoleUser:
    name: str
    uid: int
    home: Path


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Everything a run needs, resolved once before the first mutation."""

    started_at: datetime
    console_user: ConsoleUser
    log_path: Path
    download_url: str
    scratch_dir: Path
    system_root: Path = Path("/")
    app_name: str = "Google Drive"
    process_match: str = "Google Drive"
    disk_image_name: str = "GoogleDrive.dmg"
    volume_path: Path = Path("/Volumes/Install Google Drive")
    package_name: str = "GoogleDrive.pkg"

    @property
    def user_home(self) -> Path:
        return self.console_user.home

    @property
    def app_bundle(self) -> Path:
        return self.system_root / "Applications" / f"{self.app_name}.app"

    @property
    def disk_image(self) -> Path:
        return self.scratch_dir / self.disk_image_name

    @property
    def package_path(self) -> Path:
        return self.volume_path / self.package_name
