"""Fixed catalog of Google Drive artifacts, system-wide sections first."""

from __future__ import annotations

from pathlib import Path

from drive_manager.domain.models import ArtifactKind, ArtifactTarget, CatalogSection, RunConfig

BUNDLE_PREFIX = "com.google.drivefs"

USER_DIRECTORIES: tuple[str, ...] = (
    "Library/Application Support/Google/DriveFS",
    f"Library/Application Support/{BUNDLE_PREFIX}.finderhelper",
    f"Library/Application Support/{BUNDLE_PREFIX}.finderhelper.findersync",
    f"Library/Application Support/{BUNDLE_PREFIX}.fsext",
    f"Library/Application Support/{BUNDLE_PREFIX}.helper.gpu",
    f"Library/Caches/{BUNDLE_PREFIX}",
    f"Library/Saved Application State/{BUNDLE_PREFIX}.savedState",
    "Google Drive",
)


def _directory(path: Path) -> ArtifactTarget:
    return ArtifactTarget(path=path, kind=ArtifactKind.DIRECTORY)


def _files_matching(directory: Path, pattern: str) -> ArtifactTarget:
    return ArtifactTarget(
        path=directory,
        kind=ArtifactKind.PATTERN,
        pattern=pattern,
        match_kind=ArtifactKind.FILE,
    )


def _directories_matching(directory: Path, pattern: str) -> ArtifactTarget:
    return ArtifactTarget(
        path=directory,
        kind=ArtifactKind.PATTERN,
        pattern=pattern,
        match_kind=ArtifactKind.DIRECTORY,
    )


def build_catalog(config: RunConfig) -> tuple[CatalogSection, ...]:
    root = config.system_root
    home = config.user_home
    library = root / "Library"

    return (
        CatalogSection(
            title=f"Removing {config.app_name} application bundle...",
            targets=(_directory(config.app_bundle),),
        ),
        CatalogSection(
            title="Removing LaunchAgents...",
            targets=(_files_matching(library / "LaunchAgents", f"{BUNDLE_PREFIX}.*"),),
        ),
        CatalogSection(
            title="Removing Application Support files...",
            targets=(_directory(library / "Application Support" / "Google" / "DriveFS"),),
        ),
        CatalogSection(
            title="Removing receipt files...",
            targets=(_files_matching(root / "var" / "db" / "receipts", f"{BUNDLE_PREFIX}*"),),
        ),
        CatalogSection(
            title="Removing user LaunchAgents...",
            targets=(_files_matching(home / "Library" / "LaunchAgents", f"{BUNDLE_PREFIX}.*"),),
        ),
        CatalogSection(
            title=f"Processing user directory: {home}",
            targets=tuple(_directory(home / relative) for relative in USER_DIRECTORIES),
        ),
        CatalogSection(
            title="Removing user preferences and group containers...",
            targets=(
                _files_matching(home / "Library" / "Preferences", f"{BUNDLE_PREFIX}*.plist"),
                _directories_matching(home / "Library" / "Group Containers", f"*group.{BUNDLE_PREFIX}"),
            ),
        ),
    )
