from __future__ import annotations

import os
import stat
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterator

from drive_manager.domain.models import ArtifactKind

PathPredicate = Callable[[Path], bool]


def name_matcher(pattern: str, kind: ArtifactKind) -> PathPredicate:
    """Build a predicate matching entry names case-sensitively.

    Rules:
    - ``kind`` FILE accepts regular files only
    - ``kind`` DIRECTORY accepts real directories only
    - symlinks never match
    - entries that vanish mid-walk do not match; any other stat error raises
    """
    if kind not in (ArtifactKind.FILE, ArtifactKind.DIRECTORY):
        raise ValueError(f"Cannot match entries of kind {kind.value!r}.")

    def _matches(path: Path) -> bool:
        if not fnmatchcase(path.name, pattern):
            return False
        try:
            mode = path.lstat().st_mode
        except FileNotFoundError:
            return False
        if stat.S_ISLNK(mode):
            return False
        if kind is ArtifactKind.FILE:
            return stat.S_ISREG(mode)
        return stat.S_ISDIR(mode)

    return _matches


def _is_directory(directory: Path) -> bool:
    try:
        return stat.S_ISDIR(directory.stat().st_mode)
    except (FileNotFoundError, NotADirectoryError):
        return False


def _raise_walk_error(exc: OSError) -> None:
    raise exc


def expand_pattern(directory: Path, predicate: PathPredicate) -> Iterator[Path]:
    """Yield entries under ``directory`` accepted by ``predicate``.

    The walk is top-down and sorted, so repeated calls over an unchanged tree
    yield the same sequence. Matched directories are not descended into.
    A missing ``directory`` yields nothing; an unreadable one raises ``OSError``.
    """
    if not _is_directory(directory):
        return

    for root, dirnames, filenames in os.walk(directory, onerror=_raise_walk_error):
        base = Path(root)
        for name in sorted(filenames):
            candidate = base / name
            if predicate(candidate):
                yield candidate

        descend: list[str] = []
        for name in sorted(dirnames):
            candidate = base / name
            if predicate(candidate):
                yield candidate
            else:
                descend.append(name)
        dirnames[:] = descend
