"""Copy an external project into the workspace tree."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from monograft.importer.errors import CopyError, CopyWarning
from monograft.importer.file_filter import should_include
from monograft.workspace.tree import join_path_fragments

if TYPE_CHECKING:
    from monograft.workspace.tree import WorkspaceTree

logger = logging.getLogger(__name__)


@dataclass
class CopyResult:
    """Files staged by a copy, plus the ones that had to be skipped."""

    files_copied: list[str] = field(default_factory=list)
    warnings: list[CopyWarning] = field(default_factory=list)


def copy_project_files(source_path: Path, target_root: str, tree: WorkspaceTree) -> CopyResult:
    """Mirror *source_path* into *target_root* on *tree*.

    Entries rejected by :func:`should_include` are skipped together with
    their whole subtree.  Symlinks and special files are ignored.  An
    unreadable directory is treated as empty; a file that cannot be
    stat'ed or read is reported as a :class:`CopyWarning` and skipped.

    Raises :class:`CopyError` if *source_path* does not exist.
    """
    source_path = Path(source_path)
    if not source_path.exists():
        msg = f"Source path does not exist: {source_path}\nPlease verify the path is correct."
        raise CopyError(msg)

    result = CopyResult()
    stack: list[Path] = [source_path]

    while stack:
        current = stack.pop()
        try:
            entries = sorted(os.listdir(current))
        except OSError:
            logger.debug("Cannot list %s, skipping", current)
            continue

        subdirs: list[Path] = []
        for entry in entries:
            full_path = current / entry
            rel_path = full_path.relative_to(source_path).as_posix()

            if not should_include(rel_path):
                logger.debug("Excluded %s", rel_path)
                continue

            try:
                mode = full_path.lstat().st_mode
            except OSError as exc:
                _warn(result, rel_path, exc)
                continue

            if stat.S_ISDIR(mode):
                subdirs.append(full_path)
            elif stat.S_ISREG(mode):
                try:
                    content = full_path.read_bytes()
                except OSError as exc:
                    _warn(result, rel_path, exc)
                    continue
                tree.write(join_path_fragments(target_root, rel_path), content)
                result.files_copied.append(rel_path)

        # Reversed so directories are visited in name order.
        stack.extend(reversed(subdirs))

    logger.info("Copied %d files into %s", len(result.files_copied), target_root)
    return result


def _warn(result: CopyResult, rel_path: str, exc: OSError) -> None:
    warning = CopyWarning(rel_path, exc.strerror or str(exc))
    logger.warning("%s", warning)
    result.warnings.append(warning)
