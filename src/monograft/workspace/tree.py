"""Staged view of a workspace directory.

Writes are kept in memory and only reach the disk on :meth:`WorkspaceTree.flush`.
Reads see staged content first, then the files on disk.  All paths are
workspace-relative strings with ``/`` separators.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Normalize a workspace path: ``/`` separators, no ``.``/empty segments.

    Leading and trailing separators are dropped, so the result is always
    relative to the workspace root.  ``..`` segments are kept as-is; callers
    that must stay inside the workspace reject them.
    """
    parts = [p for p in path.replace("\\", "/").split("/") if p not in ("", ".")]
    return "/".join(parts)


def join_path_fragments(*fragments: str) -> str:
    """Join workspace path fragments, skipping empty ones."""
    return normalize_path("/".join(f for f in fragments if f))


def offset_from_root(path: str) -> str:
    """Return the ``../`` prefix leading from *path* back to the workspace root."""
    normalized = normalize_path(path)
    if not normalized:
        return ""
    return "../" * len(normalized.split("/"))


@dataclass(frozen=True)
class FileChange:
    """A staged write."""

    path: str
    content: bytes


class WorkspaceTree:
    """In-memory overlay over a workspace root directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._staged: dict[str, bytes] = {}

    # -- reads ---------------------------------------------------------------

    def exists(self, path: str) -> bool:
        """True if *path* is a staged file, an implicit staged directory, or on disk."""
        path = normalize_path(path)
        if path in self._staged:
            return True
        if path and any(p.startswith(path + "/") for p in self._staged):
            return True
        return (self.root / path).exists()

    def is_file(self, path: str) -> bool:
        path = normalize_path(path)
        if path in self._staged:
            return True
        return (self.root / path).is_file()

    def read(self, path: str) -> bytes | None:
        """Return file content, or ``None`` when the file does not exist."""
        path = normalize_path(path)
        if path in self._staged:
            return self._staged[path]
        disk_path = self.root / path
        if not disk_path.is_file():
            return None
        return disk_path.read_bytes()

    def read_text(self, path: str) -> str | None:
        content = self.read(path)
        if content is None:
            return None
        return content.decode("utf-8")

    def children(self, path: str) -> list[str]:
        """Names of the direct children of *path*, staged and on disk."""
        path = normalize_path(path)
        names: set[str] = set()

        prefix = path + "/" if path else ""
        for staged in self._staged:
            if staged.startswith(prefix):
                names.add(staged[len(prefix) :].split("/", 1)[0])

        disk_path = self.root / path
        if disk_path.is_dir():
            try:
                names.update(entry.name for entry in disk_path.iterdir())
            except OSError:
                logger.debug("Cannot list %s", disk_path)

        return sorted(names)

    # -- writes --------------------------------------------------------------

    def write(self, path: str, content: bytes | str) -> None:
        """Stage *content* at *path*, replacing any earlier staged write."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._staged[normalize_path(path)] = content

    def list_changes(self) -> list[FileChange]:
        return [FileChange(path, content) for path, content in sorted(self._staged.items())]

    def flush(self) -> list[str]:
        """Write every staged file to disk and clear the stage.

        Returns the workspace-relative paths written.
        """
        written: list[str] = []
        for change in self.list_changes():
            target = self.root / change.path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(change.content)
            written.append(change.path)
        self._staged.clear()
        logger.debug("Flushed %d files to %s", len(written), self.root)
        return written


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------


def _string_end(text: str, start: int) -> int:
    """Index just past the double-quoted string opening at *start*."""
    i = start + 1
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == '"':
            return i + 1
        i += 1
    return n


def _strip_comments(text: str) -> str:
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        nxt = text[i + 1] if i + 1 < n else ""
        if c == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
        elif c == "/" and nxt == "/":
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif c == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            end = n if end == -1 else end + 2
            # Keep line numbers stable for parse errors.
            out.append("\n" * text.count("\n", i, end))
            i = end
        else:
            out.append(c)
            i += 1
    return "".join(out)


def _strip_trailing_commas(text: str) -> str:
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
            continue
        if c == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "}]":
                i += 1
                continue
        out.append(c)
        i += 1
    return "".join(out)


def strip_jsonc(text: str) -> str:
    """Turn JSON-with-comments (``tsconfig.json`` style) into plain JSON.

    Removes ``//`` and ``/* */`` comments and trailing commas before ``}``
    or ``]``.  String contents are left untouched.
    """
    return _strip_trailing_commas(_strip_comments(text))


def read_json(tree: WorkspaceTree, path: str) -> Any:
    """Parse a JSON file from the tree.

    Comments and trailing commas are accepted, as in ``tsconfig.json``.
    They are not preserved when the file is written back.

    Raises :class:`FileNotFoundError` if missing and :class:`ValueError`
    if the content is not valid JSON.
    """
    text = tree.read_text(path)
    if text is None:
        msg = f"Cannot find {path}"
        raise FileNotFoundError(msg)
    try:
        return json.loads(strip_jsonc(text))
    except json.JSONDecodeError as exc:
        msg = f"Cannot parse {path}: {exc}"
        raise ValueError(msg) from exc


def write_json(tree: WorkspaceTree, path: str, data: Any) -> None:
    tree.write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def update_json(
    tree: WorkspaceTree,
    path: str,
    updater: Callable[[dict[str, Any]], dict[str, Any]],
) -> None:
    """Read, transform and stage a JSON object file."""
    data = read_json(tree, path)
    if not isinstance(data, dict):
        msg = f"{path} does not contain a JSON object"
        raise ValueError(msg)
    write_json(tree, path, updater(data))
