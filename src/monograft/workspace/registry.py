"""Workspace project registry backed by ``project.json`` files."""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Any, Protocol

from monograft.workspace.tree import join_path_fragments, write_json

if TYPE_CHECKING:
    from monograft.importer.targets import ProjectConfiguration
    from monograft.workspace.tree import WorkspaceTree

logger = logging.getLogger(__name__)

PROJECT_FILE = "project.json"

# Package installs, VCS metadata and tool caches.  Output folders such as
# ``build`` or ``dist`` are still walked: a project may live under one.
PRUNED_DIRECTORIES = frozenset(
    {
        "node_modules",
        ".git",
        ".hg",
        ".svn",
        ".nx",
        ".cache",
        ".turbo",
        ".angular",
        ".astro",
        ".next",
        ".nuxt",
        ".idea",
        ".vscode",
        ".vs",
    }
)


class ProjectRegistry(Protocol):
    """Lookup and registration of workspace projects by name."""

    def exists(self, name: str) -> bool: ...

    def register(self, name: str, config: ProjectConfiguration) -> None: ...


class TreeProjectRegistry:
    """Registry reading and staging ``<root>/project.json`` files in a tree.

    A project's name is the ``name`` field of its ``project.json``, or the
    containing directory name when the field is absent.
    """

    def __init__(self, tree: WorkspaceTree) -> None:
        self.tree = tree
        self._registered: dict[str, str] = {}

    def _discover(self) -> dict[str, str]:
        """Map project name -> project root for every ``project.json`` on disk."""
        found: dict[str, str] = {}
        root = self.tree.root
        if not root.is_dir():
            return found

        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in PRUNED_DIRECTORIES)
            if PROJECT_FILE not in filenames:
                continue
            rel_root = os.path.relpath(dirpath, root).replace(os.sep, "/")
            rel_root = "" if rel_root == "." else rel_root
            name = self._project_name(join_path_fragments(rel_root, PROJECT_FILE), rel_root)
            if name:
                found.setdefault(name, rel_root)
        return found

    def _project_name(self, project_file: str, project_root: str) -> str:
        text = self.tree.read_text(project_file)
        data: Any = None
        if text is not None:
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                logger.debug("Skipping unparsable %s", project_file)
                return ""
        if isinstance(data, dict) and isinstance(data.get("name"), str) and data["name"]:
            return str(data["name"])
        return project_root.rsplit("/", 1)[-1]

    def projects(self) -> dict[str, str]:
        """All known projects, including ones registered on this tree."""
        found = self._discover()
        found.update(self._registered)
        return found

    def exists(self, name: str) -> bool:
        return name in self.projects()

    def register(self, name: str, config: ProjectConfiguration) -> None:
        if self.exists(name):
            msg = f"Project '{name}' is already registered"
            raise ValueError(msg)
        data = {"name": name, **config.to_dict()}
        write_json(self.tree, join_path_fragments(config.root, PROJECT_FILE), data)
        self._registered[name] = config.root
        logger.info("Registered project %s at %s", name, config.root)
