"""Root ``package.json`` access: dependency merge, package manager, scope."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from monograft.workspace.tree import read_json, write_json

if TYPE_CHECKING:
    from monograft.importer.dependencies import DependencySet
    from monograft.workspace.tree import WorkspaceTree

logger = logging.getLogger(__name__)

ROOT_MANIFEST = "package.json"

PACKAGE_MANAGERS = ("bun", "pnpm", "yarn", "npm")

# Lock files probed in order when ``packageManager`` is not declared.
_LOCK_FILES = (
    ("bun.lockb", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
)


def _read_root_manifest(tree: WorkspaceTree) -> dict[str, Any] | None:
    """Return the root manifest object, or None if missing or unusable."""
    if not tree.is_file(ROOT_MANIFEST):
        return None
    try:
        data = read_json(tree, ROOT_MANIFEST)
    except ValueError:
        logger.warning("Root %s is not valid JSON", ROOT_MANIFEST)
        return None
    return data if isinstance(data, dict) else None


def merge_dependencies(tree: WorkspaceTree, deps: DependencySet) -> list[str]:
    """Add *deps* to the root manifest, keeping versions already declared.

    A package already present in either ``dependencies`` or
    ``devDependencies`` is left untouched, and so is the order of the
    existing entries.  A missing root manifest is created.  Returns the
    names that were added.
    """
    manifest = _read_root_manifest(tree)
    if manifest is None:
        if tree.is_file(ROOT_MANIFEST):
            msg = f"Cannot merge dependencies: root {ROOT_MANIFEST} is not a JSON object"
            raise ValueError(msg)
        manifest = {}

    runtime: dict[str, str] = dict(manifest.get("dependencies") or {})
    dev: dict[str, str] = dict(manifest.get("devDependencies") or {})
    declared = set(runtime) | set(dev)

    added: list[str] = []
    for name, version in deps.dependencies.items():
        if name not in declared:
            runtime[name] = version
            declared.add(name)
            added.append(name)
    for name, version in deps.dev_dependencies.items():
        if name not in declared:
            dev[name] = version
            declared.add(name)
            added.append(name)

    if not added:
        logger.debug("Root %s already declares every dependency", ROOT_MANIFEST)
        return added

    # Existing entries keep their order; new names are appended.
    if runtime:
        manifest["dependencies"] = runtime
    if dev:
        manifest["devDependencies"] = dev
    write_json(tree, ROOT_MANIFEST, manifest)
    logger.info("Added %d dependencies to %s", len(added), ROOT_MANIFEST)
    return added


def detect_package_manager(tree: WorkspaceTree) -> str:
    """Detect the workspace package manager.

    The ``packageManager`` field (``name@version``) wins; otherwise the
    first lock file found decides.  Defaults to ``npm``.
    """
    manifest = _read_root_manifest(tree)
    if manifest is not None:
        declared = manifest.get("packageManager")
        if isinstance(declared, str):
            name = declared.split("@")[0]
            if name in PACKAGE_MANAGERS:
                return name

    for lock_file, manager in _LOCK_FILES:
        if tree.exists(lock_file):
            return manager
    return "npm"


def get_workspace_scope(tree: WorkspaceTree) -> str | None:
    """Return the npm scope used for default import aliases.

    Reads ``npmScope`` from ``nx.json``, then the root manifest ``name``
    (``@acme/root`` gives ``acme``).
    """
    if tree.is_file("nx.json"):
        try:
            nx_json = read_json(tree, "nx.json")
        except ValueError:
            nx_json = None
        if isinstance(nx_json, dict) and nx_json.get("npmScope"):
            return str(nx_json["npmScope"])

    manifest = _read_root_manifest(tree)
    if manifest is not None and isinstance(manifest.get("name"), str) and manifest["name"]:
        name: str = manifest["name"]
        return name.removeprefix("@").split("/")[0]
    return None
