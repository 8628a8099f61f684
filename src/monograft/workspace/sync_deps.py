"""Keep a project's ``@astrojs/*`` integrations in step with the root manifest."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from monograft.workspace.manifest import ROOT_MANIFEST
from monograft.workspace.tree import join_path_fragments, read_json, write_json

if TYPE_CHECKING:
    from monograft.workspace.tree import WorkspaceTree

logger = logging.getLogger(__name__)

INTEGRATION_PREFIX = "@astrojs/"


def _pick(sections: list[Any], prefix: str) -> dict[str, str]:
    picked: dict[str, str] = {}
    for section in sections:
        if not isinstance(section, dict):
            continue
        for name, version in section.items():
            if name.startswith(prefix):
                picked[name] = version
    return picked


def _read_object(tree: WorkspaceTree, path: str) -> dict[str, Any]:
    data = read_json(tree, path)
    if not isinstance(data, dict):
        msg = f"{path} does not contain a JSON object"
        raise ValueError(msg)
    return data


def sync_framework_dependencies(
    tree: WorkspaceTree,
    project_root: str,
    prefix: str = INTEGRATION_PREFIX,
) -> dict[str, str]:
    """Copy the root manifest's *prefix* packages into the project manifest.

    Stale *prefix* entries in the project's ``dependencies`` are replaced;
    other entries are kept.  Nothing is written when the project is already
    in sync or has no ``package.json``.  Returns the root's *prefix*
    packages.

    Raises :class:`ValueError` if either manifest is not a JSON object.
    """
    project_manifest = join_path_fragments(project_root, "package.json")
    if not tree.is_file(project_manifest):
        logger.warning("%s not found, skipping sync", project_manifest)
        return {}

    root_data = _read_object(tree, ROOT_MANIFEST)
    wanted = _pick(
        [root_data.get("dependencies"), root_data.get("devDependencies")],
        prefix,
    )

    project_data = _read_object(tree, project_manifest)
    deps_section = project_data.get("dependencies")
    current_deps: dict[str, str] = dict(deps_section) if isinstance(deps_section, dict) else {}
    current = _pick([current_deps], prefix)

    if current == wanted:
        logger.info("%s* dependencies already in sync for %s", prefix, project_manifest)
        return wanted

    updated = {name: ver for name, ver in current_deps.items() if not name.startswith(prefix)}
    updated.update(wanted)
    project_data["dependencies"] = updated
    write_json(tree, project_manifest, project_data)

    logger.info("Synced %d %s* dependencies to %s", len(wanted), prefix, project_manifest)
    return wanted
