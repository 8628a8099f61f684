"""Register a TypeScript path alias for an imported project."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from monograft.workspace.tree import join_path_fragments, update_json

if TYPE_CHECKING:
    from monograft.workspace.tree import WorkspaceTree

logger = logging.getLogger(__name__)

PATH_MAPPING_FILE = "tsconfig.base.json"
ENTRY_FILE = "src/index.ts"


def update_path_aliases(
    tree: WorkspaceTree,
    alias: str | None,
    project_root: str,
    mapping_file: str = PATH_MAPPING_FILE,
) -> bool:
    """Point *alias* at the project's entry file in ``compilerOptions.paths``.

    Does nothing when *alias* is empty or *mapping_file* does not exist.
    Re-running with the same arguments leaves a single entry.  Returns
    True if the mapping file was updated.
    """
    if not alias or not tree.is_file(mapping_file):
        return False

    entry = join_path_fragments(project_root, ENTRY_FILE)

    def _upsert(data: dict[str, Any]) -> dict[str, Any]:
        compiler_options = data.get("compilerOptions")
        if not isinstance(compiler_options, dict):
            compiler_options = data["compilerOptions"] = {}
        paths = compiler_options.get("paths")
        if not isinstance(paths, dict):
            paths = compiler_options["paths"] = {}
        paths[alias] = [entry]
        return data

    update_json(tree, mapping_file, _upsert)
    logger.info("Mapped %s to %s in %s", alias, entry, mapping_file)
    return True
