"""Point an imported project's build output at the workspace ``dist``."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from monograft.workspace.tree import join_path_fragments, offset_from_root

if TYPE_CHECKING:
    from monograft.workspace.tree import WorkspaceTree

logger = logging.getLogger(__name__)

CONFIG_FILE = "astro.config.mjs"

_DEFINE_CONFIG_RE = re.compile(r"defineConfig\(\{")
_EXPORT_DEFAULT_RE = re.compile(r"export default \{")


def inject_out_dir(tree: WorkspaceTree, project_root: str) -> bool:
    """Add ``outDir: '<offset>dist/<root>'`` to the project's config.

    Skipped when there is no ``astro.config.mjs`` or it already mentions
    ``outDir``.  Returns True if the config was rewritten.
    """
    config_path = join_path_fragments(project_root, CONFIG_FILE)
    content = tree.read_text(config_path)
    if not content or "outDir" in content:
        return False

    out_dir = f"{offset_from_root(project_root)}dist/{project_root}"
    prop = f"outDir: '{out_dir}'"

    if _DEFINE_CONFIG_RE.search(content):
        pattern, opening = _DEFINE_CONFIG_RE, "defineConfig({"
    else:
        pattern, opening = _EXPORT_DEFAULT_RE, "export default {"
    updated = pattern.sub(lambda _m: f"{opening}\n  {prop},", content, count=1)

    if updated == content:
        logger.debug("No config object found in %s", config_path)
        return False

    tree.write(config_path, updated)
    logger.info("Set outDir to %s in %s", out_dir, config_path)
    return True
