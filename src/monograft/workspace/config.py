"""Workspace settings from ``.monograft/config.yml``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_PATH = ".monograft/config.yml"


@dataclass(frozen=True)
class WorkspaceConfig:
    """Per-workspace defaults for imported projects."""

    apps_dir: str = "apps"
    executor_namespace: str = "@monograft/astro"
    path_mapping_file: str = "tsconfig.base.json"


def load_workspace_config(workspace_root: Path) -> WorkspaceConfig:
    """Load :class:`WorkspaceConfig` from the workspace.

    Falls back to defaults for a missing file, unreadable YAML, or
    non-string values.  Unknown keys are ignored.
    """
    config_path = workspace_root / CONFIG_PATH
    if not config_path.is_file():
        return WorkspaceConfig()

    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        logger.warning("Failed to read %s, using defaults", CONFIG_PATH)
        return WorkspaceConfig()

    if not isinstance(data, dict):
        return WorkspaceConfig()

    kwargs: dict[str, Any] = {}
    for f in fields(WorkspaceConfig):
        value = data.get(f.name)
        if value is None:
            continue
        if not isinstance(value, str) or not value.strip():
            logger.warning("Ignoring invalid %s value in %s: %r", f.name, CONFIG_PATH, value)
            continue
        kwargs[f.name] = value.strip()

    return WorkspaceConfig(**kwargs)
