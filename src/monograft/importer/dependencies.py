"""Extract installable dependencies from a project's ``package.json``."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from monograft.importer.errors import ExtractionError

logger = logging.getLogger(__name__)

# Specifiers pointing at local code; meaningless once the project moves.
LOCAL_PROTOCOLS = ("workspace:", "file:", "link:")


@dataclass
class DependencySet:
    """Runtime and development dependencies, name -> version specifier."""

    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)


def filter_dependencies(deps: dict[str, Any] | None) -> dict[str, str]:
    """Drop blank specifiers and local ``workspace:``/``file:``/``link:`` ones."""
    filtered: dict[str, str] = {}
    if not isinstance(deps, dict):
        return filtered
    for name, version in deps.items():
        if not isinstance(version, str) or not version.strip():
            continue
        if version.startswith(LOCAL_PROTOCOLS):
            logger.debug("Skipping local dependency %s@%s", name, version)
            continue
        filtered[name] = version
    return filtered


def extract_dependencies(manifest_path: Path) -> DependencySet:
    """Read *manifest_path* and return its filtered dependencies.

    ``optionalDependencies`` are folded into the development set.

    Raises :class:`ExtractionError` if the manifest is missing or is not
    a JSON object.
    """
    manifest_path = Path(manifest_path)
    if not manifest_path.is_file():
        msg = (
            f"package.json not found at {manifest_path}\n"
            "The source project must have a package.json file."
        )
        raise ExtractionError(str(manifest_path), msg)

    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = f"Failed to parse package.json at {manifest_path}:\n{exc}"
        raise ExtractionError(str(manifest_path), msg) from exc

    if not isinstance(data, dict):
        msg = f"Failed to parse package.json at {manifest_path}:\nexpected a JSON object"
        raise ExtractionError(str(manifest_path), msg)

    dev = filter_dependencies(data.get("devDependencies"))
    dev.update(filter_dependencies(data.get("optionalDependencies")))

    return DependencySet(
        dependencies=filter_dependencies(data.get("dependencies")),
        dev_dependencies=dev,
    )
