"""Import request and its normalized form."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from monograft.importer.errors import ValidationError, ValidationFailure
from monograft.workspace.config import WorkspaceConfig
from monograft.workspace.manifest import get_workspace_scope
from monograft.workspace.tree import join_path_fragments, normalize_path

if TYPE_CHECKING:
    from monograft.workspace.tree import WorkspaceTree

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z\d])([A-Z])")
_SEPARATOR_RE = re.compile(r"(?!^_)[ _]")


@dataclass(frozen=True)
class ImportRequest:
    """Raw options for one import, as given by the caller."""

    source: str
    name: str | None = None
    directory: str | None = None
    tags: str | None = None
    import_alias: str | None = None
    skip_format: bool = False
    skip_install: bool = False
    set_out_dir: bool = False


@dataclass(frozen=True)
class NormalizedImportOptions:
    """Options every pipeline stage reads.

    ``project_root`` is relative to the workspace root and never contains
    ``.`` segments or stray separators.
    """

    project_name: str
    project_root: str
    source_path: Path
    source_project_name: str
    tags: list[str] = field(default_factory=list)
    import_alias: str | None = None
    skip_format: bool = False
    skip_install: bool = False
    set_out_dir: bool = False

    @property
    def project_directory(self) -> str:
        return self.project_root


def to_file_name(name: str) -> str:
    """Convert ``MyApp``/``my_app``/``my app`` style names to ``my-app``."""
    return _SEPARATOR_RE.sub("-", _CAMEL_BOUNDARY_RE.sub(r"\1-\2", name).lower())


def parse_tags(tags: str | None) -> list[str]:
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def normalize_options(
    tree: WorkspaceTree,
    request: ImportRequest,
    config: WorkspaceConfig | None = None,
) -> NormalizedImportOptions:
    """Derive :class:`NormalizedImportOptions` from *request*.

    The project name defaults to the source directory name and the
    directory to ``<apps_dir>/<name>``.  Without an explicit alias, one is
    built from the workspace scope when the workspace declares one.

    Raises :class:`ValidationError` if the directory climbs out of the
    workspace with ``..``.
    """
    config = config or WorkspaceConfig()

    source_path = Path(os.path.abspath(request.source))
    source_project_name = source_path.name

    project_name = to_file_name(request.name or source_project_name)

    raw_directory = request.directory or join_path_fragments(config.apps_dir, project_name)
    project_root = normalize_path(raw_directory)
    if ".." in project_root.split("/"):
        msg = (
            f"Invalid project directory: {raw_directory}\n"
            "The directory must stay inside the workspace."
        )
        raise ValidationError(ValidationFailure.INVALID_DESTINATION, raw_directory, msg)

    import_alias = request.import_alias
    if not import_alias:
        scope = get_workspace_scope(tree)
        import_alias = f"@{scope}/{project_name}" if scope else None

    return NormalizedImportOptions(
        project_name=project_name,
        project_root=project_root,
        source_path=source_path,
        source_project_name=source_project_name,
        tags=parse_tags(request.tags),
        import_alias=import_alias,
        skip_format=request.skip_format,
        skip_install=request.skip_install,
        set_out_dir=request.set_out_dir,
    )
