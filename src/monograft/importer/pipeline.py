"""Import pipeline: validate everything, then mutate the workspace tree.

The two phases never interleave.  Validation only reads; the first failed
check is returned as a value and aborts the import before any write.
Mutation then runs in a fixed order: copy files, merge dependencies,
register the project, map the import alias.

All writes are staged on the :class:`WorkspaceTree`.  A failure during
mutation propagates without undoing earlier staged writes; the caller
decides whether to flush.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from monograft.importer.aliases import update_path_aliases
from monograft.importer.copier import copy_project_files
from monograft.importer.dependencies import DependencySet, extract_dependencies
from monograft.importer.errors import ValidationError
from monograft.importer.framework_config import inject_out_dir
from monograft.importer.options import normalize_options
from monograft.importer.targets import create_project_config
from monograft.importer.validators import (
    validate_project_name,
    validate_source,
    validate_target_directory,
)
from monograft.workspace.config import WorkspaceConfig
from monograft.workspace.manifest import detect_package_manager, merge_dependencies
from monograft.workspace.registry import TreeProjectRegistry

if TYPE_CHECKING:
    from monograft.importer.errors import CopyWarning
    from monograft.importer.options import ImportRequest, NormalizedImportOptions
    from monograft.importer.targets import ProjectConfiguration
    from monograft.workspace.registry import ProjectRegistry
    from monograft.workspace.tree import WorkspaceTree

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Summary of a completed import."""

    project_name: str
    project_root: str
    config: ProjectConfiguration
    import_alias: str | None = None
    alias_registered: bool = False
    files_copied: list[str] = field(default_factory=list)
    dependencies: DependencySet = field(default_factory=DependencySet)
    dependencies_added: list[str] = field(default_factory=list)
    warnings: list[CopyWarning] = field(default_factory=list)


def validate_import(
    tree: WorkspaceTree,
    options: NormalizedImportOptions,
    registry: ProjectRegistry,
) -> ValidationError | None:
    """Run source, name and directory checks; return the first failure."""
    try:
        logger.info("Validating source project...")
        validate_source(options.source_path)
        logger.info("Validating project name...")
        validate_project_name(options.project_name, registry)
        logger.info("Validating target directory...")
        validate_target_directory(tree, options.project_root)
    except ValidationError as exc:
        return exc
    return None


def import_project(
    tree: WorkspaceTree,
    request: ImportRequest,
    registry: ProjectRegistry | None = None,
    config: WorkspaceConfig | None = None,
) -> ImportResult:
    """Import the project described by *request* into *tree*.

    Raises :class:`ValidationError` before any write when a precondition
    fails, and :class:`ExtractionError` or :class:`CopyError` if the
    source changes underneath the import.
    """
    config = config or WorkspaceConfig()
    if registry is None:
        registry = TreeProjectRegistry(tree)

    logger.info("Normalizing options...")
    options = normalize_options(tree, request, config)

    error = validate_import(tree, options, registry)
    if error is not None:
        raise error

    logger.info("Copying project files...")
    copied = copy_project_files(options.source_path, options.project_root, tree)

    if options.set_out_dir:
        inject_out_dir(tree, options.project_root)

    logger.info("Merging dependencies...")
    deps = extract_dependencies(options.source_path / "package.json")
    added = merge_dependencies(tree, deps)

    logger.info("Creating project configuration...")
    project_config = create_project_config(
        options,
        package_manager=detect_package_manager(tree),
        executor_namespace=config.executor_namespace,
    )
    registry.register(options.project_name, project_config)

    alias_registered = False
    if options.import_alias:
        logger.info("Updating TypeScript paths...")
        alias_registered = update_path_aliases(
            tree, options.import_alias, options.project_root, config.path_mapping_file
        )

    return ImportResult(
        project_name=options.project_name,
        project_root=options.project_root,
        config=project_config,
        import_alias=options.import_alias,
        alias_registered=alias_registered,
        files_copied=copied.files_copied,
        dependencies=deps,
        dependencies_added=added,
        warnings=copied.warnings,
    )
