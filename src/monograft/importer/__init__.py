"""Importer domain: bring an existing Astro project into the workspace."""

from monograft.importer.aliases import update_path_aliases
from monograft.importer.copier import CopyResult, copy_project_files
from monograft.importer.dependencies import DependencySet, extract_dependencies
from monograft.importer.errors import (
    CopyError,
    CopyWarning,
    ExtractionError,
    MonograftError,
    ValidationError,
    ValidationFailure,
)
from monograft.importer.file_filter import should_include
from monograft.importer.options import ImportRequest, NormalizedImportOptions, normalize_options
from monograft.importer.pipeline import ImportResult, import_project, validate_import
from monograft.importer.targets import ProjectConfiguration, Target, create_project_config
from monograft.importer.validators import (
    validate_project_name,
    validate_source,
    validate_target_directory,
)

__all__ = [
    "CopyError",
    "CopyResult",
    "CopyWarning",
    "DependencySet",
    "ExtractionError",
    "ImportRequest",
    "ImportResult",
    "MonograftError",
    "NormalizedImportOptions",
    "ProjectConfiguration",
    "Target",
    "ValidationError",
    "ValidationFailure",
    "copy_project_files",
    "create_project_config",
    "extract_dependencies",
    "import_project",
    "normalize_options",
    "should_include",
    "update_path_aliases",
    "validate_import",
    "validate_project_name",
    "validate_source",
    "validate_target_directory",
]
