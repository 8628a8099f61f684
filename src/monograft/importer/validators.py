"""Read-only precondition checks run before an import touches anything."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from monograft.importer.errors import ValidationError, ValidationFailure
from monograft.workspace.tree import normalize_path

if TYPE_CHECKING:
    from monograft.workspace.registry import ProjectRegistry
    from monograft.workspace.tree import WorkspaceTree

FRAMEWORK_PACKAGE = "astro"

# Recognized framework config files, in lookup order.
CONFIG_FILES = (
    "astro.config.mjs",
    "astro.config.js",
    "astro.config.ts",
    "astro.config.cjs",
    "astro.config.mts",
    "astro.config.cts",
)

PROJECT_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9-]*$")


def validate_source(source_path: str | Path) -> None:
    """Check that *source_path* is an Astro project directory.

    Checks run in order and stop at the first failure: the path exists,
    is a real directory, holds a recognized config file, holds a
    ``package.json`` that parses, and that manifest lists ``astro`` in
    ``dependencies`` or ``devDependencies``.

    Raises :class:`ValidationError` describing the failed check.
    """
    raw = str(source_path)
    path = Path(os.path.abspath(source_path))

    if not path.exists() and not path.is_symlink():
        msg = (
            f"Source path does not exist: {raw}\n"
            f"Resolved to: {path}\n"
            "Please verify the path and try again."
        )
        raise ValidationError(ValidationFailure.SOURCE_MISSING, raw, msg)

    if not path.is_dir() or path.is_symlink():
        msg = (
            f"Source path is not a directory: {raw}\n"
            "Only directories containing Astro projects can be imported."
        )
        raise ValidationError(ValidationFailure.SOURCE_NOT_DIRECTORY, raw, msg)

    if not any((path / name).exists() for name in CONFIG_FILES):
        msg = (
            f"No Astro configuration file found in: {raw}\n"
            f"Expected one of: {', '.join(CONFIG_FILES)}\n"
            "This does not appear to be an Astro project."
        )
        raise ValidationError(ValidationFailure.NO_CONFIG, raw, msg)

    manifest_path = path / "package.json"
    if not manifest_path.is_file():
        msg = (
            f"package.json not found in: {raw}\n"
            f"Expected location: {manifest_path}\n"
            "An Astro project must have a package.json file."
        )
        raise ValidationError(ValidationFailure.MANIFEST_MISSING, str(manifest_path), msg)

    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = (
            f"Invalid package.json in: {raw}\n"
            "The package.json file could not be parsed as valid JSON.\n"
            f"Error: {exc}"
        )
        raise ValidationError(
            ValidationFailure.MANIFEST_INVALID, str(manifest_path), msg
        ) from exc

    if not isinstance(manifest, dict):
        manifest = {}
    deps = manifest.get("dependencies")
    dev_deps = manifest.get("devDependencies")
    if not isinstance(deps, dict):
        deps = {}
    if not isinstance(dev_deps, dict):
        dev_deps = {}
    if FRAMEWORK_PACKAGE not in deps and FRAMEWORK_PACKAGE not in dev_deps:
        msg = (
            f"Astro not found in dependencies in: {raw}\n"
            "Expected 'astro' in dependencies or devDependencies in package.json.\n"
            "This does not appear to be an Astro project."
        )
        raise ValidationError(ValidationFailure.MISSING_DEPENDENCY, raw, msg)


def validate_project_name(name: str, registry: ProjectRegistry) -> None:
    """Reject malformed names and names already taken in *registry*."""
    if not PROJECT_NAME_RE.match(name):
        msg = (
            f'Invalid project name: "{name}"\n'
            "Project names must start with a letter and contain only letters, "
            "numbers, and hyphens.\n"
            "Examples: my-app, MyApp, app123, my-astro-app"
        )
        raise ValidationError(ValidationFailure.INVALID_NAME, name, msg)

    if registry.exists(name):
        msg = (
            f'Project "{name}" already exists in the workspace.\n'
            "Please choose a different name or remove the existing project first."
        )
        raise ValidationError(ValidationFailure.NAME_TAKEN, name, msg)


def validate_target_directory(tree: WorkspaceTree, directory: str) -> None:
    """Reject a destination that already exists or already has children.

    The children check catches directories that exist only implicitly,
    through files staged beneath them.
    """
    normalized = normalize_path(directory)
    if tree.exists(normalized) or tree.children(normalized):
        msg = (
            f"Target directory already exists: {directory}\n"
            f'The directory "{normalized}" already contains files.\n'
            "Please choose a different directory or remove the existing one first."
        )
        raise ValidationError(ValidationFailure.DESTINATION_OCCUPIED, normalized, msg)
