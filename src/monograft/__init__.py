"""Monograft - import existing web projects into a monorepo build graph."""

from monograft.importer import ImportRequest, ImportResult, import_project
from monograft.workspace import ProjectRegistry, TreeProjectRegistry, WorkspaceTree

__version__ = "0.1.0"

__all__ = [
    "ImportRequest",
    "ImportResult",
    "ProjectRegistry",
    "TreeProjectRegistry",
    "WorkspaceTree",
    "__version__",
    "import_project",
]
