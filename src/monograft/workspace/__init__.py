"""Workspace domain: staged file tree, project registry, root manifest, config."""

from monograft.workspace.config import WorkspaceConfig, load_workspace_config
from monograft.workspace.registry import ProjectRegistry, TreeProjectRegistry
from monograft.workspace.tree import WorkspaceTree

__all__ = [
    "ProjectRegistry",
    "TreeProjectRegistry",
    "WorkspaceConfig",
    "WorkspaceTree",
    "load_workspace_config",
]
