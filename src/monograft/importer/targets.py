"""Build-graph entry for an imported project.

Builds the ``project.json`` shape with the fixed ``dev``, ``build``,
``preview``, ``check`` and ``sync`` targets.  Pure data: nothing here
reads or writes files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from monograft.workspace.tree import join_path_fragments

if TYPE_CHECKING:
    from monograft.importer.options import NormalizedImportOptions

DEFAULT_EXECUTOR_NAMESPACE = "@monograft/astro"

TARGET_NAMES = ("dev", "build", "preview", "check", "sync")

# Bun's binary lockfile stands in for external-dependency fingerprints.
BUN_LOCKFILE_INPUT = "{workspaceRoot}/bun.lockb"

BUILD_OUTPUTS = ("{workspaceRoot}/dist/{projectRoot}", "{projectRoot}/.astro")
GENERATED_TYPES_OUTPUT = "{projectRoot}/.astro"
CONTENT_INPUT = "{projectRoot}/src/content/**/*"

Input = str | dict[str, list[str]]


@dataclass
class Target:
    """One named task of a project."""

    executor: str
    cache: bool
    depends_on: list[str] | None = None
    inputs: list[Input] | None = None
    outputs: list[str] | None = None
    metadata: dict[str, Any] | None = None
    options: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"executor": self.executor, "options": dict(self.options)}
        if self.inputs is not None:
            data["inputs"] = list(self.inputs)
        if self.outputs is not None:
            data["outputs"] = list(self.outputs)
        data["cache"] = self.cache
        if self.depends_on is not None:
            data["dependsOn"] = list(self.depends_on)
        if self.metadata is not None:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass
class ProjectConfiguration:
    """A project entry as stored in the workspace registry."""

    root: str
    source_root: str
    tags: list[str]
    targets: dict[str, Target]
    project_type: str = "application"

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "sourceRoot": self.source_root,
            "projectType": self.project_type,
            "tags": list(self.tags),
            "targets": {name: target.to_dict() for name, target in self.targets.items()},
        }


def _inputs(base: list[Input], external: list[str], package_manager: str) -> list[Input]:
    if package_manager == "bun":
        return [*base, BUN_LOCKFILE_INPUT]
    return [*base, {"externalDependencies": external}]


def build_target_graph(
    package_manager: str = "npm",
    executor_namespace: str = DEFAULT_EXECUTOR_NAMESPACE,
) -> dict[str, Target]:
    """Return the five targets of an imported project, in fixed order.

    - ``dev`` is never cached: it is a long-running server.
    - ``build`` is cached and waits for ``build`` of every dependency.
    - ``preview`` serves built output, so it is uncached and needs ``build``.
    - ``check`` is cached and needs ``sync`` for generated types.
    - ``sync`` is cached, writes ``.astro`` and is tagged as an astro
      target so generic TypeScript sync does not claim it.
    """
    ns = executor_namespace
    return {
        "dev": Target(executor=f"{ns}:dev", cache=False),
        "build": Target(
            executor=f"{ns}:build",
            cache=True,
            inputs=_inputs(["production", "^production"], ["astro"], package_manager),
            outputs=list(BUILD_OUTPUTS),
            depends_on=["^build"],
        ),
        "preview": Target(executor=f"{ns}:preview", cache=False, depends_on=["build"]),
        "check": Target(
            executor=f"{ns}:check",
            cache=True,
            inputs=_inputs(["default", "^production"], ["astro", "typescript"], package_manager),
            depends_on=["sync"],
        ),
        "sync": Target(
            executor=f"{ns}:sync",
            cache=True,
            inputs=_inputs([CONTENT_INPUT], ["astro"], package_manager),
            outputs=[GENERATED_TYPES_OUTPUT],
            metadata={"technologies": ["astro"]},
        ),
    }


def create_project_config(
    options: NormalizedImportOptions,
    package_manager: str = "npm",
    executor_namespace: str = DEFAULT_EXECUTOR_NAMESPACE,
) -> ProjectConfiguration:
    """Assemble the :class:`ProjectConfiguration` for *options*."""
    return ProjectConfiguration(
        root=options.project_root,
        source_root=join_path_fragments(options.project_root, "src"),
        tags=list(options.tags),
        targets=build_target_graph(package_manager, executor_namespace),
    )
