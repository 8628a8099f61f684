"""Monograft CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import click

from monograft import __version__
from monograft.importer.errors import MonograftError

if TYPE_CHECKING:
    from monograft.importer import ImportResult


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    """Send ``monograft.*`` log records to a rich handler."""
    from rich.logging import RichHandler

    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR

    pkg_logger = logging.getLogger("monograft")
    pkg_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        pkg_logger.addHandler(RichHandler(show_time=False, show_path=False))


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="monograft")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Monograft - import existing Astro projects into a monorepo."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    _configure_logging(verbose=verbose, quiet=quiet)


@main.command("import")
@click.argument("source", type=click.Path(path_type=Path))
@click.option("--name", default=None, help="Project name (default: source directory name).")
@click.option(
    "--directory",
    default=None,
    help="Destination relative to the workspace root (default: apps/<name>).",
)
@click.option("--tags", default=None, help="Comma-separated project tags.")
@click.option(
    "--import-alias",
    default=None,
    help="TypeScript path alias (default: @<workspace scope>/<name>).",
)
@click.option("--skip-format", is_flag=True, help="Do not format generated files.")
@click.option("--skip-install", is_flag=True, help="Do not suggest installing dependencies.")
@click.option("--set-out-dir", is_flag=True, help="Point astro.config.mjs outDir at dist/.")
@click.option("--dry-run", is_flag=True, help="Show what would be written without writing.")
@click.option(
    "--workspace",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: current directory).",
)
def import_cmd(
    source: Path,
    *,
    name: str | None,
    directory: str | None,
    tags: str | None,
    import_alias: str | None,
    skip_format: bool,
    skip_install: bool,
    set_out_dir: bool,
    dry_run: bool,
    workspace: Path | None,
) -> None:
    """Import the Astro project at SOURCE into the workspace."""
    from monograft.importer import ImportRequest, import_project
    from monograft.workspace import WorkspaceTree, load_workspace_config
    from monograft.workspace.manifest import detect_package_manager

    workspace_root = workspace or Path.cwd()
    tree = WorkspaceTree(workspace_root)
    request = ImportRequest(
        source=str(source),
        name=name,
        directory=directory,
        tags=tags,
        import_alias=import_alias,
        skip_format=skip_format,
        skip_install=skip_install,
        set_out_dir=set_out_dir,
    )

    try:
        result = import_project(tree, request, config=load_workspace_config(workspace_root))
    except (MonograftError, OSError, ValueError) as exc:
        _fail(exc)

    if dry_run:
        click.echo("Dry run: nothing written.")
        for change in tree.list_changes():
            click.echo(f"  [new] {change.path}")
    else:
        written = tree.flush()
        click.echo(f"Wrote {len(written)} files.")

    _print_summary(result)

    if result.warnings:
        click.echo("")
        for warning in result.warnings:
            click.echo(f"  [warn] {warning}")

    click.echo("")
    click.echo("Next steps:")
    click.echo(f"  Review the imported project in {result.project_root}")
    if not skip_install:
        click.echo(f"  Install dependencies: {detect_package_manager(tree)} install")
    click.echo(f"  Run the dev server: nx dev {result.project_name}")


def _print_summary(result: ImportResult) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title=f"Imported {result.project_name}", show_header=False, box=None)
    table.add_column("field", style="cyan")
    table.add_column("value")
    table.add_row("Root", result.project_root)
    table.add_row("Files", str(len(result.files_copied)))
    table.add_row("Targets", ", ".join(result.config.targets))
    table.add_row("Tags", ", ".join(result.config.tags) or "-")
    table.add_row("New deps", ", ".join(result.dependencies_added) or "-")
    if result.import_alias:
        status = "" if result.alias_registered else " (no path mapping file)"
        table.add_row("Alias", f"{result.import_alias}{status}")
    Console().print(table)


@main.command()
@click.argument("source", type=click.Path(path_type=Path))
def check(source: Path) -> None:
    """Check that SOURCE is an importable Astro project."""
    from monograft.importer import validate_source

    try:
        validate_source(source)
    except MonograftError as exc:
        _fail(exc)
    click.echo(f"[ok] {source} is an Astro project.")


@main.command("sync-deps")
@click.argument("project_root")
@click.option(
    "--workspace",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: current directory).",
)
def sync_deps(project_root: str, *, workspace: Path | None) -> None:
    """Copy root @astrojs/* versions into PROJECT_ROOT/package.json."""
    from monograft.workspace import WorkspaceTree
    from monograft.workspace.sync_deps import sync_framework_dependencies

    tree = WorkspaceTree(workspace or Path.cwd())
    try:
        synced = sync_framework_dependencies(tree, project_root)
    except (OSError, ValueError) as exc:
        _fail(exc)

    changed = tree.flush()
    if changed:
        click.echo(f"Synced {len(synced)} @astrojs/* dependencies to {changed[0]}")
    else:
        click.echo("Nothing to sync.")
