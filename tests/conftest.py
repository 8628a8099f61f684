"""Shared test fixtures for Monograft."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from pathlib import Path


def _write_file(path: Path, content: str | bytes = "") -> None:
    """Create parent dirs and write content to a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")


def _write_json(path: Path, data: Any) -> None:
    _write_file(path, json.dumps(data, indent=2))


@pytest.fixture()
def astro_source(tmp_path: Path) -> Path:
    """A minimal importable Astro project outside the workspace."""
    source = tmp_path / "external" / "my-site"
    _write_file(source / "astro.config.mjs", "export default defineConfig({});\n")
    _write_json(
        source / "package.json",
        {
            "name": "my-site",
            "dependencies": {"astro": "^5.0.0", "@astrojs/mdx": "^4.0.0"},
            "devDependencies": {"typescript": "^5.6.0"},
        },
    )
    _write_file(source / "src" / "pages" / "index.astro", "---\n---\n<h1>Hi</h1>\n")
    _write_file(source / "public" / "favicon.svg", "<svg/>")
    _write_file(source / ".env.example", "API_KEY=\n")
    _write_file(source / ".env", "API_KEY=secret\n")
    _write_file(source / "node_modules" / "astro" / "index.js", "module.exports = {};\n")
    _write_file(source / "dist" / "index.html", "<html></html>")
    _write_file(source / "package-lock.json", "{}")
    return source


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    """An empty monorepo root with a root manifest and path-mapping file."""
    root = tmp_path / "monorepo"
    _write_json(
        root / "package.json",
        {"name": "@acme/source", "private": True, "devDependencies": {"nx": "20.0.0"}},
    )
    _write_json(root / "tsconfig.base.json", {"compilerOptions": {"paths": {}}})
    return root
