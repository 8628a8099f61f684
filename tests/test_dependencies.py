"""Tests for monograft.importer.dependencies: manifest dependency extraction."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from monograft.importer.dependencies import (
    DependencySet,
    extract_dependencies,
    filter_dependencies,
)
from monograft.importer.errors import ExtractionError

if TYPE_CHECKING:
    from pathlib import Path


def _manifest(tmp_path: Path, data: dict[str, Any]) -> Path:
    path = tmp_path / "package.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestFilterDependencies:
    def test_drops_local_and_blank_specifiers(self) -> None:
        deps = {"a": "^1.0.0", "b": "workspace:*", "c": "file:../x", "d": ""}
        assert filter_dependencies(deps) == {"a": "^1.0.0"}

    def test_drops_link_and_whitespace(self) -> None:
        assert filter_dependencies({"e": "link:../e", "f": "   ", "g": "~2.1.0"}) == {
            "g": "~2.1.0"
        }

    def test_keeps_other_protocols(self) -> None:
        deps = {"h": "npm:other@1", "i": "github:org/repo", "j": "latest"}
        assert filter_dependencies(deps) == deps

    def test_non_string_specifier_dropped(self) -> None:
        assert filter_dependencies({"k": None, "l": 3}) == {}

    def test_none_and_non_dict(self) -> None:
        assert filter_dependencies(None) == {}
        assert filter_dependencies(["astro"]) == {}  # type: ignore[arg-type]


class TestExtractDependencies:
    def test_runtime_and_dev_split(self, tmp_path: Path) -> None:
        path = _manifest(
            tmp_path,
            {
                "dependencies": {"astro": "^5.0.0"},
                "devDependencies": {"vitest": "^2.0.0"},
                "optionalDependencies": {"sharp": "^0.33.0"},
            },
        )
        result = extract_dependencies(path)
        assert result.dependencies == {"astro": "^5.0.0"}
        assert result.dev_dependencies == {"vitest": "^2.0.0", "sharp": "^0.33.0"}

    def test_optional_overrides_dev(self, tmp_path: Path) -> None:
        path = _manifest(
            tmp_path,
            {
                "devDependencies": {"sharp": "^0.32.0"},
                "optionalDependencies": {"sharp": "^0.33.0"},
            },
        )
        assert extract_dependencies(path).dev_dependencies == {"sharp": "^0.33.0"}

    def test_missing_sections(self, tmp_path: Path) -> None:
        path = _manifest(tmp_path, {"name": "bare"})
        assert extract_dependencies(path) == DependencySet()

    def test_null_sections(self, tmp_path: Path) -> None:
        path = _manifest(
            tmp_path,
            {"dependencies": None, "devDependencies": None, "optionalDependencies": None},
        )
        assert extract_dependencies(path) == DependencySet()

    def test_workspace_entries_never_reach_output(self, tmp_path: Path) -> None:
        path = _manifest(
            tmp_path,
            {
                "dependencies": {"astro": "^5.0.0", "@acme/ui": "workspace:^"},
                "devDependencies": {"@acme/config": "file:../config"},
                "optionalDependencies": {"@acme/opt": "link:../opt"},
            },
        )
        result = extract_dependencies(path)
        assert result.dependencies == {"astro": "^5.0.0"}
        assert result.dev_dependencies == {}

    def test_missing_manifest(self, tmp_path: Path) -> None:
        missing = tmp_path / "package.json"
        with pytest.raises(ExtractionError, match="package.json not found") as exc_info:
            extract_dependencies(missing)
        assert exc_info.value.path == str(missing)

    def test_unparsable_manifest(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(ExtractionError, match="Failed to parse") as exc_info:
            extract_dependencies(path)
        assert str(path) in str(exc_info.value)

    def test_non_object_manifest(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ExtractionError):
            extract_dependencies(path)
