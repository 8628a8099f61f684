"""Tests for monograft.importer.validators: read-only import preconditions."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any

import pytest

from monograft.importer.errors import ValidationError, ValidationFailure
from monograft.importer.validators import (
    CONFIG_FILES,
    validate_project_name,
    validate_source,
    validate_target_directory,
)
from monograft.workspace.tree import WorkspaceTree

if TYPE_CHECKING:
    from pathlib import Path


def _write_file(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _make_source(
    root: Path,
    *,
    config: str | None = "astro.config.mjs",
    manifest: dict[str, Any] | str | None = None,
) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    if config:
        _write_file(root / config, "export default {};\n")
    if manifest is None:
        manifest = {"dependencies": {"astro": "^5.0.0"}}
    if isinstance(manifest, dict):
        manifest = json.dumps(manifest)
    _write_file(root / "package.json", manifest)
    return root


class _FakeRegistry:
    def __init__(self, *names: str) -> None:
        self.names = set(names)

    def exists(self, name: str) -> bool:
        return name in self.names

    def register(self, name: str, config: object) -> None:
        self.names.add(name)


def _kind(exc_info: pytest.ExceptionInfo[ValidationError]) -> ValidationFailure:
    return exc_info.value.kind


# ---------------------------------------------------------------------------
# validate_source
# ---------------------------------------------------------------------------


class TestValidateSource:
    def test_valid_project(self, tmp_path: Path) -> None:
        validate_source(_make_source(tmp_path / "site"))

    @pytest.mark.parametrize("config", CONFIG_FILES)
    def test_every_config_extension_accepted(self, tmp_path: Path, config: str) -> None:
        validate_source(_make_source(tmp_path / "site", config=config))

    def test_astro_in_dev_dependencies(self, tmp_path: Path) -> None:
        source = _make_source(
            tmp_path / "site", manifest={"devDependencies": {"astro": "^5.0.0"}}
        )
        validate_source(source)

    def test_relative_path_accepted(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _make_source(tmp_path / "site")
        monkeypatch.chdir(tmp_path)
        validate_source("site")

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="does not exist") as exc_info:
            validate_source(tmp_path / "nope")
        assert _kind(exc_info) is ValidationFailure.SOURCE_MISSING
        assert exc_info.value.value == str(tmp_path / "nope")

    def test_file_not_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(ValidationError, match="not a directory") as exc_info:
            validate_source(target)
        assert _kind(exc_info) is ValidationFailure.SOURCE_NOT_DIRECTORY

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_symlink_not_directory(self, tmp_path: Path) -> None:
        real = _make_source(tmp_path / "site")
        link = tmp_path / "link"
        link.symlink_to(real, target_is_directory=True)
        with pytest.raises(ValidationError) as exc_info:
            validate_source(link)
        assert _kind(exc_info) is ValidationFailure.SOURCE_NOT_DIRECTORY

    def test_missing_config(self, tmp_path: Path) -> None:
        source = _make_source(tmp_path / "site", config=None)
        with pytest.raises(ValidationError, match="No Astro configuration") as exc_info:
            validate_source(source)
        assert _kind(exc_info) is ValidationFailure.NO_CONFIG
        assert "astro.config.cts" in str(exc_info.value)

    def test_missing_config_checked_before_manifest(self, tmp_path: Path) -> None:
        # Unparsable manifest would fail later; config check must win.
        source = _make_source(tmp_path / "site", config=None, manifest="{not json")
        with pytest.raises(ValidationError) as exc_info:
            validate_source(source)
        assert _kind(exc_info) is ValidationFailure.NO_CONFIG

    def test_missing_manifest(self, tmp_path: Path) -> None:
        source = _make_source(tmp_path / "site")
        (source / "package.json").unlink()
        with pytest.raises(ValidationError, match="package.json not found") as exc_info:
            validate_source(source)
        assert _kind(exc_info) is ValidationFailure.MANIFEST_MISSING

    def test_invalid_manifest(self, tmp_path: Path) -> None:
        source = _make_source(tmp_path / "site", manifest="{not json")
        with pytest.raises(ValidationError, match="Invalid package.json") as exc_info:
            validate_source(source)
        assert _kind(exc_info) is ValidationFailure.MANIFEST_INVALID

    def test_missing_astro_dependency(self, tmp_path: Path) -> None:
        source = _make_source(
            tmp_path / "site", manifest={"dependencies": {"react": "^18.0.0"}}
        )
        with pytest.raises(ValidationError, match="Astro not found") as exc_info:
            validate_source(source)
        assert _kind(exc_info) is ValidationFailure.MISSING_DEPENDENCY

    def test_null_dependency_sections(self, tmp_path: Path) -> None:
        source = _make_source(
            tmp_path / "site", manifest={"dependencies": None, "devDependencies": None}
        )
        with pytest.raises(ValidationError) as exc_info:
            validate_source(source)
        assert _kind(exc_info) is ValidationFailure.MISSING_DEPENDENCY

    @pytest.mark.parametrize(
        "manifest",
        [
            {"dependencies": "astro-ish"},
            {"devDependencies": ["astro"]},
        ],
    )
    def test_non_mapping_dependency_sections(
        self, tmp_path: Path, manifest: dict[str, Any]
    ) -> None:
        source = _make_source(tmp_path / "site", manifest=manifest)
        with pytest.raises(ValidationError) as exc_info:
            validate_source(source)
        assert _kind(exc_info) is ValidationFailure.MISSING_DEPENDENCY

    def test_validation_error_is_value_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            validate_source(tmp_path / "nope")


# ---------------------------------------------------------------------------
# validate_project_name
# ---------------------------------------------------------------------------


class TestValidateProjectName:
    @pytest.mark.parametrize("name", ["my-astro-app", "MyAstroApp", "app123", "my-app-v2", "a"])
    def test_valid_names(self, name: str) -> None:
        validate_project_name(name, _FakeRegistry())

    @pytest.mark.parametrize("name", ["123app", "my app", "my_app", "-app", "", "my.app", "@a/b"])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(ValidationError, match="Invalid project name") as exc_info:
            validate_project_name(name, _FakeRegistry())
        assert _kind(exc_info) is ValidationFailure.INVALID_NAME

    def test_existing_project(self) -> None:
        with pytest.raises(ValidationError, match="already exists") as exc_info:
            validate_project_name("blog", _FakeRegistry("blog"))
        assert _kind(exc_info) is ValidationFailure.NAME_TAKEN
        assert exc_info.value.value == "blog"

    def test_syntax_checked_before_registry(self) -> None:
        class _Exploding(_FakeRegistry):
            def exists(self, name: str) -> bool:
                raise AssertionError("registry must not be consulted")

        with pytest.raises(ValidationError):
            validate_project_name("1bad", _Exploding())


# ---------------------------------------------------------------------------
# validate_target_directory
# ---------------------------------------------------------------------------


class TestValidateTargetDirectory:
    def test_free_directory(self, tmp_path: Path) -> None:
        validate_target_directory(WorkspaceTree(tmp_path), "apps/new-app")

    def test_existing_directory_on_disk(self, tmp_path: Path) -> None:
        (tmp_path / "apps" / "site").mkdir(parents=True)
        with pytest.raises(ValidationError, match="already exists") as exc_info:
            validate_target_directory(WorkspaceTree(tmp_path), "apps/site")
        assert _kind(exc_info) is ValidationFailure.DESTINATION_OCCUPIED

    def test_existing_file_at_target(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "apps" / "site", "not a dir")
        with pytest.raises(ValidationError):
            validate_target_directory(WorkspaceTree(tmp_path), "apps/site")

    def test_implicit_directory_from_staged_file(self, tmp_path: Path) -> None:
        tree = WorkspaceTree(tmp_path)
        tree.write("apps/site/index.ts", "export {};")
        with pytest.raises(ValidationError):
            validate_target_directory(tree, "apps/site")

    def test_path_is_normalized(self, tmp_path: Path) -> None:
        (tmp_path / "apps" / "site").mkdir(parents=True)
        with pytest.raises(ValidationError) as exc_info:
            validate_target_directory(WorkspaceTree(tmp_path), "./apps//site/")
        assert exc_info.value.value == "apps/site"

    def test_sibling_prefix_is_not_a_conflict(self, tmp_path: Path) -> None:
        tree = WorkspaceTree(tmp_path)
        tree.write("apps/site-old/index.ts", "")
        validate_target_directory(tree, "apps/site")
