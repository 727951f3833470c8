"""项目清单读写与生成单元测试"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from pkgfetch.core.dep.imports import SourceImportScanner
from pkgfetch.core.dep.manifest import Manifest, ManifestStore
from pkgfetch.core.dep.models import VersionKind
from pkgfetch.core.exceptions import ConfigError, InvalidVersionError
from tests.conftest import go_source


@pytest.fixture()
def store() -> ManifestStore:
    return ManifestStore()


class TestManifest:
    def test_lookup_full_path_then_root(self, tmp_path: Path) -> None:
        m = Manifest(tmp_path / "pkgfile.yml", deps={
            "github.com/a/b": "tag:v1",
            "github.com/a/b/sub": "commit:abc",
        })
        assert m.dependency_version("github.com/a/b/sub") == "commit:abc"
        assert m.dependency_version("github.com/a/b/other") == "tag:v1"
        assert m.dependency_version("github.com/c/d") == ""

    def test_version_spec(self, tmp_path: Path) -> None:
        m = Manifest(tmp_path / "pkgfile.yml", deps={"github.com/a/b": "tag:v1", "github.com/c/d": "x"})
        assert m.version_spec("github.com/a/b").kind is VersionKind.TAG
        assert m.version_spec("github.com/e/f").is_unpinned
        with pytest.raises(InvalidVersionError):
            m.version_spec("github.com/c/d")


class TestManifestStore:
    def test_load_missing_is_empty(self, store: ManifestStore, tmp_path: Path) -> None:
        assert not store.exists(tmp_path)
        m = store.load(tmp_path)
        assert (m.target, m.deps) == ("", {})

    def test_load_normalizes_values(self, store: ManifestStore, tmp_path: Path) -> None:
        (tmp_path / "pkgfile.yml").write_text(
            "target:\n  path: github.com/me/app\ndeps:\n  github.com/a/b:\n  github.com/c/d: ' tag:v2 '\n",
            encoding="utf-8",
        )
        m = store.load(tmp_path)
        assert m.target == "github.com/me/app"
        assert m.deps == {"github.com/a/b": "", "github.com/c/d": "tag:v2"}

    def test_save_round_trip(self, store: ManifestStore, tmp_path: Path) -> None:
        store.save(Manifest(tmp_path / "pkgfile.yml", "github.com/me/app", {"github.com/a/b": ""}))
        data = yaml.safe_load((tmp_path / "pkgfile.yml").read_text(encoding="utf-8"))
        assert data == {"target": {"path": "github.com/me/app"}, "deps": {"github.com/a/b": ""}}

    @pytest.mark.parametrize(("content", "match"), [
        ("deps:\n  - github.com/a/b\n", "deps 应为映射"),
        ("deps: github.com/a/b\n", "deps 应为映射"),
        ("target: [a, b]\n", "target 应为映射或字符串"),
    ])
    def test_load_rejects_wrong_shape(
        self, store: ManifestStore, tmp_path: Path, content: str, match: str,
    ) -> None:
        (tmp_path / "pkgfile.yml").write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError, match=match):
            store.load(tmp_path)

    def test_load_accepts_plain_target(self, store: ManifestStore, tmp_path: Path) -> None:
        (tmp_path / "pkgfile.yml").write_text("target: github.com/me/app\n", encoding="utf-8")
        assert store.load(tmp_path).target == "github.com/me/app"

    def test_custom_manifest_name(self, tmp_path: Path) -> None:
        (tmp_path / "deps.yml").write_text("deps: {}\n", encoding="utf-8")
        assert ManifestStore("deps.yml").exists(tmp_path)


class TestGenerate:
    def test_keeps_declared_and_adds_scanned(self, store: ManifestStore, tmp_path: Path) -> None:
        (tmp_path / "pkgfile.yml").write_text(
            yaml.dump({"target": {"path": "github.com/me/app"}, "deps": {"github.com/a/b": "tag:v1"}}),
            encoding="utf-8",
        )
        (tmp_path / "main.go").write_text(
            go_source("github.com/a/b/sub", "github.com/c/d/e", "github.com/me/app/util"),
            encoding="utf-8",
        )

        m = store.generate(tmp_path, SourceImportScanner())

        assert m.deps == {"github.com/a/b": "tag:v1", "github.com/c/d": ""}
        assert store.load(tmp_path).deps == m.deps

    def test_target_guessed_from_workspace_src(self, store: ManifestStore, tmp_path: Path) -> None:
        project = tmp_path / "src" / "github.com" / "me" / "app"
        project.mkdir(parents=True)
        assert store.generate(project, SourceImportScanner()).target == "github.com/me/app"

    def test_target_falls_back_to_dir_name(self, store: ManifestStore, tmp_path: Path) -> None:
        project = tmp_path / "myproj"
        project.mkdir()
        assert store.generate(project, SourceImportScanner()).target == "myproj"
