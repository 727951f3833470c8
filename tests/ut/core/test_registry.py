"""YamlRegistry 基类与本地记录 / 包名表单元测试"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from pkgfetch.core.dep.records import LocalRecordStore, NameRegistry
from pkgfetch.core.registry import YamlRegistry


class ConcreteRegistry(YamlRegistry):
    section_key = "items"


@pytest.fixture()
def registry(tmp_path: Path) -> ConcreteRegistry:
    reg_file = tmp_path / "reg.yml"
    reg_file.write_text("{}", encoding="utf-8")
    return ConcreteRegistry(str(reg_file))


class TestYamlRegistry:
    def test_put_and_get(self, registry: ConcreteRegistry) -> None:
        registry._put("foo", {"x": 1})
        assert registry._get_raw("foo") == {"x": 1}

    def test_get_missing_returns_none(self, registry: ConcreteRegistry) -> None:
        assert registry._get_raw("nonexistent") is None

    def test_put_overwrites(self, registry: ConcreteRegistry) -> None:
        registry._put("k", {"old": True})
        registry._put("k", {"new": True})
        assert registry._get_raw("k") == {"new": True}

    def test_persistence(self, tmp_path: Path) -> None:
        reg_file = tmp_path / "persist.yml"
        ConcreteRegistry(reg_file)._put("persisted", {"a": 1})
        assert ConcreteRegistry(reg_file)._get_raw("persisted") == {"a": 1}

    def test_deferred_save(self, tmp_path: Path) -> None:
        reg_file = tmp_path / "deferred.yml"
        reg = ConcreteRegistry(reg_file)
        reg._put("x", 1, save=False)
        assert not reg_file.exists()
        reg._save()
        assert ConcreteRegistry(reg_file)._get_raw("x") == 1

    def test_file_required_without_config_key(self) -> None:
        with pytest.raises(ValueError, match="需要指定注册表文件"):
            ConcreteRegistry()

    def test_non_dict_section_replaced(self, tmp_path: Path) -> None:
        reg_file = tmp_path / "bad.yml"
        reg_file.write_text("items: [1, 2]\n", encoding="utf-8")
        assert ConcreteRegistry(reg_file)._section() == {}


class TestLocalRecordStore:
    def test_set_is_memory_only_until_save_all(self, tmp_path: Path) -> None:
        f = tmp_path / "data" / "local_nodes.yml"
        store = LocalRecordStore(f)
        store.set("github.com/a/b", "3f2a9c1d")
        assert not f.exists()

        store.save_all()

        data = yaml.safe_load(f.read_text(encoding="utf-8"))
        assert data == {"nodes": {"github.com/a/b": {"value": "3f2a9c1d"}}}

    def test_placeholder_is_known_but_empty(self, tmp_path: Path) -> None:
        store = LocalRecordStore(tmp_path / "r.yml")
        store.set("github.com/a/b", "")
        assert store.has("github.com/a/b")
        assert store.get("github.com/a/b") == ""

    def test_unknown_root(self, tmp_path: Path) -> None:
        store = LocalRecordStore(tmp_path / "r.yml")
        assert not store.has("github.com/a/b")
        assert store.get("github.com/a/b") == ""

    def test_save_all_without_changes_writes_nothing(self, tmp_path: Path) -> None:
        f = tmp_path / "r.yml"
        LocalRecordStore(f).save_all()
        assert not f.exists()

    def test_default_file_from_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from pkgfetch.core.config import Config
        monkeypatch.setattr(
            "pkgfetch.core.config._current", Config(record_file=str(tmp_path / "cfg.yml")),
        )
        assert LocalRecordStore().registry_file == tmp_path / "cfg.yml"


class TestNameRegistry:
    def test_known_short_name(self, tmp_path: Path) -> None:
        names = NameRegistry(tmp_path / "pkgname.yml")
        names.register("beego", "github.com/astaxie/beego")
        assert NameRegistry(tmp_path / "pkgname.yml").full_path_for("beego") == "github.com/astaxie/beego"

    def test_unknown_name_returned_as_is(self, tmp_path: Path) -> None:
        names = NameRegistry(tmp_path / "pkgname.yml")
        assert names.full_path_for("github.com/x/y") == "github.com/x/y"
