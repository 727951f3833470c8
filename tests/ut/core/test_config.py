"""集中配置单元测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgfetch.core import config as config_mod
from pkgfetch.core.config import Config, get_config, init_config
from pkgfetch.core.exceptions import ConfigError


class TestFromFile:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        cfg = Config.from_file(str(tmp_path / "none.yml"))
        assert cfg == Config()

    def test_known_and_extra_keys(self, tmp_path: Path) -> None:
        f = tmp_path / "config.yml"
        f.write_text(
            "cache_dir: /data/repos\nstrict: true\nvcs_hosts:\n  hg.example.org: hg\nmirror: x\n",
            encoding="utf-8",
        )
        cfg = Config.from_file(str(f))
        assert cfg.cache_dir == "/data/repos"
        assert cfg.strict is True
        assert cfg.vcs_hosts == {"hg.example.org": "hg"}
        assert cfg.extra == {"mirror": "x"}

    def test_path_fields(self) -> None:
        cfg = Config()
        assert {"cache_dir", "record_file", "names_file"} <= set(cfg.__dataclass_fields__)
        assert "home_dir" not in cfg.__dataclass_fields__

    def test_path_expands_user(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert Config().path("cache_dir") == tmp_path / ".pkgfetch" / "repos"


class TestWorkspaceRoot:
    def test_remote(self, tmp_path: Path) -> None:
        assert Config().workspace_root("remote", tmp_path) is None

    def test_local(self, tmp_path: Path) -> None:
        assert Config().workspace_root("local", tmp_path) == tmp_path / ".vendor" / "src"

    def test_gopath_from_config(self, tmp_path: Path) -> None:
        cfg = Config(system_workspace=str(tmp_path / "gp"))
        assert cfg.workspace_root("gopath", tmp_path) == tmp_path / "gp" / "src"

    def test_gopath_first_env_entry(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("GOPATH", f"{tmp_path / 'a'}:{tmp_path / 'b'}")
        assert Config().workspace_root("gopath", tmp_path) == tmp_path / "a" / "src"

    def test_gopath_unset(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.delenv("GOPATH", raising=False)
        with pytest.raises(ConfigError, match="无法确定系统工作区"):
            Config().workspace_root("gopath", tmp_path)


class TestGlobalConfig:
    def test_init_replaces_current(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr(config_mod, "_current", None)
        assert get_config() == Config()

        f = tmp_path / "config.yml"
        f.write_text("manifest_name: deps.yml\n", encoding="utf-8")
        init_config(str(f))

        assert get_config().manifest_name == "deps.yml"
