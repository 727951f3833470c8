"""测试共享 fixture — 内存 VCS + 临时目录配置

FakeVcs 用一份 "远程仓库" 字典模拟拉取:
  repos = {"github.com/x/a": {"a.go": go_source("github.com/x/b")}}
fetch 时把文件写入 node.install_path，并记录每次调用，
failing 中的根路径会先写入半成品文件再抛出 FetchError。
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgfetch.core.config import Config
from pkgfetch.core.dep.models import Node
from pkgfetch.core.dep.options import GetOptions
from pkgfetch.core.exceptions import FetchError
from pkgfetch.services.get_service import GetService


def go_source(*imports: str, package: str = "main") -> str:
    """生成一个带分组导入的源文件"""
    lines = [f"package {package}", "", "import ("]
    lines += [f'\t"{name}"' for name in imports]
    lines += [")", "", "func main() {}", ""]
    return "\n".join(lines)


class FakeVcs:
    """同时充当 VcsAdapter 和 VcsProvider"""

    kind = "git"

    def __init__(
        self,
        repos: dict[str, dict[str, str]] | None = None,
        failing: tuple[str, ...] = (),
    ) -> None:
        self.repos = repos or {}
        self.failing = set(failing)
        self.fetched: list[tuple[str, str]] = []
        self.pins: dict[str, str] = {}
        self.updated: list[str] = []

    # VcsProvider
    def for_kind(self, kind: str) -> FakeVcs:
        return self

    def for_node(self, node: Node) -> FakeVcs:
        return self

    # VcsAdapter
    def detect(self, path: Path) -> bool:
        return (path / ".git").exists()

    def fetch(self, node: Node) -> None:
        self.fetched.append((node.root_path, str(node.version)))
        self.pins[node.root_path] = node.revision
        node.install_path.mkdir(parents=True, exist_ok=True)
        for rel, content in self.repos.get(node.root_path, {}).items():
            dest = node.install_path / rel
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text(content, encoding="utf-8")
        if node.root_path in self.failing:
            raise FetchError("fatal: remote end hung up unexpectedly")
        node.revision = node.root_path.rsplit("/", 1)[-1] + "-rev1"

    def update(self, node: Node) -> None:
        self.updated.append(node.root_path)
        node.revision = "updated-rev"

    @property
    def fetched_roots(self) -> list[str]:
        return [root for root, _ in self.fetched]


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    return Config(
        cache_dir=str(tmp_path / "home" / "repos"),
        record_file=str(tmp_path / "home" / "data" / "local_nodes.yml"),
        names_file=str(tmp_path / "home" / "data" / "pkgname.yml"),
        system_workspace=str(tmp_path / "gopath"),
    )


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    d = tmp_path / "project"
    d.mkdir()
    return d


@pytest.fixture()
def make_service(config: Config, project_dir: Path):
    """构造注入 FakeVcs 的 GetService"""

    def _make(vcs: FakeVcs, **options: object) -> GetService:
        return GetService(GetOptions(**options), config, project_dir=project_dir, vcs=vcs)  # type: ignore[arg-type]

    return _make
