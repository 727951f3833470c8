"""VCS 适配器 - 支持 Git / Mercurial

职责：
- 克隆 / 拉取包到共享缓存，并记录实际修订号
- 在工作区检出中原地更新
- 按检测结果或主机规则为节点选择适配器
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from pkgfetch.core.dep.models import Node, VersionKind
from pkgfetch.core.dep.paths import detect_vcs
from pkgfetch.core.exceptions import ExecutionError, FetchError, ValidationError
from pkgfetch.utils.net import clone_url
from pkgfetch.utils.shell import CommandExecutor, get_executor, run_cmd

logger = logging.getLogger(__name__)


class _BaseVcs:
    kind = ""
    marker = ""

    def __init__(self, executor: CommandExecutor | None = None) -> None:
        self._executor = executor

    @property
    def executor(self) -> CommandExecutor:
        return self._executor or get_executor()

    def detect(self, path: Path) -> bool:
        return (path / self.marker).exists()

    def _run(self, cmd: list[str], cwd: Path | str = ".") -> str:
        try:
            return run_cmd(cmd, cwd=str(cwd), executor=self.executor, label=f"{self.kind} {cmd[1]}").stdout
        except ExecutionError as e:
            raise FetchError(str(e)) from e

    @staticmethod
    def _url(node: Node) -> str:
        try:
            return clone_url(node.root_path)
        except ValidationError as e:
            raise FetchError(str(e)) from e


class GitVcs(_BaseVcs):
    """Git 仓库"""

    kind = "git"
    marker = ".git"

    def fetch(self, node: Node) -> None:
        """拉取到 node.install_path

        - 已有检出: fetch 后切换到目标版本
        - 标签 / 具名分支且无锁定修订号: 浅克隆 --branch
        - 提交 / 锁定修订号 / 最新: 完整克隆后切换
        """
        dest = node.install_path
        pin = self._pin(node)
        if self.detect(dest):
            self._run(["git", "fetch", "--tags", "origin"], cwd=dest)
            self._run(["git", "checkout", "--detach", pin or self._remote_ref(node)], cwd=dest)
        else:
            if dest.exists():
                shutil.rmtree(dest)
            dest.parent.mkdir(parents=True, exist_ok=True)
            if node.kind is not VersionKind.COMMIT and node.value and not node.revision:
                self._run(["git", "clone", "--depth", "1", "--branch", node.value, self._url(node), str(dest)])
            else:
                self._run(["git", "clone", self._url(node), str(dest)])
                if pin:
                    self._run(["git", "checkout", "--detach", pin], cwd=dest)
        node.revision = self._run(["git", "rev-parse", "HEAD"], cwd=dest).strip()
        logger.debug("Git 就绪: %s -> %s (%s)", node.label(), dest, node.revision[:12])

    def update(self, node: Node) -> None:
        ws = node.install_workspace_path
        if ws is None:
            raise FetchError(f"没有工作区位置: {node.label()}")
        if node.is_fixed():
            # 标签 / 提交检出处于分离 HEAD，git pull 无法使用
            self._run(["git", "fetch", "--tags", "origin"], cwd=ws)
            self._run(["git", "checkout", "--detach", self._pin(node) or self._remote_ref(node)], cwd=ws)
        else:
            self._run(["git", "pull"], cwd=ws)
        node.revision = self._run(["git", "rev-parse", "HEAD"], cwd=ws).strip()

    @staticmethod
    def _pin(node: Node) -> str:
        if node.kind is VersionKind.COMMIT:
            return node.value
        if node.is_unpinned():
            return node.revision
        return ""

    @staticmethod
    def _remote_ref(node: Node) -> str:
        if node.kind is VersionKind.TAG:
            return f"tags/{node.value}"
        if node.value:
            return f"origin/{node.value}"
        return "origin/HEAD"


class HgVcs(_BaseVcs):
    """Mercurial 仓库"""

    kind = "hg"
    marker = ".hg"

    def fetch(self, node: Node) -> None:
        dest = node.install_path
        rev = node.value or node.revision
        if self.detect(dest):
            self._run(["hg", "pull"], cwd=dest)
        else:
            if dest.exists():
                shutil.rmtree(dest)
            dest.parent.mkdir(parents=True, exist_ok=True)
            self._run(["hg", "clone", "--noupdate", self._url(node), str(dest)])
        self._run(["hg", "update", "--clean", rev or "default"], cwd=dest)
        node.revision = self._run(["hg", "identify", "--id", "--debug"], cwd=dest).strip()

    def update(self, node: Node) -> None:
        ws = node.install_workspace_path
        if ws is None:
            raise FetchError(f"没有工作区位置: {node.label()}")
        if node.is_fixed():
            self._run(["hg", "pull"], cwd=ws)
            self._run(["hg", "update", "--clean", node.value], cwd=ws)
        else:
            self._run(["hg", "pull", "--update"], cwd=ws)
        node.revision = self._run(["hg", "identify", "--id", "--debug"], cwd=ws).strip()


class VcsSelector:
    """为节点选择适配器

    优先级: 缓存位置已有检出的类型 > 主机规则 vcs_hosts > 默认 git
    """

    def __init__(
        self,
        adapters: list[_BaseVcs] | None = None,
        vcs_hosts: dict[str, str] | None = None,
        default: str = "git",
    ) -> None:
        adapters = adapters if adapters is not None else [GitVcs(), HgVcs()]
        self._adapters = {a.kind: a for a in adapters}
        self._hosts = dict(vcs_hosts or {})
        self._default = default

    def for_kind(self, kind: str) -> _BaseVcs:
        adapter = self._adapters.get(kind)
        if adapter is None:
            raise FetchError(f"不支持的版本控制工具: {kind}")
        return adapter

    def for_node(self, node: Node) -> _BaseVcs:
        kind = detect_vcs(node.install_path)
        if kind is None:
            host = node.root_path.split("/", 1)[0]
            kind = self._hosts.get(host, self._default)
        return self.for_kind(kind)
