"""依赖节点数据模型

数据类:
- VersionKind / VersionSpec: 版本描述（branch/tag/commit + 值）
- Node: 单个待解析包，包含身份、版本、安装位置与状态标记
- NodeLayout: 节点构造器，统一推导根路径与两个安装位置
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pkgfetch.core.dep.paths import derive_root_path, detect_vcs
from pkgfetch.core.exceptions import InvalidVersionError

_SAFE_VALUE_RE = re.compile(r"^[a-zA-Z0-9_./@\-]+$")


class VersionKind(str, Enum):
    BRANCH = "branch"
    TAG = "tag"
    COMMIT = "commit"


@dataclass(frozen=True)
class VersionSpec:
    """版本描述

    BRANCH 且 value 为空表示 "最新、未锁定"；
    BRANCH 且 value 非空表示锁定到某个分支。
    """

    kind: VersionKind = VersionKind.BRANCH
    value: str = ""

    @classmethod
    def parse(cls, text: str | None) -> VersionSpec:
        """解析 "kind:value" 形式的版本描述，空串视为最新分支

        >>> VersionSpec.parse("tag:v1.2.3")
        VersionSpec(kind=<VersionKind.TAG: 'tag'>, value='v1.2.3')
        """
        text = (text or "").strip()
        if not text:
            return cls()
        if ":" not in text:
            raise InvalidVersionError(f"无法解析版本描述: {text}（应为 <branch|tag|commit>:<值>）")
        kind_str, value = text.split(":", 1)
        try:
            kind = VersionKind(kind_str.strip().lower())
        except ValueError:
            raise InvalidVersionError(f"非法的版本类型: {kind_str}") from None
        value = value.strip()
        if value and not _SAFE_VALUE_RE.match(value):
            raise InvalidVersionError(f"版本值包含非法字符: {value}")
        if not value and kind is not VersionKind.BRANCH:
            raise InvalidVersionError(f"{kind.value} 类型必须指定值: {text}")
        return cls(kind=kind, value=value)

    @property
    def is_unpinned(self) -> bool:
        return self.kind is VersionKind.BRANCH and not self.value

    @property
    def is_fixed(self) -> bool:
        return not self.is_unpinned

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"


@dataclass
class Node:
    """依赖解析的基本单元"""

    import_path: str
    root_path: str
    version: VersionSpec
    install_path: Path                          # 共享缓存位置
    install_workspace_path: Path | None = None  # 工作区位置（remote 模式下为 None）
    revision: str = ""                          # 拉取后填入的实际修订号
    recurse_deps: bool = True
    get_deps_only: bool = False

    @property
    def kind(self) -> VersionKind:
        return self.version.kind

    @property
    def value(self) -> str:
        return self.version.value

    def is_fixed(self) -> bool:
        return self.version.is_fixed

    def is_unpinned(self) -> bool:
        return self.version.is_unpinned

    def exists(self) -> bool:
        return self.install_path.exists()

    def has_vcs_metadata(self) -> bool:
        """工作区位置是否已是一个 VCS 检出（用户自己维护的仓库不覆盖）"""
        return detect_vcs(self.install_workspace_path) is not None

    def label(self) -> str:
        return f"{self.import_path}@{self.version}"


class NodeLayout:
    """节点构造器 — 由导入路径和版本推导根路径与安装位置

    安装位置规则:
      - 共享缓存: <cache_dir>/<root_path>[.<value>]，value 中的 / 替换为 _
      - 工作区:   <workspace_dir>/<root_path>
    """

    def __init__(
        self,
        cache_dir: Path,
        workspace_dir: Path | None = None,
        deriver: Callable[[str], str] = derive_root_path,
    ) -> None:
        self.cache_dir = cache_dir
        self.workspace_dir = workspace_dir
        self.deriver = deriver

    def new_node(
        self,
        import_path: str,
        version: VersionSpec | None = None,
        *,
        recurse_deps: bool = True,
    ) -> Node:
        version = version or VersionSpec()
        root_path = self.deriver(import_path)
        suffix = f".{version.value.replace('/', '_')}" if version.value else ""
        return Node(
            import_path=import_path,
            root_path=root_path,
            version=version,
            install_path=self.cache_dir / (root_path + suffix),
            install_workspace_path=(
                self.workspace_dir / root_path if self.workspace_dir else None
            ),
            recurse_deps=recurse_deps,
        )


@dataclass
class ResolutionSession:
    """单次运行的解析状态，作为显式参数贯穿整个递归过程

    - visited: 已交给下载器（或确认已安装）的根路径，保证每个根路径只处理一次
    - skip_notified: 已输出过跳过提示的根路径，仅用于去除重复日志
    """

    visited: set[str] = field(default_factory=set)
    skip_notified: set[str] = field(default_factory=set)
    succeeded: int = 0
    failed: int = 0
    fetched: list[str] = field(default_factory=list)

    def claim(self, root_path: str) -> bool:
        """检查并占用根路径，首次占用返回 True"""
        if root_path in self.visited:
            return False
        self.visited.add(root_path)
        return True

    def notify_skip(self, root_path: str) -> bool:
        """每个根路径只需提示一次跳过，首次返回 True"""
        if root_path in self.skip_notified:
            return False
        self.skip_notified.add(root_path)
        return True
