"""领域协议定义

集中定义解析核心依赖的外部协作者接口（Protocol）。
解析器与下载器只依赖这些抽象，VCS 执行、清单读写、记录持久化
均可在测试中替换为内存实现。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pkgfetch.core.dep.manifest import Manifest
    from pkgfetch.core.dep.models import Node


# =========================================================================
# VCS 协议
# =========================================================================

class VcsAdapter(Protocol):
    """版本控制适配器

    fetch/update 失败时抛 FetchError，成功后 fetch 负责填入 node.revision。
    """

    kind: str

    def detect(self, path: Path) -> bool:
        """path 是否为该 VCS 的检出目录"""
        ...

    def fetch(self, node: Node) -> None:
        """拉取 node 到共享缓存位置 node.install_path"""
        ...

    def update(self, node: Node) -> None:
        """在工作区检出 node.install_workspace_path 中原地更新"""
        ...


class VcsProvider(Protocol):
    """按节点选择 VCS 适配器（每个节点只选择一次）"""

    def for_kind(self, kind: str) -> VcsAdapter:
        ...

    def for_node(self, node: Node) -> VcsAdapter:
        ...


# =========================================================================
# 导入枚举协议
# =========================================================================

class ImportScanner(Protocol):
    def scan(self, import_path: str, root_path: str, src_dir: Path) -> list[str]:
        """枚举某个包的外部导入"""
        ...

    def scan_tree(self, root_path: str, src_dir: Path) -> list[str]:
        """枚举整个目录树的外部导入"""
        ...


# =========================================================================
# 清单 / 记录 / 包名协议
# =========================================================================

class ManifestProvider(Protocol):
    def exists(self, directory: Path) -> bool:
        ...

    def load(self, directory: Path) -> Manifest:
        ...

    def generate(self, project_dir: Path, scanner: ImportScanner) -> Manifest:
        ...


class RecordStore(Protocol):
    """根路径 -> 修订号"""

    def has(self, root_path: str) -> bool:
        ...

    def get(self, root_path: str) -> str:
        ...

    def set(self, root_path: str, revision: str) -> None:
        ...

    def save_all(self) -> None:
        ...


class NameResolver(Protocol):
    def full_path_for(self, name: str) -> str:
        """短名 -> 完整导入路径"""
        ...
