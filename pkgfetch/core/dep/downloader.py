"""依赖包下载器

职责:
- 为单个节点决定拉取策略（VCS 原地更新 / 仅读取已有检出 / 全新拉取）
- 拉取失败时清理半成品安装目录并计数
- 返回节点自身的外部导入，供解析器生成子节点

策略表:
  | 条件                                           | 动作                                  |
  | update + 工作区模式 + 工作区位置已是 VCS 检出  | VCS 原地更新，从工作区枚举导入        |
  | node.get_deps_only（固定版本且缓存已存在）     | 不拉取，从缓存检出枚举导入            |
  | 其他                                           | 查本地记录锁定修订号，全新拉取到缓存  |
"""

from __future__ import annotations

import logging
import shutil
from typing import TYPE_CHECKING

from pkgfetch.core.dep.paths import detect_vcs
from pkgfetch.core.exceptions import ExecutionError, FetchError

if TYPE_CHECKING:
    from pkgfetch.core.dep.models import Node, ResolutionSession
    from pkgfetch.core.dep.options import GetOptions
    from pkgfetch.core.protocols import ImportScanner, RecordStore, VcsProvider

logger = logging.getLogger(__name__)


class Downloader:
    """单节点拉取器"""

    def __init__(
        self,
        options: GetOptions,
        vcs: VcsProvider,
        scanner: ImportScanner,
        records: RecordStore,
    ) -> None:
        self.options = options
        self.vcs = vcs
        self.scanner = scanner
        self.records = records

    def download(self, node: Node, session: ResolutionSession) -> tuple[Node | None, list[str]]:
        """拉取或更新单个节点

        返回 (node, imports)；失败时返回 (None, [])，调用方不得计入成功或记录修订号。
        """
        logger.info("下载依赖包: %s", node.label())
        session.claim(node.root_path)
        session.fetched.append(node.root_path)

        try:
            imports = self._fetch(node)
        except (FetchError, ExecutionError, OSError) as e:
            logger.error("下载依赖包失败: %s", node.label())
            logger.error("\t%s", e)
            session.failed += 1
            shutil.rmtree(node.install_path, ignore_errors=True)
            return None, []

        if not node.recurse_deps:
            imports = []
        return node, imports

    def _fetch(self, node: Node) -> list[str]:
        ws_path = node.install_workspace_path
        ws_kind = detect_vcs(ws_path)
        if self.options.update and self.options.installs_to_workspace and ws_path and ws_kind:
            self.vcs.for_kind(ws_kind).update(node)
            return self.scanner.scan(node.import_path, node.root_path, ws_path)

        if node.get_deps_only:
            return self.scanner.scan(node.import_path, node.root_path, node.install_path)

        # 未锁定的分支优先复用本地记录的修订号，保证重复运行结果一致
        if node.is_unpinned() and not self.options.update:
            node.revision = self.records.get(node.root_path)
            if node.revision:
                logger.debug("使用本地记录的修订号: %s -> %s", node.root_path, node.revision)
        self.vcs.for_node(node).fetch(node)
        return self.scanner.scan(node.import_path, node.root_path, node.install_path)
