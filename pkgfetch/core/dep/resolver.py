"""依赖树递归解析器

对候选节点逐个执行:
  1. 伪包 C 静默跳过；非法远程路径记一次失败，继续
  2. 根路径属于 target 自身（或其子包）时跳过
  3. 固定版本且缓存已存在 → 只追踪依赖，不再拉取
  4. 本次运行已处理过的根路径 → 跳过（每个根路径只提示一次）
  5. 非 update 模式且缓存已存在 → 不拉取，按需复制到工作区
  6. 交给下载器
  7. 由导入生成子节点，版本按该包清单的声明覆盖，深度优先递归
  8. 成功计数，未锁定节点记录修订号，按需复制到工作区

父节点拉取完成后才生成子节点：子节点的锁定版本来自父节点的清单，
而清单只有在父节点落盘后才可读。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pkgfetch.core.dep.models import VersionSpec
from pkgfetch.core.dep.paths import PSEUDO_PACKAGE, is_subpackage, is_valid_remote_path
from pkgfetch.core.dep.workspace import copy_to_workspace
from pkgfetch.core.exceptions import ConfigError, InvalidVersionError

if TYPE_CHECKING:
    from pkgfetch.core.dep.downloader import Downloader
    from pkgfetch.core.dep.models import Node, NodeLayout, ResolutionSession
    from pkgfetch.core.dep.options import GetOptions
    from pkgfetch.core.protocols import ManifestProvider, RecordStore

logger = logging.getLogger(__name__)


class Resolver:
    """依赖树解析器 - 每个根路径每次运行至多拉取一次"""

    def __init__(
        self,
        options: GetOptions,
        layout: NodeLayout,
        downloader: Downloader,
        records: RecordStore,
        manifests: ManifestProvider,
        work_dir: Path | None = None,
    ) -> None:
        self.options = options
        self.layout = layout
        self.downloader = downloader
        self.records = records
        self.manifests = manifests
        self.work_dir = work_dir

    def resolve(self, target: str, nodes: list[Node], session: ResolutionSession) -> None:
        for node in nodes:
            self._resolve_node(target, node, session)

    def _resolve_node(self, target: str, node: Node, session: ResolutionSession) -> None:
        if node.import_path == PSEUDO_PACKAGE:
            return
        if not is_valid_remote_path(node.import_path):
            logger.error("跳过非法的包路径: %s", node.label())
            session.failed += 1
            return

        if is_subpackage(node.root_path, target, self.work_dir):
            return

        if node.is_fixed() and node.exists():
            node.get_deps_only = True

        if node.root_path in session.visited:
            if session.notify_skip(node.root_path):
                logger.debug("跳过已下载的包: %s", node.label())
            return

        if not self.options.update:
            if node.exists():
                session.claim(node.root_path)
                if session.notify_skip(node.root_path):
                    logger.debug("跳过已安装的包: %s", node.label())
                if self.options.installs_to_workspace:
                    self._install_to_workspace(node, session)
                return
            if not self.records.has(node.root_path):
                # 占位：标记为 "见过但未锁定"
                self.records.set(node.root_path, "")

        result, imports = self.downloader.download(node, session)
        if imports:
            self.resolve(target, self._children(node, imports, session), session)

        if result is None:
            return

        if result.is_unpinned() and result.revision:
            self.records.set(result.root_path, result.revision)

        if self.options.installs_to_workspace and not result.has_vcs_metadata():
            if not self._install_to_workspace(result, session):
                return

        logger.info("SUCC GET %s", node.label())
        session.succeeded += 1

    def _install_to_workspace(self, node: Node, session: ResolutionSession) -> bool:
        """复制到工作区；失败只计入该包，不中断整次运行"""
        try:
            copy_to_workspace(node)
        except OSError as e:
            logger.error("复制到工作区失败: %s", node.label())
            logger.error("\t%s", e)
            session.failed += 1
            return False
        return True

    def _children(self, node: Node, imports: list[str], session: ResolutionSession) -> list[Node]:
        """由导入生成子节点，版本优先取该包清单中的声明"""
        manifest = None
        if self.manifests.exists(node.install_path):
            logger.debug("发现清单: %s", node.label())
            try:
                manifest = self.manifests.load(node.install_path)
            except ConfigError as e:
                # 依赖包自带的清单损坏时按未锁定处理，不影响本包
                logger.warning("忽略无法读取的清单 (%s): %s", node.label(), e)

        children: list[Node] = []
        for name in imports:
            version = VersionSpec()
            if manifest is not None:
                try:
                    version = manifest.version_spec(name)
                except InvalidVersionError as e:
                    logger.error("依赖版本声明无效 %s (%s): %s", name, node.label(), e)
                    session.failed += 1
                    continue
            children.append(
                self.layout.new_node(name, version, recurse_deps=self.options.recurse_deps),
            )
        return children
