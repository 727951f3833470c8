"""拉取服务 — 组装解析器并给出运行汇总

两个入口:
- get_by_manifest(): 无参数时，由项目清单（不存在则生成）得出初始节点
- get_by_paths(args): 由命令行给出的 path[@kind:value] 得出初始节点

每次运行使用独立的 ResolutionSession，结束后一次性保存本地记录。

用法:
    svc = GetService(GetOptions(update=True))
    report = svc.get_by_paths(["github.com/a/b@tag:v1.0.0"])
    sys.exit(report.exit_code)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pkgfetch.core.dep.downloader import Downloader
from pkgfetch.core.dep.imports import SourceImportScanner
from pkgfetch.core.dep.manifest import ManifestStore
from pkgfetch.core.dep.models import Node, NodeLayout, ResolutionSession, VersionSpec
from pkgfetch.core.dep.records import LocalRecordStore, NameRegistry
from pkgfetch.core.dep.resolver import Resolver
from pkgfetch.core.exceptions import MissingArgumentError
from pkgfetch.services.vcs import VcsSelector

if TYPE_CHECKING:
    from pkgfetch.core.config import Config
    from pkgfetch.core.dep.options import GetOptions
    from pkgfetch.core.protocols import (
        ImportScanner,
        ManifestProvider,
        NameResolver,
        RecordStore,
        VcsProvider,
    )

logger = logging.getLogger(__name__)

# 严格模式下存在失败时的退出码
STRICT_FAILURE_EXIT = 2


@dataclass
class GetReport:
    """运行汇总"""

    succeeded: int
    failed: int
    strict: bool = False

    @property
    def exit_code(self) -> int:
        """默认尽力而为：部分失败仍正常退出，仅严格模式下返回非零"""
        if self.strict and self.failed > 0:
            return STRICT_FAILURE_EXIT
        return 0


class GetService:
    """依赖拉取服务"""

    def __init__(
        self,
        options: GetOptions,
        config: Config | None = None,
        *,
        project_dir: Path | None = None,
        vcs: VcsProvider | None = None,
        scanner: ImportScanner | None = None,
        records: RecordStore | None = None,
        names: NameResolver | None = None,
        manifests: ManifestProvider | None = None,
    ) -> None:
        if config is None:
            from pkgfetch.core.config import get_config
            config = get_config()
        self.options = options
        self.config = config
        self.project_dir = project_dir or Path.cwd()
        self.scanner = scanner or SourceImportScanner()
        self.records = records or LocalRecordStore(config.path("record_file"))
        self.names = names or NameRegistry(config.path("names_file"))
        self.manifests = manifests or ManifestStore(config.manifest_name)
        self.layout = NodeLayout(
            cache_dir=config.path("cache_dir"),
            workspace_dir=config.workspace_root(options.target.value, self.project_dir),
        )
        downloader = Downloader(
            options,
            vcs or VcsSelector(vcs_hosts=config.vcs_hosts),
            self.scanner,
            self.records,
        )
        self.resolver = Resolver(
            options, self.layout, downloader, self.records, self.manifests,
            work_dir=self.project_dir,
        )

    # ------------------------------------------------------------------
    # 入口
    # ------------------------------------------------------------------

    def get_by_manifest(self) -> GetReport:
        """按项目清单拉取全部依赖，清单自身声明的 target 不参与拉取"""
        if self.options.download_only:
            raise MissingArgumentError("'--download, -d' 选项需要指定至少一个包")

        manifest = self.manifests.generate(self.project_dir, self.scanner)
        nodes: list[Node] = []
        for name in manifest.deps:
            root = self.layout.deriver(name)
            nodes.append(self.layout.new_node(
                root, manifest.version_spec(name), recurse_deps=self.options.recurse_deps,
            ))
        logger.info("按清单拉取: %s (%d 个依赖)", manifest.target, len(nodes))
        return self._run(manifest.target, nodes)

    def get_by_paths(self, args: list[str]) -> GetReport:
        """按命令行参数拉取，参数形如 path 或 path@kind:value"""
        nodes = [self._node_from_arg(info) for info in args]
        return self._run(".", nodes)

    def _node_from_arg(self, info: str) -> Node:
        pkg_path, _, ver = info.partition("@")
        version = VersionSpec.parse(ver)
        # 不含路径分隔符的短名通过包名表解析
        if "/" not in pkg_path:
            pkg_path = self.names.full_path_for(pkg_path)
        return self.layout.new_node(pkg_path, version, recurse_deps=self.options.recurse_deps)

    # ------------------------------------------------------------------
    # 运行与汇总
    # ------------------------------------------------------------------

    def _run(self, target: str, nodes: list[Node]) -> GetReport:
        session = ResolutionSession()
        try:
            self.resolver.resolve(target, nodes, session)
        finally:
            # 中途异常也保留已拉取包的修订号
            self.records.save_all()

        logger.info("%d 个包已下载, %d 个失败", session.succeeded, session.failed)
        return GetReport(
            succeeded=session.succeeded,
            failed=session.failed,
            strict=self.options.strict,
        )
