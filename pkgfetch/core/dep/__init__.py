"""依赖解析核心

拆分说明:
- models.py: 版本描述、节点、节点构造器、单次运行的解析状态
- paths.py: 根路径推导、远程路径校验、子包判断、VCS 识别
- imports.py: 源码导入枚举
- manifest.py: 项目清单读写与生成
- records.py: 本地记录、包名表
- options.py: 拉取选项
- workspace.py: 复制到工作区
- downloader.py: 单节点拉取策略
- resolver.py: 依赖树递归解析
"""

from pkgfetch.core.dep.downloader import Downloader
from pkgfetch.core.dep.manifest import Manifest, ManifestStore
from pkgfetch.core.dep.models import Node, NodeLayout, ResolutionSession, VersionKind, VersionSpec
from pkgfetch.core.dep.options import GetOptions, InstallTarget
from pkgfetch.core.dep.records import LocalRecordStore, NameRegistry
from pkgfetch.core.dep.resolver import Resolver

__all__ = [
    "Downloader",
    "GetOptions",
    "InstallTarget",
    "LocalRecordStore",
    "Manifest",
    "ManifestStore",
    "NameRegistry",
    "Node",
    "NodeLayout",
    "ResolutionSession",
    "Resolver",
    "VersionKind",
    "VersionSpec",
]
