"""工作区安装 - 把共享缓存中的检出复制到工作区"""

from __future__ import annotations

import logging
import shutil

from pkgfetch.core.dep.models import Node

logger = logging.getLogger(__name__)

# 不复制到工作区的目录
_IGNORED = (".vendor",)


def copy_to_workspace(node: Node) -> bool:
    """复制 node 的缓存检出到工作区，返回是否实际复制

    工作区位置已是 VCS 检出时不覆盖（那是用户自己维护的仓库）。
    """
    dest = node.install_workspace_path
    if dest is None:
        return False
    if node.has_vcs_metadata():
        logger.warning("工作区中的包受版本控制，跳过复制: %s", node.root_path)
        return False
    if not node.install_path.exists():
        logger.warning("缓存中不存在，无法复制: %s", node.install_path)
        return False

    if dest.exists():
        shutil.rmtree(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(node.install_path, dest, ignore=shutil.ignore_patterns(*_IGNORED))
    logger.debug("已复制到工作区: %s -> %s", node.install_path, dest)
    return True
