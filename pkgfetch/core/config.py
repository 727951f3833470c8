"""集中配置管理

替代各模块散落的路径常量，提供统一的配置入口。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from pkgfetch.core.exceptions import ConfigError
from pkgfetch.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "~/.pkgfetch/config.yml"


@dataclass
class Config:
    """全局配置"""

    # 目录
    cache_dir: str = "~/.pkgfetch/repos"          # 共享缓存（remote 模式的安装位置）
    record_file: str = "~/.pkgfetch/data/local_nodes.yml"
    names_file: str = "~/.pkgfetch/data/pkgname.yml"

    # 清单与工作区
    manifest_name: str = "pkgfile.yml"
    local_workspace: str = ".vendor"              # 项目内工作区，相对项目目录
    system_workspace: str = ""                    # 为空时取 $GOPATH 第一项

    # 行为
    strict: bool = False

    # 主机 -> VCS 类型，未列出的主机默认 git
    vcs_hosts: dict[str, str] = field(default_factory=lambda: {
        "code.google.com": "hg",
    })

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(Path(path).expanduser())
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def path(self, name: str) -> Path:
        """取路径类字段并展开 ~"""
        return Path(str(getattr(self, name))).expanduser()

    def workspace_root(self, target: str, project_dir: Path) -> Path | None:
        """计算安装目标对应的工作区 src 根目录

        - remote: 仅缓存，不复制到工作区，返回 None
        - local:  <project>/.vendor/src
        - gopath: <system_workspace 或 $GOPATH 第一项>/src
        """
        if target == "local":
            return project_dir / self.local_workspace / "src"
        if target == "gopath":
            base = self.system_workspace or os.environ.get("GOPATH", "")
            base = base.split(os.pathsep)[0] if base else ""
            if not base:
                raise ConfigError("无法确定系统工作区：未配置 system_workspace 且 GOPATH 未设置")
            return Path(base).expanduser() / "src"
        return None


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.debug("配置已加载: %s", path)
    return _current
