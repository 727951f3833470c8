"""YAML 文件统一读写工具

清单文件、本地记录、包名表、配置文件都经由此处读写。
读取失败（格式错误、文件过大、内容不是映射）统一转换为 ConfigError，
调用方据此决定是中止运行（项目清单、配置）还是忽略（依赖包自带的清单）。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from pkgfetch.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# 单个 YAML 文件大小上限 (10MB)
MAX_YAML_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """先写同目录临时文件再 os.replace，写到一半中断不会留下残缺的记录文件"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 映射

    文件不存在或为空时返回空字典。

    Raises:
        ConfigError: 文件过大、YAML 格式错误、顶层不是映射
    """
    p = Path(path)
    if not p.is_file():
        return {}

    size = p.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ConfigError(f"YAML 文件过大: {p} ({size} 字节，上限 {MAX_YAML_SIZE})")

    try:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("解析 YAML 文件失败: %s", p)
        raise ConfigError(f"YAML 格式错误: {p}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p} 顶层应为映射，实际为 {type(data).__name__}")
    return data


def dump_yaml(data: Any) -> str:
    """序列化为块格式 YAML，保持键顺序，允许中文"""
    return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)


def save_yaml(path: str | Path, data: Any) -> None:
    """原子写入 YAML 文件"""
    p = Path(path)
    try:
        atomic_write(p, dump_yaml(data))
    except OSError as e:
        logger.error("写入文件失败: %s, 错误: %s", p, e)
        raise
