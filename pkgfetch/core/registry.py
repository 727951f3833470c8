"""YAML 注册表基类

本地记录（根路径 -> 修订号）与包名表（短名 -> 完整路径）
共享相同的加载、保存、字段访问逻辑。子类指定 section_key，
以及未显式给出文件时从 Config 中读取路径所用的 config_key。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pkgfetch.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)


class YamlRegistry:
    """YAML 文件注册表基类

    子类用法:
        class MyRegistry(YamlRegistry):
            section_key = "items"
            config_key = "items_file"
    """

    section_key: str = "entries"
    config_key: str = ""

    def __init__(self, registry_file: str | Path = "") -> None:
        self.registry_file = self._resolve_registry_file(registry_file)
        self._data: dict[str, Any] = load_yaml(self.registry_file)

    def _resolve_registry_file(self, registry_file: str | Path) -> Path:
        if registry_file:
            return Path(registry_file).expanduser()
        if not self.config_key:
            raise ValueError(f"{type(self).__name__} 需要指定注册表文件")
        from pkgfetch.core.config import get_config
        return get_config().path(self.config_key)

    def _section(self) -> dict[str, Any]:
        """当前 section 字典，缺失或类型不对时重建"""
        section = self._data.get(self.section_key)
        if not isinstance(section, dict):
            section = {}
            self._data[self.section_key] = section
        return section

    def _save(self) -> None:
        save_yaml(self.registry_file, self._data)

    def _put(self, name: str, entry: Any, *, save: bool = True) -> Any:
        """写入条目；save=False 时只改内存，等待统一保存"""
        self._section()[name] = entry
        if save:
            self._save()
        return entry

    def _get_raw(self, name: str) -> Any | None:
        return self._section().get(name)
