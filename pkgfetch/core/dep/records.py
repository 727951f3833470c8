"""本地记录与包名表

- LocalRecordStore: 根路径 -> 上次解析得到的修订号，用于让未锁定的依赖可复现
- NameRegistry: 包短名 -> 完整导入路径
"""

from __future__ import annotations

import logging
from pathlib import Path

from pkgfetch.core.registry import YamlRegistry

logger = logging.getLogger(__name__)


class LocalRecordStore(YamlRegistry):
    """本地记录

    文件格式:
        nodes:
          github.com/a/b:
            value: 3f2a9c1d...

    set() 只修改内存，运行结束时由 save_all() 一次性原子写入。
    """

    section_key = "nodes"
    config_key = "record_file"

    def __init__(self, record_file: str | Path = "") -> None:
        super().__init__(record_file)
        self._dirty = False

    def has(self, root_path: str) -> bool:
        return self._get_raw(root_path) is not None

    def get(self, root_path: str) -> str:
        entry = self._get_raw(root_path)
        if isinstance(entry, dict):
            return str(entry.get("value") or "")
        return ""

    def set(self, root_path: str, revision: str) -> None:
        self._put(root_path, {"value": revision}, save=False)
        self._dirty = True

    def save_all(self) -> None:
        if not self._dirty:
            return
        self._save()
        self._dirty = False
        logger.debug("本地记录已保存: %s", self.registry_file)


class NameRegistry(YamlRegistry):
    """包名表

    文件格式:
        names:
          beego: github.com/astaxie/beego
    """

    section_key = "names"
    config_key = "names_file"

    def full_path_for(self, name: str) -> str:
        """短名解析为完整路径，未登记的名字原样返回"""
        full = self._get_raw(name)
        return str(full) if full else name

    def register(self, name: str, full_path: str) -> None:
        self._put(name, full_path)
        logger.info("包名已登记: %s -> %s", name, full_path)
