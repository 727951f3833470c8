"""源码导入解析

职责:
- 读取 *.go 源文件的导入段（单行 import、分组 import、别名、注释）
- 从包目录出发，递归跟进同仓库内的子包导入
- 剔除标准库导入，返回去重排序后的外部导入路径
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pkgfetch.core.dep.paths import is_standard_package

logger = logging.getLogger(__name__)

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_SINGLE_IMPORT_RE = re.compile(r'^\s*import\s+(?:[\w.]+\s+)?"([^"]+)"', re.MULTILINE)
_GROUP_IMPORT_RE = re.compile(r"^\s*import\s*\((.*?)\)", re.MULTILINE | re.DOTALL)
_GROUP_ENTRY_RE = re.compile(r'(?:[\w.]+\s+)?"([^"]+)"')
# 导入段在首个顶层声明之前结束
_FIRST_DECL_RE = re.compile(r"^(func|type|var|const)\b", re.MULTILINE)

_SKIP_DIRS = frozenset(("vendor", "testdata"))


def parse_imports(source: str) -> list[str]:
    """解析单个源文件的导入路径（保持出现顺序）"""
    source = _BLOCK_COMMENT_RE.sub("", source)
    source = _LINE_COMMENT_RE.sub("", source)
    m = _FIRST_DECL_RE.search(source)
    header = source[: m.start()] if m else source

    found: list[str] = []
    for block in _GROUP_IMPORT_RE.findall(header):
        found.extend(_GROUP_ENTRY_RE.findall(block))
    found.extend(_SINGLE_IMPORT_RE.findall(header))
    return found


class SourceImportScanner:
    """按包目录枚举外部导入"""

    def __init__(self, *, include_tests: bool = False, suffix: str = ".go") -> None:
        self.include_tests = include_tests
        self.suffix = suffix

    def scan(self, import_path: str, root_path: str, src_dir: Path) -> list[str]:
        """枚举 import_path 对应包（及其同仓库子包依赖）的外部导入

        src_dir 为仓库根路径 root_path 的本地检出目录。
        """
        external: set[str] = set()
        seen: set[str] = set()
        pending = [import_path]
        while pending:
            pkg = pending.pop()
            if pkg in seen:
                continue
            seen.add(pkg)
            rel = pkg[len(root_path):].lstrip("/") if pkg.startswith(root_path) else ""
            for name in self._package_imports(src_dir / rel if rel else src_dir):
                if is_standard_package(name):
                    continue
                if name == root_path or name.startswith(root_path + "/"):
                    pending.append(name)
                else:
                    external.add(name)
        return sorted(external)

    def scan_tree(self, root_path: str, src_dir: Path) -> list[str]:
        """枚举整个目录树的外部导入（用于为项目生成清单）"""
        external: set[str] = set()
        for pkg_dir in self._package_dirs(src_dir):
            for name in self._package_imports(pkg_dir):
                if is_standard_package(name):
                    continue
                if name == root_path or name.startswith(root_path + "/"):
                    continue
                external.add(name)
        return sorted(external)

    def _package_imports(self, pkg_dir: Path) -> list[str]:
        if not pkg_dir.is_dir():
            logger.debug("包目录不存在: %s", pkg_dir)
            return []
        names: list[str] = []
        for f in sorted(pkg_dir.glob(f"*{self.suffix}")):
            if not self.include_tests and f.stem.endswith("_test"):
                continue
            try:
                names.extend(parse_imports(f.read_text(encoding="utf-8", errors="replace")))
            except OSError as e:
                logger.warning("读取源文件失败 %s: %s", f, e)
        return names

    def _package_dirs(self, src_dir: Path) -> list[Path]:
        dirs = [src_dir]
        for d in sorted(src_dir.rglob("*")):
            if not d.is_dir():
                continue
            rel_parts = d.relative_to(src_dir).parts
            if any(p in _SKIP_DIRS or p.startswith((".", "_")) for p in rel_parts):
                continue
            dirs.append(d)
        return dirs
