"""项目清单（pkgfile.yml）

清单格式:

    target:
      path: github.com/me/project
    deps:
      github.com/a/b: "tag:v1.2.3"
      github.com/c/d: ""            # 未锁定，取最新

职责:
- 读取 / 保存清单
- 查询依赖声明的版本
- 为当前项目定位或生成清单（扫描源码导入，补全未声明的依赖）
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from pkgfetch.core.dep.models import VersionSpec
from pkgfetch.core.dep.paths import derive_root_path
from pkgfetch.core.exceptions import ConfigError
from pkgfetch.utils.yaml_io import load_yaml, save_yaml

if TYPE_CHECKING:
    from pkgfetch.core.protocols import ImportScanner

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_NAME = "pkgfile.yml"


@dataclass
class Manifest:
    """项目清单"""

    path: Path
    target: str = ""
    deps: dict[str, str] = field(default_factory=dict)

    def dependency_version(self, import_path: str) -> str:
        """查询依赖声明的版本串，先按完整导入路径，再按根路径"""
        if import_path in self.deps:
            return self.deps[import_path]
        root = derive_root_path(import_path)
        return self.deps.get(root, "")

    def version_spec(self, import_path: str) -> VersionSpec:
        return VersionSpec.parse(self.dependency_version(import_path))

    def to_dict(self) -> dict:
        return {"target": {"path": self.target}, "deps": dict(self.deps)}


class ManifestStore:
    """清单读写"""

    def __init__(
        self,
        manifest_name: str = DEFAULT_MANIFEST_NAME,
        deriver: Callable[[str], str] = derive_root_path,
    ) -> None:
        self.manifest_name = manifest_name
        self.deriver = deriver

    def manifest_path(self, directory: Path) -> Path:
        return directory / self.manifest_name

    def exists(self, directory: Path) -> bool:
        return self.manifest_path(directory).is_file()

    def load(self, directory: Path) -> Manifest:
        path = self.manifest_path(directory)
        data = load_yaml(path)
        target = data.get("target") or {}
        deps = data.get("deps") or {}
        if isinstance(target, dict):
            target = target.get("path") or ""
        if not isinstance(target, str):
            raise ConfigError(f"{path}: target 应为映射或字符串，实际为 {type(target).__name__}")
        if not isinstance(deps, dict):
            raise ConfigError(f"{path}: deps 应为映射，实际为 {type(deps).__name__}")
        return Manifest(
            path=path,
            target=target,
            deps={str(k): "" if v is None else str(v).strip() for k, v in deps.items()},
        )

    def save(self, manifest: Manifest) -> None:
        save_yaml(manifest.path, manifest.to_dict())
        logger.debug("清单已保存: %s", manifest.path)

    def generate(self, project_dir: Path, scanner: ImportScanner) -> Manifest:
        """定位或生成项目清单

        1. 读取已有清单（不存在则新建）
        2. 确定项目自身导入路径 target
        3. 扫描项目源码导入，把未声明的依赖根路径补为未锁定
        """
        manifest = self.load(project_dir)
        if not manifest.target:
            manifest.target = self._guess_target(project_dir)

        added = 0
        for name in scanner.scan_tree(manifest.target, project_dir):
            root = self.deriver(name)
            if root not in manifest.deps:
                manifest.deps[root] = ""
                added += 1
        if added:
            logger.info("清单新增 %d 个依赖", added)
        self.save(manifest)
        return manifest

    @staticmethod
    def _guess_target(project_dir: Path) -> str:
        """项目位于某个工作区 src/ 下时取相对路径，否则取目录名"""
        parts = project_dir.resolve().parts
        if "src" in parts:
            idx = len(parts) - 1 - parts[::-1].index("src")
            rel = parts[idx + 1:]
            if rel:
                return "/".join(rel)
        return project_dir.resolve().name
