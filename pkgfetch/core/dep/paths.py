"""导入路径规则

职责:
- 由导入路径推导仓库根路径（可拉取的仓库部分，不含子包后缀）
- 远程路径合法性校验
- 子包判断（排除项目自身的导入）
- 根据标记目录识别 VCS 类型
"""

from __future__ import annotations

import re
from pathlib import Path

# cgo 伪包，不是真实依赖
PSEUDO_PACKAGE = "C"

# 标记目录 -> VCS 类型
VCS_MARKERS: dict[str, str] = {
    ".git": "git",
    ".hg": "hg",
    ".svn": "svn",
    ".bzr": "bzr",
}

_HOST_RE = re.compile(r"^[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+(:\d+)?$")
_ELEMENT_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._~-]*$")
_GOPKG_VERSION_RE = re.compile(r"\.v\d+$")
_VCS_SUFFIX_RE = re.compile(r"\.(git|hg|bzr|svn)$")

# 主机 -> 根路径包含的段数
_HOST_DEPTH: dict[str, int] = {
    "github.com": 3,
    "bitbucket.org": 3,
    "gitlab.com": 3,
    "code.google.com": 3,     # code.google.com/p/<project>
    "golang.org": 3,          # golang.org/x/<repo>
    "launchpad.net": 2,
}


def derive_root_path(import_path: str) -> str:
    """推导仓库根路径

    >>> derive_root_path("github.com/user/repo/sub/pkg")
    'github.com/user/repo'
    >>> derive_root_path("gopkg.in/yaml.v2")
    'gopkg.in/yaml.v2'
    """
    parts = import_path.strip("/").split("/")
    host = parts[0]

    # 显式 VCS 后缀优先，如 example.org/repo.git/sub
    for i, part in enumerate(parts[1:], start=1):
        if _VCS_SUFFIX_RE.search(part):
            return "/".join(parts[: i + 1])

    if host == "gopkg.in":
        # gopkg.in/pkg.v1 或 gopkg.in/user/pkg.v1
        if len(parts) > 1 and _GOPKG_VERSION_RE.search(parts[1]):
            return "/".join(parts[:2])
        return "/".join(parts[:3])

    depth = _HOST_DEPTH.get(host, 3)
    return "/".join(parts[:depth])


def is_valid_remote_path(import_path: str) -> bool:
    """远程路径合法性：主机名含点号，至少两段，每段仅含安全字符"""
    parts = import_path.split("/")
    if len(parts) < 2:
        return False
    if not _HOST_RE.match(parts[0]):
        return False
    return all(_ELEMENT_RE.match(p) for p in parts[1:])


def is_standard_package(import_path: str) -> bool:
    """标准库包的首段不含点号，如 fmt、net/http"""
    return "." not in import_path.split("/", 1)[0]


def is_subpackage(root_path: str, target: str, work_dir: Path | None = None) -> bool:
    """root_path 是否等于 target 或位于 target 之下

    work_dir 给出时，当前目录本身就是该仓库（路径以 /root_path 结尾）也视为自身。
    """
    if target and target != ".":
        if root_path == target or root_path.startswith(target + "/"):
            return True
    if work_dir is not None:
        return work_dir.as_posix().rstrip("/").endswith("/" + root_path)
    return False


def detect_vcs(path: Path | None) -> str | None:
    """根据标记目录识别 VCS 类型，未识别返回 None"""
    if path is None:
        return None
    for marker, kind in VCS_MARKERS.items():
        if (path / marker).exists():
            return kind
    return None
