"""拉取选项

命令行标志在这里汇总成 GetOptions，互斥检查在解析开始前完成。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pkgfetch.core.exceptions import OptionConflictError


class InstallTarget(str, Enum):
    REMOTE = "remote"   # 只放共享缓存
    LOCAL = "local"     # 复制到项目内工作区
    GOPATH = "gopath"   # 复制到系统工作区


@dataclass(frozen=True)
class GetOptions:
    download_only: bool = False     # 只拉取指定包，不追踪依赖
    update: bool = False            # 强制重新拉取 / 通过 VCS 更新
    target: InstallTarget = InstallTarget.REMOTE
    verbose: bool = False
    strict: bool = False

    @property
    def recurse_deps(self) -> bool:
        return not self.download_only

    @property
    def installs_to_workspace(self) -> bool:
        return self.target in (InstallTarget.LOCAL, InstallTarget.GOPATH)

    @classmethod
    def from_flags(
        cls,
        *,
        download: bool = False,
        update: bool = False,
        local: bool = False,
        gopath: bool = False,
        remote: bool = False,
        verbose: bool = False,
        strict: bool = False,
    ) -> GetOptions:
        """由命令行标志构造，local/gopath/remote 两两互斥"""
        flags = {
            "'--local, -l'": local,
            "'--gopath, -g'": gopath,
            "'--remote, -r'": remote,
        }
        chosen = [name for name, on in flags.items() if on]
        if len(chosen) > 1:
            raise OptionConflictError(chosen[:2])

        if local:
            target = InstallTarget.LOCAL
        elif gopath:
            target = InstallTarget.GOPATH
        else:
            target = InstallTarget.REMOTE
        return cls(
            download_only=download, update=update, target=target,
            verbose=verbose, strict=strict,
        )
