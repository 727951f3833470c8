"""子进程执行 — VCS 命令的唯一出口

GitVcs / HgVcs 不直接调用 subprocess，而是通过 CommandExecutor 执行，
测试注入假执行器即可验证命令序列。

VCS 命令在非交互环境下运行：git 需要凭据时直接失败而不是卡在终端提示上，
失败会被下载器计为该包拉取失败。
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Protocol

from pkgfetch.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)

_NON_INTERACTIVE_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_ASKPASS": "echo",
    "HGPLAIN": "1",
}


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandExecutor(Protocol):
    """命令执行器协议"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        ...


class LocalExecutor:
    """本地子进程执行器

    命令不存在（未安装 git/hg）时返回 127，超时返回 124，与 shell 约定一致。
    """

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        try:
            r = subprocess.run(
                cmd, capture_output=True, text=True,
                cwd=cwd, env=env, check=False, timeout=timeout,
            )
        except FileNotFoundError as e:
            return CommandResult(returncode=127, stdout="", stderr=str(e))
        except subprocess.TimeoutExpired:
            return CommandResult(returncode=124, stdout="", stderr=f"超时 ({timeout}s)")
        return CommandResult(returncode=r.returncode, stdout=r.stdout, stderr=r.stderr)


_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局执行器（测试用）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor


def vcs_env() -> dict[str, str]:
    """当前环境 + 禁止交互提示"""
    return {**os.environ, **_NON_INTERACTIVE_ENV}


def run_cmd(
    cmd: list[str], *, cwd: str = ".",
    executor: CommandExecutor | None = None,
    label: str = "cmd",
    timeout: int | None = None,
) -> CommandResult:
    """执行命令，非零退出码抛 ExecutionError（附 stderr 前 500 字符）

    默认不设超时：拉取大仓库可能很慢，由用户自行中断。
    """
    logger.debug("  %s: %s (cwd=%s)", label, " ".join(cmd), cwd)
    r = (executor or get_executor()).execute(cmd, cwd=cwd, env=vcs_env(), timeout=timeout)
    if not r.success:
        raise ExecutionError(f"{label} 失败 (rc={r.returncode}): {r.stderr.strip()[:500]}")
    return r
