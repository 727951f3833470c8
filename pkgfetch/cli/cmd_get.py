"""CLI — get 命令"""

from __future__ import annotations

import click

from pkgfetch.core.dep.options import GetOptions
from pkgfetch.core.exceptions import (
    ConfigError,
    InvalidVersionError,
    MissingArgumentError,
    OptionConflictError,
)
from pkgfetch.services.get_service import GetService
from pkgfetch.utils.logger import set_verbose


def register(group: click.Group) -> None:
    group.add_command(get)


@click.command()
@click.option("--download", "-d", is_flag=True, help="只下载指定的包，不追踪依赖")
@click.option("--update", "-u", is_flag=True, help="更新包及其依赖")
@click.option("--local", "-l", is_flag=True, help="全部安装到项目内工作区")
@click.option("--gopath", "-g", is_flag=True, help="全部安装到系统工作区")
@click.option("--remote", "-r", is_flag=True, help="全部只放在本地共享仓库")
@click.option("--verbose", "-v", is_flag=True, help="显示处理细节")
@click.argument("packages", nargs=-1)
@click.pass_context
def get(
    ctx: click.Context, download: bool, update: bool, local: bool,
    gopath: bool, remote: bool, verbose: bool, packages: tuple[str, ...],
) -> None:
    """拉取包及其依赖

    \b
    pkgfetch get
    pkgfetch get <导入路径>[@<tag|commit|branch>:<值>]
    pkgfetch get <包名>[@<tag|commit|branch>:<值>]

    不带参数时按当前项目的 pkgfile.yml 拉取（不存在则生成）。
    未指定版本且包已存在时跳过，除非指定 --update。
    """
    obj = ctx.ensure_object(dict)
    set_verbose(verbose)
    try:
        options = GetOptions.from_flags(
            download=download, update=update, local=local, gopath=gopath,
            remote=remote, verbose=verbose, strict=bool(obj.get("strict")),
        )
        svc = GetService(options, obj.get("config"))
        if packages:
            report = svc.get_by_paths(list(packages))
        else:
            report = svc.get_by_manifest()
    except (OptionConflictError, MissingArgumentError, InvalidVersionError, ConfigError) as e:
        raise click.UsageError(str(e), ctx=ctx) from e

    click.echo(f"{report.succeeded} 个包已下载, {report.failed} 个失败")
    ctx.exit(report.exit_code)
