"""pkgfetch 命令行接口

CLI 按命令拆分为子模块，每个模块注册自己的命令到 main group。
"""

import click

from pkgfetch import __version__
from pkgfetch.core.config import DEFAULT_CONFIG_FILE, init_config
from pkgfetch.core.exceptions import ConfigError
from pkgfetch.utils.logger import setup_logging_from_env


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=DEFAULT_CONFIG_FILE, help="配置文件路径")
@click.option("--strict", is_flag=True, help="严格模式：任一包失败时以非零状态退出")
@click.pass_context
def main(ctx: click.Context, config_path: str, strict: bool) -> None:
    """pkgfetch - 递归拉取包及其全部依赖"""
    setup_logging_from_env()
    try:
        cfg = init_config(config_path)
    except ConfigError as e:
        raise click.UsageError(str(e), ctx=ctx) from e
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg
    ctx.obj["strict"] = strict or cfg.strict


# 注册子命令
from pkgfetch.cli.cmd_get import register as _reg_get  # noqa: E402

_reg_get(main)
