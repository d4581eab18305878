"""ame 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import functools
import os
from collections.abc import Callable
from typing import Any, TypeVar

import click

from ame import __version__
from ame.core.config import DEFAULT_CONFIG_FILE, init_config
from ame.core.exceptions import AmeError, UserCancelled
from ame.services.container import ServiceContainer, get_container, set_container
from ame.utils.logger import setup_logging

F = TypeVar("F", bound=Callable[..., Any])


def _svc() -> ServiceContainer:
    """获取全局服务容器的快捷方式"""
    return get_container()


def _verbosity() -> int:
    ctx = click.get_current_context()
    return int((ctx.find_root().obj or {}).get("verbosity", 0))


def handle_errors(func: F) -> F:
    """把业务异常转换为友好提示 + 退出码"""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except UserCancelled as e:
            click.echo(str(e))
            click.get_current_context().exit(e.exit_code)
        except AmeError as e:
            click.echo(f"错误: {e}", err=True)
            click.get_current_context().exit(e.exit_code)
        return None

    return wrapper  # type: ignore[return-value]


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "config_path",
    default=lambda: os.getenv("AME_CONFIG", DEFAULT_CONFIG_FILE),
    show_default=DEFAULT_CONFIG_FILE, help="配置文件路径",
)
@click.option("-v", "--verbose", count=True, help="输出更详细的日志（可叠加）")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: int) -> None:
    """ame - 支持 AUR 的 pacman 辅助工具"""
    setup_logging(verbose)
    ctx.obj = {"verbosity": verbose}
    try:
        cfg = init_config(config_path)
    except AmeError as e:
        click.echo(f"错误: {e}", err=True)
        ctx.exit(e.exit_code)
    set_container(ServiceContainer(config=cfg))


# 注册各领域子命令
from ame.cli.cmd_install import register as _reg_install  # noqa: E402
from ame.cli.cmd_remove import register as _reg_remove  # noqa: E402
from ame.cli.cmd_query import register as _reg_query  # noqa: E402

_reg_install(main)
_reg_remove(main)
_reg_query(main)
