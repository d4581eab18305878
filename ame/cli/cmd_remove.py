"""CLI — 卸载与缓存清理命令"""

from __future__ import annotations

import click

from ame.cli import _svc, handle_errors
from ame.core.models import PurgeResult


def register(group: click.Group) -> None:
    group.add_command(remove)
    group.add_command(clean)


def _report(result: PurgeResult) -> None:
    for name in result.cleaned:
        click.echo(f"已删除缓存目录: {name}")
    for name, path in result.cleanup_failures.items():
        click.echo(f"警告: 无法删除 {name} 的缓存目录 {path}", err=True)


@click.command()
@click.argument("packages", nargs=-1, required=True)
@click.option("--noconfirm", is_flag=True, help="不询问确认")
@handle_errors
def remove(packages: tuple[str, ...], noconfirm: bool) -> None:
    """卸载软件包并清理本地记录和缓存"""
    result = _svc().purger.purge(noconfirm, list(packages))
    if result.removed:
        click.echo(result.message)
    else:
        click.echo(result.message, err=True)
    _report(result)
    if not result.removed:
        click.get_current_context().exit(1)


@click.command()
@handle_errors
def clean() -> None:
    """删除所有残留的构建缓存目录"""
    result = _svc().purger.clean_cache()
    _report(result)
    if not result.cleaned and not result.cleanup_failures:
        click.echo("没有残留的缓存目录。")
