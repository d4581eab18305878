"""CLI — 安装命令"""

from __future__ import annotations

import click

from ame.cli import _svc, _verbosity, handle_errors
from ame.core.models import InstallOptions


def register(group: click.Group) -> None:
    group.add_command(install)
    group.add_command(aur)


def _options(noconfirm: bool, asdeps: bool) -> InstallOptions:
    return InstallOptions(verbosity=_verbosity(), noconfirm=noconfirm, as_dependency=asdeps)


@click.command()
@click.argument("packages", nargs=-1, required=True)
@click.option("--noconfirm", is_flag=True, help="不询问确认")
@click.option("--asdeps", is_flag=True, help="作为依赖安装")
@handle_errors
def install(packages: tuple[str, ...], noconfirm: bool, asdeps: bool) -> None:
    """安装软件包（官方仓库优先，其余从 AUR 构建）"""
    result = _svc().installer.install(list(packages), _options(noconfirm, asdeps))
    if result.already_satisfied:
        click.echo(f"已安装，跳过: {', '.join(result.already_satisfied)}")
    installed = [*result.official_repo, *result.community_build]
    if installed:
        click.echo(f"安装完成: {', '.join(installed)}")


@click.command()
@click.argument("packages", nargs=-1, required=True)
@click.option("--noconfirm", is_flag=True, help="不询问确认")
@click.option("--asdeps", is_flag=True, help="作为依赖安装")
@handle_errors
def aur(packages: tuple[str, ...], noconfirm: bool, asdeps: bool) -> None:
    """直接从 AUR 构建安装"""
    built = _svc().installer.install_from_community(list(packages), _options(noconfirm, asdeps))
    skipped = [p for p in dict.fromkeys(packages) if p not in built]
    if skipped:
        click.echo(f"已安装，跳过: {', '.join(skipped)}")
    if built:
        click.echo(f"安装完成: {', '.join(built)}")
