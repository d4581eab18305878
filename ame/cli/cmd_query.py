"""CLI — 查询命令"""

from __future__ import annotations

import click

from ame.cli import _svc, handle_errors


def register(group: click.Group) -> None:
    group.add_command(search)
    group.add_command(query)


@click.command()
@click.argument("term")
@handle_errors
def search(term: str) -> None:
    """在 AUR 中搜索软件包"""
    packages = _svc().lookup.search(term)
    if not packages:
        click.echo(f"没有匹配 '{term}' 的软件包。")
        return
    for p in packages:
        click.echo(f"aur/{p.name} {p.version}")
        if p.description:
            click.echo(f"    {p.description}")


@click.command()
@click.option("--explicit", is_flag=True, help="只列出显式安装的包")
@handle_errors
def query(explicit: bool) -> None:
    """列出通过 ame 安装的软件包"""
    records = _svc().database.list_all()
    if explicit:
        records = [r for r in records if not r.as_dependency]
    if not records:
        click.echo("没有通过 ame 安装的软件包。")
        return
    for r in records:
        mark = " [依赖]" if r.as_dependency else ""
        click.echo(f"  {r.name:24s} {r.version:16s}{mark}")
