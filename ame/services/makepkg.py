"""makepkg 构建

固定参数: -rsic --skippgp
  -r 构建后移除 makedepends    -s 自动安装依赖
  -i 构建后安装                 -c 清理构建产物
签名校验固定跳过；as_dependency / noconfirm 追加 --asdeps / --noconfirm。
"""

from __future__ import annotations

import logging

from ame.core.exceptions import BuildError
from ame.core.models import InstallOptions
from ame.services.workspace import BuildWorkspace
from ame.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)

BASE_FLAGS = ("-rsic", "--skippgp")


def makepkg_args(options: InstallOptions) -> list[str]:
    args = list(BASE_FLAGS)
    if options.as_dependency:
        args.append("--asdeps")
    if options.noconfirm:
        args.append("--noconfirm")
    return args


class MakepkgService:
    """makepkg 执行器"""

    def __init__(self, executor: CommandExecutor | None = None, makepkg_bin: str = "makepkg") -> None:
        self.executor = executor or get_executor()
        self.makepkg_bin = makepkg_bin

    def build(self, workspace: BuildWorkspace, options: InstallOptions) -> None:
        """在工作目录中构建并安装，失败抛 BuildError"""
        cmd = [self.makepkg_bin, *makepkg_args(options)]
        logger.info("开始构建: %s", workspace.name)
        r = self.executor.execute(cmd, cwd=str(workspace.path), capture=False)
        if not r.success:
            raise BuildError(
                f"构建安装 {workspace.name} 失败，已中止: {r.describe()}",
                package=workspace.name,
            )
        logger.info("构建完成: %s", workspace.name)
