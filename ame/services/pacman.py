"""官方包管理器 (pacman) 封装

pacman 只通过退出码报告结果；查询类操作返回 bool，
安装失败抛 InstallError，卸载结果交给调用方判断。
"""

from __future__ import annotations

import logging

from ame.core.exceptions import InstallError
from ame.core.models import InstallOptions
from ame.utils.shell import CommandExecutor, CommandResult, ToolOutcome, get_executor

logger = logging.getLogger(__name__)


class PacmanService:
    """pacman 调用封装"""

    def __init__(
        self, executor: CommandExecutor | None = None,
        pacman_bin: str = "pacman", sudo_bin: str = "sudo",
    ) -> None:
        self.executor = executor or get_executor()
        self.pacman_bin = pacman_bin
        self.sudo_bin = sudo_bin

    # ---- 查询 ----

    def is_installed(self, name: str) -> bool:
        """本地是否已安装（pacman -Qq）"""
        return self._query("-Qq", name)

    def in_repos(self, name: str) -> bool:
        """官方仓库中是否存在（pacman -Si）"""
        return self._query("-Si", name)

    def _query(self, flag: str, name: str) -> bool:
        r = self.executor.execute([self.pacman_bin, flag, name])
        if r.outcome is ToolOutcome.UNAVAILABLE:
            raise InstallError(f"无法调用 {self.pacman_bin}: {r.describe()}")
        return r.success

    # ---- 安装 / 卸载 ----

    def install(self, names: list[str], options: InstallOptions) -> None:
        """从官方仓库安装，失败抛 InstallError"""
        if not names:
            return
        cmd = [self.pacman_bin, "-S", "--needed", *names]
        if options.as_dependency:
            cmd.append("--asdeps")
        if options.noconfirm:
            cmd.append("--noconfirm")
        logger.info("从官方仓库安装: %s", ", ".join(names))
        r = self.executor.execute(self._privileged(cmd), capture=False)
        if not r.success:
            raise InstallError(f"官方仓库安装失败 ({', '.join(names)}): {r.describe()}")

    def _privileged(self, cmd: list[str]) -> list[str]:
        return [self.sudo_bin, *cmd] if self.sudo_bin else cmd

    def remove(self, names: list[str], noconfirm: bool) -> CommandResult:
        """pacman -Rsu 一次性卸载全部包，返回执行结果"""
        cmd = [self.pacman_bin, "-Rsu", *names]
        if noconfirm:
            cmd.append("--noconfirm")
        return self.executor.execute(self._privileged(cmd), capture=False)
