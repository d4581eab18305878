"""Shell 命令执行工具 — 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，方便测试替换。
外部工具（pacman / git / makepkg / pager）只通过退出码报告结果，
这里统一转换为 ToolOutcome 三态，调用方无需各自匹配退出码。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

class ToolOutcome(Enum):
    """外部工具调用结果"""

    SUCCESS = "success"          # 退出码 0
    FAILED = "failed"            # 工具自身报告失败
    UNAVAILABLE = "unavailable"  # 无法启动（程序不存在、无权限等）


@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    launched: bool = True

    @property
    def outcome(self) -> ToolOutcome:
        if not self.launched:
            return ToolOutcome.UNAVAILABLE
        if self.returncode == 0:
            return ToolOutcome.SUCCESS
        return ToolOutcome.FAILED

    @property
    def success(self) -> bool:
        return self.outcome is ToolOutcome.SUCCESS

    def describe(self) -> str:
        """简短描述，用于日志和错误信息"""
        if not self.launched:
            return f"无法启动: {self.stderr[:300]}"
        detail = f": {self.stderr.strip()[:300]}" if self.stderr.strip() else ""
        return f"rc={self.returncode}{detail}"


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议 — 抽象子进程调用

    测试时可注入 mock 实现，无需 patch subprocess。
    capture=False 时子进程直接连接终端（pager、makepkg、pacman 交互提示）。
    """

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        capture: bool = True,
    ) -> CommandResult:
        """执行命令并返回结果"""
        ...


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalExecutor:
    """本地命令执行器（默认实现）"""

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        capture: bool = True,
    ) -> CommandResult:
        args = shlex.split(cmd) if isinstance(cmd, str) else list(cmd)
        logger.debug("执行: %s (cwd=%s)", shlex.join(args), cwd)
        try:
            r = subprocess.run(
                args, capture_output=capture, text=True,
                cwd=cwd, env=env, check=False, timeout=timeout,
            )
        except OSError as e:
            logger.error("无法启动 %s: %s", args[0] if args else "", e)
            return CommandResult(returncode=-1, stderr=str(e), launched=False)
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout or "",
            stderr=r.stderr or "",
        )


# =========================================================================
# 全局默认执行器（可替换）
# =========================================================================

_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    """获取全局默认命令执行器"""
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局默认命令执行器（用于测试）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor
