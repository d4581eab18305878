"""PKGBUILD 审阅交互

AUR 构建脚本由用户维护，安装前给操作者一次查看机会:
  1. 询问是否审阅 PKGBUILD（以及 .install 脚本），默认否
  2. 审阅后再次确认是否继续安装，默认是；拒绝则抛 UserCancelled
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import click

from ame.core.exceptions import UserCancelled
from ame.services.workspace import BuildWorkspace
from ame.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str, bool], bool]


def click_confirm(question: str, default: bool) -> bool:
    return click.confirm(question, default=default)


class RecipeReviewer:
    """PKGBUILD 审阅器"""

    def __init__(
        self,
        pager: str = "less",
        executor: CommandExecutor | None = None,
        confirm: ConfirmFn | None = None,
    ) -> None:
        self.pager = pager
        self.executor = executor or get_executor()
        self.confirm = confirm or click_confirm

    def review(self, workspace: BuildWorkspace) -> None:
        """交互审阅；用户放弃时抛 UserCancelled"""
        wants_review = self.confirm(
            f"是否审阅 {workspace.name} 的 PKGBUILD（以及 .install 文件）？", False,
        )
        if not wants_review:
            return

        for path in [workspace.pkgbuild, *workspace.install_scripts()]:
            if not path.exists():
                logger.warning("文件不存在，跳过审阅: %s", path)
                continue
            r = self.executor.execute([self.pager, str(path)], cwd=str(workspace.path), capture=False)
            if not r.success:
                logger.warning("pager 退出异常 (%s): %s", self.pager, r.describe())

        if not self.confirm(f"仍然安装 {workspace.name} 吗？", True):
            raise UserCancelled(f"用户取消安装: {workspace.name}")
