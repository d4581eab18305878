"""卸载与缓存清理

流程:
  1. pacman -Rsu 一次性卸载全部包；失败可恢复（常见原因是反向依赖冲突），
     只记录错误，由操作者调整输入后重试
  2. 仅在卸载成功后从本地数据库删除记录；未记录的包直接忽略
  3. 无论卸载是否成功，逐个删除残留的缓存目录；单个失败只告警，不影响其余包
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ame.core.exceptions import ValidationError
from ame.core.models import PurgeResult

if TYPE_CHECKING:
    from ame.core.database import InstalledDatabase
    from ame.services.pacman import PacmanService
    from ame.services.workspace import WorkspaceManager

logger = logging.getLogger(__name__)


class PurgeService:
    """卸载协调器"""

    def __init__(
        self,
        *,
        pacman: PacmanService,
        database: InstalledDatabase,
        workspaces: WorkspaceManager,
    ) -> None:
        self.pacman = pacman
        self.database = database
        self.workspaces = workspaces

    def purge(self, noconfirm: bool, names: list[str]) -> PurgeResult:
        result = PurgeResult(names=list(names))
        if not names:
            result.message = "未指定要卸载的包"
            return result

        joined = " ".join(names)
        logger.info("尝试卸载: %s", joined)
        r = self.pacman.remove(list(names), noconfirm)
        try:
            if r.success:
                result.removed = True
                result.message = f"已卸载: {joined}"
                logger.info(result.message)
                removed = self.database.remove(list(names))
                result.untracked = [n for n in names if n not in removed]
            else:
                result.message = f"无法卸载: {joined} ({r.describe()})"
                logger.error(result.message)
        finally:
            # 数据库写入失败也照常清理缓存
            self._clean_caches(names, result)
        return result

    def clean_cache(self) -> PurgeResult:
        """删除缓存根目录下所有残留的构建目录"""
        names = self.workspaces.list_cached()
        result = PurgeResult(names=names, message=f"缓存目录: {len(names)} 个")
        self._clean_caches(names, result)
        return result

    def _clean_caches(self, names: list[str], result: PurgeResult) -> None:
        for name in names:
            try:
                if not self.workspaces.exists(name):
                    continue
            except ValidationError as e:
                logger.warning("跳过缓存清理: %s", e)
                continue
            if self.workspaces.release(name):
                result.cleaned.append(name)
                logger.info("已删除 %s 的 AUR 缓存目录", name)
            else:
                result.cleanup_failures[name] = str(self.workspaces.path_for(name))
