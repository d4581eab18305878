"""依赖分类器

把一组依赖名划分为四类:
  1. already_satisfied — pacman 或本地数据库已有，不再做任何查询
  2. official_repo     — 官方仓库可直接安装
  3. community_build   — 需要从 AUR 构建
  4. unresolvable      — 都找不到

纯查询，无副作用。AUR 服务异常 (ServiceError) 原样向上抛出，
不会被归入 unresolvable。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from ame.core.models import ClassifiedDependencies, InstallOptions, PackageMetadata

if TYPE_CHECKING:
    from ame.core.database import InstalledDatabase

logger = logging.getLogger(__name__)


class PackageQuery(Protocol):
    """官方包管理器的查询接口"""

    def is_installed(self, name: str) -> bool: ...

    def in_repos(self, name: str) -> bool: ...


class MetadataSource(Protocol):
    def info(self, name: str) -> PackageMetadata | None: ...


class DependencyClassifier:
    """依赖分类器"""

    def __init__(
        self,
        database: InstalledDatabase,
        pacman: PackageQuery,
        lookup: MetadataSource,
    ) -> None:
        self.database = database
        self.pacman = pacman
        self.lookup = lookup

    def classify(
        self, names: list[str] | tuple[str, ...],
        options: InstallOptions | None = None,
    ) -> ClassifiedDependencies:
        """对依赖名分类；重复名称合并，各分类内保持首次出现顺序"""
        result = ClassifiedDependencies()
        for name in dict.fromkeys(names):
            if self._is_satisfied(name):
                result.already_satisfied.append(name)
            elif self.pacman.in_repos(name):
                result.official_repo.append(name)
            else:
                meta = self.lookup.info(name)
                if meta is None:
                    result.unresolvable.append(name)
                else:
                    result.community_build.append(name)
                    result.metadata[name] = meta

        if options is not None and options.verbosity >= 1:
            logger.info(
                "分类结果: 已满足=%s 官方仓库=%s AUR=%s 未找到=%s",
                result.already_satisfied, result.official_repo,
                result.community_build, result.unresolvable,
            )
        return result

    def _is_satisfied(self, name: str) -> bool:
        return self.database.contains(name) or self.pacman.is_installed(name)
