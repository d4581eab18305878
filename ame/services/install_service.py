"""递归构建安装流水线

单个 AUR 包的处理顺序（固定）:
  1. 查询元数据（批次开始前一次性查完，任一缺失则整批不动；
     依赖的元数据直接沿用分类时取得的结果，不再重复查询）
  2. 获取工作目录（git clone）
  3. 分别分类运行依赖与构建依赖，有未找到的依赖 → 中止整次运行
  4. 审阅 PKGBUILD（noconfirm 时跳过），用户放弃 → UserCancelled
  5. 安装依赖: 官方仓库依赖交给 pacman，AUR 依赖递归进入本流水线
     （递归时 as_dependency 强制为 True）
  6. makepkg 构建安装
  7. 写入本地安装数据库，随后释放工作目录

批次内按输入顺序逐个处理；任一包失败即中止剩余包，已安装的包不回滚。
依赖链中重复出现同一个包视为依赖环，直接失败。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ame.core.exceptions import DatabaseError, DependencyCycleError, NotFoundError
from ame.core.models import (
    ClassifiedDependencies,
    InstalledPackageRecord,
    InstallOptions,
    PackageMetadata,
)

if TYPE_CHECKING:
    from ame.core.classifier import DependencyClassifier
    from ame.core.database import InstalledDatabase
    from ame.core.rpc import MetadataLookup
    from ame.services.makepkg import MakepkgService
    from ame.services.pacman import PacmanService
    from ame.services.review import RecipeReviewer
    from ame.services.workspace import WorkspaceManager

logger = logging.getLogger(__name__)


def _merge(*groups: list[str]) -> list[str]:
    return list(dict.fromkeys(n for g in groups for n in g))


def _community_metadata(*groups: ClassifiedDependencies) -> list[PackageMetadata]:
    """按首次出现顺序取出各分类结果中 AUR 包的元数据"""
    metas: dict[str, PackageMetadata] = {}
    for g in groups:
        for name in g.community_build:
            metas.setdefault(name, g.metadata[name])
    return list(metas.values())


class InstallService:
    """AUR 递归构建安装"""

    def __init__(
        self,
        *,
        lookup: MetadataLookup,
        classifier: DependencyClassifier,
        pacman: PacmanService,
        workspaces: WorkspaceManager,
        makepkg: MakepkgService,
        reviewer: RecipeReviewer,
        database: InstalledDatabase,
    ) -> None:
        self.lookup = lookup
        self.classifier = classifier
        self.pacman = pacman
        self.workspaces = workspaces
        self.makepkg = makepkg
        self.reviewer = reviewer
        self.database = database
        # 当前递归链上正在处理的包
        self._chain: list[str] = []

    # ---- 顶层入口 ----

    def install(self, names: list[str], options: InstallOptions) -> ClassifiedDependencies:
        """按来源分派安装：已满足的跳过，官方仓库走 pacman，其余走 AUR"""
        sorted_names = self.classifier.classify(names, options)
        if sorted_names.unresolvable:
            raise NotFoundError(
                f"找不到软件包: {', '.join(sorted_names.unresolvable)}，已中止",
                missing=sorted_names.unresolvable,
            )
        if sorted_names.already_satisfied:
            logger.info("已安装，跳过: %s", ", ".join(sorted_names.already_satisfied))
        self.pacman.install(sorted_names.official_repo, options)
        self._install_batch(_community_metadata(sorted_names), options)
        return sorted_names

    def install_from_community(self, names: list[str], options: InstallOptions) -> list[str]:
        """从 AUR 构建安装一批包，返回实际构建的包名"""
        if not names:
            return []
        return self._install_batch(self._resolve_all(names), options)

    # ---- 单包处理 ----

    def _install_batch(self, metas: list[PackageMetadata], options: InstallOptions) -> list[str]:
        if not metas:
            return []
        logger.info("从 AUR 安装: %s", ", ".join(m.name for m in metas))
        built: list[str] = []
        for meta in metas:
            if options.as_dependency and self.database.contains(meta.name):
                # 同一批次中已被其他依赖顺带装上
                logger.info("依赖已安装，跳过: %s", meta.name)
                continue
            self._install_one(meta, options)
            built.append(meta.name)
        return built

    def _resolve_all(self, names: list[str]) -> list[PackageMetadata]:
        metas: list[PackageMetadata] = []
        missing: list[str] = []
        for name in dict.fromkeys(names):
            meta = self.lookup.info(name)
            if meta is None:
                missing.append(name)
            else:
                metas.append(meta)
        if missing:
            raise NotFoundError(
                f"AUR 中找不到软件包: {', '.join(missing)}，已中止",
                missing=missing,
            )
        return metas

    def _install_one(self, meta: PackageMetadata, options: InstallOptions) -> None:
        pkg = meta.name
        if pkg in self._chain:
            chain = [*self._chain, pkg]
            raise DependencyCycleError(f"检测到依赖环: {' -> '.join(chain)}", chain=chain)

        self._chain.append(pkg)
        try:
            with self.workspaces.acquire(pkg) as workspace:
                if options.verbosity >= 1:
                    logger.info("%s 原始依赖: %s", pkg, ", ".join(meta.runtime_depends))
                    logger.info("%s 原始构建依赖: %s", pkg, ", ".join(meta.build_depends))

                deps = self.classifier.classify(list(meta.runtime_depends), options)
                make_deps = self.classifier.classify(list(meta.build_depends), options)
                missing = _merge(deps.unresolvable, make_deps.unresolvable)
                if missing:
                    raise NotFoundError(
                        f"找不到 {pkg} 的依赖: {', '.join(missing)}，已中止",
                        package=pkg, missing=missing,
                    )

                if not options.noconfirm:
                    self.reviewer.review(workspace)

                dep_options = options.for_dependency()
                self.pacman.install(_merge(deps.official_repo, make_deps.official_repo), dep_options)
                self._install_batch(_community_metadata(deps, make_deps), dep_options)

                self.makepkg.build(workspace, options)
                record = InstalledPackageRecord.from_metadata(meta, as_dependency=options.as_dependency)
                try:
                    self.database.add(record)
                except DatabaseError as e:
                    # 不回滚已完成的安装，由操作者决定是否手动卸载
                    raise DatabaseError(f"{pkg} 已安装，但写入本地数据库失败: {e}") from e
        finally:
            self._chain.pop()
        logger.info("安装完成: %s", pkg, extra={"package": pkg})
