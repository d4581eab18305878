"""服务容器 — 统一依赖注入

所有服务通过容器获取，同一容器内的实例共享状态（数据库、执行器等）。
CLI 通过 get_container() 获取服务，而非直接构造。

依赖关系图（→ 表示依赖）:
  classifier → database, pacman, lookup
  installer  → lookup, classifier, pacman, workspaces, makepkg, reviewer, database
  purger     → pacman, database, workspaces

用法:
    container = ServiceContainer(config=Config.from_file("config.yml"))
    container.installer.install(["yay"], InstallOptions())
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ame.utils.shell import CommandExecutor, get_executor

if TYPE_CHECKING:
    from ame.core.classifier import DependencyClassifier
    from ame.core.config import Config
    from ame.core.database import InstalledDatabase
    from ame.core.rpc import MetadataLookup
    from ame.services.install_service import InstallService
    from ame.services.makepkg import MakepkgService
    from ame.services.pacman import PacmanService
    from ame.services.purge_service import PurgeService
    from ame.services.review import ConfirmFn, RecipeReviewer
    from ame.services.workspace import WorkspaceManager

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
        confirm: ConfirmFn | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from ame.core.config import get_config
            config = get_config()
        self._config = config
        self._executor = executor or get_executor()
        self._confirm = confirm

    @property
    def config(self) -> Config:
        return self._config

    # ---- 核心 ----

    @property
    def database(self) -> InstalledDatabase:
        if "database" not in self._instances:
            from ame.core.database import InstalledDatabase
            self._instances["database"] = InstalledDatabase(self._config.db_path)
        return self._instances["database"]  # type: ignore[return-value]

    @property
    def lookup(self) -> MetadataLookup:
        if "lookup" not in self._instances:
            from ame.core.rpc import MetadataLookup
            self._instances["lookup"] = MetadataLookup(
                self._config.rpc_url, timeout=self._config.rpc_timeout,
            )
        return self._instances["lookup"]  # type: ignore[return-value]

    @property
    def classifier(self) -> DependencyClassifier:
        if "classifier" not in self._instances:
            from ame.core.classifier import DependencyClassifier
            self._instances["classifier"] = DependencyClassifier(
                self.database, self.pacman, self.lookup,
            )
        return self._instances["classifier"]  # type: ignore[return-value]

    # ---- 外部工具 ----

    @property
    def pacman(self) -> PacmanService:
        if "pacman" not in self._instances:
            from ame.services.pacman import PacmanService
            self._instances["pacman"] = PacmanService(
                self._executor,
                pacman_bin=self._config.pacman_bin,
                sudo_bin=self._config.sudo_bin,
            )
        return self._instances["pacman"]  # type: ignore[return-value]

    @property
    def workspaces(self) -> WorkspaceManager:
        if "workspaces" not in self._instances:
            from ame.services.workspace import WorkspaceManager
            self._instances["workspaces"] = WorkspaceManager(
                self._config.cache_path, self._config.clone_url,
                executor=self._executor, git_bin=self._config.git_bin,
            )
        return self._instances["workspaces"]  # type: ignore[return-value]

    @property
    def makepkg(self) -> MakepkgService:
        if "makepkg" not in self._instances:
            from ame.services.makepkg import MakepkgService
            self._instances["makepkg"] = MakepkgService(
                self._executor, makepkg_bin=self._config.makepkg_bin,
            )
        return self._instances["makepkg"]  # type: ignore[return-value]

    @property
    def reviewer(self) -> RecipeReviewer:
        if "reviewer" not in self._instances:
            from ame.services.review import RecipeReviewer
            self._instances["reviewer"] = RecipeReviewer(
                pager=self._config.resolve_pager(),
                executor=self._executor,
                confirm=self._confirm,
            )
        return self._instances["reviewer"]  # type: ignore[return-value]

    # ---- 流程 ----

    @property
    def installer(self) -> InstallService:
        if "installer" not in self._instances:
            from ame.services.install_service import InstallService
            self._instances["installer"] = InstallService(
                lookup=self.lookup,
                classifier=self.classifier,
                pacman=self.pacman,
                workspaces=self.workspaces,
                makepkg=self.makepkg,
                reviewer=self.reviewer,
                database=self.database,
            )
        return self._instances["installer"]  # type: ignore[return-value]

    @property
    def purger(self) -> PurgeService:
        if "purger" not in self._instances:
            from ame.services.purge_service import PurgeService
            self._instances["purger"] = PurgeService(
                pacman=self.pacman,
                database=self.database,
                workspaces=self.workspaces,
            )
        return self._instances["purger"]  # type: ignore[return-value]


# 全局单例
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """获取全局服务容器（首次调用时按当前配置创建）"""
    global _container  # noqa: PLW0603
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer | None) -> None:
    """替换全局服务容器（用于测试）；传 None 则下次重新创建"""
    global _container  # noqa: PLW0603
    _container = container
