"""构建工作目录管理

每个包在缓存根目录下独占一个子目录 <cache_dir>/<name>，存放克隆的源码和构建产物。

acquire() 是作用域句柄：进入时 git clone，退出时（成功、构建失败、
用户取消、任何异常）都会删除该目录。删除失败只记 WARNING，
不会覆盖正在传播的异常。
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from ame.core.exceptions import CloneError, ValidationError
from ame.utils.net import clone_base, repo_url
from ame.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildWorkspace:
    """单个包的构建工作目录"""

    name: str
    path: Path

    @property
    def pkgbuild(self) -> Path:
        return self.path / "PKGBUILD"

    def install_scripts(self) -> list[Path]:
        """包中附带的 .install 脚本"""
        return sorted(self.path.glob("*.install"))


class WorkspaceManager:
    """工作目录管理器"""

    def __init__(
        self,
        cache_dir: str | Path,
        clone_url: str,
        executor: CommandExecutor | None = None,
        git_bin: str = "git",
    ) -> None:
        self.cache_dir = Path(cache_dir)
        self.clone_url = clone_base(clone_url)
        self.executor = executor or get_executor()
        self.git_bin = git_bin

    def path_for(self, name: str) -> Path:
        if not name or "/" in name or name in (".", ".."):
            raise ValidationError(f"非法包名: {name!r}")
        return self.cache_dir / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_dir()

    @contextmanager
    def acquire(self, name: str) -> Iterator[BuildWorkspace]:
        """克隆源码并返回工作目录，退出作用域时保证删除"""
        path = self.path_for(name)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        if path.exists():
            logger.info("清理残留工作目录: %s", path)
            try:
                shutil.rmtree(path)
            except OSError as e:
                raise CloneError(f"无法清理残留工作目录 {path}: {e}") from e

        try:
            self._clone(name, path)
            yield BuildWorkspace(name=name, path=path)
        finally:
            self.release(name)

    def _clone(self, name: str, path: Path) -> None:
        url = repo_url(self.clone_url, name)
        logger.info("克隆 %s 源码 -> %s", name, path)
        r = self.executor.execute(
            [self.git_bin, "clone", url, str(path)], cwd=str(self.cache_dir),
        )
        if not r.success:
            raise CloneError(f"克隆 {name} 失败 ({url}): {r.describe()}")

    def release(self, name: str) -> bool:
        """删除工作目录；不存在视为成功，删除失败返回 False 并记录告警"""
        path = self.path_for(name)
        if not path.exists():
            return True
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.warning(
                "无法删除 %s 的缓存目录 %s: %s", name, path, e, extra={"package": name},
            )
            return False
        logger.debug("已删除工作目录: %s", path)
        return True

    def list_cached(self) -> list[str]:
        """缓存根目录下现存的包目录"""
        if not self.cache_dir.is_dir():
            return []
        return sorted(p.name for p in self.cache_dir.iterdir() if p.is_dir())
