"""集中配置管理

提供统一的配置入口，支持从 YAML 文件加载 + 编程式覆盖。
路径中的 ~ 在使用时展开，配置文件中可直接写 ~/.cache/ame。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ame.core.exceptions import ConfigError
from ame.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "~/.config/ame/config.yml"


@dataclass
class Config:
    """全局配置"""

    # 目录
    cache_dir: str = "~/.cache/ame"
    db_file: str = "~/.local/share/ame/installed.yml"

    # AUR
    rpc_url: str = "https://aur.archlinux.org/rpc/"
    clone_url: str = "https://aur.archlinux.org"
    rpc_timeout: int = 30

    # 外部工具
    pager: str = ""
    pacman_bin: str = "pacman"
    makepkg_bin: str = "makepkg"
    git_bin: str = "git"
    sudo_bin: str = "sudo"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def cache_path(self) -> Path:
        return Path(self.cache_dir).expanduser()

    @property
    def db_path(self) -> Path:
        return Path(self.db_file).expanduser()

    def resolve_pager(self) -> str:
        """pager 优先级: 配置 → $PAGER → less"""
        return self.pager or os.environ.get("PAGER", "") or "less"

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(Path(path).expanduser())
        except (yaml.YAMLError, OSError, ValueError) as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置项无效: {path}: {e}") from e
        cfg.extra = extra
        return cfg


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.debug("配置已加载: %s", path)
    return _current
