"""YAML 注册表基类

基于单个 YAML 文件的键值注册表：构造时整体读入，每次修改后整体原子写回。
子类只需指定 section_key。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ame.core.exceptions import DatabaseError
from ame.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)


class YamlRegistry:
    """YAML 文件注册表基类

    子类用法:
        class MyRegistry(YamlRegistry):
            section_key = "items"
    """

    section_key: str = "entries"

    def __init__(self, registry_file: str | Path) -> None:
        self.registry_file = Path(registry_file)
        try:
            self._data: dict[str, Any] = load_yaml(self.registry_file)
        except (yaml.YAMLError, OSError, ValueError) as e:
            raise DatabaseError(f"无法读取 {self.registry_file}: {e}") from e

    def _section(self) -> dict[str, dict[str, Any]]:
        """获取当前 section 字典（自动创建）"""
        section = self._data.get(self.section_key)
        if not isinstance(section, dict):
            section = {}
            self._data[self.section_key] = section
        return section

    def _save(self) -> None:
        try:
            save_yaml(self.registry_file, self._data)
        except (yaml.YAMLError, OSError) as e:
            raise DatabaseError(f"无法写入 {self.registry_file}: {e}") from e

    def _put(self, name: str, entry: dict[str, Any]) -> dict[str, Any]:
        """写入条目并保存"""
        self._section()[name] = entry
        self._save()
        return entry

    def _get_raw(self, name: str) -> dict[str, Any] | None:
        return self._section().get(name)

    def _has(self, name: str) -> bool:
        return name in self._section()

    def _remove_many(self, names: list[str]) -> list[str]:
        """删除多个条目，只保存一次；返回实际删除的名称"""
        section = self._section()
        removed = [n for n in dict.fromkeys(names) if n in section]
        if not removed:
            return []
        for n in removed:
            del section[n]
        self._save()
        return removed
