"""本地安装数据库

记录通过 ame 从 AUR 构建安装的包，供后续 purge 使用。

文件格式 (YAML):
    packages:
      yay:
        version: 12.3.5-1
        description: Yet another yogurt
        depends: [pacman, git]
        make_depends: [go]
        as_dependency: false
        installed_at: "2024-05-01T12:00:00+00:00"
"""

from __future__ import annotations

import logging
from pathlib import Path

from ame.core.exceptions import DatabaseError
from ame.core.models import InstalledPackageRecord
from ame.core.registry import YamlRegistry

logger = logging.getLogger(__name__)


class InstalledDatabase(YamlRegistry):
    """已安装 AUR 包数据库

    - add: 按包名插入或替换（支持重装/升级）
    - remove: 未记录的包名直接忽略，不视为错误
    """

    section_key = "packages"

    def __init__(self, db_file: str | Path) -> None:
        super().__init__(db_file)
        logger.debug("已加载安装数据库: %s (%d 条)", self.registry_file, len(self._section()))

    def add(self, record: InstalledPackageRecord) -> None:
        """写入记录并立即持久化；写入失败时内存状态回滚"""
        section = self._section()
        previous = section.get(record.name)
        try:
            self._put(record.name, record.to_dict())
        except DatabaseError:
            if previous is None:
                section.pop(record.name, None)
            else:
                section[record.name] = previous
            raise
        logger.info(
            "已记录安装: %s %s%s", record.name, record.version,
            " (依赖)" if record.as_dependency else "",
        )

    def remove(self, names: list[str]) -> list[str]:
        """删除记录，返回实际删除的包名"""
        removed = self._remove_many(list(names))
        skipped = [n for n in names if n not in removed]
        if removed:
            logger.info("已从数据库移除: %s", ", ".join(removed))
        if skipped:
            logger.debug("数据库中无记录，跳过: %s", ", ".join(skipped))
        return removed

    def contains(self, name: str) -> bool:
        return self._has(name)

    def get(self, name: str) -> InstalledPackageRecord | None:
        entry = self._get_raw(name)
        if entry is None:
            return None
        return InstalledPackageRecord.from_dict(name, entry)

    def list_all(self) -> list[InstalledPackageRecord]:
        return [
            InstalledPackageRecord.from_dict(name, entry or {})
            for name, entry in sorted(self._section().items())
        ]
