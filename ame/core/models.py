"""核心数据模型

所有核心数据类集中定义，rpc / classifier / database / services 统一从此处导入。
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

# =========================================================================
# 包元数据
# =========================================================================


@dataclass(frozen=True)
class PackageMetadata:
    """AUR 返回的单个包元信息（获取后不可变）"""

    name: str
    version: str = ""
    description: str = ""
    runtime_depends: tuple[str, ...] = ()
    build_depends: tuple[str, ...] = ()


# =========================================================================
# 依赖分类结果
# =========================================================================


@dataclass
class ClassifiedDependencies:
    """一次分类调用的结果 — 四个互不相交的名称集合（保持首次出现顺序）"""

    already_satisfied: list[str] = field(default_factory=list)
    official_repo: list[str] = field(default_factory=list)
    community_build: list[str] = field(default_factory=list)
    unresolvable: list[str] = field(default_factory=list)
    # community_build 中每个包的 AUR 元数据，分类时顺带取得
    metadata: dict[str, PackageMetadata] = field(default_factory=dict)

    def all_names(self) -> list[str]:
        return [
            *self.already_satisfied, *self.official_repo,
            *self.community_build, *self.unresolvable,
        ]

    @property
    def resolvable(self) -> bool:
        return not self.unresolvable


# =========================================================================
# 安装选项
# =========================================================================


@dataclass(frozen=True)
class InstallOptions:
    """贯穿每一层递归调用的安装选项

    递归安装依赖时只覆盖 as_dependency，其余字段原样传递。
    """

    verbosity: int = 0
    noconfirm: bool = False
    as_dependency: bool = False

    def for_dependency(self) -> InstallOptions:
        """派生依赖安装选项（强制 as_dependency=True）"""
        return replace(self, as_dependency=True)


# =========================================================================
# 安装记录
# =========================================================================


@dataclass(frozen=True)
class InstalledPackageRecord:
    """本地安装数据库中的一条记录（重装时整体替换）"""

    name: str
    version: str = ""
    description: str = ""
    depends: tuple[str, ...] = ()
    make_depends: tuple[str, ...] = ()
    as_dependency: bool = False
    installed_at: str = ""

    @classmethod
    def from_metadata(cls, meta: PackageMetadata, *, as_dependency: bool = False) -> InstalledPackageRecord:
        return cls(
            name=meta.name,
            version=meta.version,
            description=meta.description,
            depends=meta.runtime_depends,
            make_depends=meta.build_depends,
            as_dependency=as_dependency,
            installed_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "description": self.description,
            "depends": list(self.depends),
            "make_depends": list(self.make_depends),
            "as_dependency": self.as_dependency,
            "installed_at": self.installed_at,
        }

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> InstalledPackageRecord:
        return cls(
            name=name,
            version=str(data.get("version", "")),
            description=str(data.get("description", "")),
            depends=tuple(data.get("depends") or ()),
            make_depends=tuple(data.get("make_depends") or ()),
            as_dependency=bool(data.get("as_dependency", False)),
            installed_at=str(data.get("installed_at", "")),
        )


# =========================================================================
# 卸载结果
# =========================================================================


@dataclass
class PurgeResult:
    """一次 purge 调用的汇总"""

    names: list[str]
    removed: bool = False
    untracked: list[str] = field(default_factory=list)  # pacman 已卸载但数据库中无记录
    cleaned: list[str] = field(default_factory=list)    # 已删除的缓存目录
    cleanup_failures: dict[str, str] = field(default_factory=dict)
    message: str = ""

    @property
    def success(self) -> bool:
        return self.removed and not self.cleanup_failures
