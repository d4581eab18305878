"""测试共享 fixture — 模拟 pacman / git / makepkg 与 AUR RPC

整体架构:

  FakeSystem (CommandExecutor)          FakeLookup (MetadataLookup)
  ┌──────────────────────────────┐     ┌──────────────────────────┐
  │ installed: {name: asdeps}    │     │ packages: {name: meta}   │
  │ repo:      官方仓库包名       │     │ errors:   抛 ServiceError │
  │ pacman -Qq / -Si / -S / -Rsu │     │ queries:  查询记录         │
  │ git clone → 生成 PKGBUILD    │     └──────────────────────────┘
  │ makepkg   → 写入 installed   │
  └──────────────────────────────┘

测试只与内存状态和 tmp_path 交互，不触发真实子进程或网络请求。
"""

from __future__ import annotations

import shlex
from pathlib import Path
from types import SimpleNamespace

import pytest

from ame.core.classifier import DependencyClassifier
from ame.core.database import InstalledDatabase
from ame.core.exceptions import ServiceError
from ame.core.models import PackageMetadata
from ame.services.install_service import InstallService
from ame.services.makepkg import MakepkgService
from ame.services.pacman import PacmanService
from ame.services.purge_service import PurgeService
from ame.services.review import RecipeReviewer
from ame.services.workspace import WorkspaceManager
from ame.utils.shell import CommandResult

CLONE_URL = "https://aur.example.org"


# =========================================================================
# 外部工具模拟
# =========================================================================


class FakeSystem:
    """模拟 pacman / git / makepkg / pager 的命令执行器"""

    def __init__(self) -> None:
        self.installed: dict[str, bool] = {}
        self.repo: set[str] = set()
        self.fail_build: set[str] = set()
        self.fail_clone: set[str] = set()
        self.fail_remove = False
        self.calls: list[list[str]] = []
        self.cwds: list[str] = []
        self.builds: list[str] = []

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        capture: bool = True,
    ) -> CommandResult:
        args = shlex.split(cmd) if isinstance(cmd, str) else list(cmd)
        self.calls.append(args)
        self.cwds.append(cwd)
        if args and args[0] == "sudo":
            args = args[1:]
        prog, rest = args[0], args[1:]
        if prog == "pacman":
            return self._pacman(rest)
        if prog == "git":
            return self._git(rest)
        if prog == "makepkg":
            return self._makepkg(rest, cwd)
        if prog == "less":
            return CommandResult(returncode=0)
        return CommandResult(returncode=-1, stderr=f"{prog}: not found", launched=False)

    def commands(self, prog: str) -> list[list[str]]:
        """筛选某个程序的调用记录（去掉 sudo 前缀）"""
        result = []
        for c in self.calls:
            args = c[1:] if c and c[0] == "sudo" else c
            if args and args[0] == prog:
                result.append(args)
        return result

    def _pacman(self, args: list[str]) -> CommandResult:
        flag = args[0]
        names = [a for a in args[1:] if not a.startswith("-")]
        if flag == "-Qq":
            return CommandResult(returncode=0 if names[0] in self.installed else 1)
        if flag == "-Si":
            return CommandResult(returncode=0 if names[0] in self.repo else 1)
        if flag == "-S":
            missing = [n for n in names if n not in self.repo]
            if missing:
                return CommandResult(returncode=1, stderr=f"target not found: {missing[0]}")
            for n in names:
                self.installed.setdefault(n, "--asdeps" in args)
            return CommandResult(returncode=0)
        if flag == "-Rsu":
            if self.fail_remove or any(n not in self.installed for n in names):
                return CommandResult(returncode=1, stderr="failed to prepare transaction")
            for n in names:
                del self.installed[n]
            return CommandResult(returncode=0)
        return CommandResult(returncode=1, stderr=f"unsupported flag {flag}")

    def _git(self, args: list[str]) -> CommandResult:
        url, dest = args[1], Path(args[2])
        name = url.rstrip("/").rsplit("/", 1)[-1].removesuffix(".git")
        if name in self.fail_clone:
            return CommandResult(returncode=128, stderr="fatal: repository not found")
        dest.mkdir(parents=True)
        (dest / "PKGBUILD").write_text(f"pkgname={name}\n", encoding="utf-8")
        return CommandResult(returncode=0)

    def _makepkg(self, args: list[str], cwd: str) -> CommandResult:
        name = Path(cwd).name
        self.builds.append(name)
        if name in self.fail_build:
            return CommandResult(returncode=4, stderr="==> ERROR: A failure occurred in build()")
        (Path(cwd) / f"{name}-1.0-1-x86_64.pkg.tar.zst").write_bytes(b"")
        self.installed[name] = "--asdeps" in args
        return CommandResult(returncode=0)


class FakeLookup:
    """模拟 AUR RPC 查询"""

    def __init__(self) -> None:
        self.packages: dict[str, PackageMetadata] = {}
        self.errors: set[str] = set()
        self.queries: list[str] = []

    def add(
        self, name: str, depends: tuple[str, ...] = (),
        make_depends: tuple[str, ...] = (), version: str = "1.0-1",
    ) -> PackageMetadata:
        meta = PackageMetadata(
            name=name, version=version, description=f"{name} package",
            runtime_depends=tuple(depends), build_depends=tuple(make_depends),
        )
        self.packages[name] = meta
        return meta

    def info(self, name: str) -> PackageMetadata | None:
        self.queries.append(name)
        if name in self.errors:
            raise ServiceError(f"AUR RPC 请求失败: {name}")
        return self.packages.get(name)


class FakeConfirm:
    """按顺序返回预设回答；回答用完后返回默认值"""

    def __init__(self) -> None:
        self.answers: list[bool] = []
        self.questions: list[str] = []

    def __call__(self, question: str, default: bool) -> bool:
        self.questions.append(question)
        if self.answers:
            return self.answers.pop(0)
        return default


# =========================================================================
# Fixtures
# =========================================================================


@pytest.fixture()
def system() -> FakeSystem:
    return FakeSystem()


@pytest.fixture()
def lookup() -> FakeLookup:
    return FakeLookup()


@pytest.fixture()
def confirm() -> FakeConfirm:
    return FakeConfirm()


@pytest.fixture()
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture()
def db_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "installed.yml"


@pytest.fixture()
def database(db_file: Path) -> InstalledDatabase:
    return InstalledDatabase(db_file)


@pytest.fixture()
def services(
    system: FakeSystem, lookup: FakeLookup, confirm: FakeConfirm,
    database: InstalledDatabase, cache_dir: Path,
) -> SimpleNamespace:
    """按生产方式组装的服务集合（外部依赖全部替换为 fake）"""
    pacman = PacmanService(system)
    workspaces = WorkspaceManager(cache_dir, CLONE_URL, executor=system)
    classifier = DependencyClassifier(database, pacman, lookup)
    installer = InstallService(
        lookup=lookup,
        classifier=classifier,
        pacman=pacman,
        workspaces=workspaces,
        makepkg=MakepkgService(system),
        reviewer=RecipeReviewer(pager="less", executor=system, confirm=confirm),
        database=database,
    )
    purger = PurgeService(pacman=pacman, database=database, workspaces=workspaces)
    return SimpleNamespace(
        pacman=pacman, workspaces=workspaces, classifier=classifier,
        installer=installer, purger=purger, database=database,
    )
