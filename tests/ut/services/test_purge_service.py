"""PurgeService 单元测试"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from ame.core.exceptions import DatabaseError
from ame.core.models import InstalledPackageRecord


def _leftover(cache_dir: Path, name: str) -> Path:
    d = cache_dir / name
    (d / "src").mkdir(parents=True)
    (d / "PKGBUILD").write_text("pkgname=x\n", encoding="utf-8")
    return d


class TestPurge:
    @pytest.fixture()
    def purger(self, services):
        return services.purger

    def test_success_updates_database(self, purger, system, database) -> None:
        system.installed.update({"foo": False, "bar": True})
        database.add(InstalledPackageRecord(name="foo"))
        database.add(InstalledPackageRecord(name="bar", as_dependency=True))

        result = purger.purge(True, ["foo", "bar"])

        assert result.removed is True and result.success is True
        assert database.list_all() == []
        assert system.installed == {}
        assert system.commands("pacman")[-1] == ["pacman", "-Rsu", "foo", "bar", "--noconfirm"]

    def test_without_noconfirm_flag(self, purger, system) -> None:
        system.installed["foo"] = False
        purger.purge(False, ["foo"])
        assert system.commands("pacman")[-1] == ["pacman", "-Rsu", "foo"]
        assert system.calls[-1][0] == "sudo"

    def test_untracked_package_is_fine(self, purger, system, database) -> None:
        """数据库中无记录的包: 卸载成功，数据库层不报错"""
        system.installed["htop"] = False
        result = purger.purge(True, ["htop"])
        assert result.removed is True
        assert result.untracked == ["htop"]

    def test_removal_failure_keeps_database_but_cleans_cache(
        self, purger, system, database, cache_dir,
    ) -> None:
        """pacman 失败（反向依赖冲突）: 数据库不变，缓存目录仍然删除"""
        system.installed.update({"foo": False, "bar": False})
        system.fail_remove = True
        database.add(InstalledPackageRecord(name="foo"))
        database.add(InstalledPackageRecord(name="bar"))
        _leftover(cache_dir, "foo")
        _leftover(cache_dir, "bar")

        result = purger.purge(True, ["foo", "bar"])

        assert result.removed is False
        assert "foo" in result.message
        assert database.contains("foo") and database.contains("bar")
        assert result.cleaned == ["foo", "bar"]
        assert not (cache_dir / "foo").exists()
        assert not (cache_dir / "bar").exists()

    def test_database_failure_still_cleans_cache(
        self, purger, system, database, cache_dir, monkeypatch,
    ) -> None:
        """pacman 卸载成功但数据库写入失败: 异常上抛，缓存目录仍被删除"""
        system.installed["foo"] = False
        database.add(InstalledPackageRecord(name="foo"))
        _leftover(cache_dir, "foo")

        def broken_remove(names):
            raise DatabaseError("disk full")

        monkeypatch.setattr(database, "remove", broken_remove)
        with pytest.raises(DatabaseError, match="disk full"):
            purger.purge(True, ["foo"])
        assert not (cache_dir / "foo").exists()
        assert "foo" not in system.installed

    def test_purge_removes_leftover_cache(self, purger, system, cache_dir) -> None:
        system.installed["foo"] = False
        _leftover(cache_dir, "foo")
        result = purger.purge(True, ["foo"])
        assert result.cleaned == ["foo"]
        assert not (cache_dir / "foo").exists()

    def test_no_cache_dir_is_noop(self, purger, system) -> None:
        system.installed["foo"] = False
        result = purger.purge(True, ["foo"])
        assert result.cleaned == []
        assert result.cleanup_failures == {}

    @pytest.mark.skipif(os.geteuid() == 0, reason="root 不受目录权限限制")
    def test_cleanup_failure_is_independent(self, purger, system, cache_dir) -> None:
        """单个缓存目录删除失败只告警，其余包照常清理"""
        system.installed.update({"stuck": False, "fine": False})
        stuck = _leftover(cache_dir, "stuck")
        _leftover(cache_dir, "fine")
        stuck.chmod(0o500)
        try:
            result = purger.purge(True, ["stuck", "fine"])
        finally:
            stuck.chmod(0o700)
        assert "stuck" in result.cleanup_failures
        assert result.cleaned == ["fine"]
        assert result.success is False

    def test_empty_list(self, purger, system) -> None:
        result = purger.purge(True, [])
        assert result.removed is False
        assert system.calls == []

    def test_unsafe_name_skips_cache_cleanup(self, purger, system, cache_dir) -> None:
        result = purger.purge(True, ["../etc"])
        assert result.cleaned == []


class TestCleanCache:
    def test_removes_all_leftovers(self, services, cache_dir) -> None:
        _leftover(cache_dir, "a")
        _leftover(cache_dir, "b")
        result = services.purger.clean_cache()
        assert result.cleaned == ["a", "b"]
        assert list(cache_dir.iterdir()) == []

    def test_missing_cache_root(self, services) -> None:
        result = services.purger.clean_cache()
        assert result.names == [] and result.cleaned == []
