"""shell.py 单元测试"""

from __future__ import annotations

import pytest

from ame.utils.shell import CommandResult, LocalExecutor, ToolOutcome, get_executor, set_executor


class TestCommandResult:
    @pytest.mark.parametrize(("rc", "launched", "outcome"), [
        (0, True, ToolOutcome.SUCCESS),
        (1, True, ToolOutcome.FAILED),
        (-1, False, ToolOutcome.UNAVAILABLE),
    ])
    def test_outcome(self, rc: int, launched: bool, outcome: ToolOutcome) -> None:
        r = CommandResult(returncode=rc, launched=launched)
        assert r.outcome is outcome
        assert r.success is (outcome is ToolOutcome.SUCCESS)

    def test_describe(self) -> None:
        assert "rc=2" in CommandResult(returncode=2, stderr="boom").describe()
        assert "无法启动" in CommandResult(returncode=-1, stderr="x", launched=False).describe()


class TestLocalExecutor:
    def test_success(self, tmp_path) -> None:
        r = LocalExecutor().execute("echo hello", cwd=str(tmp_path))
        assert r.outcome is ToolOutcome.SUCCESS
        assert "hello" in r.stdout

    def test_failure(self, tmp_path) -> None:
        r = LocalExecutor().execute(["false"], cwd=str(tmp_path))
        assert r.outcome is ToolOutcome.FAILED

    def test_missing_program_unavailable(self, tmp_path) -> None:
        r = LocalExecutor().execute(["ame-no-such-program-xyz"], cwd=str(tmp_path))
        assert r.outcome is ToolOutcome.UNAVAILABLE
        assert r.launched is False

    def test_env_passed(self, tmp_path) -> None:
        import os
        env = {**os.environ, "AME_TEST_VAR": "42"}
        r = LocalExecutor().execute("env", cwd=str(tmp_path), env=env)
        assert "AME_TEST_VAR=42" in r.stdout


class TestGlobalExecutor:
    def test_set_and_restore(self) -> None:
        original = get_executor()
        replacement = LocalExecutor()
        try:
            set_executor(replacement)
            assert get_executor() is replacement
        finally:
            set_executor(original)
