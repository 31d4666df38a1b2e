"""Tests for the subprocess runner."""

import io
import sys
from unittest.mock import patch

import pytest

from analytics_installer.wizard.exceptions import (
    ProcessExitError, ProcessSpawnError, StreamReadError
)
from analytics_installer.wizard.progress import START_PHASE, ProgressEstimator
from analytics_installer.wizard.runner import SubprocessRunner


def python_args(code: str):
    return ["-c", code]


class TestSubprocessRunner:
    """Run real short-lived Python subprocesses."""

    def test_success_routes_both_streams(self, tmp_path):
        """Lines from stdout and stderr all reach the estimator."""
        estimator = ProgressEstimator()
        estimator.begin_phase(*START_PHASE)
        runner = SubprocessRunner(estimator, cwd=tmp_path)

        code = (
            "import sys\n"
            "print('Container qdrant Starting', flush=True)\n"
            "print('Container qdrant Started', file=sys.stderr, flush=True)\n"
            "print('hello from stdout', flush=True)\n"
        )
        outcome = runner.run(sys.executable, python_args(code))

        assert outcome.ok
        assert outcome.message == ""
        logs = list(estimator.logs)
        assert "▶️  Starting service qdrant..." in logs
        assert "✅ Service started (1/4)" in logs
        assert "ℹ️  hello from stdout" in logs
        assert estimator.progress.percent == 62.5

    def test_stderr_heavy_output_does_not_block(self, tmp_path):
        """A chatty stderr cannot starve stdout."""
        estimator = ProgressEstimator()
        runner = SubprocessRunner(estimator, cwd=tmp_path)

        code = (
            "import sys\n"
            "for i in range(2000):\n"
            "    sys.stderr.write('#%d building layer\\n' % i)\n"
            "    sys.stdout.write('step %d\\n' % i)\n"
        )
        outcome = runner.run(sys.executable, python_args(code))

        assert outcome.ok
        assert len(estimator.logs) == 100

    def test_runs_in_cwd(self, tmp_path):
        estimator = ProgressEstimator()
        runner = SubprocessRunner(estimator, cwd=tmp_path)

        outcome = runner.run(sys.executable, python_args("import os; print('cwd=' + os.getcwd())"))

        assert outcome.ok
        assert any(str(tmp_path.resolve()) in line for line in estimator.logs)

    def test_non_zero_exit(self, tmp_path):
        estimator = ProgressEstimator()
        runner = SubprocessRunner(estimator, cwd=tmp_path)

        outcome = runner.run(sys.executable, python_args("import sys; print('ERROR: nope'); sys.exit(3)"))

        assert not outcome.ok
        assert isinstance(outcome.error, ProcessExitError)
        assert outcome.error.returncode == 3
        assert "❌ ERROR: nope" in list(estimator.logs)

    def test_spawn_failure(self, tmp_path):
        estimator = ProgressEstimator()
        runner = SubprocessRunner(estimator, cwd=tmp_path)

        outcome = runner.run(str(tmp_path / "no-such-compose"), ["build"])

        assert not outcome.ok
        assert isinstance(outcome.error, ProcessSpawnError)
        assert estimator.logs[-1].startswith("❌ Failed to start")

    def test_on_update_called_per_line(self, tmp_path):
        calls = []
        estimator = ProgressEstimator()
        runner = SubprocessRunner(estimator, cwd=tmp_path, on_update=lambda: calls.append(1))

        runner.run(sys.executable, python_args("print('a'); print('b'); print('c')"))

        assert len(calls) == 3


class _BrokenStream:
    def __iter__(self):
        yield "Container qdrant Starting\n"
        raise OSError("pipe broke")

    def close(self):
        pass


class _FakeProcess:
    def __init__(self):
        self.stdout = _BrokenStream()
        self.stderr = io.StringIO("")
        self.killed = False

    def poll(self):
        return None if not self.killed else -9

    def kill(self):
        self.killed = True

    def wait(self):
        return -9 if self.killed else 0


class TestStreamReadError:
    """A read error ends the invocation with a failure."""

    def test_read_error_is_terminal(self, tmp_path):
        estimator = ProgressEstimator()
        runner = SubprocessRunner(estimator, cwd=tmp_path)
        process = _FakeProcess()

        with patch("analytics_installer.wizard.runner.subprocess.Popen", return_value=process):
            outcome = runner.run("docker", ["compose", "up", "-d"])

        assert not outcome.ok
        assert isinstance(outcome.error, StreamReadError)
        assert outcome.error.stream == "stdout"
        assert process.killed
        assert "❌ Error reading stdout: pipe broke" in list(estimator.logs)
