"""
Tests for the real command runner, using the running interpreter as the external command.
"""

import os
import shlex
import stat
import subprocess
import sys

import pytest

from src.core.runner import CommandRunner, NOT_FOUND_EXIT_CODE


PYTHON = os.path.basename(sys.executable)


def python_command(code: str) -> str:
    return f"{shlex.quote(PYTHON)} -c {shlex.quote(code)}"


@pytest.fixture
def env():
    """Environment whose PATH only holds the interpreter's directory."""
    return dict(os.environ, PATH=os.path.dirname(sys.executable))


@pytest.fixture
def runner():
    return CommandRunner()


class TestRun:

    def test_captures_output_and_exit_status(self, runner, env):
        result = runner.run(python_command("import sys; print('hello'); sys.exit(0)"), env=env)

        assert result.ok
        assert result.first_line == "hello"
        assert result.duration_seconds >= 0

    def test_non_zero_exit(self, runner, env):
        result = runner.run(python_command("import sys; sys.stderr.write('bad'); sys.exit(3)"), env=env)

        assert result.returncode == 3
        assert not result.ok
        assert result.summary() == "bad"

    def test_missing_executable_is_127(self, runner, tmp_path):
        result = runner.run("no-such-tool --version", env={"PATH": str(tmp_path)})

        assert result.returncode == NOT_FOUND_EXIT_CODE
        assert "command not found" in result.stderr

    def test_executable_resolved_against_given_path(self, runner, tmp_path):
        # interpreter directory left off the PATH
        result = runner.run(python_command("print(1)"), env={"PATH": str(tmp_path)})

        assert result.returncode == NOT_FOUND_EXIT_CODE

    def test_cwd_forwarded(self, runner, env, tmp_path):
        result = runner.run(python_command("import os; print(os.getcwd())"), cwd=tmp_path, env=env)

        assert os.path.realpath(result.first_line) == os.path.realpath(tmp_path)

    def test_env_forwarded_without_touching_process_env(self, runner, env):
        env["SCAFFOLD_TEST_MARKER"] = "from-run-env"

        result = runner.run(python_command("import os; print(os.environ['SCAFFOLD_TEST_MARKER'])"), env=env)

        assert result.first_line == "from-run-env"
        assert "SCAFFOLD_TEST_MARKER" not in os.environ

    def test_timeout(self, env):
        runner = CommandRunner(timeout=0.5)

        result = runner.run(python_command("import time; time.sleep(10)"), env=env)

        assert result.returncode == -1
        assert "Timed out" in result.stderr

    def test_os_error_reported_as_127(self, runner, env, monkeypatch):
        def fail(*args, **kwargs):
            raise PermissionError("not executable")

        monkeypatch.setattr(subprocess, "run", fail)

        result = runner.run(python_command("print(1)"), env=env)

        assert result.returncode == NOT_FOUND_EXIT_CODE
        assert "not executable" in result.stderr

    @pytest.mark.parametrize("command", ["", "   "])
    def test_empty_command_rejected(self, runner, env, command):
        with pytest.raises(ValueError):
            runner.run(command, env=env)


@pytest.mark.skipif(os.name == "nt", reason="uses a POSIX shell script")
class TestWhich:

    @pytest.fixture
    def bin_dir(self, tmp_path):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        script = bin_dir / "fake-tool"
        script.write_text("#!/bin/sh\necho fake-tool 2.0\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return bin_dir

    def test_found_only_on_given_path(self, runner, bin_dir, tmp_path):
        assert runner.which("fake-tool", {"PATH": str(bin_dir)}) == str(bin_dir / "fake-tool")
        assert runner.which("fake-tool", {"PATH": str(tmp_path)}) is None
        assert runner.which("fake-tool", {"PATH": ""}) is None

    def test_run_uses_given_path(self, runner, bin_dir):
        env = dict(os.environ, PATH=os.pathsep.join([str(bin_dir), "/bin", "/usr/bin"]))

        result = runner.run("fake-tool --version", env=env)

        assert result.ok
        assert result.first_line == "fake-tool 2.0"


class TestRunInteractive:

    def test_exit_status(self, runner, env):
        result = runner.run_interactive(python_command("import sys; sys.exit(4)"), env=env)

        assert result.returncode == 4

    def test_missing_executable_is_127(self, runner, tmp_path):
        result = runner.run_interactive("no-such-server run", env={"PATH": str(tmp_path)})

        assert result.returncode == NOT_FOUND_EXIT_CODE

    def test_os_error_reported_as_127(self, runner, env, monkeypatch):
        def fail(*args, **kwargs):
            raise OSError("exec format error")

        monkeypatch.setattr(subprocess, "run", fail)

        result = runner.run_interactive(python_command("print(1)"), env=env)

        assert result.returncode == NOT_FOUND_EXIT_CODE
        assert "exec format error" in result.stderr

    @pytest.mark.parametrize("command", ["", "   "])
    def test_empty_command_rejected(self, runner, env, command):
        with pytest.raises(ValueError):
            runner.run_interactive(command, env=env)
