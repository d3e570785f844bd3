"""
Tests for tool provisioning: detect, install, re-verify.
"""

import os

import pytest

from src.core.errors import InstallationFailed, PackageManagerMissing
from src.core.provisioner import Provisioner
from src.models.tool import ToolStatus

from conftest import FakeRunner, make_tool


class TestToolAlreadyPresent:

    def test_present_tool_is_not_installed(self):
        runner = FakeRunner(available={"node", "pkg"})
        provisioner = Provisioner(runner, env={"PATH": ""})

        result = provisioner.ensure(make_tool("node"))

        assert result.status == ToolStatus.PRESENT
        assert result.installed is False
        assert result.version == "node 1.0.0"
        assert "pkg install node" not in runner.commands

    def test_repeated_ensure_never_installs(self):
        runner = FakeRunner(available={"node"})
        provisioner = Provisioner(runner, env={"PATH": ""})
        tool = make_tool("node")

        provisioner.ensure(tool)
        provisioner.ensure(tool)

        assert runner.commands == ["node --version"] * 4

    def test_present_tool_does_not_need_package_manager(self):
        runner = FakeRunner(available={"git"})
        provisioner = Provisioner(runner, env={"PATH": ""})

        result = provisioner.ensure(make_tool("git", package_manager="missing-pm"))

        assert result.status == ToolStatus.PRESENT


class TestInstall:

    def test_installs_missing_tool(self):
        runner = FakeRunner(available={"pkg"})
        runner.responses["pkg install node"] = runner.installs("node")
        provisioner = Provisioner(runner, env={"PATH": ""})

        result = provisioner.ensure(make_tool("node"))

        assert result.status == ToolStatus.INSTALLED
        assert result.installed is True
        assert runner.commands == [
            "node --version",
            "pkg install node",
            "node --version",
            "node --version",
        ]

    def test_missing_package_manager(self):
        runner = FakeRunner()
        provisioner = Provisioner(runner, env={"PATH": ""})

        with pytest.raises(PackageManagerMissing) as exc:
            provisioner.ensure(make_tool("node", package_manager="winget"))

        assert exc.value.tool == "node"
        assert exc.value.package_manager == "winget"
        assert "winget install node" not in runner.commands

    def test_install_that_yields_nothing_fails(self):
        runner = FakeRunner(available={"pkg"})
        provisioner = Provisioner(runner, env={"PATH": ""})

        with pytest.raises(InstallationFailed) as exc:
            provisioner.ensure(make_tool("node"))

        assert exc.value.tool == "node"
        assert runner.commands.count("pkg install node") == 1

    def test_nonzero_install_exit_judged_by_detection(self):
        runner = FakeRunner(available={"pkg"})
        runner.responses["pkg install node"] = runner.installs("node", returncode=1)
        provisioner = Provisioner(runner, env={"PATH": ""})

        result = provisioner.ensure(make_tool("node"))

        assert result.status == ToolStatus.INSTALLED

    def test_failed_verification_after_install(self):
        runner = FakeRunner(available={"pkg"})
        runner.responses["pkg install node"] = runner.installs("node")
        tool = make_tool("node").model_copy(update={"verify_command": "node -e check"})
        runner.responses["node -e check"] = 1
        provisioner = Provisioner(runner, env={"PATH": ""})

        with pytest.raises(InstallationFailed):
            provisioner.ensure(tool)

    def test_auto_install_disabled(self):
        runner = FakeRunner(available={"pkg"})
        provisioner = Provisioner(runner, env={"PATH": ""}, auto_install=False)

        with pytest.raises(InstallationFailed):
            provisioner.ensure(make_tool("node"))

        assert runner.commands == ["node --version"]


class TestVerificationRechecks:

    def _runner_detecting_after(self, attempts: int) -> FakeRunner:
        """Tool becomes detectable only on the n-th detection after install."""
        runner = FakeRunner(available={"pkg"})
        state = {"installed": False, "detections": 0}

        def install():
            state["installed"] = True
            return 0

        def detect():
            if not state["installed"]:
                return 127
            state["detections"] += 1
            return 0 if state["detections"] >= attempts else 127

        runner.responses["pkg install node"] = install
        runner.responses["node --version"] = detect
        return runner

    def test_no_rechecks_by_default(self):
        runner = self._runner_detecting_after(2)
        provisioner = Provisioner(runner, env={"PATH": ""})

        with pytest.raises(InstallationFailed):
            provisioner.ensure(make_tool("node"))

    def test_bounded_rechecks(self):
        runner = self._runner_detecting_after(3)
        sleeps = []
        provisioner = Provisioner(runner, env={"PATH": ""}, verify_rechecks=2,
                                  recheck_delay_seconds=0.5, sleep=sleeps.append)

        result = provisioner.ensure(make_tool("node"))

        assert result.status == ToolStatus.INSTALLED
        assert sleeps == [0.5, 0.5]
        assert runner.commands.count("pkg install node") == 1

    def test_rechecks_exhausted(self):
        runner = self._runner_detecting_after(5)
        sleeps = []
        provisioner = Provisioner(runner, env={"PATH": ""}, verify_rechecks=2, sleep=sleeps.append)

        with pytest.raises(InstallationFailed):
            provisioner.ensure(make_tool("node"))

        assert len(sleeps) == 2


class TestPathHints:

    def test_existing_hint_is_prepended_to_run_path(self, tmp_path):
        hint = tmp_path / "nodejs"
        hint.mkdir()
        runner = FakeRunner(available={"pkg"})
        runner.responses["pkg install node"] = runner.installs("node")
        env = {"PATH": "/usr/bin"}
        provisioner = Provisioner(runner, env=env)

        provisioner.ensure(make_tool("node", path_hints=[str(hint), str(tmp_path / "missing")]))

        assert env["PATH"] == os.pathsep.join([str(hint), "/usr/bin"])

    def test_process_environment_untouched(self, tmp_path):
        hint = tmp_path / "bin"
        hint.mkdir()
        before = os.environ.get("PATH")
        runner = FakeRunner(available={"pkg"})
        runner.responses["pkg install node"] = runner.installs("node")

        Provisioner(runner, env={"PATH": ""}).ensure(make_tool("node", path_hints=[str(hint)]))

        assert os.environ.get("PATH") == before
