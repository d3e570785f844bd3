"""
Tool provisioning: detect, install when absent, re-verify.
"""

import logging
import os
import time
from typing import Callable, Dict, Iterable

from .errors import InstallationFailed, PackageManagerMissing
from .runner import CommandRunner
from ..models.tool import ToolRequirement, ToolStatus, ProvisionResult


class Provisioner:
    """Makes sure each required tool is discoverable before the project is generated."""

    def __init__(self,
                 runner: CommandRunner,
                 env: Dict[str, str],
                 auto_install: bool = True,
                 verify_rechecks: int = 0,
                 recheck_delay_seconds: float = 2.0,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the provisioner.

        Args:
            runner: Command runner used for every external call
            env: Run-scoped environment; PATH is extended in place after installs
            auto_install: If False, a missing tool fails without an install attempt
            verify_rechecks: Extra detection attempts after an install
            recheck_delay_seconds: Pause between those attempts
            sleep: Sleep function (injectable for tests)
        """
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.env = env
        self.auto_install = auto_install
        self.verify_rechecks = max(0, verify_rechecks)
        self.recheck_delay_seconds = recheck_delay_seconds
        self.sleep = sleep

    def is_present(self, tool: ToolRequirement) -> bool:
        return self.runner.run(tool.detect_command, env=self.env).ok

    def ensure(self, tool: ToolRequirement) -> ProvisionResult:
        """
        Ensure a tool is present, installing it through its package manager if needed.

        Raises:
            PackageManagerMissing: the tool is absent and so is its package manager
            InstallationFailed: the install did not yield a working executable
        """
        if self.is_present(tool):
            version = self._verify(tool)
            self.logger.info(f"{tool.name} already present ({version or 'version unknown'})")
            return ProvisionResult(tool=tool.name, status=ToolStatus.PRESENT, version=version)

        self.logger.info(f"{tool.name} not found")
        if not self.auto_install:
            raise InstallationFailed(tool.name, "tool is missing and automatic installation is disabled")

        if not self.runner.which(tool.package_manager, self.env):
            self.logger.error(f"Package manager {tool.package_manager} not found, cannot install {tool.name}")
            raise PackageManagerMissing(tool.name, tool.package_manager)

        self.logger.info(f"Installing {tool.name}: {tool.install_command}")
        install = self.runner.run(tool.install_command, env=self.env)
        if not install.ok:
            # Judged by re-detection below; some installers exit non-zero on success.
            self.logger.warning(f"Install command for {tool.name} exited with {install.returncode}: {install.summary()}")

        self._extend_path(tool.path_hints)

        if not self._detect_after_install(tool):
            detail = "tool still not found after install"
            if not install.ok:
                detail += f" ({install.summary(200)})"
            raise InstallationFailed(tool.name, detail)

        verify = self.runner.run(tool.verify_command, env=self.env)
        if not verify.ok:
            raise InstallationFailed(tool.name, f"verification '{tool.verify_command}' failed: {verify.summary(200)}")

        self.logger.info(f"Installed {tool.name} ({verify.first_line or 'version unknown'})")
        return ProvisionResult(
            tool=tool.name,
            status=ToolStatus.INSTALLED,
            version=verify.first_line,
            installed=True
        )

    def _verify(self, tool: ToolRequirement):
        result = self.runner.run(tool.verify_command, env=self.env)
        return result.first_line if result.ok else None

    def _detect_after_install(self, tool: ToolRequirement) -> bool:
        if self.is_present(tool):
            return True
        for attempt in range(1, self.verify_rechecks + 1):
            self.logger.info(
                f"{tool.name} not yet detectable, re-checking ({attempt}/{self.verify_rechecks})"
            )
            self.sleep(self.recheck_delay_seconds)
            if self.is_present(tool):
                return True
        return False

    def _extend_path(self, hints: Iterable[str]) -> None:
        """Prepend existing hint directories to the run's PATH."""
        entries = [p for p in self.env.get("PATH", "").split(os.pathsep) if p]
        added = []
        for hint in hints:
            if hint and os.path.isdir(hint) and hint not in entries:
                added.append(hint)
        if added:
            self.env["PATH"] = os.pathsep.join(added + entries)
            self.logger.debug(f"Added to PATH: {', '.join(added)}")
