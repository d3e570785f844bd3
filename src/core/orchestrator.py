"""
Scaffold orchestrator - runs input collection, provisioning, credentials and project generation.
"""

import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from .credentials import CredentialStore
from .errors import ProvisionError, ScaffoldError
from .initializer import ProjectInitializer
from .prompts import InputProvider, collect_project_config
from .provisioner import Provisioner
from .requirements import load_requirements
from .runner import CommandRunner
from ..models.installation import RunReport, RunState, WriteOutcome
from ..models.project import ProjectConfig
from ..models.tool import ProvisionResult, ToolRequirement, ToolStatus
from config.settings import Settings


class ScaffoldOrchestrator:
    """Runs one scaffolding pass from answers to a finished project."""

    def __init__(self,
                 settings: Settings,
                 input_provider: InputProvider,
                 runner: Optional[CommandRunner] = None,
                 env: Optional[Dict[str, str]] = None,
                 requirements: Optional[List[ToolRequirement]] = None):
        """
        Initialize the orchestrator.

        Args:
            settings: Application settings
            input_provider: Source of answers for missing project fields
            runner: Command runner (defaults to a real one honouring command_timeout)
            env: Run-scoped environment; a copy of os.environ when omitted
            requirements: Tools to provision; settings or OS defaults when omitted
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings
        self.input_provider = input_provider
        self.runner = runner or CommandRunner(timeout=settings.provision.command_timeout)
        self.env = dict(env) if env is not None else dict(os.environ)
        self.requirements = requirements
        self.credential_store = CredentialStore(settings.credentials.path)

        self.provisioner = Provisioner(
            runner=self.runner,
            env=self.env,
            auto_install=settings.provision.auto_install,
            verify_rechecks=settings.provision.verify_rechecks,
            recheck_delay_seconds=settings.provision.verify_recheck_delay_seconds
        )
        self.initializer = ProjectInitializer(
            runner=self.runner,
            env=self.env,
            project=settings.project,
            platform_cli=settings.platform_cli,
            install_dependencies=settings.install_dependencies,
            serve=settings.serve
        )

    def collect(self, values: Mapping[str, Optional[str]]) -> ProjectConfig:
        """Resolve the project answers before anything on disk is touched."""
        merged = dict(values)
        if not merged.get("api_key") and self.settings.credentials.api_key:
            merged["api_key"] = self.settings.credentials.api_key

        return collect_project_config(
            merged,
            self.input_provider,
            defaults={
                "project_name": self.settings.project.name,
                "vendor": self.settings.project.vendor,
            },
            prompt_defaults={"api_key": self.credential_store.load()}
        )

    def run(self, values: Mapping[str, Optional[str]]) -> RunReport:
        """
        Main orchestration method.

        Args:
            values: Project answers already known (None for missing)

        Returns:
            The finished run report (state DONE)

        Raises:
            ScaffoldError: on any unrecoverable failure, after marking the report FAILED
        """
        self.logger.info("Starting integration app scaffolding")
        report = RunReport()

        try:
            config = self.collect(values)
            report.project_id = config.project_id
            report.project_dir = str(self.initializer.project_dir(config))

            self._provision_tools(report)
            report.advance(RunState.TOOLS_VERIFIED)

            self.credential_store.save(config.api_key)

            self.initializer.initialize(config, report)
        except ScaffoldError as e:
            if report.state != RunState.FAILED:
                report.complete(RunState.FAILED, str(e))
            self.logger.error(f"Scaffolding failed: {e}")
            raise

        self.logger.info(f"Scaffolding complete: {self.summary(report)}")
        return report

    def _provision_tools(self, report: RunReport) -> None:
        if self.settings.skip_tools:
            message = "Tool provisioning skipped"
            self.logger.warning(message)
            report.warn(message)
            return

        tools = self.requirements or load_requirements(self.settings.provision.tools)
        self.logger.info(f"Checking {len(tools)} required tools: {', '.join(t.name for t in tools)}")
        for tool in tools:
            try:
                report.tools.append(self.provisioner.ensure(tool))
            except ProvisionError as e:
                report.tools.append(ProvisionResult(tool=tool.name, status=ToolStatus.FAILED, message=str(e)))
                raise

    @staticmethod
    def summary(report: RunReport) -> Dict[str, Any]:
        files = list(report.files.values())
        return {
            "state": report.state.value,
            "project_id": report.project_id,
            "project_dir": report.project_dir,
            "tools_present": sum(1 for t in report.tools if t.status == ToolStatus.PRESENT),
            "tools_installed": sum(1 for t in report.tools if t.status == ToolStatus.INSTALLED),
            "files_created": sum(1 for f in files if f == WriteOutcome.CREATED),
            "files_skipped": sum(1 for f in files if f == WriteOutcome.SKIPPED_EXISTING),
            "files_overwritten": sum(1 for f in files if f == WriteOutcome.OVERWRITTEN),
            "warnings": len(report.warnings),
            "duration_seconds": report.duration_seconds or 0.0,
        }
