"""
Project initializer: directory tree, manifest, stubs, dependencies, build, validation.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from .errors import BuildFailed, InstallationFailed, InvalidInput, ScaffoldError, ValidationFailed
from .file_writer import write_file, write_if_absent, dump_json
from .runner import CommandRunner, CommandResult
from . import templates
from ..models.installation import RunReport, RunState, StepResult, StepStatus
from ..models.project import ProjectConfig
from config.settings import ProjectDefaults, PlatformCliConfig


class ProjectInitializer:
    """Generates the integration app directory using the already provisioned tools."""

    def __init__(self,
                 runner: CommandRunner,
                 env: Dict[str, str],
                 project: Optional[ProjectDefaults] = None,
                 platform_cli: Optional[PlatformCliConfig] = None,
                 install_dependencies: bool = True,
                 serve: bool = False):
        """
        Initialize the project initializer.

        Args:
            runner: Command runner used for every external call
            env: Run-scoped environment (PATH already extended by provisioning)
            project: Project defaults (base directory, versions, commands)
            platform_cli: Platform CLI used for validation and the dev server
            install_dependencies: If False, dependency install and build are skipped
            serve: Start the dev server as the last step
        """
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.env = env
        self.project = project or ProjectDefaults()
        self.platform_cli = platform_cli or PlatformCliConfig()
        self.install_dependencies = install_dependencies
        self.serve = serve

    def project_dir(self, config: ProjectConfig) -> Path:
        """
        Directory the project is generated in, always directly under base_dir.

        Raises:
            InvalidInput: the project id would resolve outside base_dir
        """
        base_dir = Path(self.project.base_dir)
        project_dir = base_dir / config.project_id
        if project_dir.resolve().parent != base_dir.resolve():
            raise InvalidInput(f"Project id '{config.project_id}' does not name a directory inside {base_dir}")
        return project_dir

    def initialize(self, config: ProjectConfig, report: Optional[RunReport] = None) -> RunReport:
        """
        Generate the project for a config.

        Raises:
            InvalidInput: the project id does not name a directory under base_dir
            InstallationFailed: dependency installation failed
        """
        report = report or RunReport(state=RunState.TOOLS_VERIFIED)
        report.project_id = config.project_id

        try:
            project_dir = self.project_dir(config)
            report.project_dir = str(project_dir)

            self._create_structure(config, project_dir, report)
            report.advance(RunState.PROJECT_STRUCTURE_CREATED)

            self._init_git(project_dir, report)

            if self.install_dependencies:
                self._install_dependencies(project_dir, report)
                report.advance(RunState.DEPENDENCIES_INSTALLED)
                try:
                    self._build(project_dir, report)
                except BuildFailed as e:
                    self.logger.warning(str(e))
                    report.warn(str(e))
            else:
                for step in ("install", "build"):
                    report.steps.append(StepResult(step=step, status=StepStatus.SKIPPED, output="disabled"))
                report.advance(RunState.DEPENDENCIES_INSTALLED)
            report.advance(RunState.BUILT)

            try:
                if self._validate(project_dir, report):
                    report.advance(RunState.VALIDATED)
            except ValidationFailed as e:
                self.logger.warning(str(e))
                report.warn(str(e))

            if self.serve:
                self._serve(project_dir, report)
        except ScaffoldError as e:
            report.complete(RunState.FAILED, str(e))
            raise

        report.complete(RunState.DONE)
        self.logger.info(f"Project {config.project_id} initialized at {project_dir}")
        return report

    def _create_structure(self, config: ProjectConfig, project_dir: Path, report: RunReport) -> None:
        project_dir.mkdir(parents=True, exist_ok=True)

        manifest = templates.build_manifest(
            config,
            version=self.project.version,
            scripts=self.project.scripts,
            dependencies=self.project.dependencies,
            dev_dependencies=self.project.dev_dependencies
        )
        report.files[templates.MANIFEST_FILE] = write_file(
            project_dir / templates.MANIFEST_FILE, dump_json(manifest)
        )

        stubs = templates.stub_files(
            config,
            version=self.project.version,
            install_command=self.project.install_command,
            build_command=self.project.build_command,
            validate_command=self.platform_cli.validate_command
        )
        for relative_path, content in stubs.items():
            report.files[relative_path] = write_if_absent(project_dir / relative_path, content)

    def _init_git(self, project_dir: Path, report: RunReport) -> None:
        if (project_dir / ".git").exists():
            report.steps.append(StepResult(step="git_init", status=StepStatus.SKIPPED,
                                           output="already a git repository"))
            return
        if not self.runner.which("git", self.env):
            message = "git not found, repository not initialized"
            self.logger.warning(message)
            report.warn(message)
            report.steps.append(StepResult(step="git_init", status=StepStatus.SKIPPED, output=message))
            return

        result = self.runner.run("git init", cwd=project_dir, env=self.env)
        step = self._record("git_init", result, report)
        if step.status == StepStatus.FAILED:
            message = f"git init failed: {result.summary(200)}"
            self.logger.warning(message)
            report.warn(message)

    def _install_dependencies(self, project_dir: Path, report: RunReport) -> None:
        self.logger.info(f"Installing dependencies: {self.project.install_command}")
        result = self.runner.run(self.project.install_command, cwd=project_dir, env=self.env)
        self._record("install", result, report)
        if not result.ok:
            raise InstallationFailed("project dependencies", result.summary(500))

    def _build(self, project_dir: Path, report: RunReport) -> None:
        self.logger.info(f"Building: {self.project.build_command}")
        result = self.runner.run(self.project.build_command, cwd=project_dir, env=self.env)
        self._record("build", result, report)
        if not result.ok:
            raise BuildFailed(result.summary(500))

    def _validate(self, project_dir: Path, report: RunReport) -> bool:
        """Run the platform validation; False when the CLI is not installed."""
        if not self.runner.which(self.platform_cli.executable, self.env):
            message = f"{self.platform_cli.executable} CLI not found, skipping validation"
            self.logger.warning(message)
            report.warn(message)
            report.steps.append(StepResult(step="validate", status=StepStatus.SKIPPED, output=message))
            return False

        self.logger.info(f"Validating: {self.platform_cli.validate_command}")
        result = self.runner.run(self.platform_cli.validate_command, cwd=project_dir, env=self.env)
        self._record("validate", result, report)
        if not result.ok:
            raise ValidationFailed(result.summary(500))
        return True

    def _serve(self, project_dir: Path, report: RunReport) -> None:
        if not self.runner.which(self.platform_cli.executable, self.env):
            message = f"{self.platform_cli.executable} CLI not found, not starting dev server"
            self.logger.warning(message)
            report.warn(message)
            report.steps.append(StepResult(step="serve", status=StepStatus.SKIPPED, output=message))
            return

        self.logger.info(f"Starting dev server: {self.platform_cli.serve_command} (Ctrl+C to stop)")
        try:
            result = self.runner.run_interactive(self.platform_cli.serve_command, cwd=project_dir, env=self.env)
        except KeyboardInterrupt:
            self.logger.info("Dev server stopped")
            report.steps.append(StepResult(step="serve", status=StepStatus.PASSED, output="stopped by user"))
            return

        step = self._record("serve", result, report)
        if step.status == StepStatus.FAILED:
            message = f"Dev server exited with status {result.returncode}"
            self.logger.warning(message)
            report.warn(message)

    def _record(self, name: str, result: CommandResult, report: RunReport) -> StepResult:
        step = StepResult(
            step=name,
            status=StepStatus.PASSED if result.ok else StepStatus.FAILED,
            output=result.first_line,
            error=None if result.ok else result.summary(500),
            duration_seconds=result.duration_seconds
        )
        report.steps.append(step)
        return step
