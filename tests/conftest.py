"""
Shared test fixtures and configuration.
"""

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import pytest

from src.core.runner import CommandResult, NOT_FOUND_EXIT_CODE
from src.models.project import ProjectConfig
from src.models.tool import ToolRequirement
from config.settings import Settings


Response = Union[int, CommandResult, Callable[[], Union[int, CommandResult]]]


class FakeRunner:
    """
    Stands in for CommandRunner.

    Executables in ``available`` are discoverable and answer any command with
    exit status 0 and "<exe> 1.0.0". ``responses`` overrides specific command
    lines with an exit status, a CommandResult, or a callable producing one.
    """

    def __init__(self, available: Iterable[str] = (), responses: Optional[Dict[str, Response]] = None):
        self.available = set(available)
        self.responses: Dict[str, Response] = dict(responses or {})
        self.calls: List[Tuple[str, Optional[Path]]] = []
        self.interactive_calls: List[Tuple[str, Optional[Path]]] = []

    @property
    def commands(self) -> List[str]:
        return [command for command, _ in self.calls]

    def installs(self, executable: str, returncode: int = 0) -> Callable[[], int]:
        """Response that makes an executable available, as an installer would."""
        def _install():
            self.available.add(executable)
            return returncode
        return _install

    def which(self, executable, env=None):
        return f"/fake/bin/{executable}" if executable in self.available else None

    def run(self, command, cwd=None, env=None):
        self.calls.append((command, cwd))
        response = self.responses.get(command)
        if callable(response):
            response = response()
        if isinstance(response, CommandResult):
            return response
        if isinstance(response, int):
            return CommandResult(
                command=command,
                returncode=response,
                stdout="ok\n" if response == 0 else "",
                stderr="" if response == 0 else f"{command} failed"
            )

        executable = command.split()[0]
        if executable not in self.available:
            return CommandResult(command=command, returncode=NOT_FOUND_EXIT_CODE,
                                 stderr=f"{executable}: command not found")
        return CommandResult(command=command, returncode=0, stdout=f"{executable} 1.0.0\n")

    def run_interactive(self, command, cwd=None, env=None):
        self.interactive_calls.append((command, cwd))
        return CommandResult(command=command, returncode=0)


def make_tool(name: str, package_manager: str = "pkg", path_hints=None) -> ToolRequirement:
    return ToolRequirement(
        name=name,
        detect_command=f"{name} --version",
        install_command=f"{package_manager} install {name}",
        verify_command=f"{name} --version",
        package_manager=package_manager,
        path_hints=path_hints or []
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def project_config() -> ProjectConfig:
    return ProjectConfig(
        project_name="My Tool",
        contact_email="dev@example.com",
        api_key="key-123",
        support_url="https://example.com/support",
        vendor="Example Inc"
    )


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Directory projects are generated in; not created up front."""
    return tmp_path / "projects"


@pytest.fixture
def credentials_path(tmp_path: Path) -> Path:
    return tmp_path / "home" / ".appkit" / "credentials.json"


@pytest.fixture
def settings(base_dir: Path, credentials_path: Path, tmp_path: Path) -> Settings:
    return Settings(
        project={"base_dir": str(base_dir)},
        credentials={"path": str(credentials_path)},
        logging={"file_path": str(tmp_path / "logs" / "scaffold.log")}
    )
