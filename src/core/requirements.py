"""
Default tool requirements per operating system.

The order matters: yarn is installed through npm, which ships with node.
"""

import os
import platform
from typing import Any, Dict, Iterable, List, Optional

from ..models.tool import ToolRequirement


WINGET_FLAGS = "-e --silent --accept-package-agreements --accept-source-agreements"


def _sudo() -> str:
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None or geteuid() == 0:
        return ""
    return "sudo "


def _windows_requirements() -> List[ToolRequirement]:
    return [
        ToolRequirement(
            name="node",
            detect_command="node --version",
            install_command=f"winget install --id OpenJS.NodeJS.LTS {WINGET_FLAGS}",
            verify_command="node --version",
            package_manager="winget",
            path_hints=[r"C:\Program Files\nodejs"]
        ),
        ToolRequirement(
            name="yarn",
            detect_command="yarn --version",
            install_command="npm install --global yarn",
            verify_command="yarn --version",
            package_manager="npm",
            path_hints=[os.path.join(os.environ["APPDATA"], "npm")] if os.environ.get("APPDATA") else []
        ),
        ToolRequirement(
            name="git",
            detect_command="git --version",
            install_command=f"winget install --id Git.Git {WINGET_FLAGS}",
            verify_command="git --version",
            package_manager="winget",
            path_hints=[r"C:\Program Files\Git\cmd"]
        ),
    ]


def _macos_requirements() -> List[ToolRequirement]:
    return [
        ToolRequirement(
            name="node",
            detect_command="node --version",
            install_command="brew install node",
            verify_command="node --version",
            package_manager="brew",
            path_hints=["/opt/homebrew/bin", "/usr/local/bin"]
        ),
        ToolRequirement(
            name="yarn",
            detect_command="yarn --version",
            install_command="npm install --global yarn",
            verify_command="yarn --version",
            package_manager="npm",
            path_hints=["/opt/homebrew/bin", "/usr/local/bin"]
        ),
        ToolRequirement(
            name="git",
            detect_command="git --version",
            install_command="brew install git",
            verify_command="git --version",
            package_manager="brew",
            path_hints=["/opt/homebrew/bin", "/usr/local/bin"]
        ),
    ]


def _linux_requirements() -> List[ToolRequirement]:
    sudo = _sudo()
    return [
        ToolRequirement(
            name="node",
            detect_command="node --version",
            install_command=f"{sudo}apt-get install -y nodejs npm",
            verify_command="node --version",
            package_manager="apt-get",
            path_hints=["/usr/bin"]
        ),
        ToolRequirement(
            name="yarn",
            detect_command="yarn --version",
            install_command=f"{sudo}npm install --global yarn",
            verify_command="yarn --version",
            package_manager="npm",
            path_hints=["/usr/local/bin"]
        ),
        ToolRequirement(
            name="git",
            detect_command="git --version",
            install_command=f"{sudo}apt-get install -y git",
            verify_command="git --version",
            package_manager="apt-get",
            path_hints=["/usr/bin"]
        ),
    ]


def default_requirements(system: Optional[str] = None) -> List[ToolRequirement]:
    """Return the ordered tool list for an OS name as reported by platform.system()."""
    system = (system or platform.system()).lower()
    if system == "windows":
        return _windows_requirements()
    if system == "darwin":
        return _macos_requirements()
    return _linux_requirements()


def load_requirements(overrides: Optional[Iterable[Dict[str, Any]]] = None,
                      system: Optional[str] = None) -> List[ToolRequirement]:
    """Use configured tool definitions when given, otherwise the OS defaults."""
    if overrides:
        return [ToolRequirement(**item) for item in overrides]
    return default_requirements(system)
