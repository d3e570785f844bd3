"""
Tool-related data models.
"""

from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ToolStatus(str, Enum):
    """Outcome of provisioning a single tool."""
    PRESENT = "present"
    INSTALLED = "installed"
    FAILED = "failed"


class ToolRequirement(BaseModel):
    """An external tool the scaffolder needs on the machine."""
    name: str = Field(..., description="Tool name")
    detect_command: str = Field(..., description="Command whose zero exit status means the tool is present")
    install_command: str = Field(..., description="Command that installs the tool")
    verify_command: str = Field(..., description="Command run after detection to confirm and report the version")
    package_manager: str = Field(..., description="Executable that must exist before install_command can run")
    path_hints: List[str] = Field(
        default_factory=list,
        description="Directories added to PATH after installing, for executables not yet on PATH"
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "node",
                "detect_command": "node --version",
                "install_command": "brew install node",
                "verify_command": "node --version",
                "package_manager": "brew",
                "path_hints": ["/opt/homebrew/bin"]
            }
        }
    )

    @field_validator('name', 'detect_command', 'install_command', 'verify_command', 'package_manager')
    @classmethod
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class ProvisionResult(BaseModel):
    """What ensure() did for one tool."""
    tool: str = Field(..., description="Tool name")
    status: ToolStatus = Field(..., description="Provisioning outcome")
    version: Optional[str] = Field(None, description="First line of the verify command output")
    installed: bool = Field(default=False, description="Whether an install command was run")
    message: Optional[str] = Field(None, description="Diagnostic for failures")
