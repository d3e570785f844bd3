"""
Error types raised by the scaffolder.

Fatal errors (MissingRequiredInput, PackageManagerMissing, InstallationFailed)
abort the run. BuildFailed and ValidationFailed are recoverable: the
initializer catches them, records a warning and carries on.
"""

from typing import Iterable


class ScaffoldError(Exception):
    """Base class for all scaffolder errors."""


class MissingRequiredInput(ScaffoldError):
    """Required project answers are still missing after prompting."""

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required input: {', '.join(self.fields)}")


class InvalidInput(ScaffoldError, ValueError):
    """A collected answer failed validation."""


class ProvisionError(ScaffoldError):
    """A required tool could not be made available."""

    def __init__(self, tool: str, message: str):
        self.tool = tool
        super().__init__(message)


class PackageManagerMissing(ProvisionError):
    def __init__(self, tool: str, package_manager: str):
        self.package_manager = package_manager
        super().__init__(
            tool,
            f"Cannot install {tool}: package manager '{package_manager}' not found on PATH"
        )


class InstallationFailed(ProvisionError):
    def __init__(self, tool: str, detail: str):
        self.detail = detail
        super().__init__(tool, f"Installation of {tool} failed: {detail}")


class BuildFailed(ScaffoldError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Build failed: {detail}")


class ValidationFailed(ScaffoldError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Validation failed: {detail}")
