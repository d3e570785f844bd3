"""
Data models for the integration app scaffolder.
"""

from .tool import ToolRequirement, ToolStatus, ProvisionResult
from .project import ProjectConfig, normalize_project_id
from .installation import RunReport, RunState, StepResult, StepStatus, WriteOutcome

__all__ = [
    "ToolRequirement",
    "ToolStatus",
    "ProvisionResult",
    "ProjectConfig",
    "normalize_project_id",
    "RunReport",
    "RunState",
    "StepResult",
    "StepStatus",
    "WriteOutcome"
]
