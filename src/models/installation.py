"""
Run state, step result and write outcome models.
"""

from enum import Enum
from typing import Optional, Dict, List
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from .tool import ProvisionResult


class StepStatus(str, Enum):
    """Status of an initializer step."""
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class WriteOutcome(str, Enum):
    """What a file write primitive did."""
    CREATED = "created"
    SKIPPED_EXISTING = "skipped_existing"
    OVERWRITTEN = "overwritten"


class RunState(str, Enum):
    """Per-run state machine."""
    IDLE = "idle"
    TOOLS_VERIFIED = "tools_verified"
    PROJECT_STRUCTURE_CREATED = "project_structure_created"
    DEPENDENCIES_INSTALLED = "dependencies_installed"
    BUILT = "built"
    VALIDATED = "validated"
    DONE = "done"
    FAILED = "failed"


# Allowed forward transitions; FAILED is reachable from any non-terminal state.
_TRANSITIONS = {
    RunState.IDLE: {RunState.TOOLS_VERIFIED},
    RunState.TOOLS_VERIFIED: {RunState.PROJECT_STRUCTURE_CREATED},
    RunState.PROJECT_STRUCTURE_CREATED: {RunState.DEPENDENCIES_INSTALLED},
    RunState.DEPENDENCIES_INSTALLED: {RunState.BUILT},
    RunState.BUILT: {RunState.VALIDATED, RunState.DONE},
    RunState.VALIDATED: {RunState.DONE},
    RunState.DONE: set(),
    RunState.FAILED: set(),
}


class StepResult(BaseModel):
    """Result of one external step (git init, install, build, validate, serve)."""
    step: str = Field(..., description="Step name")
    status: StepStatus = Field(..., description="Step status")
    output: Optional[str] = Field(None, description="Step output")
    error: Optional[str] = Field(None, description="Error message if failed")
    duration_seconds: Optional[float] = Field(None, description="Step duration")


class RunReport(BaseModel):
    """Everything one scaffolding run did."""
    state: RunState = Field(default=RunState.IDLE)
    project_id: Optional[str] = None
    project_dir: Optional[str] = None

    tools: List[ProvisionResult] = Field(default_factory=list)
    files: Dict[str, WriteOutcome] = Field(
        default_factory=dict,
        description="Project-relative path to write outcome"
    )
    steps: List[StepResult] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    error: Optional[str] = None

    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None

    def advance(self, state: RunState) -> None:
        """Move to the next state, rejecting transitions the state machine does not allow."""
        if state == RunState.FAILED and self.state not in (RunState.DONE, RunState.FAILED):
            self.state = state
            return
        if state not in _TRANSITIONS[self.state]:
            raise ValueError(f"Invalid run state transition: {self.state.value} -> {state.value}")
        self.state = state

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def step(self, name: str) -> Optional[StepResult]:
        for result in self.steps:
            if result.step == name:
                return result
        return None

    def complete(self, state: RunState, error: Optional[str] = None) -> None:
        """Mark the run as finished in a terminal state."""
        self.advance(state)
        if error:
            self.error = error
        self.completed_at = datetime.now(timezone.utc)
        if self.started_at:
            self.duration_seconds = (self.completed_at - self.started_at).total_seconds()

    @property
    def succeeded(self) -> bool:
        return self.state == RunState.DONE
