"""
Core modules for the integration app scaffolder.
"""

from .orchestrator import ScaffoldOrchestrator
from .provisioner import Provisioner
from .initializer import ProjectInitializer
from .runner import CommandRunner, CommandResult
from .credentials import CredentialStore

__all__ = [
    "ScaffoldOrchestrator",
    "Provisioner",
    "ProjectInitializer",
    "CommandRunner",
    "CommandResult",
    "CredentialStore"
]
