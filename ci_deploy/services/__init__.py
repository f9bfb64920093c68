"""Services for the application."""

from .change_resolver import resolve
from .deployment_coordinator import DeploymentCoordinator
from .deployment_executor import DeploymentExecutor
from .factory import (
    create_command_executor,
    create_coordinator_from_settings,
    create_deployment_executor_from_settings,
    create_git_manager_from_settings,
)
from .git_manager import GitManager

__all__ = [
    "DeploymentCoordinator",
    "DeploymentExecutor",
    "GitManager",
    "create_command_executor",
    "create_coordinator_from_settings",
    "create_deployment_executor_from_settings",
    "create_git_manager_from_settings",
    "resolve",
]
