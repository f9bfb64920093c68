"""Factories wiring services together from application settings."""

import sys

from ..config.settings import Settings
from ..protocols.command_executor_protocol import CommandExecutorProtocol
from .command_executor import DryRunCommandExecutor, SubprocessCommandExecutor
from .deployment_coordinator import DeploymentCoordinator
from .deployment_executor import DeploymentExecutor
from .git_manager import GitManager
from .secret_provider import EnvironmentSecretProvider


def create_command_executor(dry_run: bool = False) -> CommandExecutorProtocol:
    """
    Create a command executor based on dry-run mode.

    Args:
        dry_run: If True, returns DryRunCommandExecutor; if False, returns
            SubprocessCommandExecutor

    Returns:
        CommandExecutorProtocol implementation
    """
    if dry_run:
        print("🔧 DRY RUN mode: commands will be printed, not executed", file=sys.stderr)
        return DryRunCommandExecutor()
    return SubprocessCommandExecutor()


def create_git_manager_from_settings(settings: Settings) -> GitManager:
    """
    Create a GitManager using application settings.

    Args:
        settings: Application settings

    Returns:
        GitManager for the configured repository path
    """
    return GitManager(
        local_path=settings.REPO_PATH,
        secret_provider=EnvironmentSecretProvider(),
        ci_user_email=settings.CI_USER_EMAIL,
        ci_user_name=settings.CI_USER_NAME,
    )


def create_deployment_executor_from_settings(settings: Settings) -> DeploymentExecutor:
    return DeploymentExecutor(
        executor=create_command_executor(settings.DRY_RUN),
        secret_provider=EnvironmentSecretProvider(),
        compose_command=settings.COMPOSE_COMMAND,
        dry_run=settings.DRY_RUN,
    )


def create_coordinator_from_settings(settings: Settings) -> DeploymentCoordinator:
    return DeploymentCoordinator(
        diff_source=create_git_manager_from_settings(settings),
        deployment_executor=create_deployment_executor_from_settings(settings),
    )
