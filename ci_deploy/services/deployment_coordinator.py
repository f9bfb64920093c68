"""Coordinates change detection and deployment of impacted services."""

import sys
from typing import List

from ..protocols.diff_source_protocol import DiffSourceProtocol
from ..schemas import ChangeComparisonSpec, DeploymentConfig, DeploymentResult
from .change_resolver import resolve
from .deployment_executor import DeploymentExecutor


class DeploymentCoordinator:
    """Finds the services touched by a change and rolls them out."""

    def __init__(
        self,
        diff_source: DiffSourceProtocol,
        deployment_executor: DeploymentExecutor,
    ):
        self.diff_source = diff_source
        self.deployment_executor = deployment_executor

    def detect_changes(self, spec: ChangeComparisonSpec) -> List[str]:
        """Return the service paths with changes between the compared references."""
        print(
            f"Checking for changes on branch '{spec.base_branch}' relative to "
            f"'{spec.compare_ref}' for services: {', '.join(spec.service_paths)}",
            file=sys.stderr,
        )

        # History from the SCM checkout may be enough, so a failed fetch is tolerated
        self.diff_source.fetch_base_branch(
            spec.remote, spec.base_branch, spec.credentials_id
        )
        changed_files = self.diff_source.get_changed_files(spec.compare_ref)

        services = resolve(changed_files, spec.service_paths)
        print(
            "Identified services to update: "
            f"{', '.join(services) if services else 'None'}",
            file=sys.stderr,
        )
        return services

    def deploy_changes(
        self, spec: ChangeComparisonSpec, deployment: DeploymentConfig
    ) -> DeploymentResult:
        """Detect impacted services and deploy only those."""
        services = self.detect_changes(spec)
        if not services:
            print("No services changed, skipping deployment", file=sys.stderr)
            return DeploymentResult()

        config = deployment.model_copy(update={"services_to_update": services})
        return self.deployment_executor.deploy(config)
