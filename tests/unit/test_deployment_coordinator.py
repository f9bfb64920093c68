"""Unit tests for DeploymentCoordinator class."""

from unittest.mock import Mock

import pytest

from ci_deploy.exceptions import FetchError
from ci_deploy.schemas import ChangeComparisonSpec, DeploymentConfig, DeploymentResult
from ci_deploy.services import DeploymentCoordinator, DeploymentExecutor, GitManager


class TestDeploymentCoordinator:
    """Test cases for DeploymentCoordinator class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.mock_diff_source = Mock(spec=GitManager)
        self.mock_diff_source.fetch_base_branch.return_value = True
        self.mock_deployment_executor = Mock(spec=DeploymentExecutor)

        self.coordinator = DeploymentCoordinator(
            diff_source=self.mock_diff_source,
            deployment_executor=self.mock_deployment_executor,
        )
        self.spec = ChangeComparisonSpec(
            base_branch="development",
            service_paths=["backend", "frontend", "nginx"],
            credentials_id="git-creds",
        )
        self.deployment = DeploymentConfig(
            env_file_credential="prod-env",
            registry="acme/shop",
            build_number="42",
            services_to_update=["backend", "frontend", "nginx"],
        )

    def test_detect_changes(self):
        self.mock_diff_source.get_changed_files.return_value = [
            "nginx/nginx.conf",
            "backend/app/main.py",
            "README.md",
        ]

        result = self.coordinator.detect_changes(self.spec)

        assert result == ["backend", "nginx"]
        self.mock_diff_source.fetch_base_branch.assert_called_once_with(
            "origin", "development", "git-creds"
        )
        self.mock_diff_source.get_changed_files.assert_called_once_with("HEAD~1 HEAD")

    def test_detect_changes_continues_after_failed_fetch(self):
        self.mock_diff_source.fetch_base_branch.return_value = False
        self.mock_diff_source.get_changed_files.return_value = ["frontend/src/App.vue"]

        assert self.coordinator.detect_changes(self.spec) == ["frontend"]

    def test_detect_changes_no_changes(self):
        self.mock_diff_source.get_changed_files.return_value = []

        assert self.coordinator.detect_changes(self.spec) == []

    def test_detect_changes_diff_failure(self):
        self.mock_diff_source.get_changed_files.side_effect = FetchError("bad ref")

        with pytest.raises(FetchError):
            self.coordinator.detect_changes(self.spec)

    def test_deploy_changes_deploys_only_impacted_services(self):
        self.mock_diff_source.get_changed_files.return_value = ["frontend/index.html"]
        expected = DeploymentResult(services=["frontend"])
        self.mock_deployment_executor.deploy.return_value = expected

        result = self.coordinator.deploy_changes(self.spec, self.deployment)

        assert result == expected
        deployed_config = self.mock_deployment_executor.deploy.call_args[0][0]
        assert deployed_config.services_to_update == ["frontend"]
        assert deployed_config.build_number == "42"
        # Caller's config is left untouched
        assert self.deployment.services_to_update == ["backend", "frontend", "nginx"]

    def test_deploy_changes_skips_deployment_without_changes(self):
        self.mock_diff_source.get_changed_files.return_value = ["docs/guide.md"]

        result = self.coordinator.deploy_changes(self.spec, self.deployment)

        assert result == DeploymentResult()
        self.mock_deployment_executor.deploy.assert_not_called()
