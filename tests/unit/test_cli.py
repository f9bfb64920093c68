"""Unit tests for the ci-deploy CLI."""

from unittest.mock import Mock, patch

from typer.testing import CliRunner

from ci_deploy.cli import EXIT_FAILURE, EXIT_INVALID_CONFIG, app
from ci_deploy.config.settings import Settings
from ci_deploy.exceptions import FetchError
from ci_deploy.schemas import DeploymentResult

runner = CliRunner()


class TestResolveChanges:
    def test_changed_files_from_options(self):
        result = runner.invoke(
            app,
            [
                "resolve-changes",
                "-s", "backend",
                "-s", "frontend",
                "-f", "frontend/x",
                "-f", "backend/y",
            ],
        )

        assert result.exit_code == 0
        assert result.stdout == "backend\nfrontend\n"

    def test_changed_files_from_stdin(self):
        result = runner.invoke(
            app,
            ["resolve-changes", "--service", "auth", "--service", "nginx"],
            input="auth-service/app.py\n\n  nginx/nginx.conf  \n",
        )

        assert result.exit_code == 0
        assert result.stdout == "nginx\n"

    def test_no_impacted_services(self):
        result = runner.invoke(app, ["resolve-changes", "-s", "backend"], input="")

        assert result.exit_code == 0
        assert result.stdout == ""

    def test_missing_service_list_is_invalid_configuration(self):
        result = runner.invoke(app, ["resolve-changes", "-f", "backend/a.py"])

        assert result.exit_code == EXIT_INVALID_CONFIG


class TestDetectChanges:
    def setup_method(self):
        self.settings = Settings(BASE_BRANCH="main", SERVICE_PATHS=[])
        self.coordinator = Mock()

    def _invoke(self, args):
        with patch("ci_deploy.cli.get_settings", return_value=self.settings), patch(
            "ci_deploy.cli.create_coordinator_from_settings",
            return_value=self.coordinator,
        ):
            return runner.invoke(app, ["detect-changes"] + args)

    def test_detect_changes(self):
        self.coordinator.detect_changes.return_value = ["backend", "nginx"]

        result = self._invoke(
            ["--base-branch", "development", "--compare-ref", "origin/main...HEAD",
             "-s", "backend", "-s", "frontend", "-s", "nginx"]
        )

        assert result.exit_code == 0
        assert result.stdout == "backend\nnginx\n"
        spec = self.coordinator.detect_changes.call_args[0][0]
        assert spec.base_branch == "development"
        assert spec.compare_ref == "origin/main...HEAD"
        assert spec.remote == "origin"
        assert spec.service_paths == ["backend", "frontend", "nginx"]

    def test_services_default_to_settings(self):
        self.settings = Settings(SERVICE_PATHS=["api", "web"])
        self.coordinator.detect_changes.return_value = []

        result = self._invoke([])

        assert result.exit_code == 0
        spec = self.coordinator.detect_changes.call_args[0][0]
        assert spec.service_paths == ["api", "web"]
        assert spec.base_branch == "main"

    def test_empty_service_list(self):
        result = self._invoke(["--base-branch", "main"])

        assert result.exit_code == EXIT_INVALID_CONFIG
        self.coordinator.detect_changes.assert_not_called()

    def test_diff_failure(self):
        self.coordinator.detect_changes.side_effect = FetchError("bad revision")

        result = self._invoke(["-s", "backend"])

        assert result.exit_code == EXIT_FAILURE


class TestDeploy:
    def setup_method(self):
        self.settings = Settings(DOCKER_REGISTRY="acme/shop", ENV_FILE_CREDENTIAL="prod-env")
        self.deployer = Mock()
        self.deployer.deploy.return_value = DeploymentResult(services=["backend", "frontend"])

    def _invoke(self, args):
        with patch("ci_deploy.cli.get_settings", return_value=self.settings), patch(
            "ci_deploy.cli.create_deployment_executor_from_settings",
            return_value=self.deployer,
        ):
            return runner.invoke(app, ["deploy"] + args)

    def test_deploy(self):
        result = self._invoke(
            ["--services", "backend, frontend", "--build-number", "42", "--no-pull-code"]
        )

        assert result.exit_code == 0
        assert result.stdout == "backend\nfrontend\n"
        config = self.deployer.deploy.call_args[0][0]
        assert config.services_to_update == ["backend", "frontend"]
        assert config.registry == "acme/shop"
        assert config.env_file_credential == "prod-env"
        assert config.build_number == "42"
        assert config.pull_code is False

    def test_deploy_empty_services(self):
        result = self._invoke(["--services", " , ", "--build-number", "42"])

        assert result.exit_code == EXIT_INVALID_CONFIG
        self.deployer.deploy.assert_not_called()


class TestDeployChanges:
    def test_deploy_changes(self):
        settings = Settings(
            DOCKER_REGISTRY="acme/shop",
            ENV_FILE_CREDENTIAL="prod-env",
            SERVICE_PATHS=["backend", "frontend"],
        )
        coordinator = Mock()
        coordinator.deploy_changes.return_value = DeploymentResult(services=["frontend"])

        with patch("ci_deploy.cli.get_settings", return_value=settings), patch(
            "ci_deploy.cli.create_coordinator_from_settings", return_value=coordinator
        ):
            result = runner.invoke(app, ["deploy-changes", "--build-number", "7"])

        assert result.exit_code == 0
        assert result.stdout == "frontend\n"
        spec, deployment = coordinator.deploy_changes.call_args[0]
        assert spec.service_paths == ["backend", "frontend"]
        assert deployment.build_number == "7"


class TestServe:
    @patch("uvicorn.run")
    def test_serve(self, mock_run):
        result = runner.invoke(app, ["serve", "--port", "9000"])

        assert result.exit_code == 0
        mock_run.assert_called_once_with(
            "ci_deploy.main:app", host="127.0.0.1", port=9000, reload=False
        )
