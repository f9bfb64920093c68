"""ci-deploy command line entry point."""

import sys
from typing import List, Optional

import typer

from ci_deploy.config.settings import get_settings
from ci_deploy.exceptions import CIDeployError, ConfigurationError
from ci_deploy.schemas import parse_comparison_spec, parse_deployment_config
from ci_deploy.services import (
    create_coordinator_from_settings,
    create_deployment_executor_from_settings,
    resolve,
)

app = typer.Typer(
    name="ci-deploy",
    help="Change detection and compose deployment helpers for CI pipelines",
    add_completion=False,
)

EXIT_FAILURE = 1
EXIT_INVALID_CONFIG = 2


def _fail(e: CIDeployError) -> None:
    if isinstance(e, ConfigurationError):
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(EXIT_INVALID_CONFIG)
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(EXIT_FAILURE)


def _echo_services(services: List[str]) -> None:
    for service in services:
        typer.echo(service)


@app.command("resolve-changes")
def resolve_changes(
    service: Optional[List[str]] = typer.Option(
        None, "--service", "-s", help="Service root to check (repeatable)"
    ),
    changed_file: Optional[List[str]] = typer.Option(
        None,
        "--changed-file",
        "-f",
        help="Changed file path (repeatable). Read from stdin when omitted.",
    ),
):
    """
    Print the services that contain any of the changed files.

    Examples:
        git diff --name-only HEAD~1 HEAD | ci-deploy resolve-changes -s backend -s frontend
    """
    service_roots = [root.strip() for root in service or [] if root.strip()]
    if not service_roots:
        _fail(ConfigurationError("at least one --service is required"))

    if changed_file:
        lines = changed_file
    else:
        lines = sys.stdin.read().splitlines()
    changed_files = [line.strip() for line in lines if line.strip()]

    _echo_services(resolve(changed_files, service_roots))


@app.command("detect-changes")
def detect_changes(
    service: Optional[List[str]] = typer.Option(
        None, "--service", "-s", help="Service root to check (repeatable)"
    ),
    base_branch: Optional[str] = typer.Option(None, help="Integration branch to fetch"),
    compare_ref: Optional[str] = typer.Option(
        None, help="Git reference(s) to diff, e.g. 'HEAD~1 HEAD'"
    ),
    remote: Optional[str] = typer.Option(None, help="Git remote to fetch from"),
    credentials_id: Optional[str] = typer.Option(
        None, help="Credential id used for an authenticated fetch"
    ),
):
    """
    Diff the repository and print the services with changes.

    Examples:
        ci-deploy detect-changes --base-branch main -s backend -s frontend -s nginx
    """
    settings = get_settings()
    try:
        spec = parse_comparison_spec(
            {
                "base_branch": base_branch or settings.BASE_BRANCH,
                "compare_ref": compare_ref or settings.COMPARE_REF,
                "remote": remote or settings.GIT_REMOTE,
                "credentials_id": credentials_id or settings.GIT_CREDENTIALS_ID,
                "service_paths": service or settings.SERVICE_PATHS,
            }
        )
        services = create_coordinator_from_settings(settings).detect_changes(spec)
    except CIDeployError as e:
        _fail(e)
    _echo_services(services)


@app.command("deploy")
def deploy(
    services: str = typer.Option(
        ..., help="Comma-separated services to update, e.g. 'backend,frontend'"
    ),
    build_number: str = typer.Option(..., help="Image tag to deploy"),
    registry: Optional[str] = typer.Option(None, help="Docker registry name"),
    env_file_credential: Optional[str] = typer.Option(
        None, help="Credential id of the secret .env file"
    ),
    compose_file: Optional[str] = typer.Option(None, help="Compose manifest"),
    working_dir: str = typer.Option(".", help="Directory holding the compose file"),
    pull_code: bool = typer.Option(True, "--pull-code/--no-pull-code"),
):
    """
    Update image tags for the given services and refresh them.

    Examples:
        ci-deploy deploy --services backend,frontend --build-number 42 --registry acme/app
    """
    settings = get_settings()
    try:
        config = parse_deployment_config(
            {
                "services_to_update": services,
                "build_number": build_number,
                "registry": registry or settings.DOCKER_REGISTRY,
                "env_file_credential": env_file_credential
                or settings.ENV_FILE_CREDENTIAL,
                "compose_file": compose_file or settings.COMPOSE_FILE,
                "working_dir": working_dir,
                "pull_code": pull_code,
            }
        )
        result = create_deployment_executor_from_settings(settings).deploy(config)
    except CIDeployError as e:
        _fail(e)
    _echo_services(result.services)


@app.command("deploy-changes")
def deploy_changes(
    build_number: str = typer.Option(..., help="Image tag to deploy"),
    service: Optional[List[str]] = typer.Option(
        None, "--service", "-s", help="Service root to check (repeatable)"
    ),
    base_branch: Optional[str] = typer.Option(None, help="Integration branch to fetch"),
    compare_ref: Optional[str] = typer.Option(None, help="Git reference(s) to diff"),
    registry: Optional[str] = typer.Option(None, help="Docker registry name"),
    env_file_credential: Optional[str] = typer.Option(
        None, help="Credential id of the secret .env file"
    ),
):
    """Detect changed services and deploy only those."""
    settings = get_settings()
    try:
        spec = parse_comparison_spec(
            {
                "base_branch": base_branch or settings.BASE_BRANCH,
                "compare_ref": compare_ref or settings.COMPARE_REF,
                "remote": settings.GIT_REMOTE,
                "credentials_id": settings.GIT_CREDENTIALS_ID,
                "service_paths": service or settings.SERVICE_PATHS,
            }
        )
        deployment = parse_deployment_config(
            {
                # Replaced by the detected services before deploying
                "services_to_update": spec.service_paths,
                "build_number": build_number,
                "registry": registry or settings.DOCKER_REGISTRY,
                "env_file_credential": env_file_credential
                or settings.ENV_FILE_CREDENTIAL,
                "compose_file": settings.COMPOSE_FILE,
                "working_dir": settings.REPO_PATH,
            }
        )
        result = create_coordinator_from_settings(settings).deploy_changes(
            spec, deployment
        )
    except CIDeployError as e:
        _fail(e)
    _echo_services(result.services)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", envvar="CI_DEPLOY_HOST"),
    port: int = typer.Option(8005, envvar="CI_DEPLOY_PORT"),
    reload: bool = typer.Option(False, help="Reload on code changes (development)"),
):
    """Run the HTTP API for build servers that trigger jobs via webhooks."""
    import uvicorn

    typer.echo(f"Starting CI Deploy API on {host}:{port}", err=True)
    uvicorn.run("ci_deploy.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
