from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from ci_deploy.config.settings import Settings, get_settings
from ci_deploy.exceptions import CIDeployError, ConfigurationError
from ci_deploy.schemas import (
    ChangeComparisonSpec,
    DeploymentConfig,
    DeploymentResult,
    FileChange,
    ImpactedServices,
    ResolveRequest,
)
from ci_deploy.services import (
    DeploymentCoordinator,
    create_coordinator_from_settings,
    resolve,
)

router = APIRouter(tags=["changes"])


def get_coordinator(settings: Settings = Depends(get_settings)) -> DeploymentCoordinator:
    """Build a coordinator for the configured repository."""
    return create_coordinator_from_settings(settings)


def _raise_http_error(e: CIDeployError) -> None:
    status_code = 400 if isinstance(e, ConfigurationError) else 500
    raise HTTPException(status_code=status_code, detail=str(e)) from e


@router.post("/changes/resolve", response_model=ImpactedServices)
async def resolve_changes(request: ResolveRequest):
    """Map already-known changed files onto service roots."""
    return ImpactedServices(services=resolve(request.changed_files, request.service_roots))


@router.post("/changes/detect", response_model=ImpactedServices)
def detect_changes(
    spec: ChangeComparisonSpec,
    coordinator: DeploymentCoordinator = Depends(get_coordinator),
):
    """Diff the repository and return the impacted services."""
    try:
        return ImpactedServices(services=coordinator.detect_changes(spec))
    except CIDeployError as e:
        _raise_http_error(e)


@router.get("/changes/files", response_model=Dict[str, Any])
def list_changed_files(
    compare_ref: str = "HEAD~1 HEAD",
    coordinator: DeploymentCoordinator = Depends(get_coordinator),
):
    """List changed files with their git status."""
    try:
        changes: List[FileChange] = coordinator.diff_source.get_file_changes(compare_ref)
    except CIDeployError as e:
        _raise_http_error(e)
    return {"compare_ref": compare_ref, "changes": changes}


@router.post("/deployments", response_model=DeploymentResult)
def create_deployment(
    config: DeploymentConfig,
    coordinator: DeploymentCoordinator = Depends(get_coordinator),
    settings: Settings = Depends(get_settings),
):
    """Deploy the given services in the configured repository."""
    # Callers never choose where secrets and manifests are written
    config = config.model_copy(update={"working_dir": settings.REPO_PATH})
    try:
        return coordinator.deployment_executor.deploy(config)
    except CIDeployError as e:
        _raise_http_error(e)
