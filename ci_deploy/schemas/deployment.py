"""Deployment schemas."""

from pathlib import PurePath
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ValidationError, field_validator

from ..exceptions import ConfigurationError


class DeploymentConfig(BaseModel):
    """Everything needed to roll impacted services to a new build."""

    env_file_credential: str
    registry: str
    build_number: str
    services_to_update: List[str]
    compose_file: str = "docker-compose.yml"
    env_file: str = ".env"
    working_dir: str = "."
    pull_code: bool = True

    @field_validator("env_file_credential", "registry", "build_number")
    @classmethod
    def _require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("compose_file", "env_file")
    @classmethod
    def _require_relative_path(cls, value: str) -> str:
        value = value.strip()
        path = PurePath(value)
        if not value or value.startswith("-"):
            raise ValueError("must be a file name inside the working directory")
        if path.is_absolute() or ".." in path.parts:
            raise ValueError("must be a relative path without '..'")
        return value

    @field_validator("build_number", mode="before")
    @classmethod
    def _build_number_as_text(cls, value: Any) -> Any:
        # Build servers hand out numeric build ids
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("services_to_update", mode="before")
    @classmethod
    def _split_services(cls, value: Union[str, List[str]]) -> List[str]:
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            return value
        cleaned = [str(service).strip() for service in value if str(service).strip()]
        if not cleaned:
            raise ValueError("at least one service is required")
        return cleaned


class DeploymentResult(BaseModel):
    services: List[str] = []
    updated_images: Dict[str, str] = {}
    commands: List[List[str]] = []


def parse_deployment_config(data: Dict[str, Any]) -> DeploymentConfig:
    """Build a DeploymentConfig, raising ConfigurationError if invalid."""
    try:
        return DeploymentConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid deployment settings: {e}") from e
