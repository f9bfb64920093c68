"""Change detection schemas."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError, field_validator

from ..exceptions import ConfigurationError


class FileStatus(str, Enum):
    """Enum for file change statuses."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"


class FileChange(BaseModel):
    """Represents a file change detected by git diff."""

    status: FileStatus
    file_path: str
    old_file_path: Optional[str] = None  # For renamed files


def _clean_service_roots(value: List[str]) -> List[str]:
    cleaned = [path.strip() for path in value if path.strip()]
    if not cleaned:
        raise ValueError("at least one service path is required")
    return cleaned


class ChangeComparisonSpec(BaseModel):
    """Which references to compare and which service roots to check."""

    base_branch: str
    service_paths: List[str]
    compare_ref: str = "HEAD~1 HEAD"
    remote: str = "origin"
    credentials_id: Optional[str] = None

    @field_validator("base_branch", "compare_ref", "remote")
    @classmethod
    def _require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        # Values reach git as positional arguments and must never parse as options
        if any(token.startswith("-") for token in value.split()):
            raise ValueError("must not start with '-'")
        return value

    @field_validator("service_paths")
    @classmethod
    def _clean_service_paths(cls, value: List[str]) -> List[str]:
        return _clean_service_roots(value)

    @field_validator("credentials_id")
    @classmethod
    def _blank_credentials_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class ResolveRequest(BaseModel):
    service_roots: List[str]
    changed_files: List[str] = []

    @field_validator("service_roots")
    @classmethod
    def _clean_roots(cls, value: List[str]) -> List[str]:
        return _clean_service_roots(value)

    @field_validator("changed_files")
    @classmethod
    def _clean_changed_files(cls, value: List[str]) -> List[str]:
        return [path.strip() for path in value if path.strip()]


class ImpactedServices(BaseModel):
    services: List[str]


def parse_comparison_spec(data: Dict[str, Any]) -> ChangeComparisonSpec:
    """Build a ChangeComparisonSpec, raising ConfigurationError if invalid."""
    try:
        return ChangeComparisonSpec(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid change comparison settings: {e}") from e
