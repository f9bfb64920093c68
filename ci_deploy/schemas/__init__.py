"""Schemas for the application."""

from .change import (
    ChangeComparisonSpec,
    FileChange,
    FileStatus,
    ImpactedServices,
    ResolveRequest,
    parse_comparison_spec,
)
from .deployment import DeploymentConfig, DeploymentResult, parse_deployment_config

__all__ = [
    "ChangeComparisonSpec",
    "DeploymentConfig",
    "DeploymentResult",
    "FileChange",
    "FileStatus",
    "ImpactedServices",
    "ResolveRequest",
    "parse_comparison_spec",
    "parse_deployment_config",
]
