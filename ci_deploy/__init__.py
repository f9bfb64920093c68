"""CI/CD helpers for service change detection and compose deployments."""

__version__ = "0.1.0"
