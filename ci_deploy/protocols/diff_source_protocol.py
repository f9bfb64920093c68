"""Diff source protocol interface."""

from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable

from ..schemas import FileChange


@runtime_checkable
class DiffSourceProtocol(Protocol):
    """Protocol for retrieving changed files between two git references."""

    @property
    def local_path(self) -> Path:
        """Local repository path."""
        ...

    def fetch_base_branch(
        self, remote: str, base_branch: str, credentials_id: Optional[str] = None
    ) -> bool:
        """Fetch the base branch from the remote. Returns True if successful."""
        ...

    def get_changed_files(self, compare_ref: str) -> List[str]:
        """Get changed file paths for the compare ref. Raises FetchError on failure."""
        ...

    def get_file_changes(self, compare_ref: str) -> List[FileChange]:
        """Get changed files with their status for the compare ref."""
        ...

