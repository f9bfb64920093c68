import sys
from pathlib import Path
from typing import List, Optional

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..exceptions import ConfigurationError, FetchError, SecretNotFoundError
from ..protocols.secret_provider_protocol import SecretProviderProtocol
from ..schemas import FileChange, FileStatus


class GitManager:
    """Reads changes from the git working copy the pipeline runs in."""

    def __init__(
        self,
        local_path: str,
        secret_provider: Optional[SecretProviderProtocol] = None,
        ci_user_email: str = "ci@example.com",
        ci_user_name: str = "CI",
    ):
        self.local_path = Path(local_path)
        self.secret_provider = secret_provider
        self.ci_user_email = ci_user_email
        self.ci_user_name = ci_user_name
        self.repo: Optional[Repo] = None

    def setup_repository(self) -> Repo:
        """Open the repository at local_path."""
        if self.repo is None:
            try:
                self.repo = Repo(self.local_path)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise FetchError(
                    f"{self.local_path} is not a git repository: {e}"
                ) from e
        return self.repo

    def fetch_base_branch(
        self, remote: str, base_branch: str, credentials_id: Optional[str] = None
    ) -> bool:
        """
        Fetch the base branch (and tags) from the remote.

        A failed fetch only produces a warning: the checkout may already carry
        enough history for the diff, e.g. for "HEAD~1 HEAD".
        """
        _reject_option_like(remote, base_branch)
        repo = self.setup_repository()
        try:
            if credentials_id:
                credentials = self._get_credentials(credentials_id)
                # Some CI agents refuse to fetch without a committer identity
                with repo.config_writer() as writer:
                    writer.set_value("user", "email", self.ci_user_email)
                    writer.set_value("user", "name", self.ci_user_name)
                with repo.git.custom_environment(
                    GIT_USERNAME=credentials.username,
                    GIT_PASSWORD=credentials.password,
                ):
                    repo.git.fetch("--tags", "--end-of-options", remote, base_branch)
            else:
                repo.git.fetch("--tags", "--end-of-options", remote, base_branch)
        except (GitCommandError, SecretNotFoundError) as e:
            print(
                f"WARNING: Failed to fetch '{remote}/{base_branch}'. "
                f"This might affect diff accuracy. Error: {e}",
                file=sys.stderr,
            )
            return False

        print(f"Successfully fetched '{remote}/{base_branch}'", file=sys.stderr)
        return True

    def _get_credentials(self, credentials_id: str):
        if self.secret_provider is None:
            raise SecretNotFoundError(
                f"No secret provider configured for credentials '{credentials_id}'"
            )
        return self.secret_provider.get_username_password(credentials_id)

    def get_changed_files(self, compare_ref: str) -> List[str]:
        """Get changed file paths reported by git diff for the compare ref."""
        output = self._diff("--name-only", compare_ref)
        changed_files = [path.strip() for path in output.split("\0") if path.strip()]

        if not changed_files:
            print("No files detected as changed by 'git diff'", file=sys.stderr)
        else:
            print(
                "Detected changed files:\n" + "\n".join(changed_files), file=sys.stderr
            )
        return changed_files

    def get_file_changes(self, compare_ref: str) -> List[FileChange]:
        """Get changed files with their status for the compare ref."""
        output = self._diff("--name-status", compare_ref)
        # -z output is a flat stream: status, path, and a second path for R/C
        tokens = output.split("\0")

        changes = []
        i = 0
        while i < len(tokens):
            status = tokens[i].strip()
            if not status:
                i += 1
                continue
            code = status[0]
            if code in ("R", "C"):
                old_path, new_path = tokens[i + 1 : i + 3]
                i += 3
                if code == "R":
                    changes.append(
                        FileChange(
                            status=FileStatus.RENAMED,
                            file_path=new_path,
                            old_file_path=old_path,
                        )
                    )
                else:
                    changes.append(FileChange(status=FileStatus.ADDED, file_path=new_path))
                continue

            path = tokens[i + 1]
            i += 2
            if code in ("A", "D"):
                changes.append(FileChange(status=FileStatus(code), file_path=path))
            else:
                # M, T (type change) and U (unmerged) all mean the path changed
                changes.append(FileChange(status=FileStatus.MODIFIED, file_path=path))
        return changes

    def _diff(self, mode: str, compare_ref: str) -> str:
        refs = compare_ref.split()
        if not refs:
            raise FetchError("No git reference given to compare")
        _reject_option_like(*refs)

        repo = self.setup_repository()
        print(
            f"Executing Git command: 'git diff {mode} {' '.join(refs)}'",
            file=sys.stderr,
        )
        try:
            # -z keeps non-ASCII paths unquoted
            return repo.git.diff("-z", mode, "--end-of-options", *refs)
        except GitCommandError as e:
            raise FetchError(
                f"Failed to get Git diff. Ensure '{compare_ref}' is a valid Git "
                f"reference and repository is accessible. Error: {e}"
            ) from e


def _reject_option_like(*values: str) -> None:
    for value in values:
        if value.strip().startswith("-"):
            raise ConfigurationError(f"Git argument must not start with '-': {value!r}")
