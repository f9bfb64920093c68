"""Credential lookup backed by environment variables."""

import os
import re
from pathlib import Path
from typing import Mapping, Optional

from ..exceptions import SecretNotFoundError
from ..protocols.secret_provider_protocol import UsernamePassword


class EnvironmentSecretProvider:
    """
    Resolves credential ids from environment variables.

    The build server binds each credential under a prefix derived from its id:
    "deploy-git" becomes DEPLOY_GIT_USERNAME / DEPLOY_GIT_PASSWORD for a
    username/password credential and DEPLOY_GIT_FILE for a secret file.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    @staticmethod
    def env_prefix(credentials_id: str) -> str:
        return re.sub(r"[^A-Za-z0-9]", "_", credentials_id.strip()).upper()

    def _lookup(self, credentials_id: str, suffix: str) -> str:
        name = f"{self.env_prefix(credentials_id)}_{suffix}"
        value = self.environ.get(name, "")
        if not value:
            raise SecretNotFoundError(
                f"Credential '{credentials_id}' is not available (expected ${name})"
            )
        return value

    def get_username_password(self, credentials_id: str) -> UsernamePassword:
        return UsernamePassword(
            username=self._lookup(credentials_id, "USERNAME"),
            password=self._lookup(credentials_id, "PASSWORD"),
        )

    def get_secret_file(self, credentials_id: str) -> Path:
        path = Path(self._lookup(credentials_id, "FILE"))
        if not path.is_file():
            raise SecretNotFoundError(
                f"Secret file for credential '{credentials_id}' not found at {path}"
            )
        return path
