"""Secret provider protocol interface."""

from pathlib import Path
from typing import NamedTuple, Protocol, runtime_checkable


class UsernamePassword(NamedTuple):
    username: str
    password: str


@runtime_checkable
class SecretProviderProtocol(Protocol):
    """Resolves credential ids handed to the pipeline by the build server."""

    def get_username_password(self, credentials_id: str) -> UsernamePassword:
        """Get a username/password credential. Raises SecretNotFoundError."""
        ...

    def get_secret_file(self, credentials_id: str) -> Path:
        """Get the path of a secret file credential. Raises SecretNotFoundError."""
        ...
