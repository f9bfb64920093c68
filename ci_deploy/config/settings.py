from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Pipeline settings loaded from environment variables.

    The build server exposes job parameters as environment variables, so every
    value here can be overridden per job. List values (SERVICE_PATHS,
    COMPOSE_COMMAND) are read as JSON arrays, e.g. SERVICE_PATHS='["backend"]'.
    """

    # Change detection
    REPO_PATH: str = "."
    BASE_BRANCH: str = "main"
    COMPARE_REF: str = "HEAD~1 HEAD"  # Merge commit vs. its first parent
    GIT_REMOTE: str = "origin"
    GIT_CREDENTIALS_ID: Optional[str] = None
    SERVICE_PATHS: List[str] = []

    # Committer identity written before an authenticated fetch
    CI_USER_EMAIL: str = "ci@example.com"
    CI_USER_NAME: str = "CI"

    # Deployment
    DOCKER_REGISTRY: str = ""
    ENV_FILE_CREDENTIAL: str = ""
    COMPOSE_FILE: str = "docker-compose.yml"
    COMPOSE_COMMAND: List[str] = ["docker-compose"]

    # Print commands instead of running them
    DRY_RUN: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
