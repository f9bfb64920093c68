"""Rolls compose services to a new image tag on the local agent."""

import re
import shutil
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..exceptions import CommandExecutionError, ConfigurationError, FetchError
from ..protocols.command_executor_protocol import CommandExecutorProtocol
from ..protocols.secret_provider_protocol import SecretProviderProtocol
from ..schemas import DeploymentConfig, DeploymentResult


def rewrite_image_tag(
    manifest: str, registry: str, service: str, tag: str
) -> Tuple[str, int]:
    """
    Point every ``image: <registry>/<service>:...`` line at ``tag``.

    Returns the new manifest text and the number of lines rewritten.
    """
    image = f"{registry}/{service}"
    pattern = re.compile(
        rf"^(?P<lead>\s*image:\s*){re.escape(image)}:.*$", flags=re.MULTILINE
    )
    return pattern.subn(lambda m: f"{m.group('lead')}{image}:{tag}", manifest)


class DeploymentExecutor:
    """Stages secrets, updates image tags and refreshes compose services."""

    def __init__(
        self,
        executor: CommandExecutorProtocol,
        secret_provider: SecretProviderProtocol,
        compose_command: Optional[Sequence[str]] = None,
        dry_run: bool = False,
    ):
        self.executor = executor
        self.secret_provider = secret_provider
        self.compose_command = list(compose_command or ["docker-compose"])
        self.dry_run = dry_run

    def deploy(self, config: DeploymentConfig) -> DeploymentResult:
        """Deploy the services listed in the config."""
        if not config.services_to_update:
            raise ConfigurationError("No services to update")

        working_dir = Path(config.working_dir)
        compose_path = _inside(working_dir, config.compose_file)
        env_path = _inside(working_dir, config.env_file)
        if not compose_path.is_file():
            raise ConfigurationError(f"Compose file not found: {compose_path}")

        print("🚀 Starting local deployment on this agent...", file=sys.stderr)
        commands: List[List[str]] = []

        self._stage_env_file(config, env_path)

        if config.pull_code:
            print("Pulling latest code...", file=sys.stderr)
            try:
                commands.append(self._run(["git", "pull"], working_dir))
            except CommandExecutionError as e:
                raise FetchError(f"Failed to pull latest code: {e}") from e

        print(
            "Updating image tags in "
            f"{config.compose_file} for: {', '.join(config.services_to_update)}",
            file=sys.stderr,
        )
        updated_images = self._update_image_tags(config, compose_path)

        print("Pulling new images and restarting services...", file=sys.stderr)
        compose = self.compose_command + ["-f", config.compose_file]
        # pull only fetches changed images, up only restarts services whose image changed
        commands.append(self._run(compose + ["pull"], working_dir))
        commands.append(self._run(compose + ["up", "-d"], working_dir))

        print("✅ Deployment completed", file=sys.stderr)
        return DeploymentResult(
            services=list(config.services_to_update),
            updated_images=updated_images,
            commands=commands,
        )

    def _stage_env_file(self, config: DeploymentConfig, env_path: Path) -> None:
        print("Preparing .env file...", file=sys.stderr)
        source = self.secret_provider.get_secret_file(config.env_file_credential)
        if self.dry_run:
            print(f"🔧 DRY RUN: would copy secret file to {env_path}", file=sys.stderr)
            return
        shutil.copyfile(source, env_path)

    def _update_image_tags(self, config: DeploymentConfig, compose_path: Path) -> dict:
        manifest = compose_path.read_text(encoding="utf-8")
        updated_images = {}
        for service in config.services_to_update:
            manifest, count = rewrite_image_tag(
                manifest, config.registry, service, config.build_number
            )
            if count:
                updated_images[service] = (
                    f"{config.registry}/{service}:{config.build_number}"
                )
            else:
                print(
                    f"WARNING: No image line for '{config.registry}/{service}' "
                    f"in {config.compose_file}",
                    file=sys.stderr,
                )
        if self.dry_run:
            print(f"🔧 DRY RUN: would rewrite {compose_path}", file=sys.stderr)
        else:
            compose_path.write_text(manifest, encoding="utf-8")
        return updated_images

    def _run(self, args: List[str], working_dir: Path) -> List[str]:
        self.executor.run(args, cwd=working_dir)
        return args


def _inside(working_dir: Path, file_name: str) -> Path:
    path = working_dir / file_name
    if not path.resolve().is_relative_to(working_dir.resolve()):
        raise ConfigurationError(f"{file_name} must stay inside {working_dir}")
    return path
