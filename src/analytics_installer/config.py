"""
Analytics Installer Settings

Runtime settings resolved from environment variables and CLI overrides.
The project root is always explicit: it is where .env and config.yaml are
detected and written, and where docker compose runs.
"""

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


DEFAULT_COMPOSE_COMMAND = ["docker", "compose"]

TRUTHY = ("1", "true", "yes")


@dataclass
class InstallerSettings:
    """Resolved installer settings."""
    project_root: Path
    compose_command: List[str] = field(default_factory=lambda: list(DEFAULT_COMPOSE_COMMAND))
    log_file: Optional[Path] = None
    debug: bool = False

    @classmethod
    def from_env(
        cls,
        project_root: Optional[Path] = None,
        compose_command: Optional[str] = None,
        log_file: Optional[Path] = None,
        debug: Optional[bool] = None,
    ) -> "InstallerSettings":
        """Build settings from the environment, letting explicit values win.

        Args:
            project_root: Overrides ANALYTICS_INSTALLER_ROOT (default: cwd)
            compose_command: Overrides ANALYTICS_INSTALLER_COMPOSE, shell-split
            log_file: Overrides ANALYTICS_INSTALLER_LOG_FILE
            debug: Overrides ANALYTICS_INSTALLER_DEBUG

        Returns:
            InstallerSettings
        """
        if project_root is None:
            env_root = os.environ.get("ANALYTICS_INSTALLER_ROOT")
            project_root = Path(env_root) if env_root else Path.cwd()

        compose = compose_command or os.environ.get("ANALYTICS_INSTALLER_COMPOSE", "")
        command = shlex.split(compose) if compose.strip() else list(DEFAULT_COMPOSE_COMMAND)

        if log_file is None:
            env_log = os.environ.get("ANALYTICS_INSTALLER_LOG_FILE")
            log_file = Path(env_log) if env_log else None

        if debug is None:
            debug = os.environ.get("ANALYTICS_INSTALLER_DEBUG", "").lower() in TRUTHY

        return cls(
            project_root=Path(project_root).expanduser().resolve(),
            compose_command=command,
            log_file=log_file,
            debug=debug,
        )

    @property
    def env_path(self) -> Path:
        return self.project_root / ".env"

    @property
    def config_path(self) -> Path:
        return self.project_root / "config.yaml"

    def build_args(self) -> List[str]:
        """Arguments for the image build phase."""
        return self.compose_command[1:] + ["build", "--no-cache"]

    def start_args(self) -> List[str]:
        """Arguments for the service start phase."""
        return self.compose_command[1:] + ["up", "-d"]


# Environment variable documentation
ENV_VARS = {
    "ANALYTICS_INSTALLER_ROOT": {
        "description": "Project root holding .env, config.yaml and the compose file",
        "default": "current directory"
    },
    "ANALYTICS_INSTALLER_COMPOSE": {
        "description": "Compose command to run",
        "default": "docker compose"
    },
    "ANALYTICS_INSTALLER_LOG_FILE": {
        "description": "Write a debug log to this file",
        "default": "none"
    },
    "ANALYTICS_INSTALLER_DEBUG": {
        "description": "Enable debug mode with verbose logging",
        "values": ["1", "true", "yes"],
        "default": "false"
    },
}
