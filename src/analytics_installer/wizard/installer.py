"""
Install Orchestrator

Runs `compose build --no-cache` and then, only if it succeeded,
`compose up -d`. Build owns the first half of the progress bar and start the
second half.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from analytics_installer.config import InstallerSettings
from analytics_installer.wizard.exceptions import InstallerError, ProcessExitError
from analytics_installer.wizard.logging_config import get_logger
from analytics_installer.wizard.progress import BUILD_PHASE, START_PHASE, ProgressEstimator
from analytics_installer.wizard.runner import SubprocessRunner


logger = get_logger("installer")

BUILD = "build"
START = "start"

PHASE_LABELS = {
    BUILD: "Docker Compose build failed",
    START: "Docker Compose up failed",
}


@dataclass
class InstallResult:
    """Overall outcome of the two-phase install."""
    success: bool
    phase: Optional[str] = None
    error: Optional[InstallerError] = None

    @property
    def message(self) -> str:
        """Diagnostic text for the error screen."""
        if self.success or self.phase is None:
            return ""
        label = PHASE_LABELS[self.phase]
        if self.error is None or isinstance(self.error, ProcessExitError):
            return label
        text = f"{label}: {self.error.message}"
        if self.error.details:
            text = f"{text} ({self.error.details})"
        return text


class InstallOrchestrator:
    """Sequences the build and start phases."""

    def __init__(
        self,
        settings: InstallerSettings,
        estimator: ProgressEstimator,
        on_update: Optional[Callable[[], None]] = None,
        runner: Optional[SubprocessRunner] = None,
    ):
        self.settings = settings
        self.estimator = estimator
        self.on_update = on_update
        self.runner = runner or SubprocessRunner(
            estimator,
            cwd=settings.project_root,
            on_update=on_update,
        )

    def run(self) -> InstallResult:
        """Run both phases; stop at the first failure."""
        program = self.settings.compose_command[0]
        display = " ".join(self.settings.compose_command)

        self._log("🔨 Step 1/2: Building images (no cache)...")
        self._log(f"📦 Executing: {display} build --no-cache")
        self.estimator.begin_phase(*BUILD_PHASE)
        logger.info("Build phase started")

        outcome = self.runner.run(program, self.settings.build_args())
        if not outcome.ok:
            logger.error("Build phase failed: %s", outcome.error)
            return InstallResult(success=False, phase=BUILD, error=outcome.error)

        self._log("✅ Build completed successfully!")
        self.estimator.pin(50.0)

        self._log("🚀 Step 2/2: Starting services...")
        self._log(f"📦 Executing: {display} up -d")
        self.estimator.begin_phase(*START_PHASE)
        logger.info("Start phase started")

        outcome = self.runner.run(program, self.settings.start_args())
        if not outcome.ok:
            logger.error("Start phase failed: %s", outcome.error)
            return InstallResult(success=False, phase=START, error=outcome.error)

        self._log("✅ All services started successfully!")
        self.estimator.pin(100.0)
        logger.info("Install finished")
        return InstallResult(success=True)

    def _log(self, message: str):
        self.estimator.log(message)
        if self.on_update:
            self.on_update()
