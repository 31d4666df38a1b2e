"""
Analytics Installer Wizard Orchestrator

Runs the foreground control loop: draw the current snapshot, read a key,
dispatch the resulting intents to the state machine and carry out the
instructions it returns.
"""

from typing import Callable, List, Optional

from rich.console import Console
from rich.live import Live

from analytics_installer.config import InstallerSettings
from analytics_installer.wizard.exceptions import InstallerError, get_error_code
from analytics_installer.wizard.installer import InstallOrchestrator
from analytics_installer.wizard.logging_config import get_logger
from analytics_installer.wizard.machine import WizardMachine
from analytics_installer.wizard.materializer import ConfigMaterializer
from analytics_installer.wizard.state import (
    HARD_INTERRUPT,
    Instruction,
    InstructionKind,
    Intent,
    Screen,
)
from analytics_installer.wizard.ui import WizardUI, read_intents


logger = get_logger("orchestrator")

# Standard exit code for SIGINT
EXIT_INTERRUPTED = 130

IntentReader = Callable[[bool], List[Intent]]


def describe_error(error: InstallerError) -> str:
    """One-line description for the error screen."""
    if error.details:
        return f"{error.message} ({error.details})"
    return error.message


class WizardOrchestrator:
    """Drives the installer wizard from first screen to exit."""

    def __init__(
        self,
        settings: InstallerSettings,
        console: Optional[Console] = None,
        reader: Optional[IntentReader] = None,
        screen: bool = True,
    ):
        self.settings = settings
        self.console = console or Console()
        self.ui = WizardUI(self.console)
        self.reader = reader or read_intents
        self.screen = screen
        self.materializer = ConfigMaterializer(settings.project_root)
        self.machine = WizardMachine(
            env_exists=self.materializer.env_exists(),
            config_exists=self.materializer.config_exists(),
        )
        self.last_error: Optional[InstallerError] = None
        self.interrupted = False
        self._live: Optional[Live] = None

    def run(self) -> int:
        """Run the wizard until it halts.

        Returns:
            Process exit code
        """
        logger.info(
            "Wizard started in %s (.env: %s, config.yaml: %s)",
            self.settings.project_root,
            self.machine.env_exists,
            self.machine.config_exists,
        )
        with Live(
            self.ui.render(self.machine.snapshot()),
            console=self.console,
            auto_refresh=False,
            screen=self.screen,
            transient=False,
        ) as live:
            self._live = live
            try:
                while self.machine.running:
                    self.refresh()
                    for intent in self.reader(self.machine.form.editing):
                        self._dispatch(intent)
                        if not self.machine.running:
                            break
            except KeyboardInterrupt:
                self._dispatch(HARD_INTERRUPT)
            finally:
                self._live = None

        return self.exit_code()

    def refresh(self):
        """Redraw the current snapshot."""
        if self._live is not None:
            self._live.update(self.ui.render(self.machine.snapshot()), refresh=True)

    def exit_code(self) -> int:
        screen = self.machine.screen
        if screen == Screen.SUCCESS:
            return 0
        if screen == Screen.ERROR:
            return get_error_code(self.last_error) if self.last_error else 1
        if self.interrupted:
            return EXIT_INTERRUPTED
        return 0

    def _dispatch(self, intent: Intent):
        if intent == HARD_INTERRUPT:
            self.interrupted = True
        instruction = self.machine.dispatch(intent)
        if instruction is not None:
            self.perform(instruction)

    def perform(self, instruction: Instruction):
        """Carry out one instruction and report the outcome to the machine."""
        kind = instruction.kind
        if kind == InstructionKind.WRITE_ENV:
            try:
                self.materializer.write_env_file(instruction.form)
            except InstallerError as e:
                self.last_error = e
                self.machine.file_write_failed(f"Failed to generate .env: {describe_error(e)}")
            else:
                self.machine.env_written()
        elif kind == InstructionKind.WRITE_CONFIG:
            try:
                self.materializer.write_config_file()
            except InstallerError as e:
                self.last_error = e
                self.machine.file_write_failed(f"Failed to generate config.yaml: {describe_error(e)}")
            else:
                self.machine.config_written()
        elif kind == InstructionKind.RUN_INSTALL:
            self.refresh()
            installer = InstallOrchestrator(
                self.settings,
                self.machine.estimator,
                on_update=self.refresh,
            )
            result = installer.run()
            if not result.success:
                self.last_error = result.error
            self.machine.install_finished(result)
        elif kind == InstructionKind.EXIT:
            logger.info("Exiting wizard from %s", self.machine.screen.value)
