"""
Wizard State Machine

Owns the five-screen flow (Confirmation, EnvSetup, Installing, Success,
Error) and the menu selection. It performs no I/O: `dispatch` returns an
Instruction for the control loop, which reports the outcome back through
`env_written`, `config_written`, `file_write_failed` or `install_finished`.
"""

from dataclasses import replace
from typing import Optional

from analytics_installer.wizard.installer import InstallResult
from analytics_installer.wizard.logging_config import get_logger
from analytics_installer.wizard.progress import ProgressEstimator
from analytics_installer.wizard.state import (
    FormData,
    Instruction,
    InstructionKind,
    Intent,
    IntentKind,
    LAST_FIELD,
    MenuSelection,
    Screen,
    WizardSnapshot,
    WizardState,
    default_selection,
    selectable_options,
)


logger = get_logger("machine")

EXIT = Instruction(InstructionKind.EXIT)
WRITE_CONFIG = Instruction(InstructionKind.WRITE_CONFIG)
RUN_INSTALL = Instruction(InstructionKind.RUN_INSTALL)


class WizardMachine:
    """Transition logic for the installer wizard."""

    def __init__(
        self,
        env_exists: bool,
        config_exists: bool,
        estimator: Optional[ProgressEstimator] = None,
    ):
        self.env_exists = env_exists
        self.config_exists = config_exists
        self.estimator = estimator or ProgressEstimator()
        self.state = WizardState.confirmation()
        self.menu_selection = default_selection(env_exists, config_exists)
        self.form = FormData()
        self.running = True

    @property
    def screen(self) -> Screen:
        return self.state.screen

    @property
    def options(self):
        return selectable_options(self.env_exists, self.config_exists)

    def snapshot(self) -> WizardSnapshot:
        """Copy of everything the presentation layer draws."""
        return WizardSnapshot(
            state=self.state,
            menu_selection=self.menu_selection,
            options=tuple(self.options),
            env_exists=self.env_exists,
            config_exists=self.config_exists,
            form=replace(self.form),
            progress=replace(self.estimator.progress),
            logs=tuple(self.estimator.logs),
        )

    def dispatch(self, intent: Intent) -> Optional[Instruction]:
        """Apply one user intent.

        Returns:
            The side effect to perform, if any
        """
        if not self.running:
            return None

        if intent.kind == IntentKind.HARD_INTERRUPT:
            return self._halt("hard interrupt")

        screen = self.state.screen
        if screen == Screen.CONFIRMATION:
            return self._on_confirmation(intent)
        if screen == Screen.ENV_SETUP:
            return self._on_env_setup(intent)
        # Installing, Success and Error only react to a hard interrupt
        return None

    # Confirmation screen

    def _on_confirmation(self, intent: Intent) -> Optional[Instruction]:
        kind = intent.kind
        if kind == IntentKind.MOVE_UP:
            self._move_selection(-1)
        elif kind == IntentKind.MOVE_DOWN:
            self._move_selection(1)
        elif kind == IntentKind.CANCEL:
            return self._halt("cancelled")
        elif kind == IntentKind.CONFIRM:
            return self._select(self.menu_selection)
        return None

    def _move_selection(self, step: int):
        options = self.options
        if self.menu_selection not in options:
            self.menu_selection = default_selection(self.env_exists, self.config_exists)
            return
        index = options.index(self.menu_selection)
        self.menu_selection = options[(index + step) % len(options)]

    def _select(self, selection: MenuSelection) -> Optional[Instruction]:
        if selection == MenuSelection.PROCEED:
            if not (self.env_exists and self.config_exists):
                return None
            self._transition(WizardState.installing())
            self.estimator.log("🚀 Starting Analytics installation...")
            return RUN_INSTALL
        if selection == MenuSelection.GENERATE_ENV:
            self.form = FormData()
            self._transition(WizardState.env_setup())
            return None
        if selection == MenuSelection.GENERATE_CONFIG:
            return WRITE_CONFIG
        return self._halt("cancelled")

    # EnvSetup screen

    def _on_env_setup(self, intent: Intent) -> Optional[Instruction]:
        form = self.form
        kind = intent.kind

        if form.editing:
            if kind == IntentKind.EDIT_CHAR:
                form.set_current_value(form.current_value() + intent.char)
            elif kind == IntentKind.EDIT_BACKSPACE:
                form.set_current_value(form.current_value()[:-1])
            elif kind in (IntentKind.CONFIRM, IntentKind.TOGGLE_EDIT, IntentKind.CANCEL):
                form.editing = False
            return None

        if kind == IntentKind.MOVE_UP:
            form.current_field = max(form.current_field - 1, 0)
        elif kind == IntentKind.MOVE_DOWN:
            form.current_field = min(form.current_field + 1, LAST_FIELD)
        elif kind in (IntentKind.CONFIRM, IntentKind.TOGGLE_EDIT):
            form.editing = True
        elif kind == IntentKind.SUBMIT_FORM:
            if form.validate():
                return Instruction(InstructionKind.WRITE_ENV, form=replace(form))
            logger.info("Form rejected: %s", form.error_message)
        elif kind == IntentKind.CANCEL:
            self.form = FormData()
            self._transition(WizardState.confirmation())
        return None

    # Outcomes reported by the control loop

    def env_written(self):
        """The .env file was written."""
        self.env_exists = True
        self.form = FormData()
        self.menu_selection = default_selection(self.env_exists, self.config_exists)
        self._transition(WizardState.confirmation())

    def config_written(self):
        """The config.yaml file was written."""
        self.config_exists = True
        self.menu_selection = default_selection(self.env_exists, self.config_exists)

    def file_write_failed(self, message: str):
        """Writing .env or config.yaml failed; the error screen is terminal."""
        self._transition(WizardState.error(message))

    def install_finished(self, result: InstallResult):
        """The install orchestrator returned."""
        if result.success:
            self.estimator.pin(100.0)
            self._transition(WizardState.success())
        else:
            self._transition(WizardState.error(f"Installation failed: {result.message}"))

    def _transition(self, state: WizardState):
        logger.debug("State %s -> %s", self.state.screen.value, state.screen.value)
        self.state = state

    def _halt(self, reason: str) -> Instruction:
        logger.info("Wizard halted (%s)", reason)
        self.running = False
        return EXIT
