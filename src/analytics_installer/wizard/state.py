"""
Wizard State

Data shared between the state machine, the control loop and the UI.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from analytics_installer.wizard.progress import InstallProgress
from analytics_installer.wizard.validators import validate_openai_key


class Screen(str, Enum):
    CONFIRMATION = "confirmation"
    ENV_SETUP = "env_setup"
    INSTALLING = "installing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class WizardState:
    """The active wizard screen; only Error carries a message."""
    screen: Screen
    message: str = ""

    @classmethod
    def confirmation(cls) -> "WizardState":
        return cls(Screen.CONFIRMATION)

    @classmethod
    def env_setup(cls) -> "WizardState":
        return cls(Screen.ENV_SETUP)

    @classmethod
    def installing(cls) -> "WizardState":
        return cls(Screen.INSTALLING)

    @classmethod
    def success(cls) -> "WizardState":
        return cls(Screen.SUCCESS)

    @classmethod
    def error(cls, message: str) -> "WizardState":
        return cls(Screen.ERROR, message)


class MenuSelection(str, Enum):
    PROCEED = "proceed"
    GENERATE_ENV = "generate_env"
    GENERATE_CONFIG = "generate_config"
    CANCEL = "cancel"


MENU_LABELS = {
    MenuSelection.GENERATE_ENV: "Generate .env",
    MenuSelection.GENERATE_CONFIG: "Generate config.yaml",
    MenuSelection.PROCEED: "Proceed with Installation",
    MenuSelection.CANCEL: "Cancel",
}


def selectable_options(env_exists: bool, config_exists: bool) -> List[MenuSelection]:
    """Menu options in display order for the given file presence."""
    options = []
    if not env_exists:
        options.append(MenuSelection.GENERATE_ENV)
    if not config_exists:
        options.append(MenuSelection.GENERATE_CONFIG)
    if env_exists and config_exists:
        options.append(MenuSelection.PROCEED)
    options.append(MenuSelection.CANCEL)
    return options


def default_selection(env_exists: bool, config_exists: bool) -> MenuSelection:
    """Preferred option: the first missing file, else Proceed."""
    if not env_exists:
        return MenuSelection.GENERATE_ENV
    if not config_exists:
        return MenuSelection.GENERATE_CONFIG
    return MenuSelection.PROCEED


# (attribute, label, required)
FORM_FIELDS: Tuple[Tuple[str, str, bool], ...] = (
    ("openai_api_key", "OpenAI API Key", True),
    ("generation_model", "Generation Model", False),
    ("host_port", "UI Port", False),
    ("ai_service_port", "AI Service Port", False),
)

LAST_FIELD = len(FORM_FIELDS) - 1


@dataclass
class FormData:
    """Values collected by the .env form."""
    openai_api_key: str = ""
    generation_model: str = "gpt-4o-mini"
    host_port: str = "3000"
    ai_service_port: str = "5555"
    current_field: int = 0
    editing: bool = False
    error_message: str = ""

    @property
    def current_attribute(self) -> str:
        return FORM_FIELDS[self.current_field][0]

    def current_value(self) -> str:
        return getattr(self, self.current_attribute)

    def set_current_value(self, value: str):
        setattr(self, self.current_attribute, value)

    def validate(self) -> bool:
        """Validate the form, updating error_message."""
        valid, message = validate_openai_key(self.openai_api_key)
        self.error_message = "" if valid else message
        return valid


class IntentKind(str, Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    EDIT_CHAR = "edit_char"
    EDIT_BACKSPACE = "edit_backspace"
    TOGGLE_EDIT = "toggle_edit"
    SUBMIT_FORM = "submit_form"
    HARD_INTERRUPT = "hard_interrupt"


@dataclass(frozen=True)
class Intent:
    """A user intent produced by the presentation layer."""
    kind: IntentKind
    char: str = ""

    @classmethod
    def edit_char(cls, char: str) -> "Intent":
        return cls(IntentKind.EDIT_CHAR, char)


MOVE_UP = Intent(IntentKind.MOVE_UP)
MOVE_DOWN = Intent(IntentKind.MOVE_DOWN)
CONFIRM = Intent(IntentKind.CONFIRM)
CANCEL = Intent(IntentKind.CANCEL)
EDIT_BACKSPACE = Intent(IntentKind.EDIT_BACKSPACE)
TOGGLE_EDIT = Intent(IntentKind.TOGGLE_EDIT)
SUBMIT_FORM = Intent(IntentKind.SUBMIT_FORM)
HARD_INTERRUPT = Intent(IntentKind.HARD_INTERRUPT)


class InstructionKind(str, Enum):
    WRITE_ENV = "write_env"
    WRITE_CONFIG = "write_config"
    RUN_INSTALL = "run_install"
    EXIT = "exit"


@dataclass(frozen=True)
class Instruction:
    """A side effect the control loop must perform for the state machine."""
    kind: InstructionKind
    form: Optional[FormData] = None


@dataclass(frozen=True)
class WizardSnapshot:
    """Read-only view handed to the presentation layer."""
    state: WizardState
    menu_selection: MenuSelection
    options: Tuple[MenuSelection, ...]
    env_exists: bool
    config_exists: bool
    form: FormData
    progress: InstallProgress
    logs: Tuple[str, ...] = field(default_factory=tuple)
