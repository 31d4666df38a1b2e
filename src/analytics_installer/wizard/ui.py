"""
Analytics Installer UI Components

Draws wizard snapshots with the rich library and maps raw key presses to
wizard intents. Nothing here mutates wizard state.
"""

import re
from typing import List, Optional

import click
from rich.align import Align
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from analytics_installer.wizard.state import (
    CANCEL,
    CONFIRM,
    EDIT_BACKSPACE,
    FORM_FIELDS,
    HARD_INTERRUPT,
    MENU_LABELS,
    MOVE_DOWN,
    MOVE_UP,
    SUBMIT_FORM,
    Intent,
    MenuSelection,
    Screen,
    WizardSnapshot,
)


# Patterns that indicate a secret value
SECRET_PATTERNS = [
    "token", "password", "secret", "key", "credential",
    "api_key", "apikey", "auth", "bearer",
]

# Regex patterns for common secret formats
SECRET_REGEXES = [
    r'sk-proj-[a-zA-Z0-9\-_]{8,}',  # OpenAI project keys
    r'sk-[a-zA-Z0-9]{8,}',  # OpenAI keys
]

SERVICES = [
    "analytics-service",
    "qdrant",
    "northwind-db (PostgreSQL demo)",
    "analytics-ui",
]

KEY_UP = ("\x1b[A", "\x1bOA")
KEY_DOWN = ("\x1b[B", "\x1bOB")
KEY_ENTER = ("\r", "\n")
KEY_ESCAPE = "\x1b"
KEY_TAB = "\t"
KEY_BACKSPACE = ("\x7f", "\x08")
KEY_CTRL_S = "\x13"

KEY_FIELD_WIDTH = 40


def mask_secrets(text: str, mask: str = "********") -> str:
    """Mask secrets in a string.

    Args:
        text: The text that may contain secrets
        mask: The string to replace secrets with

    Returns:
        Text with secrets masked
    """
    if not text:
        return text

    result = text

    # Mask known secret patterns in key=value format
    for pattern in SECRET_PATTERNS:
        regex = rf'({pattern}["\']?\s*[=:]\s*["\']?)([^"\'\s]+)(["\']?)'
        result = re.sub(regex, rf'\1{mask}\3', result, flags=re.IGNORECASE)

    # Mask specific secret formats
    for regex in SECRET_REGEXES:
        result = re.sub(regex, mask, result)

    return result


def key_to_intents(key: str, editing: bool = False) -> List[Intent]:
    """Translate one read from the keyboard into intents.

    While a form field is being edited, printable input (including pasted
    text) becomes one EditChar intent per character.
    """
    if editing:
        if key in KEY_ENTER:
            return [CONFIRM]
        if key == KEY_ESCAPE:
            return [CANCEL]
        if key in KEY_BACKSPACE:
            return [EDIT_BACKSPACE]
        if key.startswith(KEY_ESCAPE):
            return []
        return [Intent.edit_char(ch) for ch in key if ch.isprintable()]

    if key in KEY_UP:
        return [MOVE_UP]
    if key in KEY_DOWN or key == KEY_TAB:
        return [MOVE_DOWN]
    if key in KEY_ENTER:
        return [CONFIRM]
    if key == KEY_ESCAPE or key == "q":
        return [CANCEL]
    if key == KEY_CTRL_S:
        return [SUBMIT_FORM]
    return []


def read_intents(editing: bool = False) -> List[Intent]:
    """Block for one key press and return the intents it maps to."""
    try:
        key = click.getchar()
    except (KeyboardInterrupt, EOFError):
        return [HARD_INTERRUPT]
    return key_to_intents(key, editing)


def _title(text: str, style: str) -> Panel:
    return Panel(Align.center(Text(text, style=style)), border_style=style.split()[-1])


def _help(text: str) -> Text:
    return Text(text, style="dim", justify="center")


def _log_style(line: str) -> str:
    if "❌" in line or "error" in line:
        return "red"
    if "✅" in line or "started" in line:
        return "green"
    if "⬇️" in line:
        return "blue"
    if "🔨" in line:
        return "yellow"
    if "▶️" in line:
        return "cyan"
    return "white"


class WizardUI:
    """Renders wizard snapshots."""

    def __init__(self, console: Optional[Console] = None, log_height: Optional[int] = None):
        self.console = console or Console()
        self.log_height = log_height

    def render(self, snapshot: WizardSnapshot) -> RenderableType:
        """Build the renderable for the active screen."""
        screen = snapshot.state.screen
        if screen == Screen.CONFIRMATION:
            return self.render_confirmation(snapshot)
        if screen == Screen.ENV_SETUP:
            return self.render_env_setup(snapshot)
        if screen == Screen.INSTALLING:
            return self.render_installing(snapshot)
        if screen == Screen.SUCCESS:
            return self.render_success(snapshot)
        return self.render_error(snapshot)

    def render_confirmation(self, snapshot: WizardSnapshot) -> RenderableType:
        all_files_exist = snapshot.env_exists and snapshot.config_exists

        status = Text(justify="center")
        status.append("Configuration Files:\n\n", style="green" if all_files_exist else "yellow")
        for name, exists in ((".env", snapshot.env_exists), ("config.yaml", snapshot.config_exists)):
            status.append("✓" if exists else "✗", style="green" if exists else "red")
            status.append(f" {name}")
            if not exists:
                status.append(" (missing)", style="red")
            status.append("\n")
        status.append("\n")

        if all_files_exist:
            status.append("✅ All configuration files ready!\n\n", style="bold green")
            status.append("Services to be started:\n")
            for service in SERVICES:
                status.append(f"  • {service}\n")
        else:
            status.append("⚠️  Some configuration files are missing!\n", style="bold yellow")
            status.append("Please generate the missing files before proceeding.\n")

        menu = Text(justify="center")
        for option in snapshot.options:
            color = {MenuSelection.PROCEED: "green", MenuSelection.CANCEL: "red"}.get(option, "cyan")
            style = f"bold black on {color}" if option == snapshot.menu_selection else color
            menu.append(f"[ {MENU_LABELS[option]} ]", style=style)
            menu.append("\n")

        return Group(
            _title("🚀 Analytics Installer", "bold cyan"),
            Panel(status, title="Status"),
            Panel(menu, title="Menu"),
            _help("Use ↑↓ to navigate, Enter to select, Esc to cancel"),
        )

    def render_env_setup(self, snapshot: WizardSnapshot) -> RenderableType:
        form = snapshot.form
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Field")
        table.add_column("Value")
        table.add_column("Required", style="red")

        for index, (attribute, label, required) in enumerate(FORM_FIELDS):
            if index == form.current_field:
                style = "bold green" if form.editing else "bold cyan"
            else:
                style = "white"
            value = getattr(form, attribute)
            if attribute == "openai_api_key":
                value = value[:KEY_FIELD_WIDTH].ljust(KEY_FIELD_WIDTH, "_")
            table.add_row(Text(f"{label}:", style=style), Text(value, style=style), "*" if required else "")

        body = [Text("Please provide the following information:\n"), table]
        if form.error_message:
            body.append(Text(f"\n{form.error_message}", style="bold red"))
        body.append(Text("\n* Required field", style="dim"))

        if form.editing:
            help_text = "Type to edit, Enter to finish, Esc to cancel"
        else:
            help_text = "↑↓ to navigate, Enter to edit, Ctrl+S to save, Esc to cancel"

        return Group(
            _title("🔧 Generate .env File", "bold cyan"),
            Panel(Group(*body), title="Configuration Form"),
            _help(help_text),
        )

    def render_installing(self, snapshot: WizardSnapshot) -> RenderableType:
        progress = snapshot.progress
        bar = Table.grid(expand=True)
        bar.add_column(ratio=1)
        bar.add_column(width=6, justify="right")
        bar.add_row(
            ProgressBar(total=100, completed=progress.percent, complete_style="cyan"),
            f"{progress.percent:.0f}%",
        )

        if progress.current_service:
            current = (
                f"Current: {progress.current_service} "
                f"({progress.completed_services}/{progress.total_services})"
            )
        else:
            current = "Initializing..."

        return Group(
            _title("🔄 Installing Analytics... Please wait", "bold yellow"),
            Panel(bar, title="Progress"),
            Panel(Align.center(Text(current, style="green")), title="Status"),
            self._logs_panel(snapshot.logs, "Installation Logs", styled=True),
            _help("Press Ctrl+C to cancel"),
        )

    def render_success(self, snapshot: WizardSnapshot) -> RenderableType:
        message = Text(justify="center")
        message.append("Analytics has been successfully installed!\n\n", style="bold green")
        message.append("All services are now running. You can access Analytics UI at:\n")
        message.append("http://localhost:3000", style="underline cyan")

        return Group(
            _title("✅ Installation Complete!", "bold green"),
            Panel(message, title="Success"),
            self._logs_panel(snapshot.logs[-10:], "Installation Summary"),
            _help("Press Ctrl+C to exit"),
        )

    def render_error(self, snapshot: WizardSnapshot) -> RenderableType:
        message = Text()
        message.append("An error occurred:\n\n", style="bold red")
        message.append(snapshot.state.message)

        return Group(
            _title("❌ Installation Failed", "bold red"),
            Panel(message, title="Error Details"),
            self._logs_panel(snapshot.logs, "Installation Logs"),
            _help("Press Ctrl+C to exit"),
        )

    def _logs_panel(self, logs, title: str, styled: bool = False) -> Panel:
        # Keep the newest lines in view, as a terminal scrollback would
        height = self.log_height or max(self.console.height - 20, 5)
        visible = list(logs)[-height:]
        text = Text()
        for line in visible:
            text.append(line + "\n", style=_log_style(line) if styled else "white")
        return Panel(text, title=title)
