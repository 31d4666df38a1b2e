"""
Analytics Installer Command Line Interface

Main entry point for the analytics-installer CLI.
"""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from analytics_installer.config import ENV_VARS, InstallerSettings

console = Console()


def _settings(root: str, compose: str, log_file: str, verbose: bool) -> InstallerSettings:
    return InstallerSettings.from_env(
        project_root=Path(root) if root else None,
        compose_command=compose or None,
        log_file=Path(log_file) if log_file else None,
        debug=True if verbose else None,
    )


@click.group(invoke_without_command=True)
@click.version_option(package_name="analytics-installer")
@click.pass_context
def main(ctx: click.Context):
    """Analytics Installer: set up and start the Analytics services

    Runs the installation wizard when called without a command.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(install)


@main.command()
@click.option("--root", type=click.Path(file_okay=False), help="Project root holding the compose file (default: current directory)")
@click.option("--compose", help="Compose command to run (default: 'docker compose')")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write a debug log to this file")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output (to the default log file if --log-file is not set)")
def install(root: str, compose: str, log_file: str, verbose: bool):
    """Run the interactive installation wizard.

    Generates any missing .env / config.yaml, then runs
    'docker compose build --no-cache' followed by 'docker compose up -d'.

    Examples:
        analytics-installer install
        analytics-installer install --root ~/analytics
    """
    import logging
    from analytics_installer.wizard import WizardOrchestrator
    from analytics_installer.wizard.logging_config import get_log_path, setup_logging
    from analytics_installer.wizard.orchestrator import EXIT_INTERRUPTED, describe_error
    from analytics_installer.wizard.state import Screen

    settings = _settings(root, compose, log_file, verbose)
    if settings.debug and settings.log_file is None:
        settings.log_file = get_log_path(settings.project_root)

    # The wizard owns the terminal; logs only go to a file
    setup_logging(
        level=logging.DEBUG if settings.debug else logging.INFO,
        log_file=settings.log_file,
        quiet=True,
    )

    wizard = WizardOrchestrator(settings, console=console)
    try:
        code = wizard.run()
    except KeyboardInterrupt:
        code = EXIT_INTERRUPTED
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if wizard.machine.screen == Screen.SUCCESS:
        console.print("[green]✓[/green] Analytics is running at [cyan]http://localhost:3000[/cyan]")
    elif wizard.last_error is not None:
        console.print(f"[red]✗[/red] {wizard.machine.state.message or describe_error(wizard.last_error)}")
        if wizard.last_error.remediation:
            console.print(f"[blue]ℹ[/blue] To fix: {wizard.last_error.remediation}")
    elif code == EXIT_INTERRUPTED:
        console.print("[yellow]⚠[/yellow] Installation interrupted.")
    if settings.log_file:
        console.print(f"[dim]Log: {settings.log_file}[/dim]")
    sys.exit(code)


@main.command()
@click.option("--root", type=click.Path(file_okay=False), help="Project root (default: current directory)")
@click.option("--compose", help="Compose command to run (default: 'docker compose')")
def status(root: str, compose: str):
    """Show configuration file status and the commands install would run."""
    from analytics_installer.wizard.materializer import ConfigMaterializer

    settings = _settings(root, compose, None, False)
    materializer = ConfigMaterializer(settings.project_root)

    table = Table(title=f"Project root: {settings.project_root}", border_style="blue")
    table.add_column("File", style="cyan")
    table.add_column("Status")

    for name, exists in ((".env", materializer.env_exists()), ("config.yaml", materializer.config_exists())):
        table.add_row(name, "[green]✓ present[/green]" if exists else "[red]✗ missing[/red]")

    env = materializer.read_env_file()
    if env:
        key = env.get("OPENAI_API_KEY") or ""
        table.add_row("OPENAI_API_KEY", "********" if key else "[dim]not set[/dim]")
        table.add_row("GENERATION_MODEL", env.get("GENERATION_MODEL") or "[dim]not set[/dim]")

    console.print(table)
    console.print()
    display = " ".join(settings.compose_command)
    console.print("[bold]Install will run:[/bold]")
    console.print(f"  1. {display} build --no-cache")
    console.print(f"  2. {display} up -d")


@main.command(name="env")
def env_help():
    """List environment variables the installer reads."""
    table = Table(border_style="blue")
    table.add_column("Variable", style="cyan")
    table.add_column("Description")
    table.add_column("Default", style="dim")
    for name, info in ENV_VARS.items():
        table.add_row(name, info["description"], info["default"])
    console.print(table)


if __name__ == "__main__":
    main()
