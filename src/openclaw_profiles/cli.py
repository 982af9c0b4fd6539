"""Command-line entry point: openclaw-model-switch."""

import importlib
import logging
import os
import sys

import click
from rich.console import Console
from rich.markup import escape

from .exceptions import BaseMissingError
from .exceptions import DependencyMissingError
from .exceptions import ProfileError
from .exceptions import ProfileNotFoundError
from .gateway import gateway_port_from_env
from .gateway import is_gateway_running
from .manager import ProfileManager
from .models import ProfilePaths
from .models import SyncOutcome
from .models import SyncResult

logger = logging.getLogger(__name__)

console = Console()

PROG_NAME = "openclaw-model-switch"

# Modules that must import before any document is touched
REQUIRED_MODULES = ("json",)


def check_dependencies(modules: tuple[str, ...] | None = None) -> None:
    """Fail fast when the JSON codec cannot be loaded.

    Raises:
        DependencyMissingError: If a required module is unavailable
    """
    for name in modules or REQUIRED_MODULES:
        try:
            importlib.import_module(name)
        except ImportError as e:
            raise DependencyMissingError(f"JSON support is required but unavailable: {e}") from e


def configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.environ.get("OPENCLAW_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def create_profile_manager() -> ProfileManager:
    """Create a manager for $OPENCLAW_DIR probing the configured gateway port."""
    port = gateway_port_from_env()
    return ProfileManager(ProfilePaths.from_env(), gateway_probe=lambda: is_gateway_running(port=port))


class SwitchCommand(click.Command):
    """Command whose usage errors exit with status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise


# ===== Rendering =====


def print_sync_result(result: SyncResult) -> None:
    if result.outcome is SyncOutcome.BOOTSTRAPPED:
        console.print("[yellow]No base.json found, created it from current config[/yellow]")
    elif result.changed and result.backup is not None:
        console.print("[yellow]Detected changes in openclaw.json base settings[/yellow]")
        console.print(f"Backed up old base.json to: [cyan]{escape(result.backup.name)}[/cyan]")
        console.print("[green]Updated base.json with current config changes[/green]")
        console.print()


def print_status(manager: ProfileManager) -> None:
    status = manager.status()
    if status.active_config_exists:
        active_model = status.active_model or "unknown"
    else:
        active_model = "not configured"

    console.print("[bold]OpenClaw Model Configuration[/bold]")
    console.print("───────────────────────────────")
    console.print(f"Current Profile: [green]{escape(status.current_profile or 'unknown')}[/green]")
    console.print(f"Active Model:    [cyan]{escape(active_model)}[/cyan]")
    env_model = os.environ.get("OPENCLAW_MODEL")
    if env_model:
        console.print(f"Env Override:    [yellow]OPENCLAW_MODEL={escape(env_model)}[/yellow]")
    console.print()
    if status.gateway_running:
        console.print("Gateway Status:  [green]Running[/green] (restart needed for changes)")
    else:
        console.print("Gateway Status:  [yellow]Stopped[/yellow]")
    console.print()


def print_profiles(manager: ProfileManager) -> None:
    console.print("[bold]Available Model Profiles:[/bold]")
    console.print()

    profiles = manager.list_profiles()
    if not profiles:
        console.print("  [yellow]No profiles found. Run with --init to set up example profiles.[/yellow]")
        return

    for profile in profiles:
        label = f"{escape(profile.name)} - {escape(profile.display_name)}"
        if profile.is_current:
            console.print(f"  [green]* {label}[/green]")
        else:
            console.print(f"    {label}")
        console.print(f"      [cyan]{escape(profile.primary or '')}[/cyan]")
        if profile.description:
            console.print(f"      {escape(profile.description)}")
        console.print()


def apply_profile(manager: ProfileManager, name: str) -> None:
    console.print(f"Switching to profile: [cyan]{escape(name)}[/cyan]")
    result = manager.switch(name)
    print_sync_result(result.sync)
    console.print(f"[green]Successfully switched to {escape(result.profile.display_name)}[/green]")
    console.print(f"Primary model: [cyan]{escape(result.profile.primary or 'none')}[/cyan]")
    if result.gateway_running:
        console.print()
        console.print("[yellow]Note: Gateway is running. Restart it for changes to take effect.[/yellow]")
        console.print("  Run: openclaw gateway restart")


def run_init(manager: ProfileManager) -> None:
    console.print("[bold]Initializing Model Profile System[/bold]")
    console.print()

    result = manager.init()
    paths = manager.paths
    if result.base_created:
        console.print(f"[green]Created: {escape(str(paths.base))}[/green]")
    elif result.base_existed:
        console.print("[yellow]base.json already exists, skipping...[/yellow]")
    if result.active_config_missing:
        console.print("[red]Warning: No openclaw.json found. Run 'openclaw setup' first.[/red]")

    if result.installed_profiles:
        console.print(f"[green]Created default profiles in: {escape(str(paths.models_dir))}[/green]")
        for name in result.installed_profiles:
            console.print(f"  {escape(name)}")

    console.print()
    console.print("[green]Initialization complete![/green]")
    console.print(f"Run '{PROG_NAME}' to see available profiles.")


def report_error(error: ProfileError) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    if isinstance(error, ProfileNotFoundError):
        console.print("Available profiles:")
        for name in error.available:
            console.print(f"  {escape(name)}")
    elif isinstance(error, BaseMissingError):
        console.print("Run with --init to set up the profile system.")


# ===== Command =====


@click.command(
    name=PROG_NAME,
    cls=SwitchCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("profile", required=False)
@click.option("--list", "-l", "list_only", is_flag=True, help="List available profiles")
@click.option("--sync", "-s", "sync_only", is_flag=True, help="Sync base.json with openclaw.json changes")
@click.option("--init", "-i", "init_only", is_flag=True, help="Initialize the profile system")
@click.option("--verbose", "-v", is_flag=True, help="Log details to stderr")
def cli(profile: str | None, list_only: bool, sync_only: bool, init_only: bool, verbose: bool):
    """OpenClaw Model Profile Switcher.

    Switch the OpenClaw gateway between AI models while preserving your
    base config (skills, channels, hooks, plugins).

    \b
    Usage:
      openclaw-model-switch                Show current config and available profiles
      openclaw-model-switch <profile>      Switch to a model profile
      openclaw-model-switch --list         List available profiles
      openclaw-model-switch --sync         Sync base.json with openclaw.json changes
      openclaw-model-switch --init         Initialize the profile system

    \b
    Auto-sync:
      When switching profiles, any manual changes to openclaw.json
      (new skills, channels, etc.) are automatically detected and
      merged into base.json. Old base.json is backed up with timestamp.

    \b
    Environment:
      OPENCLAW_MODEL         Profile to auto-apply when no argument is given
      OPENCLAW_DIR           Config directory (default: ~/.openclaw)
      OPENCLAW_GATEWAY_PORT  Gateway port to check (default: 18789)

    \b
    Examples:
      openclaw-model-switch opus-4.5       Switch to Claude Opus 4.5
      openclaw-model-switch ollama-local   Switch to local Ollama model
    """
    configure_logging(verbose)

    if sum([bool(profile), list_only, sync_only, init_only]) > 1:
        raise click.UsageError("Give a profile name or one of --list, --sync, --init")

    manager = create_profile_manager()
    try:
        check_dependencies()

        if init_only:
            run_init(manager)
        elif sync_only:
            console.print("[bold]Syncing base.json with current config...[/bold]")
            print_sync_result(manager.sync())
            console.print("[green]Sync complete.[/green]")
        elif list_only:
            print_profiles(manager)
        elif profile:
            apply_profile(manager, profile)
        elif os.environ.get("OPENCLAW_MODEL"):
            env_model = os.environ["OPENCLAW_MODEL"]
            console.print(f"[yellow]Using OPENCLAW_MODEL environment variable: {escape(env_model)}[/yellow]")
            apply_profile(manager, env_model)
        else:
            print_status(manager)
            print_profiles(manager)
            console.print(f"[bold]Usage:[/bold] {PROG_NAME} <profile-name>")
            console.print("Run with --help for more options.")
    except ProfileError as e:
        logger.debug("Command failed", exc_info=True)
        report_error(e)
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
