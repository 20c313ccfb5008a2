"""
CLI interface for the mac changer
"""

import sys
import logging
import argparse
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table
from rich import box

from . import __version__
from .address import ADDRESS_PATTERN, RANDOM_MAC, parse_mac
from .applier import AddressApplier, SubprocessRunner, detect_platform
from .changer import MacChanger
from .interfaces import open_interface
from .errors import (
    ConfigurationError, InvalidAddressError, MacChangerError, UnsupportedPlatformError
)
from .settings import (
    PARAM_ADDRESS, PARAM_IFACE, Settings, get_config_paths, init_config, load_settings
)

logger = logging.getLogger(__name__)

PROMPT = "mac-changer"
QUIT_COMMANDS = frozenset({"quit", "exit", "q"})


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def create_parser(settings: Settings) -> argparse.ArgumentParser:
    """Create CLI argument parser with defaults from settings."""
    parser = argparse.ArgumentParser(
        prog="mac-changer",
        description="Temporarily change the hardware address of a network interface",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive session on eth0 with a random address
  %(prog)s --iface eth0

  # Apply a fixed address right away
  %(prog)s --iface en7 --address 02:11:22:33:44:55 --on

  # Use a saved profile
  %(prog)s --profile cafe

Session commands:
  mac.changer on | mac.changer off | set <param> <value> | get <param>
  status | help | quit
        """
    )

    parser.add_argument(
        "--profile",
        metavar="NAME",
        help="Use named profile from config file"
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and available profiles"
    )

    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Initialize user config file with defaults"
    )

    parser.add_argument(
        "-i", "--iface",
        default=settings.iface,
        help=f"Interface to operate on (default: {settings.iface or 'none'})"
    )

    parser.add_argument(
        "-a", "--address",
        default=settings.address,
        help=f"Hardware address to apply (default: {settings.address})"
    )

    parser.add_argument(
        "--no-sudo",
        dest="sudo",
        action="store_false",
        default=settings.sudo,
        help="Do not prefix ifconfig with sudo"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.timeout,
        help="Seconds to wait for ifconfig (default: wait forever)"
    )

    parser.add_argument(
        "--on",
        action="store_true",
        help="Turn the changer on before entering the session"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"mac-changer {__version__}"
    )

    return parser


def show_config(settings: Settings, console: Optional[Console] = None) -> None:
    """Display current configuration and available profiles."""
    console = console or Console()

    console.print("[bold cyan]Configuration Sources[/bold cyan]")
    if settings.config_sources:
        for source in settings.config_sources:
            console.print(f"  [green][OK][/green] {source}")
    else:
        console.print("  [dim]No config files found (using built-in defaults)[/dim]")

    console.print()
    console.print("[bold cyan]Config Search Paths[/bold cyan]")
    for path in get_config_paths():
        exists = "[green][OK][/green]" if path.exists() else "[dim]--[/dim]"
        console.print(f"  {exists} {path}")

    console.print()
    console.print("[bold cyan]Current Settings[/bold cyan]")
    table = Table(box=box.SIMPLE)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_row(PARAM_IFACE, settings.iface or "-")
    table.add_row(PARAM_ADDRESS, settings.address)
    table.add_row("sudo", str(settings.sudo))
    table.add_row("timeout", str(settings.timeout) if settings.timeout else "none")
    if settings.default_profile:
        table.add_row("default_profile", settings.default_profile)
    console.print(table)

    if settings.profiles:
        console.print()
        console.print("[bold cyan]Available Profiles[/bold cyan]")
        profiles_table = Table(box=box.SIMPLE)
        profiles_table.add_column("Profile", style="cyan")
        profiles_table.add_column("Interface", style="white")
        profiles_table.add_column("Address", style="white")
        profiles_table.add_column("Description", style="dim")

        for name, profile in settings.profiles.items():
            default_marker = " [yellow]*[/yellow]" if name == settings.default_profile else ""
            profiles_table.add_row(
                f"{name}{default_marker}",
                profile.iface or "-",
                profile.address,
                profile.description
            )

        console.print(profiles_table)
        console.print("[dim]* = default profile[/dim]")


def show_status(changer: MacChanger, console: Console) -> None:
    """Display the changer's state and tracked addresses."""
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("interface", str(changer.handle))
    table.add_row("state", changer.state.value)
    table.add_row("original", changer.original or "-")
    table.add_row("desired", changer.desired or "-")
    table.add_row(PARAM_IFACE, changer.settings.iface or "-")
    table.add_row(PARAM_ADDRESS, changer.settings.address)
    console.print(table)


def show_help(console: Console) -> None:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Command", style="cyan")
    table.add_column("Description")
    table.add_row(MacChanger.CMD_ON, "Start mac changer module.")
    table.add_row(MacChanger.CMD_OFF, "Stop mac changer module and restore original mac address.")
    table.add_row("set <param> <value>", f"Set {PARAM_IFACE}, or {PARAM_ADDRESS} to {ADDRESS_PATTERN} or {RANDOM_MAC}")
    table.add_row("get <param>", "Show a parameter value")
    table.add_row("status", "Show changer state")
    table.add_row("quit", "Restore the original address if needed and exit")
    console.print(table)


def _set_param(changer: MacChanger, name: str, value: str) -> None:
    if name == PARAM_ADDRESS and value != RANDOM_MAC:
        # Same check the parameter registry applies before storing a value
        parse_mac(value)
    elif name == PARAM_IFACE and value != changer.handle.name:
        # The handle must always be the interface the changer writes to
        changer.attach(open_interface(value))
    changer.settings.set_param(name, value)


def execute(line: str, changer: MacChanger, console: Console) -> bool:
    """
    Execute one session command.

    Returns:
        False when the session should end, True otherwise

    Raises:
        MacChangerError: If the command fails
    """
    words = line.split()
    if not words:
        return True

    verb = words[0].lower()

    if verb in QUIT_COMMANDS:
        return False
    if verb == "help":
        show_help(console)
    elif verb == "status":
        show_status(changer, console)
    elif verb == "get" and len(words) == 2:
        try:
            console.print(f"{words[1]}: {changer.settings.get_param(words[1])}")
        except KeyError:
            raise ConfigurationError(f"Unknown parameter: {words[1]}") from None
    elif verb == "set" and len(words) >= 3:
        value = line.split(None, 2)[2].strip()
        try:
            _set_param(changer, words[1], value)
        except KeyError:
            raise ConfigurationError(f"Unknown parameter: {words[1]}") from None
        console.print(f"{words[1]} => {value}")
    else:
        changer.handle_command(line)

    return True


def run_session(changer: MacChanger, console: Console) -> int:
    """
    Interactive command loop.

    The original address is restored on exit if the changer is still running.
    """
    exit_code = 0
    try:
        while True:
            line = Prompt.ask(f"[bold]{PROMPT}[/bold]", console=console, default="")
            try:
                if not execute(line, changer, console):
                    break
            except MacChangerError as e:
                logger.error(f"[FAIL] {e}")
    except (KeyboardInterrupt, EOFError):
        console.print("\n[yellow][!] Session interrupted[/yellow]")
        exit_code = 130

    if changer.running:
        logger.info("[*] Restoring original address before exit")
        try:
            changer.stop()
        except MacChangerError as e:
            logger.error(f"[FAIL] Could not restore original address: {e}")
            return 1

    return exit_code


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    console = Console()
    argv = sys.argv[1:] if argv is None else argv

    # Preliminary parse for --profile so defaults come from the profile
    profile_arg = None
    if "--profile" in argv:
        idx = argv.index("--profile")
        if idx + 1 < len(argv):
            profile_arg = argv[idx + 1]

    settings = load_settings(profile=profile_arg)
    if profile_arg and profile_arg not in settings.profiles:
        console.print(f"[yellow]Warning: Profile '{profile_arg}' not found[/yellow]")
        console.print("Available profiles:", ", ".join(settings.list_profiles()) or "(none)")

    parser = create_parser(settings)
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.init_config:
        config_path = init_config()
        if config_path:
            console.print(f"[green][OK][/green] Config file created: {config_path}")
        else:
            console.print("[yellow]Config file already exists.[/yellow]")
            console.print("Use --show-config to view current settings.")
        return 0

    settings.iface = args.iface
    settings.address = args.address
    settings.sudo = args.sudo
    settings.timeout = args.timeout

    if args.show_config:
        show_config(settings, console)
        return 0

    try:
        platform = detect_platform()
    except UnsupportedPlatformError as e:
        logger.error(f"[FAIL] {e}")
        return 3

    if not settings.iface:
        logger.error(f"[FAIL] No interface given, use --iface or set {PARAM_IFACE}")
        return 2

    runner = SubprocessRunner(sudo=settings.sudo, timeout=settings.timeout)

    try:
        if args.address != RANDOM_MAC:
            parse_mac(args.address)
        handle = open_interface(settings.iface, runner=SubprocessRunner(sudo=False))
    except (ConfigurationError, InvalidAddressError) as e:
        logger.error(f"[FAIL] Configuration error: {e}")
        return 2

    logger.debug(f"Platform: {platform.name}")
    console.print(f"[cyan]Interface:[/cyan] {handle}")

    changer = MacChanger(handle, settings, AddressApplier(runner=runner))

    if args.on:
        try:
            changer.start()
        except MacChangerError as e:
            logger.error(f"[FAIL] {e}")
            return 1

    return run_session(changer, console)


if __name__ == "__main__":
    sys.exit(main())
