"""
Vault CLI.

Command-line interface for inspecting configuration, replaying simulation
scenarios and querying persisted vault events.
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from .config import ConfigError, load_config
from .core import VaultError, get_logger
from .simulation import SimulationEnvironment, run_scenario
from .storage import EventRepository

logger = get_logger(__name__)


class VaultCLI:
    """
    Command-line interface for the vault.

    Example:
        >>> cli = VaultCLI()
        >>> cli.run(["simulate", "--config", "config/vault.yaml"])
    """

    def __init__(self) -> None:
        self._parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser."""
        parser = argparse.ArgumentParser(
            prog="delta-vault",
            description="Delta-neutral vault accounting and simulation",
        )
        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        # simulate command
        simulate_parser = subparsers.add_parser(
            "simulate",
            help="Replay the scenario in a configuration file",
        )
        simulate_parser.add_argument(
            "--config", "-c",
            type=str,
            required=True,
            help="Path to configuration file",
        )
        simulate_parser.add_argument(
            "--env", "-e",
            type=str,
            help="Environment overlay (loads <config>.<env>.yaml)",
        )
        simulate_parser.add_argument(
            "--json",
            action="store_true",
            help="Print the result as JSON",
        )

        # show-config command
        show_parser = subparsers.add_parser(
            "show-config",
            help="Print the validated configuration",
        )
        show_parser.add_argument(
            "--config", "-c",
            type=str,
            required=True,
            help="Path to configuration file",
        )
        show_parser.add_argument(
            "--env", "-e",
            type=str,
            help="Environment overlay (loads <config>.<env>.yaml)",
        )

        # events command
        events_parser = subparsers.add_parser(
            "events",
            help="List persisted vault events",
        )
        events_parser.add_argument(
            "--db",
            type=str,
            required=True,
            help="Path to the event database",
        )
        events_parser.add_argument(
            "--name", "-n",
            type=str,
            help="Filter by event name (e.g. Deposit)",
        )
        events_parser.add_argument(
            "--owner", "-o",
            type=str,
            help="Filter by owner account",
        )
        events_parser.add_argument(
            "--limit", "-l",
            type=int,
            default=20,
            help="Maximum events to show (default: 20)",
        )

        return parser

    def run(self, args: List[str]) -> int:
        """
        Run CLI command.

        Args:
            args: Command-line arguments

        Returns:
            Exit code (0 for success)
        """
        if not args:
            self._parser.print_help()
            return 0

        parsed = self._parser.parse_args(args)

        if not parsed.command:
            self._parser.print_help()
            return 0

        handler = getattr(self, f"_cmd_{parsed.command.replace('-', '_')}")
        try:
            return handler(parsed)
        except (ConfigError, VaultError) as e:
            print(f"Error: {e}")
            logger.error(f"CLI error: {e}")
            return 1

    # =========================================================================
    # Command Handlers
    # =========================================================================

    def _cmd_simulate(self, args: argparse.Namespace) -> int:
        """Handle simulate command."""
        config = load_config(args.config, env=args.env)
        env = run_scenario(config)

        if args.json:
            print(json.dumps(self._summary(env), indent=2, default=str))
        else:
            self._print_results(env)
            self._print_status(env.vault.status())
        return 0

    def _cmd_show_config(self, args: argparse.Namespace) -> int:
        """Handle show-config command."""
        config = load_config(args.config, env=args.env)
        print(json.dumps(config.model_dump(mode="json"), indent=2))
        return 0

    def _cmd_events(self, args: argparse.Namespace) -> int:
        """Handle events command."""
        repository = EventRepository(args.db)
        repository.initialize()
        events = repository.get_events(name=args.name, owner=args.owner, limit=args.limit)

        if not events:
            print("No events found")
            return 0

        for event in events:
            payload = {k: v for k, v in event.items() if k not in ("name", "timestamp")}
            print(f"{event['timestamp']}  {event['name']:<22} {payload}")
        return 0

    # =========================================================================
    # Output Helpers
    # =========================================================================

    def _summary(self, env: SimulationEnvironment) -> Dict[str, Any]:
        return {
            "steps": [r.to_dict() for r in env.results],
            "status": env.vault.status(),
            "events": [e.to_dict() for e in env.vault.events.history],
        }

    def _print_results(self, env: SimulationEnvironment) -> None:
        print("\n" + "=" * 60)
        print("  Scenario Steps")
        print("=" * 60)
        for r in env.results:
            if r.ok:
                print(f"  [{r.index:>3}] {r.action:<10} ok     -> {r.result}")
            else:
                print(f"  [{r.index:>3}] {r.action:<10} FAILED -> {r.error_code}: {r.error}")

    def _print_status(self, status: Dict[str, Any]) -> None:
        print("\n" + "=" * 60)
        print("  Vault Status")
        print("=" * 60)
        print(f"  Paused:        {status['paused']}")
        print(f"  Total assets:  {status['total_assets']:,}")
        print(f"  Total shares:  {status['total_shares']:,}")
        print(f"  Idle assets:   {status['idle_assets']:,}")
        for leg, balance in status["legs"].items():
            shown = f"{balance:,}" if balance is not None else "not set"
            print(f"  {leg.capitalize():<6} leg:     {shown}")
        if status["holders"]:
            print("\n  Holders:")
            for holder, shares in sorted(status["holders"].items()):
                print(f"    {holder:<20} {shares:>15,}")
        print()


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    if args is None:
        args = sys.argv[1:]
    return VaultCLI().run(args)


if __name__ == "__main__":
    sys.exit(main())
