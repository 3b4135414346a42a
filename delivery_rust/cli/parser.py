"""
delivery-rust CLI argument parser.

This module implements the command-line interface for delivery-rust using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("delivery-rust")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """delivery-rust command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="delivery-rust",
            description="delivery-rust - Prepare build hosts for a Rust toolchain",
            epilog='Use "delivery-rust COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"delivery-rust {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./delivery_rust.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Directory searched for delivery_rust.yaml (default: current directory)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_detect_command(subparsers)
        self._add_plan_command(subparsers)
        self._add_converge_command(subparsers)

        return parser

    def _add_platform_arguments(self, parser):
        """Add platform overrides shared by plan and converge."""
        parser.add_argument(
            "--platform-family",
            metavar="FAMILY",
            help="Override detected platform family (e.g., rhel, debian, windows)",
        )
        parser.add_argument(
            "--ruby-version",
            metavar="VERSION",
            help="Override omnibus.ruby_version (used on windows)",
        )

    def _add_detect_command(self, subparsers):
        """Add 'detect' subcommand."""
        subparsers.add_parser(
            "detect",
            help="Show the host's platform family",
            description="Detect and print the platform family of this host",
        )

    def _add_plan_command(self, subparsers):
        """Add 'plan' subcommand."""
        parser = subparsers.add_parser(
            "plan",
            help="Show preparation resources",
            description="List the resources that would prepare this build host",
        )
        self._add_platform_arguments(parser)

    def _add_converge_command(self, subparsers):
        """Add 'converge' subcommand."""
        parser = subparsers.add_parser(
            "converge",
            help="Prepare this build host",
            description="Converge the build host preparation resources",
        )
        self._add_platform_arguments(parser)
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would change without changing anything",
        )
        parser.add_argument(
            "--report",
            type=Path,
            metavar="PATH",
            help="Write a JSON run report to PATH",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "detect": "delivery_rust.cli.commands.detect",
            "plan": "delivery_rust.cli.commands.plan",
            "converge": "delivery_rust.cli.commands.converge",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        import importlib

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
