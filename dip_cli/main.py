"""
Module 07 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m dip_cli verify <proof.json> [--root HEX] [--max-keys N] [--max-accounts N] [--hasher NAME] [--json]
    python -m dip_cli encode <leaf.json> [--block-number-width N] [--json]
    python -m dip_cli hashers [--json]
    python -m dip_cli config --init|--show

Environment Variables:
    DIP_HASHER                  Hasher name (default: blake2_256)
    DIP_LAYOUT_VERSION          Trie layout version (default: 1)
    DIP_MAX_REVEALED_KEYS       Maximum revealed DID keys (default: 10)
    DIP_MAX_REVEALED_ACCOUNTS   Maximum revealed linked accounts (default: 10)
    DIP_LOG_LEVEL               Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.crypto.hashing import available_hashers, get_hasher
from dip_cli.commands import encode, verify
from dip_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="dip",
        description="DIP proof verifier CLI - Verify identity Merkle proofs and inspect leaf encodings.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./dip.yaml or ~/.config/dip/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a DIP proof document",
        description="Check a proof's revealed leaves against its identity commitment.",
    )
    verify_parser.add_argument(
        "proof_path",
        type=str,
        help="Path to the proof document (JSON)",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Trusted identity commitment (0x hex); overrides the one in the document",
    )
    verify_parser.add_argument(
        "--max-keys",
        type=int,
        default=None,
        help="Maximum number of revealed DID keys (default: from config)",
    )
    verify_parser.add_argument(
        "--max-accounts",
        type=int,
        default=None,
        help="Maximum number of revealed linked accounts (default: from config)",
    )
    verify_parser.add_argument(
        "--hasher",
        type=str,
        default=None,
        help="Hasher the commitment was built with (default: from config)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- encode command ---
    encode_parser = subparsers.add_parser(
        "encode",
        help="Show the trie key/value bytes of revealed leaves",
        description="Encode leaf documents the way the identity provider commits them.",
    )
    encode_parser.add_argument(
        "leaf_path",
        type=str,
        help="Path to a leaf document or a list of them (JSON)",
    )
    encode_parser.add_argument(
        "--block-number-width",
        type=int,
        choices=[4, 8],
        default=None,
        help="Block number width in bytes (default: from config)",
    )
    encode_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    encode_parser.set_defaults(func=encode.encode_cmd)

    # --- hashers command ---
    hashers_parser = subparsers.add_parser(
        "hashers",
        help="List registered hashers",
        description="Show the hash functions proofs can be verified with.",
    )
    hashers_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    hashers_parser.set_defaults(func=hashers_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="dip.yaml",
        help="Path for config file created by --init (default: dip.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (DIP_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: dip config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def hashers_cmd(args: argparse.Namespace) -> int:
    """Handle hashers command."""
    hashers = [get_hasher(name) for name in available_hashers()]
    default = args.cli_config.verifier.hasher

    if args.json:
        data = [
            {"name": h.name, "length": h.length, "default": h.name == default}
            for h in hashers
        ]
        print(json.dumps(data, indent=2))
        return EXIT_SUCCESS

    for h in hashers:
        marker = " [default]" if h.name == default else ""
        print(f"{h.name} ({h.length} bytes){marker}")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    setup_logging(level=args.log_level or config.api.log_level)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
