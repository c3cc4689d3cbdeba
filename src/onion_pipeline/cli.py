"""Command-line interface for onion-pipeline."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from onion_pipeline.pipeline.orchestrator import Orchestrator


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def parse_argument(value: str) -> Any:
    """Parse a --arg value as JSON, keeping it as a string if that fails."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def check_definition(args: argparse.Namespace) -> int:
    """Execute the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    definition_path = args.definition.resolve()
    if not definition_path.exists():
        logger.error(f"Pipeline definition not found: {definition_path}")
        return 1

    try:
        orchestrator = Orchestrator.from_file(definition_path)

        logger.info(f"Definition valid: {orchestrator.definition.name}")
        logger.info(f"  Steps: {len(orchestrator.steps)}")
        logger.info(f"  Destination: {orchestrator.definition.destination}")

        return 0

    except Exception as e:
        logger.error(f"Invalid pipeline definition: {e}")
        return 1


def run_pipeline(args: argparse.Namespace) -> int:
    """Execute the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    definition_path = args.definition.resolve()
    if not definition_path.exists():
        logger.error(f"Pipeline definition not found: {definition_path}")
        return 1

    try:
        orchestrator = Orchestrator.from_file(definition_path)
        result = orchestrator.run(args.arguments)

        print(json.dumps(result, default=str))
        logger.info(f"Pipeline complete: {orchestrator.definition.name}")

        return 0

    except Exception as e:
        logger.error(f"Pipeline failed: {e}")
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="onion-pipeline",
        description="Run middleware pipelines described by JSON definitions",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate a pipeline definition",
        description="Validate a pipeline definition and resolve every step and destination reference.",
    )
    check_parser.add_argument(
        "--definition",
        type=Path,
        required=True,
        help="Path to the pipeline definition JSON file",
    )
    check_parser.set_defaults(func=check_definition)

    run_parser = subparsers.add_parser(
        "run",
        help="Run a pipeline and print its result",
        description="Run arguments through the pipeline described by a definition file and print the result as JSON.",
    )
    run_parser.add_argument(
        "--definition",
        type=Path,
        required=True,
        help="Path to the pipeline definition JSON file",
    )
    run_parser.add_argument(
        "--arg",
        dest="arguments",
        action="append",
        type=parse_argument,
        default=None,
        help="Argument to send through the pipeline, parsed as JSON when possible (repeatable; replaces the definition's arguments)",
    )
    run_parser.set_defaults(func=run_pipeline)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
