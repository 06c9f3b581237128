"""
Non-transitive dice game entry point.

Usage:
    python -m console.main 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3

Exit codes:
    0  game finished, or the user left
    1  invalid dice or engine configuration
    2  invalid command-line options
    3  the computer's disclosure failed verification
    4  no secure random source
"""

import argparse
import logging
import sys
from typing import Callable, Optional, Sequence

from dicegame.config import Config, settings as engine_settings
from dicegame.engine import (
    DiceSet,
    DuplicateConfigurationError,
    EntropySourceError,
    TrustViolationError,
    ValidationError,
)
from shared.constants import EXAMPLE_ARGS

from console.config import settings
from console.terminal import ConsoleGameController, ConsolePrompts


EXIT_OK = 0
EXIT_CONFIGURATION = 1
EXIT_TRUST_VIOLATION = 3
EXIT_NO_ENTROPY = 4


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level or engine_settings.LOG_LEVEL, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Non-transitive dice game with provably fair rolls",
        epilog=f"Example: python -m console.main {EXAMPLE_ARGS}",
    )
    parser.add_argument(
        "dice",
        nargs="*",
        help="Dice configurations, one per argument, e.g. 2,2,4,4,9,9",
    )
    parser.add_argument(
        "--rounds",
        type=positive_int,
        default=settings.rounds,
        help=f"Number of rounds to play (default: {settings.rounds})",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Logging level (default: {engine_settings.LOG_LEVEL})",
    )
    return parser


def report_configuration_error(error: Exception, output_fn: Callable[[str], None]) -> None:
    """Print a dice configuration error the way the game always has."""
    if isinstance(error, DuplicateConfigurationError):
        output_fn("Error: Duplicate dice configurations detected:")
        for dice in error.duplicates:
            output_fn(f"- {dice}")
        return
    if isinstance(error, ValidationError) and error.configuration is not None:
        output_fn(f"Error in dice configuration '{error.configuration}': {error.message}")
    else:
        output_fn(f"Error: {error}")
    output_fn(f"Example: python -m console.main {EXAMPLE_ARGS}")


def main(
    argv: Optional[Sequence[str]] = None,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> int:
    """Main entry point."""
    parser = build_parser()
    # Dice such as "-1,2,3,4" look like options to argparse
    args, extra = parser.parse_known_args(argv)
    setup_logging(args.log_level)

    try:
        Config.validate()
        if args.rounds < 1:
            raise ValueError(f"FAIR_DICE_ROUNDS must be a positive integer, got {args.rounds}")
        dice_set = DiceSet.from_args(list(args.dice) + extra)
    except (ValidationError, DuplicateConfigurationError) as e:
        report_configuration_error(e, output_fn)
        return EXIT_CONFIGURATION
    except ValueError as e:
        output_fn(f"Error: {e}")
        return EXIT_CONFIGURATION

    controller = ConsoleGameController(
        dice_set,
        prompts=ConsolePrompts(input_fn=input_fn, output_fn=output_fn),
        settings=settings,
    )

    try:
        controller.run(args.rounds)
    except TrustViolationError as e:
        output_fn(f"Error: the computer's disclosure does not match its commitment. {e}")
        output_fn("The result of this exchange cannot be trusted.")
        return EXIT_TRUST_VIOLATION
    except EntropySourceError as e:
        output_fn(f"Error: {e}")
        return EXIT_NO_ENTROPY
    except (KeyboardInterrupt, EOFError):
        output_fn("\nGame interrupted. Goodbye!")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
