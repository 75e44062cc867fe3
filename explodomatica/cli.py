"""
Explodomatica - CLI Entry Point

Generate explosion sound effects and save them as WAV files.

Usage:
    explodomatica boom.wav
    explodomatica boom.wav --duration 2.5 --layers 6 --speed-factor 0.5
    explodomatica boom.wav --preset distant_thunder --mutate --seed 42

Caution: the output file is overwritten without confirmation.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from colorama import Fore, Style, init
from pydantic import ValidationError

from .config_loader import ConfigLoadError, get_config_loader
from .params import DEFAULT_PARAMETERS, ExplosionParameters
from .pipeline import ExplosionPipeline
from .sample_buffer import AllocationError
from .utils import make_rng, resolve_seed

init()

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

# Stream number of the mutation generator, kept apart from synthesis (stream 0)
MUTATION_STREAM = 1


def print_info(message: str):
    """Print info message."""
    print(f"{Fore.CYAN}ℹ{Style.RESET_ALL}  {message}")


def print_error(message: str):
    """Print error message."""
    print(f"{Fore.RED}✗{Style.RESET_ALL}  {message}", file=sys.stderr)


def print_success(message: str):
    """Print success message."""
    print(f"{Fore.GREEN}✓{Style.RESET_ALL}  {message}")


def print_parameters(params: ExplosionParameters, seed: int):
    """Print the parameters used for this run."""
    print(f"\n{Fore.MAGENTA}{'─' * 50}{Style.RESET_ALL}")
    print(f"{Fore.MAGENTA}Explosion parameters:{Style.RESET_ALL}")
    for name, value in params.model_dump().items():
        print(f"   {name}: {value}")
    print(f"   seed: {seed}")
    print(f"{Fore.MAGENTA}{'─' * 50}{Style.RESET_ALL}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="explodomatica",
        description="Generate explosion sound effects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s boom.wav
  %(prog)s boom.wav --duration 2.5 --layers 6
  %(prog)s boom.wav --preset distant_thunder --mutate

caution: the output file will be overwritten.
        """,
    )

    parser.add_argument("output", nargs="?", help="Output WAV file path")

    # Parameter sources (one at most)
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", help="Start from a named preset")
    source.add_argument("--config", help="Start from a YAML parameter file")
    parser.add_argument(
        "--list-presets",
        action="store_true",
        help="List available presets and exit",
    )

    # Explosion parameters (override the preset / config file)
    parser.add_argument("--duration", type=float, help="Duration of explosion in seconds")
    parser.add_argument(
        "--layers", type=int, dest="layer_count",
        help="Number of sound layers used to build up each explosion",
    )
    parser.add_argument(
        "--preexplosions", type=int,
        help="Number of pre-explosions (the \"ka-\" in \"ka-BOOM!\")",
    )
    parser.add_argument(
        "--pre-delay", type=float, dest="preexplosion_delay",
        help="Window in seconds over which pre-explosions are scattered",
    )
    parser.add_argument(
        "--pre-lp-factor", type=float, dest="preexplosion_low_pass_factor",
        help="Pre-explosion low-pass factor; closer to zero lowers the cutoff",
    )
    parser.add_argument(
        "--pre-lp-count", type=int, dest="preexplosion_lp_iterations",
        help="Number of times the pre-explosion low-pass filter is applied",
    )
    parser.add_argument(
        "--speed-factor", type=float, dest="final_speed_factor",
        help="Speed up (>1.0) or slow down (<1.0) the final explosion",
    )
    parser.add_argument(
        "--early-reflections", type=int,
        help="Number of early reflections in reverb",
    )
    parser.add_argument(
        "--late-reflections", type=int,
        help="Number of late reflections in reverb",
    )

    # Randomness
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible explosion")
    parser.add_argument(
        "--mutate",
        action="store_true",
        help="Randomly alter all parameters by a small amount",
    )

    # Misc options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


PARAMETER_OPTIONS = (
    "duration",
    "layer_count",
    "preexplosions",
    "preexplosion_delay",
    "preexplosion_low_pass_factor",
    "preexplosion_lp_iterations",
    "final_speed_factor",
    "early_reflections",
    "late_reflections",
)


def resolve_parameters(args: argparse.Namespace) -> ExplosionParameters:
    """
    Combine a preset or parameter file with command-line overrides.

    Raises:
        ConfigLoadError: If a preset or parameter file cannot be loaded
        ValidationError: If an override is out of range
    """
    loader = get_config_loader()
    params = DEFAULT_PARAMETERS
    if args.preset:
        params = loader.load_preset(args.preset)
    elif args.config:
        params = loader.load_parameters_file(args.config)

    overrides = {name: getattr(args, name) for name in PARAMETER_OPTIONS}
    return params.with_overrides(**overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.output is None and not args.list_presets:
        parser.error("the following arguments are required: output")

    setup_logging(args.verbose)

    if args.list_presets:
        loader = get_config_loader()
        for name in loader.get_available_presets():
            print(f"  {name:<20} {loader.get_preset_description(name)}")
        return EXIT_OK

    try:
        params = resolve_parameters(args)
    except ConfigLoadError as e:
        print_error(str(e))
        return EXIT_FAILURE
    except ValidationError as e:
        print_error(f"Invalid explosion parameters: {e}")
        return EXIT_USAGE

    seed = resolve_seed(args.seed)
    if args.mutate:
        params = params.mutate(make_rng(seed, stream=MUTATION_STREAM))

    print_parameters(params, seed)
    print_info(f"Output: {args.output} (will be overwritten)")

    try:
        pipeline = ExplosionPipeline(params, seed=seed)
        if not pipeline.render(args.output):
            print_error(f"Cannot open '{args.output}'")
            return EXIT_FAILURE
    except KeyboardInterrupt:
        print_error("Generation cancelled by user")
        return EXIT_INTERRUPTED
    except AllocationError as e:
        print_error(f"Out of memory: {e}")
        return EXIT_FAILURE

    print_success(f"Saved output in '{args.output}'")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
