"""
Command line interface: stream samples of a distribution to stdout.

Examples:
    randstream -n 5 normal 0 1
    randstream -s 42 -b f64le stable 1.5 0 > samples.bin
    randstream -e --discard-above 100 normal 0 2
    randstream -c -n 1000 uniform -1 1
"""

import argparse
import os
import sys
from typing import Any, BinaryIO, Dict, List, Optional

from .config import GeneratorConfig
from .distributions import (
    ConfigurationError,
    Distribution,
    Uniform,
    Normal,
    Cauchy,
    Triangular,
    StudentT,
    Empirical,
    Categorical,
)
from .encoding import BINARY_FORMATS
from .sampler import fresh_seed
from .stable import Stable
from .writer import SampleWriter, write_samples


def _add_distribution_parsers(subparsers) -> None:
    p = subparsers.add_parser("uniform", help="Uniform distribution")
    p.add_argument("min", type=float)
    p.add_argument("max", type=float)
    p.add_argument("--right-inclusive", action="store_true",
                   help="Include the specified maximum as a possible value")
    p.set_defaults(build=lambda a: Uniform(a.min, a.max, inclusive=a.right_inclusive))

    p = subparsers.add_parser("normal", help="Normal distribution")
    p.add_argument("mean", type=float)
    p.add_argument("stddev", type=float)
    p.set_defaults(build=lambda a: Normal(a.mean, a.stddev))

    p = subparsers.add_parser("cauchy", help="Cauchy distribution")
    p.add_argument("median", type=float)
    p.add_argument("scale", type=float)
    p.set_defaults(build=lambda a: Cauchy(a.median, a.scale))

    p = subparsers.add_parser("triangular", help="Triangular distribution")
    p.add_argument("min", type=float)
    p.add_argument("max", type=float)
    p.add_argument("mode", type=float)
    p.set_defaults(build=lambda a: Triangular(a.min, a.max, a.mode))

    p = subparsers.add_parser("student-t", help="Student's t distribution")
    p.add_argument("freedom", type=float, help="Degrees of freedom")
    p.set_defaults(build=lambda a: StudentT(a.freedom))

    p = subparsers.add_parser("stable", help="General stable distribution (CMS method)")
    p.add_argument("alpha", type=float, help="Stability, in (0, 2]")
    p.add_argument("beta", type=float, help="Skewness, in [-1, 1]")
    p.add_argument("--location", type=float, default=0.0)
    p.add_argument("--scale", type=float, default=1.0)
    p.set_defaults(build=lambda a: Stable(a.location, a.scale, a.alpha, a.beta))

    p = subparsers.add_parser("empirical", help="Empirical distribution of the given data points")
    p.add_argument("data", type=float, nargs="+")
    p.set_defaults(build=lambda a: Empirical(a.data))

    p = subparsers.add_parser("categorical", help="Weighted choice; prints the zero-based category index")
    p.add_argument("weights", type=float, nargs="+")
    p.set_defaults(build=lambda a: Categorical(a.weights))

    p = subparsers.add_parser("spec", help="Distribution given as a string, e.g. 'normal(0,1)'")
    p.add_argument("spec", help=f"One of: {', '.join(Distribution.names())}")
    p.set_defaults(build=lambda a: Distribution.from_string(a.spec))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="randstream",
        description="Generate a stream of random samples from a chosen distribution",
    )

    # Output configuration
    parser.add_argument("-p", "--precision", type=int, default=None,
                        help="Number of digits after the decimal point (default 10)")
    parser.add_argument("-b", "--binary", dest="binary_format", choices=list(BINARY_FORMATS),
                        default=None, metavar="FORMAT",
                        help=f"Emit fixed-width binary values: {', '.join(BINARY_FORMATS)}")

    # Generation
    parser.add_argument("-s", "--seed", type=int, default=None, help="Seed for a reproducible stream")
    parser.add_argument("-n", "--count", type=int, default=None,
                        help="Number of samples to emit (default: unlimited)")

    # Post-processing
    parser.add_argument("-e", "--exp", dest="exponentiate", action="store_true", default=None,
                        help="Emit e**x instead of x (normal becomes log-normal)")
    parser.add_argument("--discard-below", type=float, default=None,
                        help="Redraw samples below this value")
    parser.add_argument("--discard-above", type=float, default=None,
                        help="Redraw samples above this value")
    parser.add_argument("-c", "--cumulative", action="store_true", default=None,
                        help="Emit the running sum of samples (random walk)")

    parser.add_argument("--config", help="Path to a JSON generator configuration")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report settings on stderr")

    subparsers = parser.add_subparsers(dest="distribution", metavar="DISTRIBUTION")
    _add_distribution_parsers(subparsers)
    return parser


def config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    """
    Merge the optional JSON configuration with command line flags.

    Flags given on the command line take precedence over file values.
    """
    settings: Dict[str, Any] = {}
    if args.config:
        settings = GeneratorConfig.from_file(args.config).to_dict()

    if args.distribution is not None:
        settings["distribution"] = args.build(args)
    elif "distribution" not in settings:
        raise ConfigurationError("No distribution given (choose a subcommand or use --config)")

    for key in ("precision", "binary_format", "seed", "count",
                "exponentiate", "discard_below", "discard_above", "cumulative"):
        value = getattr(args, key)
        if value is not None:
            settings[key] = value

    return GeneratorConfig.from_dict(settings)


def report(config: GeneratorConfig) -> None:
    print(f"📊 Distribution: {config.distribution.to_string()}", file=sys.stderr)
    print(f"🎲 Seed: {config.seed}", file=sys.stderr)
    output = config.binary_format or f"text, {config.precision} digits"
    print(f"💾 Output: {output}", file=sys.stderr)
    count = config.count if config.count is not None else "unlimited"
    print(f"🔢 Samples: {count}", file=sys.stderr)


def _silence_stdout() -> None:
    # Python flushes stdout again at exit; point it at devnull so a closed
    # pipe does not produce a second error
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def main(argv: Optional[List[str]] = None, stdout: Optional[BinaryIO] = None) -> int:
    """Main function to run the generator."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except (ConfigurationError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        if config.seed is None:
            config.seed = fresh_seed()
        report(config)

    stream = config.build_stream()
    encoder = config.build_encoder()
    sink = stdout if stdout is not None else sys.stdout.buffer

    try:
        with SampleWriter(sink) as writer:
            written = write_samples(stream, encoder, writer)
    except BrokenPipeError:
        if stdout is None:
            _silence_stdout()
        return 1
    except OSError as e:
        print(f"error: failed to write output: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    if args.verbose:
        print(f"✅ Wrote {written} samples", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
