"""slowlog-convert: turn a CSV slow-log export into NDJSON for replay."""

import logging
import sys
from argparse import ArgumentParser

import yaml

from slowlog_converter import __version__
from slowlog_converter.config import VALID_LOG_LEVELS, load_config
from slowlog_converter.converter import convert_file
from slowlog_converter.errors import InputError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser.

    Every option defaults to None so that unset flags do not mask values
    from the config file or environment.
    """
    parser = ArgumentParser(
        prog="slowlog-convert",
        description="Convert a CSV slow-log export into newline-delimited JSON.",
    )
    parser.add_argument(
        "--slow-in",
        dest="input_path",
        metavar="PATH",
        help="Path to the CSV slow-log export",
    )
    parser.add_argument(
        "--slow-out",
        dest="output_path",
        metavar="PATH",
        help="Path of the NDJSON file to write",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="YAML config file (default: $SLOWLOG_CONFIG)",
    )
    parser.add_argument(
        "--encoding",
        help="Text encoding of the CSV file (default: utf-8)",
    )
    parser.add_argument(
        "--delimiter",
        help="CSV field delimiter (default: ',')",
    )
    parser.add_argument(
        "--min-fields",
        type=int,
        help="Minimum number of fields per row (default: 13)",
    )
    parser.add_argument(
        "--stats-file",
        metavar="PATH",
        help="Also write run statistics as JSON to this path",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=VALID_LOG_LEVELS,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = vars(args).copy()
    config_path = overrides.pop("config")
    try:
        config = load_config(config_path, overrides)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: invalid configuration: {exc}", file=sys.stderr)
        return 2

    if not config.input_path or not config.output_path:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: both --slow-in and --slow-out are required",
              file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        stats = convert_file(config)
    except InputError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("Error creating output file %s: %s", config.output_path, exc)
        return 1

    if config.stats_file:
        try:
            stats.save(config.stats_file)
        except OSError as exc:
            logger.error("Failed to write stats file %s: %s", config.stats_file, exc)
            return 1
        logger.info("Stats written to %s", config.stats_file)

    return 0

