"""
Command line interface of siftools.

::

    siftools sample heads.ipf head_l1.idf heads_sampled.ipf -s head -i
    siftools sample ipfs/ head_l1.idf sampled/ --filter "*.ipf" -s head
    siftools join measured.ipf modeled.ipf joined.ipf --key1 id --key2 id --interpolate

The exit status is 1 when the configuration is invalid or an input file
could not be processed, 0 otherwise.
"""

import argparse
import pathlib
import sys
from typing import List, Optional, Sequence

from siftools import __version__
from siftools.exceptions import ToolError
from siftools.formats import ipf
from siftools.join import JoinOptions, JoinType, join_point_timeseries
from siftools.logging import LoggerType, LogLevel, configure, logger
from siftools.sample import SampleOptions, run, run_batch
from siftools.util.path import check_input_file, check_output_file


def _observation_column(value: Optional[str]):
    if value is None:
        return None
    return int(value) if value.isdigit() else value


def _add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)",
    )
    parser.add_argument(
        "--logger",
        default="python",
        choices=[member.value for member in LoggerType],
        help="Logging framework (default: python)",
    )
    parser.add_argument(
        "--log-file",
        nargs="?",
        const="siftools.log",
        default=None,
        help=(
            "Also write the log to this file "
            "(default when given without a path: siftools.log)"
        ),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="siftools", description="Tools for IPF point files and IDF/ASC grids"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sample = subparsers.add_parser(
        "sample", help="Sample a grid at the points of IPF files"
    )
    sample.add_argument("input", help="IPF file, or directory with IPF files")
    sample.add_argument("grid", help="IDF or ASC file")
    sample.add_argument("output", help="Output IPF (or CSV) file, or directory")
    sample.add_argument(
        "--filter",
        default="*.ipf",
        help="Pattern of the input files when input is a directory (default: *.ipf)",
    )
    sample.add_argument(
        "-r", "--recursive", action="store_true", help="Search subdirectories of input"
    )
    sample.add_argument(
        "-c",
        dest="value_column",
        help="Name of the sampled value column (default: grid name)",
    )
    sample.add_argument(
        "-d",
        dest="decimal_count",
        type=int,
        default=2,
        help="Number of decimals (default: 2)",
    )
    sample.add_argument(
        "-e",
        dest="skip_outside_extent",
        action="store_true",
        help="Skip points outside the grid extent",
    )
    sample.add_argument(
        "-i", dest="interpolate", action="store_true", help="Interpolate bilinearly"
    )
    sample.add_argument(
        "-n",
        dest="skip_nodata",
        action="store_true",
        help="Skip points with NoData values",
    )
    sample.add_argument(
        "-o",
        dest="overwrite",
        action="store_true",
        help="Overwrite existing output files",
    )
    sample.add_argument(
        "-s",
        dest="observation_column",
        help=(
            "Name or number of the column with observed values; "
            "adds residuals and statistics"
        ),
    )
    sample.add_argument(
        "--stats", help="Statistics report (default: <output>_stats.csv)"
    )
    sample.add_argument("--prefix", default="", help="Prefix of the added column names")
    sample.add_argument("--csv", action="store_true", help="Write CSV instead of IPF")
    sample.add_argument(
        "--pvalues",
        type=float,
        nargs="+",
        default=[10.0, 50.0, 90.0],
        help="Percentiles of the statistics report (default: 10 50 90)",
    )
    sample.add_argument(
        "--nodata",
        type=float,
        default=-9999.0,
        help="NoData value of the output (default: -9999)",
    )
    _add_logging_arguments(sample)

    join = subparsers.add_parser("join", help="Join the time series of two IPF files")
    join.add_argument("ipf1", help="IPF file with associated time series")
    join.add_argument("ipf2", help="IPF file with the time series to join")
    join.add_argument("output", help="Output IPF file")
    join.add_argument(
        "--key1", required=True, help="Key column of ipf1, name or number"
    )
    join.add_argument(
        "--key2", required=True, help="Key column of ipf2, name or number"
    )
    join.add_argument(
        "--join",
        default="full",
        choices=[member.value for member in JoinType],
        help="Join type of the dates (default: full)",
    )
    join.add_argument("--start", help="Start of period, e.g. 20200101")
    join.add_argument("--end", help="End of period, e.g. 20201231")
    join.add_argument(
        "--interpolate",
        action="store_true",
        help="Interpolate ipf2 in the dates of ipf1",
    )
    join.add_argument(
        "--max-distance",
        type=float,
        default=None,
        help="Maximum distance in days between the dates to interpolate between",
    )
    join.add_argument(
        "-o",
        dest="overwrite",
        action="store_true",
        help="Overwrite existing output files",
    )
    _add_logging_arguments(join)
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    try:
        log_level = LogLevel.from_name(args.log_level)
    except ValueError as e:
        raise ToolError(str(e)) from e
    configure(
        LoggerType.from_name(args.logger),
        log_level,
        add_default_file_handler=args.log_file is not None,
        log_file=args.log_file or "siftools.log",
    )


def _sample(args: argparse.Namespace) -> List[str]:
    options = SampleOptions(
        interpolate=args.interpolate,
        skip_outside_extent=args.skip_outside_extent,
        skip_nodata=args.skip_nodata,
        decimal_count=args.decimal_count,
        nodata=args.nodata,
        value_column=args.value_column,
        prefix=args.prefix,
        pvalues=tuple(args.pvalues),
    )
    observation_column = _observation_column(args.observation_column)
    input_path = pathlib.Path(args.input)
    if input_path.is_dir():
        result = run_batch(
            input_path,
            args.filter,
            args.grid,
            args.output,
            observation_column,
            options,
            stats_path=args.stats,
            overwrite=args.overwrite,
            csv=args.csv,
            recursive=args.recursive,
        )
        warnings = result.warnings
        if result.failures:
            for path, message in result.failures.items():
                warnings.append(f"{path}: failed: {message}")
            raise _Failed(warnings)
        return warnings

    result = run(
        input_path,
        args.grid,
        args.output,
        observation_column,
        options,
        stats_path=args.stats,
        overwrite=args.overwrite,
        csv=args.csv,
    )
    return list(result.warnings)


def _join(args: argparse.Namespace) -> List[str]:
    try:
        options = JoinOptions(
            join_type=JoinType(args.join),
            period_start=args.start,
            period_end=args.end,
            max_interpolation_distance=args.max_distance,
            interpolate=args.interpolate,
        )
    except ValueError as e:
        raise ToolError(str(e)) from e
    path1 = check_input_file(args.ipf1, "IPF file 1")
    path2 = check_input_file(args.ipf2, "IPF file 2")
    output_path = check_output_file(args.output, args.overwrite)

    dataset1 = ipf.read(path1)
    dataset2 = ipf.read(path2)
    logger.info(f"Joining time series of {path2} to {path1}")
    joined = join_point_timeseries(
        dataset1,
        dataset2,
        _observation_column(args.key1),
        _observation_column(args.key2),
        options,
    )
    ipf.write(output_path, joined)
    logger.info(f"Written {len(joined)} points to {output_path}")
    return []


class _Failed(Exception):
    def __init__(self, warnings: List[str]):
        super().__init__("One or more input files could not be processed")
        self.warnings = warnings


def _summarize(warnings: Sequence[str]) -> None:
    if warnings:
        print(f"{len(warnings)} warning(s):", file=sys.stderr)
        for warning in warnings:
            print(f"  {warning}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        _configure_logging(args)
        match args.command:
            case "sample":
                warnings = _sample(args)
            case "join":
                warnings = _join(args)
            case _:
                parser.error(f"Unknown command: {args.command}")
    except _Failed as e:
        _summarize(e.warnings)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ToolError, ValueError, OSError) as e:
        logger.critical(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _summarize(warnings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
