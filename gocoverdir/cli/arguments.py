import argparse
from typing import List, Optional

from gocoverdir.config.run_config import DEFAULT_IGNORE_DIRS, default_coverprofile
from gocoverdir.utils.duration import parse_duration


def duration_argument(value: str) -> float:
    """
    Argument type for Go duration strings.

    Args:
        value: Duration such as "3s" or "1m30s"

    Returns:
        The duration in seconds

    Raises:
        argparse.ArgumentTypeError: If the value is not a valid duration
    """
    try:
        return parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gocoverdir',
        description='Run go test -cover in every Go directory of a tree and combine the cover profiles',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # go test pass-through arguments
    parser.add_argument(
        '-covermode', '--covermode',
        choices=['set', 'count', 'atomic'],
        default='set',
        help="Same as -covermode in 'go test'"
    )
    parser.add_argument(
        '-cpu', '--cpu',
        type=int,
        default=-1,
        help="Same as -cpu in 'go test'; negative values are not passed on"
    )
    parser.add_argument(
        '-race', '--race',
        action='store_true',
        default=False,
        help="Same as -race in 'go test'"
    )
    parser.add_argument(
        '-timeout', '--timeout',
        type=duration_argument,
        default='3s',
        help="Same as -timeout in 'go test'"
    )
    parser.add_argument(
        '-coverprofile', '--coverprofile',
        type=str,
        default=str(default_coverprofile()),
        help="Same as -coverprofile in 'go test', but will be a combined cover profile"
    )

    # Traversal arguments
    parser.add_argument(
        '-depth', '--depth',
        type=int,
        default=10,
        help='Directory depth to search'
    )
    parser.add_argument(
        '-ignoredirs', '--ignoredirs',
        type=str,
        default=DEFAULT_IGNORE_DIRS,
        help='Colon separated list of directory names to ignore'
    )

    # Logging arguments
    parser.add_argument(
        '-logfile', '--logfile',
        type=str,
        default='-',
        help="Logfile to print debug output to. '-' is stderr; empty means be silent "
             "unless there is an error, then dump to stderr"
    )
    parser.add_argument(
        '-log-level', '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='INFO',
        help='Set the logging level'
    )

    # Coverage reporting arguments
    parser.add_argument(
        '-printcoverage', '--printcoverage',
        action='store_true',
        default=False,
        help='Print coverage amount to stdout'
    )
    parser.add_argument(
        '-requiredcoverage', '--requiredcoverage',
        type=float,
        default=0.0,
        help='Fail if coverage is below this percentage'
    )
    parser.add_argument(
        '-htmlcoverage', '--htmlcoverage',
        action='store_true',
        default=False,
        help='Generate an HTML coverage report in the temp directory'
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Value checks beyond the argument types (e.g. the coverage range) happen
    when the run configuration is built.

    Args:
        argv: Arguments to parse; defaults to sys.argv[1:]

    Returns:
        Parsed arguments namespace
    """
    return build_parser().parse_args(argv)
