"""Command line arguments.

Environment Variables:
    FLOWMATCH_LOGLEVEL
    FLOWMATCH_HTTP_ENDPOINT

"""

import argparse
import os

from .configuration import Configuration
from .endpoint import parse_endpoint
from .logging import EXT_STDERR

DEFAULT_LOGFILE = EXT_STDERR
DEFAULT_LOGLEVEL = 'info'


class _ArgParserTest(argparse.ArgumentParser):
    """ArgumentParser subclass that does not exit.
    """

    def exit(self, status=0, message=None):
        raise RuntimeError('_ArgParserTest: status=%d, message="%s"' %
                           (status, message))


def common_args(*, under_test=False):
    """Construct default ArgumentParser parent.

    Args:
        under_test (Boolean): When true, create an argument parser subclass
            that raises an exception instead of calling exit.
    """
    parser_class = _ArgParserTest if under_test else argparse.ArgumentParser
    parser = parser_class(add_help=False)

    log_group = parser.add_argument_group('log arguments')
    log_group.add_argument(
        '--loglevel',
        metavar='LEVEL',
        help='log level',
        default=os.getenv('FLOWMATCH_LOGLEVEL', DEFAULT_LOGLEVEL))
    log_group.add_argument(
        '--logfile', metavar='FILE', help='log file', default=DEFAULT_LOGFILE)

    run_group = parser.add_argument_group('run arguments')
    run_group.add_argument(
        '--http-endpoint',
        type=endpoint_type(),
        metavar='[HOST:]PORT',
        help='run HTTP service on endpoint',
        default=os.getenv('FLOWMATCH_HTTP_ENDPOINT', ''))
    run_group.add_argument(
        '--shell', action='store_true', help='run interactive shell')
    run_group.add_argument(
        '--file',
        type=file_lines_type(),
        metavar='FILE',
        help='encode expressions listed in file, one per line',
        default=[])

    return parser


def parse_args(argv=None, *, under_test=False):
    """Parse command line arguments into a Configuration."""
    parser_class = _ArgParserTest if under_test else argparse.ArgumentParser
    parser = parser_class(
        prog='flowmatch',
        description='Encode flow match fields as ovs-ofctl match tokens',
        parents=[common_args(under_test=under_test)])
    parser.add_argument(
        'exprs',
        metavar='EXPR',
        nargs='*',
        help='match expression, e.g. "transport_source_port_range 1 6"')
    args = parser.parse_args(argv)
    return Configuration(
        loglevel=args.loglevel,
        logfile=args.logfile,
        http_endpoint=args.http_endpoint,
        shell=args.shell,
        exprs=args.file + args.exprs)


def endpoint_type(name='endpoint'):
    """Return validated "[host:]port" text."""

    def _parse(value):
        if value:
            parse_endpoint(value)
        return value

    _parse.__name__ = name
    return _parse


def file_lines_type(name='file_lines_type', *, encoding='utf-8'):
    """Return non-blank, non-comment lines of a file."""

    def _parse(value):
        with open(value, encoding=encoding) as afile:
            lines = [line.strip() for line in afile]
        return [line for line in lines if line and not line.startswith('#')]

    _parse.__name__ = name
    return _parse
