"""flowmatch: encode typed flow match fields as ovs-ofctl match tokens."""

__version__ = '0.1.0'

# pylint: disable=wildcard-import

from flowmatch.api import *  # noqa: E402
