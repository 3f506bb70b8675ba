"""Configuration object for the flowmatch command line tools."""

from typing import Sequence  # pylint: disable=unused-import

from flowmatch.logging import EXT_STDERR


class Configuration:
    """Stores flowmatch settings.

    Attributes:
        loglevel (str): Log level name. Default is 'info'.
        logfile (str): Log file path. Default is stderr.
        http_endpoint (str): "[host:]port" for the HTTP service. Default
            is '' (no service).
        shell (bool): Run the interactive shell. Default is False.
        exprs (Sequence[str]): Match expressions to encode. Default is ().

    """

    loglevel = 'info'  # type: str
    logfile = EXT_STDERR  # type: str
    http_endpoint = ''  # type: str
    shell = False  # type: bool
    exprs = ()  # type: Sequence[str]

    def __init__(self, **kwds):
        """Initialize settings by overriding defaults."""
        assert all(hasattr(self, key) for key in kwds), kwds
        self.__dict__.update(kwds)
