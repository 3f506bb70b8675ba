"""Logging configuration."""

import logging
import os

logger = logging.getLogger(__package__)

FLOWMATCHDEBUG = int(os.getenv('FLOWMATCHDEBUG', '0'))

if FLOWMATCHDEBUG > 0:  # pragma: no cover
    logging.basicConfig()
    logger.setLevel(logging.DEBUG)
    logger.debug('FLOWMATCHDEBUG=%d enabled', FLOWMATCHDEBUG)
