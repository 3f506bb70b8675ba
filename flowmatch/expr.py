"""Parse textual match expressions such as "transport_source_port 80".

An expression is a factory name from the public API followed by its
arguments, split using shell quoting rules. Arguments that parse as
integers (with base prefix detection) are passed as ints; `VLAN_NONE` is
accepted by name; anything else is passed as a string.
"""

import inspect
import shlex

from flowmatch import api
from flowmatch.exception import ExpressionError
from flowmatch.fields import VLAN_NONE
from flowmatch.log import logger

_HELPERS = {
    'set_state', 'unset_state', 'set_tcp_flag', 'unset_tcp_flag', 'decompose'
}

FACTORIES = {
    name: getattr(api, name)
    for name in api.__all__ if name.islower() and name not in _HELPERS
}

_CONSTANTS = {'VLAN_NONE': VLAN_NONE, 'flowmatch.VLAN_NONE': VLAN_NONE}


def parse_expr(text):
    """Return the match value described by `text`."""
    try:
        words = shlex.split(text)
    except ValueError as ex:
        raise ExpressionError('%s: %r' % (ex, text)) from None
    if not words:
        raise ExpressionError('empty match expression')

    name, args = words[0], [_convert_arg(arg) for arg in words[1:]]
    func = FACTORIES.get(name)
    if func is None:
        raise ExpressionError('unknown match: %s' % name)
    try:
        inspect.signature(func).bind(*args)
    except TypeError as ex:
        raise ExpressionError('%s: %s' % (name, ex)) from None
    return func(*args)


def encode_expr(text):
    """Return list of tokens for the match described by `text`.

    Port ranges expand to one token per masked port. A register match with
    a zero mask produces no tokens.
    """
    value = parse_expr(text)
    if isinstance(value, api.TransportPortRange):
        tokens = value.encode()
    else:
        tokens = [value.encode()]
    logger.debug('encode_expr %r -> %r', text, tokens)
    return [token for token in tokens if token]


def _convert_arg(arg):
    if arg in _CONSTANTS:
        return _CONSTANTS[arg]
    try:
        return int(arg, 0)
    except ValueError:
        return arg
