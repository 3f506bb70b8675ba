import re

_ENDPOINT_REGEX = re.compile(r'^(?:(?:\[(\S*)\]|(\S*)):)?(\d+)$')


def parse_endpoint(endpt):
    """Split "[host:]port" into a (host, port) tuple.

    IPv6 hosts must be bracketed, e.g. "[::1]:8080". A missing host
    is returned as ''.
    """
    if isinstance(endpt, tuple):
        host, port = endpt
        return (host, int(port))
    m = _ENDPOINT_REGEX.match(str(endpt))
    if not m:
        raise ValueError('Invalid endpoint: %s' % endpt)
    return (m.group(1) or m.group(2) or '', int(m.group(3)))


def format_endpoint(pair):
    """Return "host:port" text for (host, port) tuple."""
    host, port = pair
    if ':' in host:
        return '[%s]:%d' % pair
    return '%s:%d' % pair
