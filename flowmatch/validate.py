"""Address validators shared by match values.

Each validator returns the canonical literal for an input or raises a
subclass of MatchError.
"""

import ipaddress
import re

from flowmatch.exception import FormatError, ParseError
from flowmatch.fields import ETHERNET_ADDR_LEN

_HEX_PAIRS_REGEX = re.compile(r'^[0-9A-Fa-f]{2}(?:([:-])[0-9A-Fa-f]{2})?'
                              r'(?:\1[0-9A-Fa-f]{2})*$')
_HEX_QUADS_REGEX = re.compile(r'^[0-9A-Fa-f]{4}(?:\.[0-9A-Fa-f]{4})*$')
_PREFIX_REGEX = re.compile(r'^[0-9]{1,3}$')


def parse_ipv4_or_cidr(text):
    """Return canonical IPv4 address, or IPv4 CIDR block as given.

    IPv6 literals are rejected even when they embed an IPv4 address.
    """
    error = FormatError('%r is not a valid IPv4 address or IPv4 CIDR block' %
                        (text, ))
    addr = _parse_address_or_cidr(text, error)
    if addr.version != 4:
        raise error
    return text if '/' in text else str(addr)


def parse_ipv6_or_cidr(text):
    """Return canonical IPv6 address, or IPv6 CIDR block as given.

    Literals that also denote an IPv4 address (dotted quads and IPv4-mapped
    IPv6 addresses) are rejected.
    """
    error = FormatError('%r is not a valid IPv6 address or IPv6 CIDR block' %
                        (text, ))
    addr = _parse_address_or_cidr(text, error)
    if addr.version != 6 or addr.ipv4_mapped is not None:
        raise error
    return text if '/' in text else str(addr)


def _parse_address_or_cidr(text, error):
    """Return the ip_address part of `text`, or raise `error`.

    Zone ids (`fe80::1%eth0`) and netmask prefixes are rejected.
    """
    if not isinstance(text, str) or '%' in text:
        raise error
    try:
        if '/' in text:
            # Prefix length only; netmask notation is not accepted.
            if not _PREFIX_REGEX.match(text.partition('/')[2]):
                raise error
            # ip_interface accepts host bits to the right of the prefix.
            return ipaddress.ip_interface(text).ip
        return ipaddress.ip_address(text)
    except ValueError:
        raise error from None


def parse_hardware_address(addr, *, what='hardware address'):
    """Return 6-octet hardware address as lower-case colon separated hex.

    `addr` may be bytes or text in colon, hyphen or dotted-quad notation.
    Raises FormatError when the address does not have exactly 6 octets, and
    ParseError when the text is not a hardware address at all.
    """
    octets = _hardware_address_octets(addr, what)
    if len(octets) != ETHERNET_ADDR_LEN:
        raise FormatError('%s must be %d octets, but got %d' %
                          (what, ETHERNET_ADDR_LEN, len(octets)))
    return ':'.join('%02x' % octet for octet in octets)


def _hardware_address_octets(addr, what):
    if isinstance(addr, (bytes, bytearray)):
        return bytes(addr)
    if not isinstance(addr, str):
        raise ParseError('%s must be str or bytes: %r' % (what, addr))
    if _HEX_PAIRS_REGEX.match(addr):
        return bytes.fromhex(re.sub('[:-]', '', addr))
    if _HEX_QUADS_REGEX.match(addr):
        return bytes.fromhex(addr.replace('.', ''))
    raise ParseError('invalid %s: %r' % (what, addr))
