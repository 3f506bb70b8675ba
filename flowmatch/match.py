"""Implements the closed family of match values.

Every match value is immutable and supports two operations:

    encode()    Return the `key=value[/mask]` token, or raise MatchError.
    describe()  Return a `flowmatch.factory(args...)` expression that
                rebuilds the value; used for debugging and code generation.

Each class carries a `polarity` attribute stating what a 1 bit in its mask
means (see flowmatch.fields.Polarity). Transport ports use WILDCARD masks
while registers, VLAN TCI, conntrack marks and tunnel ids use MATCH masks.
The two are kept apart on purpose; do not share mask handling between them.
"""

from flowmatch.exception import FormatError, RangeError
from flowmatch.fields import (Field, Polarity, Side, VLAN_NONE, VLAN_VID_MAX,
                              reg_key)
from flowmatch.portrange import PORT_WIDTH, decompose
from flowmatch.validate import (parse_hardware_address, parse_ipv4_or_cidr,
                                parse_ipv6_or_cidr)
from flowmatch.log import logger

_U8 = 8
_U16 = 16
_U32 = 32
_U64 = 64

_REG_MAX = 15


class _Value:
    """Immutable value object with equality over its slots."""

    __slots__ = ()

    def __init__(self, *args):
        assert len(args) == len(self.__slots__), args
        for name, value in zip(self.__slots__, args):
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError('%s is immutable' % type(self).__name__)

    def __delattr__(self, name):
        raise AttributeError('%s is immutable' % type(self).__name__)

    def _values(self):
        return tuple(getattr(self, name) for name in self.__slots__)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._values() == other._values()

    def __hash__(self):
        return hash((type(self), self._values()))

    def __repr__(self):
        return self.describe()

    def describe(self):
        """Return expression that reconstructs this value."""
        raise NotImplementedError


class Match(_Value):
    """Base class of single-token match values."""

    __slots__ = ()
    polarity = Polarity.NONE

    def encode(self):
        """Return `key=value` text for this match."""
        raise NotImplementedError


def _is_uint(value):
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _check_uint(name, value, bits):
    """Raise RangeError unless `value` is an unsigned `bits`-bit integer."""
    if not _is_uint(value) or value >= (1 << bits):
        raise RangeError('%s must be between 0 and %d, but got %r' %
                         (name, (1 << bits) - 1, value))


def _fmt(fmt, value):
    """Format `value` with `fmt`, or as repr if it is not an unsigned int."""
    if _is_uint(value):
        return fmt % value
    return repr(value)


def _masked(mask):
    return mask != 0


def _token(key, value):
    return '%s=%s' % (key, value)


def _join_flags(name, flags):
    if not all(isinstance(flag, str) for flag in flags):
        raise FormatError('%s must be a sequence of strings, but got %r' %
                          (name, flags))
    return ''.join(flags)


def _side_name(side, source_name, destination_name):
    if Side(side) is Side.SOURCE:
        return source_name
    return destination_name


class DataLinkMatch(Match):
    """Ethernet source or destination address, with optional wildcard.

    The address is text such as "aa:bb:cc:dd:ee:ff" or
    "aa:bb:cc:dd:ee:ff/ff:ff:ff:00:00:00".
    """

    __slots__ = ('side', 'addr')

    @property
    def key(self):
        return _side_name(self.side, Field.DL_SRC, Field.DL_DST)

    def encode(self):
        if not isinstance(self.addr, str):
            return _token(self.key, parse_hardware_address(self.addr))
        addr, sep, wildcard = self.addr.partition('/')
        value = parse_hardware_address(addr)
        if sep:
            value += '/' + parse_hardware_address(
                wildcard, what='wildcard mask')
        return _token(self.key, value)

    def describe(self):
        func = _side_name(self.side, 'data_link_source',
                          'data_link_destination')
        return 'flowmatch.%s(%r)' % (func, self.addr)


class DataLinkTypeMatch(Match):
    """EtherType match."""

    __slots__ = ('ether_type', )

    def encode(self):
        _check_uint('ether_type', self.ether_type, _U16)
        return _token(Field.DL_TYPE, '0x%04x' % self.ether_type)

    def describe(self):
        return 'flowmatch.data_link_type(%s)' % _fmt('0x%04x', self.ether_type)


class DataLinkVLANMatch(Match):
    """VLAN id match; VLAN_NONE matches packets without a VLAN tag."""

    __slots__ = ('vid', )

    def encode(self):
        if self.vid == VLAN_NONE:
            return _token(Field.DL_VLAN, '0x%04x' % VLAN_NONE)
        if not _is_uint(self.vid) or self.vid > VLAN_VID_MAX:
            raise RangeError('VLAN VID must be between 0 and %d, but got %r' %
                             (VLAN_VID_MAX, self.vid))
        return _token(Field.DL_VLAN, '%d' % self.vid)

    def describe(self):
        if self.vid == VLAN_NONE:
            return 'flowmatch.data_link_vlan(flowmatch.VLAN_NONE)'
        return 'flowmatch.data_link_vlan(%s)' % _fmt('%d', self.vid)


class VLANTCIMatch(Match):
    """VLAN tag control information with optional mask.

    A zero mask means no mask was given and the bare TCI is written.
    """

    __slots__ = ('tci', 'mask')
    polarity = Polarity.MATCH

    def encode(self):
        _check_uint('tci', self.tci, _U16)
        _check_uint('mask', self.mask, _U16)
        if self.mask != 0:
            return _token(Field.VLAN_TCI,
                          '0x%04x/0x%04x' % (self.tci, self.mask))
        return _token(Field.VLAN_TCI, '0x%04x' % self.tci)

    def describe(self):
        return 'flowmatch.vlan_tci(%s, %s)' % (_fmt('0x%04x', self.tci),
                                              _fmt('0x%04x', self.mask))


class NetworkMatch(Match):
    """IPv4 source or destination address or CIDR block."""

    __slots__ = ('side', 'ip')

    @property
    def key(self):
        return _side_name(self.side, Field.NW_SRC, Field.NW_DST)

    def encode(self):
        return _token(self.key, parse_ipv4_or_cidr(self.ip))

    def describe(self):
        func = _side_name(self.side, 'network_source', 'network_destination')
        return 'flowmatch.%s(%r)' % (func, self.ip)


class IPv6Match(Match):
    """IPv6 source or destination address or CIDR block."""

    __slots__ = ('side', 'ip')

    @property
    def key(self):
        return _side_name(self.side, Field.IPV6_SRC, Field.IPV6_DST)

    def encode(self):
        return _token(self.key, parse_ipv6_or_cidr(self.ip))

    def describe(self):
        func = _side_name(self.side, 'ipv6_source', 'ipv6_destination')
        return 'flowmatch.%s(%r)' % (func, self.ip)


class NetworkProtocolMatch(Match):
    """IP or IPv6 protocol number, e.g. 6 for TCP."""

    __slots__ = ('num', )

    def encode(self):
        _check_uint('protocol', self.num, _U8)
        return _token(Field.NW_PROTO, '%d' % self.num)

    def describe(self):
        return 'flowmatch.network_protocol(%s)' % _fmt('%d', self.num)


class ICMPTypeMatch(Match):
    __slots__ = ('icmp_type', )

    def encode(self):
        _check_uint('icmp_type', self.icmp_type, _U8)
        return _token(Field.ICMP_TYPE, '%d' % self.icmp_type)

    def describe(self):
        return 'flowmatch.icmp_type(%s)' % _fmt('%d', self.icmp_type)


class ARPHardwareAddressMatch(Match):
    """ARP source (SHA) or target (THA) hardware address."""

    __slots__ = ('side', 'addr')

    @property
    def key(self):
        return _side_name(self.side, Field.ARP_SHA, Field.ARP_THA)

    def encode(self):
        return _token(self.key, parse_hardware_address(self.addr))

    def describe(self):
        func = _side_name(self.side, 'arp_source_hardware_address',
                          'arp_target_hardware_address')
        return 'flowmatch.%s(%r)' % (func, self.addr)


class ARPProtocolAddressMatch(Match):
    """ARP source (SPA) or target (TPA) IPv4 address or CIDR block."""

    __slots__ = ('side', 'ip')

    @property
    def key(self):
        return _side_name(self.side, Field.ARP_SPA, Field.ARP_TPA)

    def encode(self):
        return _token(self.key, parse_ipv4_or_cidr(self.ip))

    def describe(self):
        func = _side_name(self.side, 'arp_source_protocol_address',
                          'arp_target_protocol_address')
        return 'flowmatch.%s(%r)' % (func, self.ip)


class NeighborDiscoveryTargetMatch(Match):
    """IPv6 neighbor discovery target address or CIDR block."""

    __slots__ = ('ip', )

    def encode(self):
        return _token(Field.ND_TARGET, parse_ipv6_or_cidr(self.ip))

    def describe(self):
        return 'flowmatch.neighbor_discovery_target(%r)' % (self.ip, )


class NeighborDiscoveryLinkLayerMatch(Match):
    """IPv6 neighbor discovery source or target link-layer address."""

    __slots__ = ('side', 'addr')

    @property
    def key(self):
        return _side_name(self.side, Field.ND_SLL, Field.ND_TLL)

    def encode(self):
        return _token(self.key, parse_hardware_address(self.addr))

    def describe(self):
        func = _side_name(self.side, 'neighbor_discovery_source_link_layer',
                          'neighbor_discovery_target_link_layer')
        return 'flowmatch.%s(%r)' % (func, self.addr)


class TransportPortMatch(Match):
    """TCP/UDP source or destination port with optional wildcard mask.

    Mask bits set to 1 are don't-care bits; a zero mask is an exact match.
    """

    __slots__ = ('side', 'port', 'mask')
    polarity = Polarity.WILDCARD

    @property
    def key(self):
        return _side_name(self.side, Field.TP_SRC, Field.TP_DST)

    def encode(self):
        _check_uint('port', self.port, _U16)
        _check_uint('mask', self.mask, _U16)
        if self.mask == 0:
            return _token(self.key, '%d' % self.port)
        return _token(self.key, '0x%04x/0x%04x' % (self.port, self.mask))

    def describe(self):
        if _masked(self.mask):
            func = _side_name(self.side, 'transport_source_masked_port',
                              'transport_destination_masked_port')
            return 'flowmatch.%s(%s, %s)' % (func, _fmt('%#x', self.port),
                                             _fmt('%#x', self.mask))
        func = _side_name(self.side, 'transport_source_port',
                          'transport_destination_port')
        return 'flowmatch.%s(%s)' % (func, _fmt('%d', self.port))


class TransportPortRange(_Value):
    """Inclusive range of TCP/UDP ports.

    A range is not a single token; `masked_ports()` expands it into
    TransportPortMatch values, each one an alternative match.
    """

    __slots__ = ('side', 'start', 'end')
    polarity = Polarity.WILDCARD

    def masked_ports(self):
        """Return list of masked port matches covering the range."""
        blocks = decompose(self.start, self.end, PORT_WIDTH)
        logger.debug('%s: %d masked ports', self.describe(), len(blocks))
        return [
            TransportPortMatch(self.side, block.value, block.mask)
            for block in blocks
        ]

    def encode(self):
        """Return list of tokens, one per masked port."""
        return [port.encode() for port in self.masked_ports()]

    def describe(self):
        func = _side_name(self.side, 'transport_source_port_range',
                          'transport_destination_port_range')
        return 'flowmatch.%s(%s, %s)' % (func, _fmt('%d', self.start),
                                         _fmt('%d', self.end))


class ConnectionTrackingMarkMatch(Match):
    """Conntrack mark with optional mask; a zero mask writes the bare mark."""

    __slots__ = ('mark', 'mask')
    polarity = Polarity.MATCH

    def encode(self):
        _check_uint('mark', self.mark, _U32)
        _check_uint('mask', self.mask, _U32)
        if self.mask != 0:
            return _token(Field.CT_MARK,
                          '0x%08x/0x%08x' % (self.mark, self.mask))
        return _token(Field.CT_MARK, '0x%08x' % self.mark)

    def describe(self):
        return 'flowmatch.connection_tracking_mark(%s, %s)' % (
            _fmt('0x%08x', self.mark), _fmt('0x%08x', self.mask))


class ConnectionTrackingZoneMatch(Match):
    __slots__ = ('zone', )

    def encode(self):
        _check_uint('zone', self.zone, _U16)
        return _token(Field.CT_ZONE, '%d' % self.zone)

    def describe(self):
        return 'flowmatch.connection_tracking_zone(%s)' % _fmt('%d', self.zone)


class ConnectionTrackingStateMatch(Match):
    """Conntrack state flags, e.g. ('+trk', '-new').

    Flags are written in the order given; they are not checked.
    """

    __slots__ = ('states', )

    def encode(self):
        return _token(Field.CT_STATE, _join_flags('states', self.states))

    def describe(self):
        args = ', '.join(repr(state) for state in self.states)
        return 'flowmatch.connection_tracking_state(%s)' % args


class TCPFlagsMatch(Match):
    """TCP flags, e.g. ('+syn', '-ack'), written in the order given."""

    __slots__ = ('flags', )

    def encode(self):
        return _token(Field.TCP_FLAGS, _join_flags('flags', self.flags))

    def describe(self):
        args = ', '.join(repr(flag) for flag in self.flags)
        return 'flowmatch.tcp_flags(%s)' % args


class TunnelIDMatch(Match):
    """Tunnel id with optional mask; a zero mask writes the bare id."""

    __slots__ = ('tun_id', 'mask')
    polarity = Polarity.MATCH

    def encode(self):
        _check_uint('tun_id', self.tun_id, _U64)
        _check_uint('mask', self.mask, _U64)
        if self.mask == 0:
            return _token(Field.TUN_ID, '%#x' % self.tun_id)
        return _token(Field.TUN_ID, '%#x/%#x' % (self.tun_id, self.mask))

    def describe(self):
        if _masked(self.mask):
            return 'flowmatch.tunnel_id_with_mask(%s, %s)' % (
                _fmt('%#x', self.tun_id), _fmt('%#x', self.mask))
        return 'flowmatch.tunnel_id(%s)' % _fmt('%#x', self.tun_id)


class ConjunctionIDMatch(Match):
    __slots__ = ('conj_id', )

    def encode(self):
        _check_uint('conj_id', self.conj_id, _U32)
        return _token(Field.CONJ_ID, '%d' % self.conj_id)

    def describe(self):
        return 'flowmatch.conjunction_id(%s)' % _fmt('%d', self.conj_id)


class RegMatch(Match):
    """Register field `reg<num>` with must-match mask.

    A zero mask leaves the register unconstrained and encodes to ''. An
    all-ones mask is an exact match written without a suffix.
    """

    __slots__ = ('num', 'value', 'mask')
    polarity = Polarity.MATCH

    def encode(self):
        if not _is_uint(self.num) or self.num > _REG_MAX:
            raise RangeError('register must be between 0 and %d, but got %r'
                             % (_REG_MAX, self.num))
        _check_uint('value', self.value, _U32)
        _check_uint('mask', self.mask, _U32)
        key = reg_key(self.num)
        if self.mask == 0:
            return ''
        if self.mask == (1 << _U32) - 1:
            if self.value == 0:
                return _token(key, '0')
            return _token(key, '%#x' % self.value)
        return _token(key, '%#x/%#x' % (self.value, self.mask))

    def describe(self):
        return 'flowmatch.reg_match(%s, %s, %s)' % (
            _fmt('%d', self.num), _fmt('%#x', self.value),
            _fmt('%#x', self.mask))


MATCH_TYPES = (DataLinkMatch, DataLinkTypeMatch, DataLinkVLANMatch,
               VLANTCIMatch, NetworkMatch, IPv6Match, NetworkProtocolMatch,
               ICMPTypeMatch, ARPHardwareAddressMatch, ARPProtocolAddressMatch,
               NeighborDiscoveryTargetMatch, NeighborDiscoveryLinkLayerMatch,
               TransportPortMatch, ConnectionTrackingMarkMatch,
               ConnectionTrackingZoneMatch, ConnectionTrackingStateMatch,
               TCPFlagsMatch, TunnelIDMatch, ConjunctionIDMatch, RegMatch)
