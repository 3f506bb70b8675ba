"""Public API."""

from typing import Union

from .exception import (MatchError, FormatError, RangeError, ParseError,
                        ExpressionError)
from .fields import (CTState, TCPFlag, VLAN_NONE, Side, set_state,
                     unset_state, set_tcp_flag, unset_tcp_flag)
from .match import (
    Match, DataLinkMatch, DataLinkTypeMatch, DataLinkVLANMatch, VLANTCIMatch,
    NetworkMatch, IPv6Match, NetworkProtocolMatch, ICMPTypeMatch,
    ARPHardwareAddressMatch, ARPProtocolAddressMatch,
    NeighborDiscoveryTargetMatch, NeighborDiscoveryLinkLayerMatch,
    TransportPortMatch, TransportPortRange, ConnectionTrackingMarkMatch,
    ConnectionTrackingZoneMatch, ConnectionTrackingStateMatch, TCPFlagsMatch,
    TunnelIDMatch, ConjunctionIDMatch, RegMatch)
from .portrange import Block, PortRange, decompose

__all__ = (
    'data_link_source', 'data_link_destination', 'data_link_type',
    'data_link_vlan', 'vlan_tci', 'network_source', 'network_destination',
    'ipv6_source', 'ipv6_destination', 'network_protocol', 'icmp_type',
    'arp_source_hardware_address', 'arp_target_hardware_address',
    'arp_source_protocol_address', 'arp_target_protocol_address',
    'neighbor_discovery_target', 'neighbor_discovery_source_link_layer',
    'neighbor_discovery_target_link_layer', 'transport_source_port',
    'transport_destination_port', 'transport_source_masked_port',
    'transport_destination_masked_port', 'transport_source_port_range',
    'transport_destination_port_range', 'connection_tracking_mark',
    'connection_tracking_zone', 'connection_tracking_state', 'tcp_flags',
    'tunnel_id', 'tunnel_id_with_mask', 'conjunction_id', 'reg_match',
    'set_state', 'unset_state', 'set_tcp_flag', 'unset_tcp_flag', 'decompose',
    'Block', 'PortRange', 'Match', 'TransportPortRange', 'CTState', 'TCPFlag',
    'VLAN_NONE', 'MatchError', 'FormatError', 'RangeError', 'ParseError',
    'ExpressionError')

HardwareAddr = Union[str, bytes]


def data_link_source(addr: str) -> Match:
    """Match Ethernet source address with optional "/wildcard" mask."""
    return DataLinkMatch(Side.SOURCE, addr)


def data_link_destination(addr: str) -> Match:
    """Match Ethernet destination address with optional "/wildcard" mask."""
    return DataLinkMatch(Side.DESTINATION, addr)


def data_link_type(ether_type: int) -> Match:
    """Match EtherType, e.g. 0x0800."""
    return DataLinkTypeMatch(ether_type)


def data_link_vlan(vid: int) -> Match:
    """Match VLAN id `vid`, or untagged packets if `vid` is VLAN_NONE."""
    return DataLinkVLANMatch(vid)


def vlan_tci(tci: int, mask: int = 0) -> Match:
    """Match VLAN tag control information, with optional mask."""
    return VLANTCIMatch(tci, mask)


def network_source(ip: str) -> Match:
    """Match IPv4 source address or IPv4 CIDR block."""
    return NetworkMatch(Side.SOURCE, ip)


def network_destination(ip: str) -> Match:
    """Match IPv4 destination address or IPv4 CIDR block."""
    return NetworkMatch(Side.DESTINATION, ip)


def ipv6_source(ip: str) -> Match:
    """Match IPv6 source address or IPv6 CIDR block."""
    return IPv6Match(Side.SOURCE, ip)


def ipv6_destination(ip: str) -> Match:
    """Match IPv6 destination address or IPv6 CIDR block."""
    return IPv6Match(Side.DESTINATION, ip)


def network_protocol(num: int) -> Match:
    """Match IP or IPv6 protocol number.

    For example, 1 matches ICMP when the flow's protocol is IPv4, 58
    matches ICMPv6 when it is IPv6.
    """
    return NetworkProtocolMatch(num)


def icmp_type(typ: int) -> Match:
    """Match ICMP type."""
    return ICMPTypeMatch(typ)


def arp_source_hardware_address(addr: HardwareAddr) -> Match:
    """Match ARP source hardware address (SHA)."""
    return ARPHardwareAddressMatch(Side.SOURCE, addr)


def arp_target_hardware_address(addr: HardwareAddr) -> Match:
    """Match ARP target hardware address (THA)."""
    return ARPHardwareAddressMatch(Side.DESTINATION, addr)


def arp_source_protocol_address(ip: str) -> Match:
    """Match ARP source protocol address (SPA), IPv4 address or CIDR."""
    return ARPProtocolAddressMatch(Side.SOURCE, ip)


def arp_target_protocol_address(ip: str) -> Match:
    """Match ARP target protocol address (TPA), IPv4 address or CIDR."""
    return ARPProtocolAddressMatch(Side.DESTINATION, ip)


def neighbor_discovery_target(ip: str) -> Match:
    """Match IPv6 neighbor discovery target address or CIDR block."""
    return NeighborDiscoveryTargetMatch(ip)


def neighbor_discovery_source_link_layer(addr: HardwareAddr) -> Match:
    """Match IPv6 neighbor solicitation source link-layer address."""
    return NeighborDiscoveryLinkLayerMatch(Side.SOURCE, addr)


def neighbor_discovery_target_link_layer(addr: HardwareAddr) -> Match:
    """Match IPv6 neighbor advertisement target link-layer address."""
    return NeighborDiscoveryLinkLayerMatch(Side.DESTINATION, addr)


def transport_source_port(port: int) -> Match:
    """Match TCP/UDP source port exactly."""
    return TransportPortMatch(Side.SOURCE, port, 0)


def transport_destination_port(port: int) -> Match:
    """Match TCP/UDP destination port exactly."""
    return TransportPortMatch(Side.DESTINATION, port, 0)


def transport_source_masked_port(port: int, mask: int) -> Match:
    """Match TCP/UDP source port; 1 bits in `mask` are don't-care."""
    return TransportPortMatch(Side.SOURCE, port, mask)


def transport_destination_masked_port(port: int, mask: int) -> Match:
    """Match TCP/UDP destination port; 1 bits in `mask` are don't-care."""
    return TransportPortMatch(Side.DESTINATION, port, mask)


def transport_source_port_range(start: int, end: int) -> TransportPortRange:
    """Return inclusive source port range; see `masked_ports()`."""
    return TransportPortRange(Side.SOURCE, start, end)


def transport_destination_port_range(start: int,
                                     end: int) -> TransportPortRange:
    """Return inclusive destination port range; see `masked_ports()`."""
    return TransportPortRange(Side.DESTINATION, start, end)


def connection_tracking_mark(mark: int, mask: int = 0) -> Match:
    """Match conntrack mark, with optional mask."""
    return ConnectionTrackingMarkMatch(mark, mask)


def connection_tracking_zone(zone: int) -> Match:
    """Match conntrack zone."""
    return ConnectionTrackingZoneMatch(zone)


def connection_tracking_state(*states: str) -> Match:
    """Match conntrack state.

    Use `set_state` and `unset_state` to build the arguments:

        connection_tracking_state(set_state(CTState.TRACKED),
                                  unset_state(CTState.NEW))
    """
    return ConnectionTrackingStateMatch(tuple(states))


def tcp_flags(*flags: str) -> Match:
    """Match TCP flags built with `set_tcp_flag` and `unset_tcp_flag`."""
    return TCPFlagsMatch(tuple(flags))


def tunnel_id(tun_id: int) -> Match:
    """Match tunnel id exactly."""
    return TunnelIDMatch(tun_id, 0)


def tunnel_id_with_mask(tun_id: int, mask: int) -> Match:
    """Match tunnel id under mask."""
    return TunnelIDMatch(tun_id, mask)


def conjunction_id(conj_id: int) -> Match:
    """Match flows that matched every dimension of conjunction `conj_id`."""
    return ConjunctionIDMatch(conj_id)


def reg_match(num: int, value: int, mask: int) -> Match:
    """Match register `num`; 1 bits in `mask` must match `value`."""
    return RegMatch(num, value, mask)
