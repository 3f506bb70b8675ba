"""Test match value encoding."""

import pytest

import flowmatch
from flowmatch.exception import FormatError, ParseError, RangeError
from flowmatch.fields import Polarity
from flowmatch.match import MATCH_TYPES, RegMatch, TransportPortMatch


def test_data_link():
    """Test dl_src and dl_dst."""
    match = flowmatch.data_link_source('DE:AD:BE:EF:00:01')
    assert match.encode() == 'dl_src=de:ad:be:ef:00:01'
    assert repr(match) == "flowmatch.data_link_source('DE:AD:BE:EF:00:01')"

    match = flowmatch.data_link_destination(
        'de-ad-be-ef-00-01/ff:ff:ff:00:00:00')
    assert match.encode() == 'dl_dst=de:ad:be:ef:00:01/ff:ff:ff:00:00:00'
    assert match.describe() == (
        "flowmatch.data_link_destination('de-ad-be-ef-00-01/ff:ff:ff:00:00:00')")


def test_data_link_bad_length():
    """Test hardware address with 5 octets."""
    match = flowmatch.data_link_source('de:ad:be:ef:00')
    with pytest.raises(FormatError) as excinfo:
        match.encode()
    assert str(excinfo.value) == (
        'hardware address must be 6 octets, but got 5')

    match = flowmatch.data_link_source('de:ad:be:ef:00:01/ff:ff')
    with pytest.raises(FormatError, match='wildcard mask must be 6 octets'):
        match.encode()

    with pytest.raises(ParseError):
        flowmatch.data_link_source('not-a-mac').encode()


def test_data_link_type():
    """Test dl_type."""
    match = flowmatch.data_link_type(0x0800)
    assert match.encode() == 'dl_type=0x0800'
    assert match.describe() == 'flowmatch.data_link_type(0x0800)'

    with pytest.raises(RangeError):
        flowmatch.data_link_type(0x10000).encode()


def test_data_link_vlan():
    """Test dl_vlan, including the no-tag sentinel."""
    assert flowmatch.data_link_vlan(10).encode() == 'dl_vlan=10'
    assert flowmatch.data_link_vlan(0).encode() == 'dl_vlan=0'
    assert flowmatch.data_link_vlan(4095).encode() == 'dl_vlan=4095'

    match = flowmatch.data_link_vlan(flowmatch.VLAN_NONE)
    assert match.encode() == 'dl_vlan=0xffff'
    assert match.describe() == 'flowmatch.data_link_vlan(flowmatch.VLAN_NONE)'
    assert flowmatch.data_link_vlan(10).describe() == (
        'flowmatch.data_link_vlan(10)')

    for vid in (4096, -1, 0xfffe):
        with pytest.raises(RangeError):
            flowmatch.data_link_vlan(vid).encode()


def test_vlan_tci():
    """Test vlan_tci with and without mask."""
    assert flowmatch.vlan_tci(0x1000).encode() == 'vlan_tci=0x1000'
    match = flowmatch.vlan_tci(0x1000, 0x1000)
    assert match.encode() == 'vlan_tci=0x1000/0x1000'
    assert match.describe() == 'flowmatch.vlan_tci(0x1000, 0x1000)'


def test_network():
    """Test nw_src and nw_dst."""
    assert flowmatch.network_source('10.0.0.0/24').encode() == (
        'nw_src=10.0.0.0/24')
    assert flowmatch.network_destination('192.168.1.1').encode() == (
        'nw_dst=192.168.1.1')
    assert flowmatch.network_source('10.0.0.1/8').encode() == (
        'nw_src=10.0.0.1/8')

    for bad in ('::1', '::ffff:10.0.0.1', 'fe80::/64', 'foo', '10.0.0.0/33'):
        with pytest.raises(FormatError):
            flowmatch.network_source(bad).encode()

    assert repr(flowmatch.network_destination('10.0.0.1')) == (
        "flowmatch.network_destination('10.0.0.1')")


def test_ipv6():
    """Test ipv6_src and ipv6_dst."""
    assert flowmatch.ipv6_source('2001:DB8::1').encode() == (
        'ipv6_src=2001:db8::1')
    assert flowmatch.ipv6_destination('fe80::/10').encode() == (
        'ipv6_dst=fe80::/10')

    for bad in ('10.0.0.1', '10.0.0.0/8', '::ffff:10.0.0.1', 'bogus'):
        with pytest.raises(FormatError):
            flowmatch.ipv6_source(bad).encode()


def test_protocol_and_icmp():
    """Test nw_proto and icmp_type are decimal."""
    assert flowmatch.network_protocol(6).encode() == 'nw_proto=6'
    assert flowmatch.network_protocol(58).describe() == (
        'flowmatch.network_protocol(58)')
    assert flowmatch.icmp_type(8).encode() == 'icmp_type=8'
    with pytest.raises(RangeError):
        flowmatch.network_protocol(256).encode()


def test_arp():
    """Test ARP hardware and protocol address fields."""
    addr = b'\x00\x11\x22\x33\x44\x55'
    assert flowmatch.arp_source_hardware_address(addr).encode() == (
        'arp_sha=00:11:22:33:44:55')
    assert flowmatch.arp_target_hardware_address(
        '00:11:22:33:44:55').encode() == 'arp_tha=00:11:22:33:44:55'
    assert flowmatch.arp_source_protocol_address('10.0.0.1').encode() == (
        'arp_spa=10.0.0.1')
    assert flowmatch.arp_target_protocol_address('10.0.0.0/8').encode() == (
        'arp_tpa=10.0.0.0/8')

    with pytest.raises(FormatError, match='must be 6 octets, but got 4'):
        flowmatch.arp_source_hardware_address(b'\x00\x11\x22\x33').encode()
    with pytest.raises(FormatError):
        flowmatch.arp_target_protocol_address('::1').encode()


def test_neighbor_discovery():
    """Test nd_target, nd_sll and nd_tll."""
    assert flowmatch.neighbor_discovery_target('fe80::1').encode() == (
        'nd_target=fe80::1')
    assert flowmatch.neighbor_discovery_source_link_layer(
        '00:11:22:33:44:55').encode() == 'nd_sll=00:11:22:33:44:55'
    assert flowmatch.neighbor_discovery_target_link_layer(
        '0011.2233.4455').encode() == 'nd_tll=00:11:22:33:44:55'
    with pytest.raises(FormatError):
        flowmatch.neighbor_discovery_target('10.0.0.1').encode()


def test_transport_port():
    """Test tp_src and tp_dst, exact and masked."""
    assert flowmatch.transport_source_port(80).encode() == 'tp_src=80'
    assert flowmatch.transport_destination_port(443).encode() == (
        'tp_dst=443')
    match = flowmatch.transport_source_masked_port(0x2, 0x1)
    assert match.encode() == 'tp_src=0x0002/0x0001'
    assert match.describe() == (
        'flowmatch.transport_source_masked_port(0x2, 0x1)')
    assert flowmatch.transport_destination_masked_port(80, 0).encode() == (
        'tp_dst=80')
    assert flowmatch.transport_destination_port(22).describe() == (
        'flowmatch.transport_destination_port(22)')

    with pytest.raises(RangeError):
        flowmatch.transport_source_port(65536).encode()


def test_transport_port_range():
    """Test port range expands into masked ports."""
    port_range = flowmatch.transport_source_port_range(1, 6)
    assert port_range.encode() == [
        'tp_src=1', 'tp_src=0x0002/0x0001', 'tp_src=0x0004/0x0001', 'tp_src=6'
    ]
    assert port_range.masked_ports()[1] == (
        flowmatch.transport_source_masked_port(2, 1))
    assert port_range.describe() == (
        'flowmatch.transport_source_port_range(1, 6)')

    port_range = flowmatch.transport_destination_port_range(0, 65535)
    assert port_range.encode() == ['tp_dst=0x0000/0xffff']

    port_range = flowmatch.transport_destination_port_range(80, 80)
    assert port_range.encode() == ['tp_dst=80']

    with pytest.raises(RangeError):
        flowmatch.transport_destination_port_range(6, 1).masked_ports()


def test_connection_tracking():
    """Test ct_mark, ct_zone and ct_state."""
    assert flowmatch.connection_tracking_mark(1).encode() == (
        'ct_mark=0x00000001')
    match = flowmatch.connection_tracking_mark(0x10, 0xff)
    assert match.encode() == 'ct_mark=0x00000010/0x000000ff'
    assert match.describe() == (
        'flowmatch.connection_tracking_mark(0x00000010, 0x000000ff)')

    assert flowmatch.connection_tracking_zone(10).encode() == 'ct_zone=10'

    match = flowmatch.connection_tracking_state(
        flowmatch.set_state(flowmatch.CTState.TRACKED),
        flowmatch.unset_state(flowmatch.CTState.NEW),
        flowmatch.set_state('est'))
    assert match.encode() == 'ct_state=+trk-new+est'
    assert match.describe() == (
        "flowmatch.connection_tracking_state('+trk', '-new', '+est')")


def test_connection_tracking_state_order_kept():
    """Test flags are neither reordered nor deduplicated."""
    match = flowmatch.connection_tracking_state('-new', '+trk', '+trk')
    assert match.encode() == 'ct_state=-new+trk+trk'


def test_tcp_flags():
    """Test tcp_flags."""
    match = flowmatch.tcp_flags(
        flowmatch.set_tcp_flag(flowmatch.TCPFlag.SYN),
        flowmatch.unset_tcp_flag(flowmatch.TCPFlag.ACK))
    assert match.encode() == 'tcp_flags=+syn-ack'
    assert match.describe() == "flowmatch.tcp_flags('+syn', '-ack')"


def test_tunnel_id():
    """Test tun_id with and without mask."""
    match = flowmatch.tunnel_id(0x10)
    assert match.encode() == 'tun_id=0x10'
    assert match.describe() == 'flowmatch.tunnel_id(0x10)'
    assert flowmatch.tunnel_id(0).encode() == 'tun_id=0x0'

    match = flowmatch.tunnel_id_with_mask(0x10, 0xff)
    assert match.encode() == 'tun_id=0x10/0xff'
    assert match.describe() == 'flowmatch.tunnel_id_with_mask(0x10, 0xff)'


def test_conjunction_id():
    """Test conj_id is decimal."""
    assert flowmatch.conjunction_id(123).encode() == 'conj_id=123'
    assert flowmatch.conjunction_id(123).describe() == (
        'flowmatch.conjunction_id(123)')


def test_reg_match():
    """Test register polarity: 1 bits must match."""
    assert flowmatch.reg_match(0, 0x1, 0).encode() == ''
    assert flowmatch.reg_match(3, 0x2a, 0xffffffff).encode() == 'reg3=0x2a'
    assert flowmatch.reg_match(0, 0, 0xffffffff).encode() == 'reg0=0'
    assert flowmatch.reg_match(0, 0x1, 0xf).encode() == 'reg0=0x1/0xf'
    assert flowmatch.reg_match(1, 0x1, 0xf).describe() == (
        'flowmatch.reg_match(1, 0x1, 0xf)')

    with pytest.raises(RangeError):
        flowmatch.reg_match(16, 1, 1).encode()


def test_mask_polarity():
    """Test each masked field declares its polarity."""
    assert TransportPortMatch.polarity is Polarity.WILDCARD
    assert flowmatch.TransportPortRange.polarity is Polarity.WILDCARD
    assert RegMatch.polarity is Polarity.MATCH
    for cls in MATCH_TYPES:
        assert isinstance(cls.polarity, Polarity)


def test_match_immutable():
    """Test match values cannot be changed and compare by value."""
    match = flowmatch.transport_source_port(80)
    with pytest.raises(AttributeError):
        match.port = 81
    assert match == flowmatch.transport_source_port(80)
    assert match != flowmatch.transport_destination_port(80)
    assert match != flowmatch.conjunction_id(80)
    assert len({match, flowmatch.transport_source_port(80)}) == 1


def test_out_of_width_values():
    """Test values wider than their field raise RangeError."""
    with pytest.raises(RangeError, match='tci must be between 0 and 65535'):
        flowmatch.vlan_tci(0x10000).encode()
    with pytest.raises(RangeError, match='mask'):
        flowmatch.vlan_tci(1, 0x10000).encode()
    with pytest.raises(RangeError, match='mark'):
        flowmatch.connection_tracking_mark(1 << 32).encode()
    with pytest.raises(RangeError, match='mask'):
        flowmatch.connection_tracking_mark(1, 1 << 32).encode()
    with pytest.raises(RangeError, match='zone'):
        flowmatch.connection_tracking_zone(1 << 16).encode()
    with pytest.raises(RangeError, match='tun_id'):
        flowmatch.tunnel_id(1 << 64).encode()
    with pytest.raises(RangeError, match='mask'):
        flowmatch.tunnel_id_with_mask(1, 1 << 64).encode()
    with pytest.raises(RangeError, match='conj_id'):
        flowmatch.conjunction_id(1 << 32).encode()
    with pytest.raises(RangeError, match='value'):
        flowmatch.reg_match(0, 1 << 32, 0xffffffff).encode()


def test_bool_is_not_an_integer():
    """Test True and False are rejected where an integer is required."""
    with pytest.raises(RangeError):
        flowmatch.transport_source_port(True).encode()
    with pytest.raises(RangeError):
        flowmatch.transport_source_masked_port(0, True).encode()
    with pytest.raises(RangeError):
        flowmatch.network_protocol(False).encode()
    with pytest.raises(RangeError, match='VLAN VID'):
        flowmatch.data_link_vlan(True).encode()
    with pytest.raises(RangeError, match='register'):
        flowmatch.reg_match(True, 1, 0xffffffff).encode()


def test_describe_non_integer_args():
    """Test describe falls back to repr for arguments that are not ints."""
    assert flowmatch.data_link_vlan('abc').describe() == (
        "flowmatch.data_link_vlan('abc')")
    assert flowmatch.transport_source_masked_port(1, 'x').describe() == (
        "flowmatch.transport_source_masked_port(0x1, 'x')")
    assert flowmatch.transport_destination_port(None).describe() == (
        'flowmatch.transport_destination_port(None)')
    assert flowmatch.tunnel_id_with_mask('a', 1.5).describe() == (
        "flowmatch.tunnel_id_with_mask('a', 1.5)")
    assert flowmatch.reg_match(-1, 1, 2).describe() == (
        'flowmatch.reg_match(-1, 0x1, 0x2)')
    assert flowmatch.data_link_type(True).describe() == (
        'flowmatch.data_link_type(True)')
    assert flowmatch.transport_source_port_range('a', 6).describe() == (
        "flowmatch.transport_source_port_range('a', 6)")


def test_flags_must_be_strings():
    """Test state and flag tokens that are not strings raise FormatError."""
    with pytest.raises(FormatError, match='states'):
        flowmatch.connection_tracking_state(1).encode()
    with pytest.raises(FormatError, match='flags'):
        flowmatch.tcp_flags('+syn', 2).encode()
    assert repr(flowmatch.tcp_flags('+syn', 2)) == (
        "flowmatch.tcp_flags('+syn', 2)")
