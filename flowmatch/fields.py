"""Field keys, mask polarities and flag vocabularies used in match tokens."""

import enum


class Field(enum.Enum):
    """Closed set of match field keys.

    The value of each member is the literal token written before `=`.
    """

    ARP_SHA = 'arp_sha'
    ARP_SPA = 'arp_spa'
    ARP_THA = 'arp_tha'
    ARP_TPA = 'arp_tpa'
    CONJ_ID = 'conj_id'
    CT_MARK = 'ct_mark'
    CT_STATE = 'ct_state'
    CT_ZONE = 'ct_zone'
    DL_SRC = 'dl_src'
    DL_DST = 'dl_dst'
    DL_TYPE = 'dl_type'
    DL_VLAN = 'dl_vlan'
    ICMP_TYPE = 'icmp_type'
    IPV6_SRC = 'ipv6_src'
    IPV6_DST = 'ipv6_dst'
    ND_SLL = 'nd_sll'
    ND_TLL = 'nd_tll'
    ND_TARGET = 'nd_target'
    NW_SRC = 'nw_src'
    NW_DST = 'nw_dst'
    NW_PROTO = 'nw_proto'
    TCP_FLAGS = 'tcp_flags'
    TP_SRC = 'tp_src'
    TP_DST = 'tp_dst'
    TUN_ID = 'tun_id'
    VLAN_TCI = 'vlan_tci'

    def __str__(self):
        return self.value


def reg_key(num):
    """Return key for register field `num`, e.g. "reg3"."""
    return 'reg%d' % num


class Polarity(enum.Enum):
    """Meaning of a 1 bit in a field's mask.

    WILDCARD: a 1 bit is "don't care". A zero mask is the exact-match
        sentinel and is printed without a suffix. Used by fields whose
        masks come from range decomposition (transport ports).
    MATCH: a 1 bit is "must match". Used by opaque register-style fields.
    NONE: the field has no numeric mask.
    """

    WILDCARD = 'wildcard'
    MATCH = 'match'
    NONE = 'none'


# Special dl_vlan value matching only packets without a VLAN tag.
VLAN_NONE = 0xffff

VLAN_VID_MAX = 0x0fff

ETHERNET_ADDR_LEN = 6


class Side(enum.Enum):
    """Which end of a connection a field describes."""

    SOURCE = 'src'
    DESTINATION = 'dst'


class CTState(enum.Enum):
    """Connection tracking states understood by ct_state."""

    NEW = 'new'
    ESTABLISHED = 'est'
    RELATED = 'rel'
    REPLY = 'rpl'
    INVALID = 'inv'
    TRACKED = 'trk'


class TCPFlag(enum.Enum):
    """RFC 793 TCP flags understood by tcp_flags."""

    URG = 'urg'
    ACK = 'ack'
    PSH = 'psh'
    RST = 'rst'
    SYN = 'syn'
    FIN = 'fin'


def set_state(state):
    """Return ct_state token that requires `state` to be set."""
    return '+%s' % CTState(state).value


def unset_state(state):
    """Return ct_state token that requires `state` to be unset."""
    return '-%s' % CTState(state).value


def set_tcp_flag(flag):
    """Return tcp_flags token that requires `flag` to be set."""
    return '+%s' % TCPFlag(flag).value


def unset_tcp_flag(flag):
    """Return tcp_flags token that requires `flag` to be unset."""
    return '-%s' % TCPFlag(flag).value
