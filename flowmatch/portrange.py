"""Decompose an inclusive integer range into aligned ternary blocks.

A block `Block(value, mask_bits)` covers the integers
`value .. value + 2**mask_bits - 1`; the low `mask_bits` bits of `value` are
always zero. The decomposition walks the range from its start, emitting the
largest aligned block that still fits at each step. This is the
conventional range-splitting used for ternary (TCAM) match tables; it is
deterministic, though not always the global minimum.
"""

import collections

from flowmatch.exception import RangeError
from flowmatch.log import logger

PORT_WIDTH = 16


class Block(collections.namedtuple('Block', 'value mask_bits')):
    """Aligned range `value .. value + 2**mask_bits - 1`."""

    __slots__ = ()

    @property
    def mask(self):
        """Return mask with the don't-care bits set."""
        return (1 << self.mask_bits) - 1

    @property
    def last(self):
        """Return the last integer covered by the block."""
        return self.value | self.mask


def decompose(start, end, width=PORT_WIDTH):
    """Return list of blocks whose union is exactly `start .. end`.

    Raises RangeError if `start > end`, if either bound is not an integer,
    or if either bound does not fit in `width` bits.
    """
    for name, value in (('start', start), ('end', end), ('width', width)):
        if not isinstance(value, int) or isinstance(value, bool):
            raise RangeError('range %s must be an integer, but got %r' %
                             (name, value))
    if width <= 0:
        raise RangeError('field width must be positive: %r' % (width, ))
    limit = (1 << width) - 1
    if start < 0 or end > limit:
        raise RangeError('range %d-%d is outside 0-%d' % (start, end, limit))
    if start > end:
        raise RangeError('range start %d is greater than end %d' %
                         (start, end))

    blocks = []
    while start <= end:
        bits = min(_trailing_zeros(start, width),
                   (end - start + 1).bit_length() - 1)
        blocks.append(Block(start, bits))
        start += 1 << bits

    # Block sizes grow while start gains trailing zeros, then shrink.
    assert len(blocks) <= 2 * width, blocks
    logger.debug('decompose %d-%d/%d: %d blocks', blocks[0].value, end, width,
                 len(blocks))
    return blocks


def _trailing_zeros(value, width):
    """Return number of trailing zero bits in `value`, at most `width`."""
    if value == 0:
        return width
    return min((value & -value).bit_length() - 1, width)


class PortRange(collections.namedtuple('PortRange', 'start end')):
    """Inclusive range of 16-bit transport ports."""

    __slots__ = ()

    def bitwise_match(self):
        """Return the range as a list of aligned blocks."""
        return decompose(self.start, self.end, PORT_WIDTH)
