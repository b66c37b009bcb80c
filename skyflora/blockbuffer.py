from collections import namedtuple

import numpy

from skyflora import config
from skyflora.blocks import AIR, BlockState


class Region(namedtuple('Region', ['min', 'max'])):
    """ Inclusive integer box, `min` and `max` are (x, y, z) tuples. """
    __slots__ = ()

    @classmethod
    def from_corners(cls, corner_a, corner_b):
        lo = tuple(min(a, b) for a, b in zip(corner_a, corner_b))
        hi = tuple(max(a, b) for a, b in zip(corner_a, corner_b))
        return cls(lo, hi)

    @property
    def shape(self):
        return tuple(hi - lo + 1 for lo, hi in zip(self.min, self.max))

    def contains(self, x, y, z):
        return all(lo <= v <= hi for v, lo, hi in zip((x, y, z), self.min, self.max))


class WorldContext(namedtuple('WorldContext', ['seed', 'min_height', 'max_height'])):
    """ World properties a populator reads: the 64 bit seed and the valid
    generation band.
    """
    __slots__ = ()

    def __new__(cls, seed, min_height=None, max_height=None):
        if min_height is None:
            min_height = getattr(config, 'MIN_HEIGHT', 64)
        if max_height is None:
            max_height = getattr(config, 'MAX_HEIGHT', 192)
        return super(WorldContext, cls).__new__(cls, int(seed), int(min_height), int(max_height))


class BlockBuffer(object):
    """Mutable block storage for an inclusive box of absolute coordinates.

    Kinds live in a (X, Y, Z) uint16 array and state data in a parallel
    uint8 array, the same axis order the sector arrays use.
    """

    def __init__(self, bounds_min, bounds_max, fill=AIR):
        self._min = tuple(int(v) for v in bounds_min)
        self._max = tuple(int(v) for v in bounds_max)
        shape = tuple(hi - lo + 1 for lo, hi in zip(self._min, self._max))
        if min(shape) <= 0:
            raise ValueError(f"empty buffer bounds {self._min}..{self._max}")
        self.blocks = numpy.full(shape, fill, dtype='u2')
        self.data = numpy.zeros(shape, dtype='u1')

    @classmethod
    def from_array(cls, blocks, origin=(0, 0, 0)):
        """ Wrap a copy of an existing (X, Y, Z) block id array whose first
        element sits at `origin`.
        """
        blocks = numpy.asarray(blocks)
        hi = tuple(o + s - 1 for o, s in zip(origin, blocks.shape))
        buffer = cls(origin, hi)
        buffer.blocks[...] = blocks
        return buffer

    def bounds_min(self):
        return self._min

    def bounds_max(self):
        return self._max

    def region(self):
        return Region(self._min, self._max)

    def _index(self, x, y, z):
        if not (self._min[0] <= x <= self._max[0]
                and self._min[1] <= y <= self._max[1]
                and self._min[2] <= z <= self._max[2]):
            raise IndexError(f"block {(x, y, z)} outside buffer {self._min}..{self._max}")
        return (x - self._min[0], y - self._min[1], z - self._min[2])

    def block_at(self, x, y, z):
        return int(self.blocks[self._index(x, y, z)])

    def state_at(self, x, y, z):
        idx = self._index(x, y, z)
        return BlockState(int(self.blocks[idx]), int(self.data[idx]))

    def set_block(self, x, y, z, state):
        idx = self._index(x, y, z)
        self.blocks[idx] = state.kind
        self.data[idx] = state.data

    def set_block_kind(self, x, y, z, kind):
        idx = self._index(x, y, z)
        self.blocks[idx] = kind
        self.data[idx] = 0

    def fill(self, lo, hi, kind):
        """ Set every block in the inclusive box `lo`..`hi` to `kind`. """
        a = self._index(*lo)
        b = self._index(*hi)
        self.blocks[a[0]:b[0] + 1, a[1]:b[1] + 1, a[2]:b[2] + 1] = kind
        self.data[a[0]:b[0] + 1, a[1]:b[1] + 1, a[2]:b[2] + 1] = 0

    def column(self, x, z):
        """ View of the block ids in column (x, z), indexed from bounds_min y. """
        ix, _, iz = self._index(x, self._min[1], z)
        return self.blocks[ix, :, iz]

    def copy(self):
        other = BlockBuffer(self._min, self._max)
        other.blocks[...] = self.blocks
        other.data[...] = self.data
        return other
