import numpy

from skyflora.blocks import AIR

_HASH_MASK = 0x00ffffff
_HASH_SCALE = float(0x01000000)


def _low24(v):
    if isinstance(v, int):
        return numpy.int64(v & _HASH_MASK)
    return numpy.asarray(v, dtype=numpy.int64) & _HASH_MASK


def hash_to_float(x, z, seed):
    """ Map a column position and a seed to a reproducible value in [0, 1).

    Computes ``h = x*73428767 ^ z*9122569 ^ seed*457`` and returns the low 24
    bits of ``h*(h + 456149)`` divided by 2**24, bit for bit what 64 bit
    two's complement wraparound arithmetic gives. Only the low 24 bits
    survive the final mask, so every operand is reduced to them first and
    nothing can overflow.

    Parameters
    ----------
    x, z : int or array of ints
    seed : int or array of ints
        Broadcast against `x` and `z`.

    Returns
    -------
    value : float, or float64 array when any argument is an array

    """
    scalar = numpy.ndim(x) == 0 and numpy.ndim(z) == 0 and numpy.ndim(seed) == 0
    h = ((_low24(x) * 73428767) & _HASH_MASK) \
        ^ ((_low24(z) * 9122569) & _HASH_MASK) \
        ^ ((_low24(seed) * 457) & _HASH_MASK)
    v = (h * (h + 456149)) & _HASH_MASK
    if scalar:
        return int(v) / _HASH_SCALE
    return v / _HASH_SCALE


def to_int32(v):
    """ Wrap an integer to a signed 32 bit value. """
    v &= 0xffffffff
    return v - 0x100000000 if v & 0x80000000 else v


def derive_seeds(seed, multiplier=28703):
    """ Split a 64 bit world seed into the two 32 bit flower layer seeds. """
    seed_a = to_int32((seed >> 32) ^ seed)
    return seed_a, to_int32(seed_a * multiplier)


def _kinds(empty):
    if isinstance(empty, (int, numpy.integer)):
        return frozenset((int(empty),))
    return frozenset(int(k) for k in empty)


def next_solid(buffer, x, y, z, y_end, empty=AIR):
    """ Walk down column (x, z) from `y` to the first non-empty block.

    Returns the y of that block, or ``y_end - 1`` when everything down to
    `y_end` (inclusive) is empty. `empty` is a block id or a collection of ids.
    """
    empty = _kinds(empty)
    while y >= y_end and buffer.block_at(x, y, z) in empty:
        y -= 1
    return y


def next_air(buffer, x, y, z, y_end, empty=AIR):
    """ Walk down column (x, z) from `y` out of a solid run.

    Returns the y of the first empty block, or ``y_end - 1``.
    """
    empty = _kinds(empty)
    while y >= y_end and buffer.block_at(x, y, z) not in empty:
        y -= 1
    return y
