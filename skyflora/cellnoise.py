#
# Cellular (Voronoi) noise for flower cell placement.
#
# The lattice hash and the Voronoi module follow libnoise by Jason Bevins,
# with value noise mapped to [0, 1] as in flow-noise. Everything is
# evaluated on numpy arrays so a whole region is sampled in one call.
#
# Seeds are passed to every evaluation. No evaluator keeps seed state, so a
# single instance can serve both flower layers and any number of threads.
#
import numpy

SQRT_3 = 1.7320508075688772

X_NOISE_GEN = 1619
Y_NOISE_GEN = 31337
Z_NOISE_GEN = 6971
SEED_NOISE_GEN = 1013

# Neighbourhood searched around the sample's lattice cell, in z, y, x order
# so that argmin keeps the first closest point the way the nested loop does.
_OFFSETS = numpy.array([(dx, dy, dz)
                        for dz in range(-2, 3)
                        for dy in range(-2, 3)
                        for dx in range(-2, 3)], dtype=numpy.int64).T


def int_value_noise_3d(x, y, z, seed):
    """ 31 bit integer lattice hash of (x, y, z, seed), 32 bit wraparound. """
    x = numpy.asarray(x, dtype=numpy.int64)
    y = numpy.asarray(y, dtype=numpy.int64)
    z = numpy.asarray(z, dtype=numpy.int64)
    seed = numpy.int64(int(seed) & 0xffffffff)
    n = (X_NOISE_GEN * x + Y_NOISE_GEN * y + Z_NOISE_GEN * z + SEED_NOISE_GEN * seed) & 0x7fffffff
    n = (n >> 13) ^ n
    # only the low 32 bits of each product matter
    t = (n * n) & 0xffffffff
    t = (t * 60493 + 19990303) & 0xffffffff
    return (n * t + 1376312589) & 0x7fffffff


def value_noise_3d(x, y, z, seed):
    return int_value_noise_3d(x, y, z, seed) / 2147483647.0


def _lattice(v):
    t = numpy.trunc(v)
    return numpy.where(v > 0.0, t, t - 1).astype(numpy.int64)


class Voronoi(object):
    """Cellular noise: each point takes the value of its nearest seed point.

    frequency: seed points per unit length.
    displacement: scale of the per-cell random value added to the output.
    enable_distance: also add the scaled distance to the nearest seed point.
    """

    def __init__(self, frequency=1.0, displacement=1.0, enable_distance=False):
        self.frequency = float(frequency)
        self.displacement = float(displacement)
        self.enable_distance = bool(enable_distance)

    def get_value(self, x, y, z, seed):
        x, y, z = numpy.broadcast_arrays(
            numpy.asarray(x, dtype=numpy.float64) * self.frequency,
            numpy.asarray(y, dtype=numpy.float64) * self.frequency,
            numpy.asarray(z, dtype=numpy.float64) * self.frequency)
        shape = x.shape
        x = x.reshape(-1, 1)
        y = y.reshape(-1, 1)
        z = z.reshape(-1, 1)

        xc = _lattice(x) + _OFFSETS[0]
        yc = _lattice(y) + _OFFSETS[1]
        zc = _lattice(z) + _OFFSETS[2]
        xpos = xc + value_noise_3d(xc, yc, zc, seed)
        ypos = yc + value_noise_3d(xc, yc, zc, seed + 1)
        zpos = zc + value_noise_3d(xc, yc, zc, seed + 2)
        dx = xpos - x
        dy = ypos - y
        dz = zpos - z
        best = numpy.argmin(dx * dx + dy * dy + dz * dz, axis=1)[:, numpy.newaxis]
        xcand = numpy.take_along_axis(xpos, best, axis=1)[:, 0]
        ycand = numpy.take_along_axis(ypos, best, axis=1)[:, 0]
        zcand = numpy.take_along_axis(zpos, best, axis=1)[:, 0]

        if self.enable_distance:
            dx = xcand - x[:, 0]
            dy = ycand - y[:, 0]
            dz = zcand - z[:, 0]
            value = numpy.sqrt(dx * dx + dy * dy + dz * dz) * SQRT_3 - 1.0
        else:
            value = numpy.zeros(xcand.shape)
        value = value + self.displacement * value_noise_3d(
            numpy.floor(xcand).astype(numpy.int64),
            numpy.floor(ycand).astype(numpy.int64),
            numpy.floor(zcand).astype(numpy.int64),
            seed)
        if shape == ():
            return float(value[0])
        return value.reshape(shape)

    __call__ = get_value


class RarityCurve(object):
    """ ``1 - (1 - v)**degree`` of a source module's value. Higher degrees
    push more of the output towards 1.
    """

    def __init__(self, source, degree=4):
        self.source = source
        self.degree = degree

    def apply(self, value):
        return 1 - (1 - value) ** self.degree

    def get_value(self, x, y, z, seed):
        return self.apply(self.source.get_value(x, y, z, seed))

    __call__ = get_value


class CellularFeatureField(object):
    """Two cell layers sampled in the y=0 plane: a discrete cell index that
    selects an entry of a feature table and a continuous density that sets the
    odds of that feature being kept.

    The index field's displacement is derived from `table_size`, so the index
    always lands inside the table.
    """

    def __init__(self, table_size, frequency=0.1, degree=4):
        if table_size < 1:
            raise ValueError(f"feature table needs at least one entry, got {table_size}")
        self.table_size = table_size
        self.cells = Voronoi(frequency=frequency, displacement=table_size - 1, enable_distance=False)
        self.densities = Voronoi(frequency=frequency, displacement=0, enable_distance=True)
        self.rarity = RarityCurve(self.densities, degree=degree)

    def cell_index(self, x, z, seed):
        value = self.cells.get_value(x, 0, z, seed)
        # truncate, don't round
        if numpy.ndim(value) == 0:
            return int(value)
        return numpy.trunc(value).astype(numpy.int64)

    def density(self, x, z, seed):
        return self.densities.get_value(x, 0, z, seed)

    def odds(self, x, z, seed):
        return self.rarity.get_value(x, 0, z, seed)


if __name__ == '__main__':
    import time
    from PIL import Image

    from skyflora import config
    from skyflora.util import derive_seeds

    seed_a, seed_b = derive_seeds(12345, config.SEED_LAYER_MULTIPLIER)
    field = CellularFeatureField(8, frequency=config.FLOWER_FREQUENCY, degree=config.RARITY_DEGREE)
    zz, xx = numpy.mgrid[0:128, 0:128]
    t = time.time()
    cells = field.cell_index(xx, zz, seed_a)
    odds = field.odds(xx, zz, seed_a)
    print('cells + odds', time.time() - t)
    print('STATS')
    print('######')
    print(cells.min(), cells.max(), numpy.average(cells))
    print(odds.min(), odds.max(), numpy.average(odds))
    im = Image.fromarray(numpy.array(cells * 255 // 7, dtype='u1'))
    im.save('flower_cells.png')
    im = Image.fromarray(numpy.array(numpy.clip(odds, 0.0, 1.0) * 255, dtype='u1'))
    im.save('flower_odds.png')
