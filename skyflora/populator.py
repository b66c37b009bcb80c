#std/external libs
from collections import namedtuple

import numpy

#local libs
from skyflora import config
from skyflora import logutil
from skyflora.blocks import AIR, BLOCK_ID, TALL_GRASS, default_state
from skyflora.cellnoise import CellularFeatureField
from skyflora.util import derive_seeds, hash_to_float, next_air, next_solid

DOUBLE_TALL_GRASS = BLOCK_ID['Double Tall Grass']


class Feature(namedtuple('Feature', ['kind', 'lower', 'upper'])):
    """ A flower cell entry: 'none', a 'single' block or a 'double' (lower,
    upper) pair of block states.
    """
    __slots__ = ()

    @property
    def is_none(self):
        return self.kind == 'none'

    @property
    def double_height(self):
        return self.kind == 'double'

    def kinds(self):
        return tuple(s.kind for s in (self.lower, self.upper) if s is not None)


NO_FEATURE = Feature('none', None, None)


def single_block(state):
    return Feature('single', state, None)


def double_block(lower, upper):
    return Feature('double', lower, upper)


# Flower per cell index. The none entries keep most cells plain grass.
FLOWERS = (
    single_block(default_state('Rose')),
    single_block(default_state('Dandelion')),
    NO_FEATURE,
    NO_FEATURE,
    NO_FEATURE,
    NO_FEATURE,
    NO_FEATURE,
    NO_FEATURE,
)
FLOWER_CELL_DISPLACEMENT = len(FLOWERS) - 1


def resolve_feature(field, flowers, x, z, value, seed_a, seed_b):
    """Pick the flower for column (x, z) given its random `value`.

    The first cell layer's flower is kept unless the cell is empty or
    `value` falls under the cell's odds. Then the second layer is tried,
    and its flower is dropped too if `value` falls under that layer's odds.
    Returns an entry of `flowers`, possibly a none feature.
    """
    flower = flowers[field.cell_index(x, z, seed_a)]
    if flower.is_none or value < field.odds(x, z, seed_a):
        # second, offset layer of cells so they overlap
        flower = flowers[field.cell_index(x, z, seed_b)]
        if not flower.is_none and value < field.odds(x, z, seed_b):
            flower = NO_FEATURE
    return flower


def resolve_features(field, flowers, x, z, values, seed_a, seed_b):
    """ Array form of `resolve_feature`. Returns the chosen table index per
    column, -1 where no flower is placed.
    """
    present = numpy.array([not f.is_none for f in flowers], dtype=bool)
    index_a = field.cell_index(x, z, seed_a)
    index_b = field.cell_index(x, z, seed_b)
    retry = ~present[index_a] | (values < field.odds(x, z, seed_a))
    keep_b = present[index_b] & ~(values < field.odds(x, z, seed_b))
    return numpy.where(retry, numpy.where(keep_b, index_b, -1), index_a)


class GrassPopulator(object):
    """Places tall grass with groups of flowers on the top surface of every
    column, and sparser grass on each surface beneath an overhang.

    The populator holds configuration only. Seeds go to every noise
    evaluation as arguments, so one instance can be shared between workers
    as long as each call gets its own buffer.
    """

    def __init__(self, flowers=FLOWERS, cover=TALL_GRASS, double_cover=DOUBLE_TALL_GRASS):
        if len(flowers) == 0:
            raise ValueError("flower table is empty")
        self.flowers = tuple(flowers)
        self.cover = cover
        self.double_cover = double_cover
        self.top_margin = int(getattr(config, 'TOP_MARGIN', 2))
        self.grass_odds = float(getattr(config, 'GRASS_ODDS', 0.3))
        self.double_grass_odds = float(getattr(config, 'DOUBLE_GRASS_ODDS', 0.9))
        self.covered_grass_odds = float(getattr(config, 'COVERED_GRASS_ODDS', 0.8))
        self.seed_multiplier = int(getattr(config, 'SEED_LAYER_MULTIPLIER', 28703))
        self.field = CellularFeatureField(
            len(self.flowers),
            frequency=getattr(config, 'FLOWER_FREQUENCY', 0.1),
            degree=getattr(config, 'RARITY_DEGREE', 4))
        # Blocks we write are skipped like air, so a second pass finds the same surfaces.
        kinds = {AIR, cover.kind, double_cover}
        for flower in self.flowers:
            kinds.update(flower.kinds())
        self.empty_kinds = frozenset(kinds)

    def resolve_feature(self, x, z, value, seed):
        seed_a, seed_b = derive_seeds(seed, self.seed_multiplier)
        return resolve_feature(self.field, self.flowers, x, z, value, seed_a, seed_b)

    def populate(self, buffer, context):
        """ Decorate the whole of `buffer`. """
        self.decorate(buffer.region(), buffer, context)

    def decorate(self, region, buffer, context):
        """Decorate every column of `region` in `buffer` for the world in `context`.

        Parameters
        ----------
        region : Region
            Inclusive box inside the buffer bounds.
        buffer : BlockBuffer
            Modified in place.
        context : WorldContext

        """
        (x_lo, y_lo, z_lo), (x_hi, y_hi, z_hi) = region.min, region.max
        y_max = y_hi - self.top_margin
        y_min = y_lo
        if y_max < context.min_height or y_min > context.max_height:
            logutil.log("POPULATE", f"skip region {region.min}..{region.max}, outside "
                        f"{context.min_height}..{context.max_height}", level="DEBUG")
            return
        seed = context.seed
        seed_a, seed_b = derive_seeds(seed, self.seed_multiplier)
        y_start = min(y_max, context.max_height)
        y_end = max(y_min, context.min_height)
        empty = self.empty_kinds

        zz, xx = numpy.mgrid[z_lo:z_hi + 1, x_lo:x_hi + 1]
        values = hash_to_float(xx, zz, seed)
        chosen = resolve_features(self.field, self.flowers, xx, zz, values, seed_a, seed_b)

        counts = {'flower': 0, 'grass': 0, 'double': 0, 'covered': 0, 'bare': 0}
        for iz, z in enumerate(range(z_lo, z_hi + 1)):
            for ix, x in enumerate(range(x_lo, x_hi + 1)):
                # get the y value of the topmost block
                yy = next_solid(buffer, x, y_start, z, y_end, empty)
                if yy < y_end:
                    counts['bare'] += 1
                    continue
                value = values[iz, ix]
                index = chosen[iz, ix]
                if index >= 0:
                    flower = self.flowers[index]
                    buffer.set_block(x, yy + 1, z, flower.lower)
                    if flower.double_height:
                        buffer.set_block(x, yy + 2, z, flower.upper)
                    counts['flower'] += 1
                elif value >= self.grass_odds:
                    if value >= self.double_grass_odds and yy + 1 < y_max:
                        buffer.set_block_kind(x, yy + 1, z, self.double_cover)
                        buffer.set_block_kind(x, yy + 2, z, self.double_cover)
                        counts['double'] += 1
                    else:
                        buffer.set_block(x, yy + 1, z, self.cover)
                        counts['grass'] += 1
                # surfaces underneath only get grass, and less of it
                yy = next_solid(buffer, x, next_air(buffer, x, yy, z, y_end, empty), z, y_end, empty)
                while yy >= y_end:
                    if hash_to_float(x, z, seed ^ yy) >= self.covered_grass_odds:
                        buffer.set_block(x, yy + 1, z, self.cover)
                        counts['covered'] += 1
                    yy = next_solid(buffer, x, next_air(buffer, x, yy, z, y_end, empty), z, y_end, empty)
        logutil.log("POPULATE", f"region {region.min}..{region.max} y {y_end}..{y_start}: "
                    + " ".join(f"{k}={v}" for k, v in counts.items()))


grass_populator = None


def initialize_populator(flowers=FLOWERS):
    global grass_populator
    grass_populator = GrassPopulator(flowers=flowers)
    return grass_populator


def populate_region(region, buffer, context):
    """ Decorate `region` with the module level populator, creating it on first use. """
    if grass_populator is None:
        initialize_populator()
    grass_populator.decorate(region, buffer, context)
