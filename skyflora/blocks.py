from collections import namedtuple

import numpy

# Block id 0 is always air.
AIR = 0

# Shrub variants carried in the data field of a Tall Grass state.
SHRUB_DEAD_BUSH = 0
SHRUB_TALL_GRASS = 1
SHRUB_FERN = 2

BlockState = namedtuple('BlockState', ['kind', 'data'])


class Block(object):
    name = None
    solid = True
    # Data value used when the block is written by kind only.
    default_data = 0


class Decoration(object):
    solid = False


class DirtWithGrass(Block):
    name = 'Grass'

class Dirt(Block):
    name = 'Dirt'

class Stone(Block):
    name = 'Stone'

class CobbleStone(Block):
    name = 'Cobblestone'

class Sand(Block):
    name = 'Sand'

class Leaves(Block):
    name = 'Leaves'
    solid = False

class Water(Block):
    name = 'Water'
    solid = False

class TallGrass(Decoration, Block):
    name = 'Tall Grass'

class DoubleTallGrass(Decoration, Block):
    name = 'Double Tall Grass'

class Rose(Decoration, Block):
    name = 'Rose'

class Dandelion(Decoration, Block):
    name = 'Dandelion'

class LilacLower(Decoration, Block):
    name = 'Lilac Lower'

class LilacUpper(Decoration, Block):
    name = 'Lilac Upper'


BLOCKS = [
    DirtWithGrass,
    Dirt,
    Stone,
    CobbleStone,
    Sand,
    Leaves,
    Water,
    TallGrass,
    DoubleTallGrass,
    Rose,
    Dandelion,
    LilacLower,
    LilacUpper,
]

i = 1
BLOCK_ID = {}
for x in BLOCKS:
    BLOCK_ID[x.name] = i
    i += 1
BLOCK_SOLID = numpy.array([False] + [x.solid for x in BLOCKS], dtype=numpy.uint8)
BLOCK_DECORATION = numpy.array([False] + [issubclass(x, Decoration) for x in BLOCKS], dtype=numpy.uint8)


def default_state(name):
    """ Return the plain `BlockState` for the block called `name`. """
    block = BLOCKS[BLOCK_ID[name] - 1]
    return BlockState(BLOCK_ID[name], block.default_data)


TALL_GRASS = BlockState(BLOCK_ID['Tall Grass'], SHRUB_TALL_GRASS)
