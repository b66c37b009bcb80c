# Vertical band the skylands terrain generator fills (inclusive).
MIN_HEIGHT = 64
MAX_HEIGHT = 192

# Blocks kept free at the top of a region so double-height placements fit.
TOP_MARGIN = 2

# Decoration odds. A column passes when its hash value is >= the odds.
GRASS_ODDS = 0.3
DOUBLE_GRASS_ODDS = 0.9
# Surfaces under an overhang get less cover.
COVERED_GRASS_ODDS = 0.8

# Flower cells
FLOWER_FREQUENCY = 0.1
RARITY_DEGREE = 4
# Multiplier for the seed of the second (overlapping) flower cell layer.
SEED_LAYER_MULTIPLIER = 28703

# Enable ANSI colors in logs.
LOG_COLOR = True

# Emit DEBUG level lines.
LOG_DEBUG = False

# Log per-region placement counts from the grass populator.
LOG_POPULATE = False
