import enum
from collections import namedtuple

import numpy

from config import WATER_COLOR


class BlockKind(enum.IntEnum):
    AIR = 0
    BEDROCK = 1
    STONE = 2
    DIRT = 3
    SAND = 4
    GRAVEL = 5
    CLAY = 6
    GRASS = 7
    SNOW = 8
    MAGMA = 9
    WATER = 10


BlockInfo = namedtuple('BlockInfo', 'name transparent movable fluid indestructible color uv')

# One row per kind, indexed by BlockKind value. Properties never change at runtime.
# uv is a flat atlas cell stub; color is what actually distinguishes blocks.
_INFO = {
    BlockKind.AIR:     BlockInfo('Air',     True,  False, False, False, (0.00, 0.00, 0.00), (0.0, 0.0)),
    BlockKind.BEDROCK: BlockInfo('Bedrock', False, False, False, True,  (0.08, 0.08, 0.09), (0.7, 0.1)),
    BlockKind.STONE:   BlockInfo('Stone',   False, False, False, False, (0.50, 0.50, 0.52), (0.3, 0.1)),
    BlockKind.DIRT:    BlockInfo('Dirt',    False, True,  False, False, (0.50, 0.35, 0.20), (0.1, 0.1)),
    BlockKind.SAND:    BlockInfo('Sand',    False, True,  False, False, (0.82, 0.76, 0.52), (0.1, 0.3)),
    BlockKind.GRAVEL:  BlockInfo('Gravel',  False, True,  False, False, (0.45, 0.43, 0.42), (0.3, 0.3)),
    BlockKind.CLAY:    BlockInfo('Clay',    False, True,  False, False, (0.62, 0.58, 0.66), (0.5, 0.3)),
    BlockKind.GRASS:   BlockInfo('Grass',   False, True,  False, False, (0.20, 0.66, 0.20), (0.7, 0.3)),
    BlockKind.SNOW:    BlockInfo('Snow',    False, True,  False, False, (0.95, 0.96, 0.98), (0.1, 0.5)),
    BlockKind.MAGMA:   BlockInfo('Magma',   False, True,  False, False, (0.85, 0.25, 0.05), (0.3, 0.5)),
    BlockKind.WATER:   BlockInfo('Water',   True,  False, True,  False, WATER_COLOR,        (0.5, 0.1)),
}
BLOCKS = [_INFO[kind] for kind in BlockKind]

BLOCK_ID = {info.name: int(kind) for kind, info in _INFO.items()}
BLOCK_TRANSPARENT = numpy.array([x.transparent for x in BLOCKS], dtype=bool)
BLOCK_MOVABLE = numpy.array([x.movable for x in BLOCKS], dtype=bool)
BLOCK_FLUID = numpy.array([x.fluid for x in BLOCKS], dtype=bool)
BLOCK_INDESTRUCTIBLE = numpy.array([x.indestructible for x in BLOCKS], dtype=bool)
BLOCK_COLORS = numpy.array([x.color for x in BLOCKS], dtype=numpy.float32)
BLOCK_UV = numpy.array([x.uv for x in BLOCKS], dtype=numpy.float32)
# Cells the gravity pass has to look at.
BLOCK_SIMULATED = BLOCK_MOVABLE | BLOCK_FLUID

AIR = BlockKind.AIR
WATER = BlockKind.WATER


def info(kind):
    return BLOCKS[int(kind)]


def is_transparent(kind):
    return bool(BLOCK_TRANSPARENT[int(kind)])


def is_movable_solid(kind):
    return bool(BLOCK_MOVABLE[int(kind)])


def is_fluid(kind):
    return bool(BLOCK_FLUID[int(kind)])


def is_indestructible(kind):
    return bool(BLOCK_INDESTRUCTIBLE[int(kind)])


def color(kind):
    return info(kind).color
