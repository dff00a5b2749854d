import numpy

from config import CHUNK_SIZE
from blocks import AIR


class Chunk(object):
    """
    A cube of CHUNK_SIZE**3 blocks plus the world-space origin of its lowest corner.

    Chunks are created and owned by World. Block writes go through World so
    dirty tracking stays correct; readers may use `get_local` or `blocks`.
    """
    size = CHUNK_SIZE

    def __init__(self, origin, blocks=None):
        if any(c % CHUNK_SIZE for c in origin):
            raise ValueError(f"chunk origin {origin} is not a multiple of {CHUNK_SIZE}")
        self.origin = tuple(int(c) for c in origin)
        if blocks is None:
            blocks = numpy.zeros((CHUNK_SIZE, CHUNK_SIZE, CHUNK_SIZE), dtype=numpy.uint8)
        self.blocks = blocks
        # Mesh out of date with respect to the block grid.
        self.dirty = True
        self.geometry = None

    def __repr__(self):
        return f"Chunk{self.origin}"

    @staticmethod
    def in_bounds(x, y, z):
        return 0 <= x < CHUNK_SIZE and 0 <= y < CHUNK_SIZE and 0 <= z < CHUNK_SIZE

    def get_local(self, x, y, z):
        if not self.in_bounds(x, y, z):
            return AIR
        return int(self.blocks[x, y, z])

    def set_local(self, x, y, z, kind):
        """Write one cell; returns False when out of bounds. Called by World only."""
        if not self.in_bounds(x, y, z):
            return False
        self.blocks[x, y, z] = int(kind)
        self.dirty = True
        return True

    def center(self):
        half = CHUNK_SIZE / 2.0
        return (self.origin[0] + half, self.origin[1] + half, self.origin[2] + half)
