'''
mesher.py -- builds per-chunk surface geometry from block data with face culling
'''

# standard library imports
import time
import numpy

# local imports
import logutil
from config import CHUNK_SIZE
from util import FACES, FACE_QUADS, QUAD_TRIANGLES
from blocks import AIR, BLOCK_TRANSPARENT, BLOCK_FLUID, BLOCK_COLORS, BLOCK_UV


class Geometry(object):
    """
    Surface description of one chunk: vertex positions (local to `origin`),
    parallel per-vertex colors and uv stubs, and two triangle index groups.
    """
    __slots__ = ("origin", "vertices", "colors", "uvs", "opaque", "water")

    def __init__(self, origin, vertices, colors, uvs, opaque, water):
        self.origin = origin
        self.vertices = vertices
        self.colors = colors
        self.uvs = uvs
        self.opaque = opaque
        self.water = water

    @classmethod
    def empty(cls, origin):
        return cls(
            origin,
            numpy.zeros((0, 3), dtype=numpy.float32),
            numpy.zeros((0, 3), dtype=numpy.float32),
            numpy.zeros((0, 2), dtype=numpy.float32),
            numpy.zeros(0, dtype=numpy.int32),
            numpy.zeros(0, dtype=numpy.int32),
        )

    @property
    def vertex_count(self):
        return len(self.vertices)

    @property
    def opaque_triangle_count(self):
        return len(self.opaque) // 3

    @property
    def water_triangle_count(self):
        return len(self.water) // 3

    def same_as(self, other):
        return (
            self.origin == other.origin
            and numpy.array_equal(self.vertices, other.vertices)
            and numpy.array_equal(self.colors, other.colors)
            and numpy.array_equal(self.uvs, other.uvs)
            and numpy.array_equal(self.opaque, other.opaque)
            and numpy.array_equal(self.water, other.water)
        )


def split_view(axis, plane, keep_below=True):
    """
    Clipping predicate for a half cutaway along `axis` (0=x, 1=y, 2=z).

    The predicate takes broadcastable global coordinate arrays and returns
    True for clipped cells: those at or beyond `plane` when keeping the lower
    half, below it otherwise.
    """
    def clipped(gx, gy, gz):
        coord = (gx, gy, gz)[axis]
        if keep_below:
            return coord >= plane
        return coord < plane
    return clipped


class MeshBuilder(object):
    """
    Rebuilds a chunk's Geometry from scratch. Blocks across chunk faces are
    read through `world.get_chunk`; missing chunks read as Air.
    """

    def __init__(self, world=None, clip=None):
        self.world = world
        self.clip = clip

    def _gather_halo(self, chunk):
        """Chunk blocks padded by one cell copied from the 6 face neighbors."""
        S = CHUNK_SIZE
        padded = numpy.zeros((S + 2, S + 2, S + 2), dtype=numpy.uint8)
        padded[1:-1, 1:-1, 1:-1] = chunk.blocks
        if self.world is None:
            return padded
        ox, oy, oz = chunk.origin
        for face in FACES:
            neighbor = self.world.get_chunk((ox + face[0] * S, oy + face[1] * S, oz + face[2] * S))
            if neighbor is None:
                continue
            src = [slice(None)] * 3
            dst = [slice(1, -1)] * 3
            for axis, d in enumerate(face):
                if d == 1:
                    src[axis] = slice(0, 1)
                    dst[axis] = slice(S + 1, S + 2)
                elif d == -1:
                    src[axis] = slice(S - 1, S)
                    dst[axis] = slice(0, 1)
            padded[tuple(dst)] = neighbor.blocks[tuple(src)]
        return padded

    def _apply_clip(self, padded, origin):
        r = numpy.arange(-1, CHUNK_SIZE + 1)
        gx = (origin[0] + r)[:, None, None]
        gy = (origin[1] + r)[None, :, None]
        gz = (origin[2] + r)[None, None, :]
        clipped = numpy.broadcast_to(self.clip(gx, gy, gz), padded.shape)
        # A clipped cell draws nothing and exposes the faces behind it.
        return numpy.where(clipped, numpy.uint8(AIR), padded).astype(numpy.uint8)

    def exposed_faces(self, chunk):
        """Boolean (S,S,S,6) mask of faces to draw, faces ordered as util.FACES."""
        S = CHUNK_SIZE
        padded = self._gather_halo(chunk)
        if self.clip is not None:
            padded = self._apply_clip(padded, chunk.origin)
        blocks = padded[1:-1, 1:-1, 1:-1]
        water = BLOCK_FLUID[blocks]
        solid = (blocks != AIR) & ~water
        exposed = numpy.zeros(blocks.shape + (6,), dtype=bool)
        for f, (dx, dy, dz) in enumerate(FACES):
            neighbor = padded[1 + dx:1 + dx + S, 1 + dy:1 + dy + S, 1 + dz:1 + dz + S]
            # Water draws only against open air; everything else against any see-through block.
            exposed[..., f] = (water & (neighbor == AIR)) | (solid & BLOCK_TRANSPARENT[neighbor])
        return exposed, blocks

    def build(self, chunk):
        t0 = time.perf_counter()
        exposed, blocks = self.exposed_faces(chunk)
        coords = numpy.argwhere(exposed)  # x, y, z, face in scan order
        if len(coords) == 0:
            return Geometry.empty(chunk.origin)
        pos = coords[:, :3]
        face = coords[:, 3]
        kinds = blocks[pos[:, 0], pos[:, 1], pos[:, 2]]
        n = len(coords)

        vertices = (FACE_QUADS[face] + pos[:, None, :].astype(numpy.float32)).reshape(-1, 3)
        colors = numpy.repeat(BLOCK_COLORS[kinds], 4, axis=0)
        uvs = numpy.repeat(BLOCK_UV[kinds], 4, axis=0)

        tris = (numpy.arange(n, dtype=numpy.int32) * 4)[:, None] + QUAD_TRIANGLES[None, :]
        is_water = BLOCK_FLUID[kinds]
        opaque = tris[~is_water].ravel()
        water = tris[is_water].ravel()
        geometry = Geometry(chunk.origin, vertices.astype(numpy.float32), colors, uvs, opaque, water)
        logutil.log("MESH", f"built {chunk.origin}: {n} faces in {(time.perf_counter() - t0) * 1000.0:.2f}ms")
        return geometry
