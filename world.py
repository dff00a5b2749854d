'''
world.py -- chunk storage, global/local addressing and the single write path for block edits
'''

# standard library imports
import time
import collections
import numpy

# local imports
import logutil
from config import CHUNK_SIZE, WorldConfig
from util import FACES, chunk_origin, local_offset, add
from blocks import BlockKind, AIR, BLOCK_INDESTRUCTIBLE
from chunk import Chunk
from mapgen import TerrainGenerator, GenerationMode
from mesher import MeshBuilder


def _resolve_kind(kind):
    try:
        return BlockKind(kind)
    except (ValueError, TypeError):
        return None


class World(object):
    """
    Sparse map from chunk origin to Chunk over a cubic lattice of
    `world_size**3` chunks. All block writes go through `set_block`.
    """

    def __init__(self, world_config=None):
        self.config = world_config if world_config is not None else WorldConfig()
        self.chunks = {}
        # Lattice size used by the last generation; config edits take effect on regenerate.
        self.world_size = self.config.world_size
        self.generator = None
        self.mesher = MeshBuilder(self)

    @property
    def extent(self):
        return self.world_size * CHUNK_SIZE

    def world_center(self):
        half = self.extent / 2.0
        return (half, half, half)

    def is_inside(self, position):
        n = self.extent
        x, y, z = position
        return 0 <= x < n and 0 <= y < n and 0 <= z < n

    def get_chunk(self, origin):
        return self.chunks.get(tuple(origin))

    def all_chunks(self):
        # Snapshot so callers may edit blocks while iterating.
        return list(self.chunks.values())

    def get_block(self, position):
        chunk = self.chunks.get(chunk_origin(position))
        if chunk is None:
            return AIR
        return BlockKind(chunk.get_local(*local_offset(position, chunk.origin)))

    def set_block(self, position, kind, propagate=True):
        """
        Write `kind` at the global `position`. Returns False, changing nothing,
        when `kind` is not a BlockKind value, the position is outside the
        lattice, or its chunk is missing.

        With `propagate`, chunks sharing a face with the edited cell are
        marked dirty too so seams get remeshed.
        """
        kind = _resolve_kind(kind)
        if kind is None:
            return False
        if not self.is_inside(position):
            return False
        chunk = self.chunks.get(chunk_origin(position))
        if chunk is None:
            return False
        local = local_offset(position, chunk.origin)
        if not chunk.set_local(local[0], local[1], local[2], kind):
            return False
        if propagate:
            self._mark_seam_neighbors(chunk, local)
        return True

    def _mark_seam_neighbors(self, chunk, local):
        for axis in range(3):
            if local[axis] == 0:
                step = -CHUNK_SIZE
            elif local[axis] == CHUNK_SIZE - 1:
                step = CHUNK_SIZE
            else:
                continue
            origin = list(chunk.origin)
            origin[axis] += step
            neighbor = self.chunks.get(tuple(origin))
            if neighbor is not None:
                neighbor.dirty = True

    def mark_dirty_around(self, position, dirty):
        """Add the chunk holding `position` and its 6 face neighbors to the `dirty` set."""
        origin = chunk_origin(position)
        for offset in [(0, 0, 0)] + FACES:
            o = add(origin, (offset[0] * CHUNK_SIZE, offset[1] * CHUNK_SIZE, offset[2] * CHUNK_SIZE))
            if o in self.chunks:
                dirty.add(o)
        return dirty

    def dig(self, position):
        """Remove the block at `position` unless it is Air or indestructible."""
        kind = self.get_block(position)
        if kind == AIR or BLOCK_INDESTRUCTIBLE[kind]:
            return False
        return self.set_block(position, AIR, propagate=True)

    def paint(self, position, kind):
        kind = _resolve_kind(kind)
        if kind is None or self.get_block(position) == kind:
            return False
        return self.set_block(position, kind, propagate=True)

    def generate(self, mode=GenerationMode.FULL):
        """
        Discard every chunk and rebuild the lattice from the current config.
        A chunk that fails to generate is logged and left out.
        """
        try:
            mode = GenerationMode(mode)
        except ValueError:
            raise ValueError(f"unknown generation mode {mode!r}")
        t0 = time.perf_counter()
        self.chunks = {}
        self.world_size = self.config.world_size
        self.generator = TerrainGenerator(self.config, self.world_center(), mode)
        logutil.log("WORLDGEN", f"generating {self.world_size}^3 chunks, mode={mode.value} seed={self.config.seed}")
        for i in range(self.world_size):
            for j in range(self.world_size):
                for k in range(self.world_size):
                    self._generate_chunk((i * CHUNK_SIZE, j * CHUNK_SIZE, k * CHUNK_SIZE))
        t1 = time.perf_counter()
        for chunk in self.all_chunks():
            self.rebuild_mesh(chunk)
        t2 = time.perf_counter()
        logutil.log("WORLDGEN", f"generated {len(self.chunks)} chunks in {(t1 - t0) * 1000.0:.1f}ms, "
                                f"meshed in {(t2 - t1) * 1000.0:.1f}ms")
        return len(self.chunks)

    def _generate_chunk(self, origin):
        chunk = Chunk(origin)
        try:
            self.generator.populate(chunk)
        except Exception as e:
            logutil.log("WORLDGEN", f"chunk {origin} failed to generate, discarded: {e!r}", "ERROR")
            return None
        self.chunks[chunk.origin] = chunk
        return chunk

    def regenerate_chunk(self, origin):
        """Rebuild a single lattice cell from the last generation's config snapshot."""
        origin = tuple(origin)
        if self.generator is None or origin != chunk_origin(origin) or not self.is_inside(origin):
            return None
        self.chunks.pop(origin, None)
        chunk = self._generate_chunk(origin)
        if chunk is None:
            return None
        dirty = self.mark_dirty_around(origin, set())
        for o in dirty:
            self.chunks[o].dirty = True
        self.rebuild_dirty()
        return chunk

    def rebuild_mesh(self, chunk):
        try:
            chunk.geometry = self.mesher.build(chunk)
        except Exception as e:
            logutil.log("MESH", f"mesh build failed for {chunk.origin}: {e!r}", "ERROR")
            chunk.geometry = None
            chunk.dirty = True
            return None
        chunk.dirty = False
        return chunk.geometry

    def rebuild_dirty(self):
        """Remesh every dirty chunk once; returns how many were rebuilt."""
        count = 0
        for chunk in self.all_chunks():
            if chunk.dirty:
                if self.rebuild_mesh(chunk) is not None:
                    count += 1
        return count

    def set_clip(self, predicate):
        """Install (or clear with None) a clipping predicate; every chunk must remesh."""
        self.mesher.clip = predicate
        for chunk in self.chunks.values():
            chunk.dirty = True

    def count_blocks(self):
        counts = collections.Counter()
        for chunk in self.chunks.values():
            kinds, n = numpy.unique(chunk.blocks, return_counts=True)
            for kind, c in zip(kinds, n):
                counts[BlockKind(int(kind))] += int(c)
        return counts
