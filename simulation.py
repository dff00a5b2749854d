'''
simulation.py -- radial gravity for loose blocks and water, run as discrete ticks
'''

# standard library imports
import math
import random
import time
import collections
import numpy

# local imports
import config
import logutil
from util import add, radial_down, perpendicular_faces, chunk_origin
from blocks import AIR, WATER, BLOCK_SIMULATED, BLOCK_FLUID

TickStats = collections.namedtuple('TickStats', 'tick moves rebuilt dirty')


class GravitySimulator(object):
    """
    Moves loose solids and water one cell toward the world center per tick.

    Randomness for slide and spread choices comes from a private stream
    seeded with `seed`, so ticking never changes what generation produces.
    """

    def __init__(self, world, seed=None):
        self.world = world
        self.random = random.Random(seed)
        self.tick_id = 0

    def _open_kind(self, position):
        """Kind at `position`, or None if a block can't be written there."""
        if not self.world.is_inside(position):
            return None
        if self.world.get_chunk(chunk_origin(position)) is None:
            return None
        return self.world.get_block(position)

    def _solid_target(self, position, center):
        down = radial_down(position, center)
        below = add(position, down)
        if self._open_kind(below) in (AIR, WATER):
            return below
        # Blocked: slide diagonally down along one of the 4 perpendicular faces.
        candidates = []
        for side in perpendicular_faces(down):
            cell = add(below, side)
            if self._open_kind(cell) in (AIR, WATER):
                candidates.append(cell)
        if candidates:
            return self.random.choice(candidates)
        return None

    def _fluid_target(self, position, center):
        down = radial_down(position, center)
        below = add(position, down)
        kind = self._open_kind(below)
        if kind == AIR:
            return below
        if kind is None or kind == WATER:
            return None
        candidates = []
        for side in perpendicular_faces(down):
            cell = add(position, side)
            if self._open_kind(cell) == AIR:
                candidates.append(cell)
        if candidates:
            return self.random.choice(candidates)
        return None

    def _move(self, source, target, kind, settled, dirty):
        world = self.world
        displaced = world.get_block(target)
        world.set_block(target, kind, propagate=False)
        world.set_block(source, displaced, propagate=False)
        settled.add(target)
        settled.add(source)
        world.mark_dirty_around(source, dirty)
        world.mark_dirty_around(target, dirty)

    def tick(self):
        """Run one pass over every chunk, outermost chunks first, then remesh touched chunks once."""
        t0 = time.perf_counter()
        self.tick_id += 1
        logutil.set_tick(self.tick_id)
        world = self.world
        center = world.world_center()
        chunks = sorted(world.all_chunks(), key=lambda c: math.dist(c.center(), center), reverse=True)

        settled = set()
        dirty = set()
        moves = 0
        for chunk in chunks:
            ox, oy, oz = chunk.origin
            # argwhere yields cells in x, y, z nested order.
            for lx, ly, lz in numpy.argwhere(BLOCK_SIMULATED[chunk.blocks]):
                position = (ox + int(lx), oy + int(ly), oz + int(lz))
                if position in settled:
                    continue
                kind = world.get_block(position)
                if not BLOCK_SIMULATED[kind]:
                    continue
                if BLOCK_FLUID[kind]:
                    target = self._fluid_target(position, center)
                else:
                    target = self._solid_target(position, center)
                if target is None:
                    continue
                self._move(position, target, kind, settled, dirty)
                moves += 1

        rebuilt = 0
        for origin in sorted(dirty):
            if world.rebuild_mesh(world.get_chunk(origin)) is not None:
                rebuilt += 1
        logutil.log("SIM", f"{moves} moves, {rebuilt} chunks rebuilt in {(time.perf_counter() - t0) * 1000.0:.1f}ms")
        return TickStats(self.tick_id, moves, rebuilt, frozenset(dirty))


class TickScheduler(object):
    """Fixed-interval driver: feed it frame times, it runs whole ticks."""

    def __init__(self, simulator, tick_rate=None, max_ticks_per_update=None):
        self.simulator = simulator
        self.tick_rate = tick_rate if tick_rate is not None else config.TICK_RATE
        if max_ticks_per_update is None:
            max_ticks_per_update = getattr(config, 'MAX_TICKS_PER_UPDATE', 4)
        self.max_ticks_per_update = max_ticks_per_update
        self.accumulator = 0.0

    def update(self, dt):
        self.accumulator += dt
        ticks = 0
        while self.accumulator >= self.tick_rate and ticks < self.max_ticks_per_update:
            self.accumulator -= self.tick_rate
            self.simulator.tick()
            ticks += 1
        if self.accumulator >= self.tick_rate:
            logutil.log("SIM", f"dropping {int(self.accumulator / self.tick_rate)} late ticks", "WARN")
            self.accumulator %= self.tick_rate
        return ticks
