#std/external libs
import enum
import numpy

#local libs
import config
import simplex
from config import CHUNK_SIZE
from blocks import BlockKind

AIR = BlockKind.AIR
BEDROCK = BlockKind.BEDROCK
STONE = BlockKind.STONE
DIRT = BlockKind.DIRT
SAND = BlockKind.SAND
GRAVEL = BlockKind.GRAVEL
CLAY = BlockKind.CLAY
GRASS = BlockKind.GRASS
SNOW = BlockKind.SNOW
MAGMA = BlockKind.MAGMA
WATER = BlockKind.WATER

_U64 = (1 << 64) - 1


class GenerationMode(enum.Enum):
    FULL = 'full'
    SHAPE = 'shape'  # sphere and shells only, no noise; fast previews
    TERRAIN = 'terrain'


class Noise2D(object):
    """Seeded 2D simplex layer sampled at global block coordinates."""
    def __init__(self, seed, frequency):
        self.noise = simplex.SimplexNoise(seed=seed)
        self.frequency = frequency
        # Phase offset keeps layers sharing a frequency from lining up.
        rng = numpy.random.RandomState(int(seed) & 0xffffffff)
        self.phase = rng.uniform(0.0, 97.0, size=2)

    def sample(self, a, b):
        """Signed noise (about [-1,1]) at every broadcast pair of `a` and `b`."""
        a, b = numpy.broadcast_arrays(numpy.asarray(a, dtype=numpy.float64),
                                      numpy.asarray(b, dtype=numpy.float64))
        Z = numpy.stack([a.ravel(), b.ravel()], axis=1) * self.frequency + self.phase
        return self.noise.noise(Z).reshape(a.shape)

    def sample01(self, a, b):
        return numpy.clip(0.5 + 0.5 * self.sample(a, b), 0.0, 1.0)


class TerrainGenerator:
    """
    Fills chunks of a spherical planet from a snapshot of WorldConfig.

    Every cell is a pure function of (global position, config, seed): the
    vectorized `generate_blocks` and the scalar `block_at` agree cell for cell.
    """

    def __init__(self, world_config, center, mode=GenerationMode.FULL):
        # Own copy so later edits to the world's config don't leak into built chunks.
        self.config = world_config.copy()
        self.center = tuple(float(c) for c in center)
        self.mode = GenerationMode(mode)
        self.use_noise = self.mode != GenerationMode.SHAPE
        seed = self.config.seed
        f = self.config.noise_frequency
        # Broad land/ocean plates and elevation.
        self.continents = Noise2D(seed + 101, f * config.CONTINENT_FREQUENCY_SCALE)
        self.ridges = Noise2D(seed + 102, f)
        self.base = Noise2D(seed + 103, f * config.BASE_FREQUENCY_SCALE)
        # Caves from the product of two 2D fields (cheaper than full 3D).
        self.cave_xy = Noise2D(seed + 120, config.CAVE_FREQUENCY)
        self.cave_yz = Noise2D(seed + 121, config.CAVE_FREQUENCY)
        # Surface biome controls.
        self.temperature = Noise2D(seed + 106, config.TEMPERATURE_FREQUENCY)
        self.patches = Noise2D(seed + 107, config.PATCH_FREQUENCY)

    def _elevation(self, gx, gz):
        """Column elevation above planet_radius and the mountain mask, shape (X,1,Z)."""
        cfg = self.config
        shape = numpy.broadcast(gx, gz).shape
        if not self.use_noise:
            return numpy.zeros(shape), numpy.zeros(shape, dtype=bool)
        continent = self.continents.sample01(gx, gz)
        land = continent >= cfg.continent_threshold
        # Ridged noise: fold around zero then square for sharp crests.
        ridge = (1.0 - numpy.abs(self.ridges.sample(gx, gz))) ** 2
        base = self.base.sample01(gx, gz)
        land_elev = cfg.noise_amplitude * (ridge + config.BASE_HEIGHT_WEIGHT * base)
        depth = numpy.clip((cfg.continent_threshold - continent) / max(cfg.continent_threshold, 1e-6), 0.0, 1.0)
        ocean_elev = -cfg.noise_amplitude * config.OCEAN_DEPTH_SCALE * depth
        elevation = numpy.where(land, land_elev, ocean_elev)
        mountain = land & (ridge > config.MOUNTAIN_RIDGE)
        return elevation, mountain

    def _cell_random(self, gx, gy, gz, salt=0):
        # Splitmix64-style integer hash for deterministic floats in [0,1).
        gx, gy, gz = numpy.broadcast_arrays(gx, gy, gz)
        key = numpy.uint64((int(self.config.seed) * 0x94D049BB133111EB + salt) & _U64)
        h = (gx.astype(numpy.uint64) * numpy.uint64(0x632BE59BD9B4E019)) \
            ^ (gy.astype(numpy.uint64) * numpy.uint64(0x9E3779B97F4A7C15)) \
            ^ (gz.astype(numpy.uint64) * numpy.uint64(0xD6E8FEB86659FD93)) ^ key
        h = (h ^ (h >> numpy.uint64(30))) * numpy.uint64(0xBF58476D1CE4E5B9)
        h = (h ^ (h >> numpy.uint64(27))) * numpy.uint64(0x94D049BB133111EB)
        h = h ^ (h >> numpy.uint64(31))
        return (h >> numpy.uint64(11)).astype(numpy.float64) / float(1 << 53)

    def _surface_blocks(self, gx, gz, surface, mountain):
        """Top block and sub-surface block per column."""
        cfg = self.config
        beach = surface <= cfg.sea_level + config.BEACH_HEIGHT
        if not self.use_noise:
            top = numpy.where(beach, SAND, GRASS)
            sub = numpy.where(beach, SAND, DIRT)
            return top, sub
        temp = self.temperature.sample01(gx, gz)
        patch = self.patches.sample01(gx, gz)
        top = numpy.where(temp < 0.3, SNOW, numpy.where(temp > 0.7, SAND, GRASS))
        top = numpy.where(mountain, SNOW, top)
        top = numpy.where(beach, SAND, top)
        sub = numpy.where(patch < 0.4, DIRT, numpy.where(patch < 0.7, CLAY, GRAVEL))
        sub = numpy.where(top == SAND, SAND, sub)
        return top, sub

    def _classify(self, gx, gy, gz):
        """Block kinds for the grid spanned by gx (X,1,1), gy (1,Y,1) and gz (1,1,Z)."""
        cfg = self.config
        cx, cy, cz = self.center
        R = float(cfg.planet_radius)
        dist = numpy.sqrt((gx - cx) ** 2 + (gy - cy) ** 2 + (gz - cz) ** 2)

        elevation, mountain = self._elevation(gx, gz)
        surface = R + elevation
        solid = dist <= surface
        if self.use_noise:
            cave_signal = self.cave_xy.sample01(gx, gy) * self.cave_yz.sample01(gy, gz)
            cavity = solid & (cave_signal > cfg.cave_threshold) & (dist > config.CAVE_CORE_EXCLUSION)
        else:
            cavity = numpy.zeros(dist.shape, dtype=bool)
        filled = solid & ~cavity

        blocks = numpy.zeros(dist.shape, dtype=numpy.uint8)
        blocks[~filled & (dist <= cfg.sea_level)] = WATER

        core = filled & (dist < config.CORE_FRACTION * R)
        mantle = filled & ~core & (dist < config.MANTLE_FRACTION * R)
        crust = filled & ~core & ~mantle
        crust_top = crust & (dist > surface - config.SURFACE_DEPTH)
        deep = crust & ~crust_top

        blocks[core] = MAGMA
        blocks[mantle] = BEDROCK
        if self.use_noise and mantle.any():
            rnd = self._cell_random(gx, gy, gz)
            blocks[mantle & (rnd < config.MANTLE_MAGMA_CHANCE)] = MAGMA
        blocks[deep] = STONE
        if crust_top.any():
            top, sub = self._surface_blocks(gx, gz, surface, mountain)
            kind = numpy.where(dist > surface - 1.0, top, sub)
            kind = numpy.broadcast_to(kind, dist.shape)
            blocks[crust_top] = kind[crust_top]
        return blocks

    def generate_blocks(self, origin):
        """A fresh (CHUNK_SIZE,)*3 uint8 grid for the chunk at `origin`."""
        ox, oy, oz = origin
        r = numpy.arange(CHUNK_SIZE)
        gx = (ox + r)[:, None, None]
        gy = (oy + r)[None, :, None]
        gz = (oz + r)[None, None, :]
        blocks = self._classify(gx, gy, gz)
        return numpy.ascontiguousarray(blocks, dtype=numpy.uint8)

    def populate(self, chunk):
        chunk.blocks = self.generate_blocks(chunk.origin)
        chunk.dirty = True
        return chunk

    def block_at(self, position):
        """Block kind the generator assigns to a single global position."""
        x, y, z = position
        gx = numpy.array([x])[:, None, None]
        gy = numpy.array([y])[None, :, None]
        gz = numpy.array([z])[None, None, :]
        return BlockKind(int(self._classify(gx, gy, gz)[0, 0, 0]))
