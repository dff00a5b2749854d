import math

# Size of chunks used to store, mesh and dirty-track blocks (cube edge, in blocks).
CHUNK_SIZE = 16

# Simulation driver
TICK_RATE = 0.2  # seconds between gravity ticks
MAX_TICKS_PER_UPDATE = 4  # cap catch-up ticks when the caller stalls

# Terrain shells, as fractions of the planet radius.
CORE_FRACTION = 0.2  # inside this: magma
MANTLE_FRACTION = 0.45  # inside this: bedrock with some magma
MANTLE_MAGMA_CHANCE = 0.06
SURFACE_DEPTH = 3  # outermost blocks of the crust get biome blocks
# Caves never open closer than this to the center.
CAVE_CORE_EXCLUSION = 10.0

# Noise layer scales relative to WorldConfig.noise_frequency.
CONTINENT_FREQUENCY_SCALE = 0.25
BASE_FREQUENCY_SCALE = 0.5
BASE_HEIGHT_WEIGHT = 0.25
OCEAN_DEPTH_SCALE = 0.5
MOUNTAIN_RIDGE = 0.8  # ridge value above which a column counts as mountain
# Fixed-frequency layers.
CAVE_FREQUENCY = 0.1
TEMPERATURE_FREQUENCY = 0.03
PATCH_FREQUENCY = 0.15
BEACH_HEIGHT = 1.5  # surfaces within this of sea level become sand

# Flat per-block colors (0-1 RGB) used by the mesher.
WATER_COLOR = (0.18, 0.40, 0.74)

# Enable ANSI colors in logs.
LOG_COLOR = True

# Log world generation timings and failures.
LOG_GENERATION = True

# Log per-tick simulation stats (noisy).
LOG_SIMULATION = False

# Logging for mesh activity.
MESH_LOG = False

# Defaults for a new world.
DEFAULT_SEED = 12345
DEFAULT_WORLD_SIZE = 4
DEFAULT_PLANET_RADIUS = 24
DEFAULT_SEA_LEVEL = 26.0
DEFAULT_NOISE_FREQUENCY = 0.05
DEFAULT_NOISE_AMPLITUDE = 8.0
DEFAULT_CONTINENT_THRESHOLD = 0.45
DEFAULT_CAVE_THRESHOLD = 0.65

# Valid ranges for values coming from editor sliders.
CONFIG_RANGES = {
    'world_size': (1, 8),
    'planet_radius': (10, 60),
    'sea_level': (10.0, 70.0),
    'noise_frequency': (0.01, 0.2),
    'noise_amplitude': (0.0, 20.0),
    'continent_threshold': (0.0, 1.0),
    'cave_threshold': (0.0, 1.0),
}


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


class WorldConfig(object):
    """
    Flat record of per-world generation parameters.

    The constructor only enforces structural limits so small test planets can
    be described directly. Values arriving from UI controls should go through
    `update` or `from_dict`, which clamp to CONFIG_RANGES.
    """
    FIELDS = ('seed', 'world_size', 'planet_radius', 'sea_level', 'noise_frequency',
              'noise_amplitude', 'continent_threshold', 'cave_threshold')

    def __init__(self, seed=DEFAULT_SEED, world_size=DEFAULT_WORLD_SIZE,
                 planet_radius=DEFAULT_PLANET_RADIUS, sea_level=DEFAULT_SEA_LEVEL,
                 noise_frequency=DEFAULT_NOISE_FREQUENCY, noise_amplitude=DEFAULT_NOISE_AMPLITUDE,
                 continent_threshold=DEFAULT_CONTINENT_THRESHOLD, cave_threshold=DEFAULT_CAVE_THRESHOLD):
        lo, hi = CONFIG_RANGES['world_size']
        self.seed = int(seed)
        self.world_size = _clamp(int(world_size), lo, hi)
        self.planet_radius = max(0, int(planet_radius))
        self.sea_level = max(0.0, float(sea_level))
        self.noise_frequency = max(1e-6, float(noise_frequency))
        self.noise_amplitude = max(0.0, float(noise_amplitude))
        self.continent_threshold = _clamp(float(continent_threshold), 0.0, 1.0)
        self.cave_threshold = _clamp(float(cave_threshold), 0.0, 1.0)

    def update(self, **values):
        """Apply editor values, clamping each to its documented range."""
        for name, value in values.items():
            if name not in self.FIELDS:
                raise KeyError(name)
            if name == 'seed':
                self.seed = int(value)
                continue
            lo, hi = CONFIG_RANGES[name]
            if isinstance(lo, int):
                value = int(round(value))
            else:
                value = float(value)
                if math.isnan(value):
                    value = lo
            setattr(self, name, _clamp(value, lo, hi))
        return self

    def copy(self):
        return WorldConfig(**self.as_dict())

    def as_dict(self):
        return {name: getattr(self, name) for name in self.FIELDS}

    @classmethod
    def from_dict(cls, values):
        return cls().update(**values)

    def __eq__(self, other):
        if not isinstance(other, WorldConfig):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        fields = ', '.join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"WorldConfig({fields})"
