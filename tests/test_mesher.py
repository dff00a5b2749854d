import os
import sys
import itertools

import numpy as np

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import blocks
from config import CHUNK_SIZE, WorldConfig
from blocks import BlockKind, BLOCK_TRANSPARENT
from chunk import Chunk
from util import FACES, add
from mesher import MeshBuilder, split_view
from world import World


def _empty_world(size=1):
    world = World(WorldConfig(world_size=size))
    for i, j, k in itertools.product(range(size), repeat=3):
        chunk = Chunk((i * CHUNK_SIZE, j * CHUNK_SIZE, k * CHUNK_SIZE))
        world.chunks[chunk.origin] = chunk
    return world


def _emitted(world, chunk):
    """(global position, face) for every face the mesher draws in `chunk`."""
    exposed, _ = world.mesher.exposed_faces(chunk)
    out = []
    for x, y, z, f in np.argwhere(exposed):
        pos = (chunk.origin[0] + int(x), chunk.origin[1] + int(y), chunk.origin[2] + int(z))
        out.append((pos, FACES[f]))
    return out


def test_single_block_is_a_closed_cube():
    world = _empty_world()
    world.set_block((4, 5, 6), BlockKind.STONE)
    geo = world.rebuild_mesh(world.get_chunk((0, 0, 0)))
    assert geo.vertex_count == 24
    assert geo.opaque_triangle_count == 12
    assert geo.water_triangle_count == 0
    assert geo.vertices.min(axis=0).tolist() == [4.0, 5.0, 6.0]
    assert geo.vertices.max(axis=0).tolist() == [5.0, 6.0, 7.0]
    assert np.allclose(geo.colors, blocks.color(BlockKind.STONE))
    assert geo.opaque.max() < geo.vertex_count


def test_quads_wind_outward():
    world = _empty_world()
    world.set_block((4, 5, 6), BlockKind.STONE)
    geo = world.rebuild_mesh(world.get_chunk((0, 0, 0)))
    center = np.array([4.5, 5.5, 6.5])
    tris = geo.vertices[geo.opaque.reshape(-1, 3)]
    normals = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])
    outward = tris.mean(axis=1) - center
    assert np.all((normals * outward).sum(axis=1) > 0)


def test_adjacent_solids_hide_shared_faces():
    world = _empty_world()
    world.set_block((4, 4, 4), BlockKind.STONE)
    world.set_block((5, 4, 4), BlockKind.BEDROCK)
    geo = world.rebuild_mesh(world.get_chunk((0, 0, 0)))
    assert geo.opaque_triangle_count == 20


def test_water_rules():
    world = _empty_world()
    world.set_block((4, 4, 4), BlockKind.WATER)
    world.set_block((5, 4, 4), BlockKind.WATER)
    world.set_block((4, 3, 4), BlockKind.STONE)
    geo = world.rebuild_mesh(world.get_chunk((0, 0, 0)))
    # water pair: 10 outer faces minus the one resting on stone
    assert geo.water_triangle_count == 2 * 9
    # stone draws all faces, including the one under water
    assert geo.opaque_triangle_count == 12
    assert len(geo.water) % 6 == 0


def test_seam_faces_use_neighbor_chunk():
    world = _empty_world(2)
    world.set_block((15, 1, 1), BlockKind.STONE)
    world.set_block((16, 1, 1), BlockKind.STONE)
    left = world.rebuild_mesh(world.get_chunk((0, 0, 0)))
    right = world.rebuild_mesh(world.get_chunk((16, 0, 0)))
    assert left.opaque_triangle_count == 10
    assert right.opaque_triangle_count == 10


def test_missing_neighbor_reads_as_air():
    chunk = Chunk((0, 0, 0))
    chunk.blocks[15, 0, 0] = BlockKind.STONE
    geo = MeshBuilder().build(chunk)
    assert geo.opaque_triangle_count == 12


def test_split_view_draws_cross_section():
    world = _empty_world()
    world.set_block((4, 4, 4), BlockKind.STONE)
    world.set_block((5, 4, 4), BlockKind.STONE)
    world.set_clip(split_view(0, 5))
    assert world.get_chunk((0, 0, 0)).dirty
    geo = world.rebuild_mesh(world.get_chunk((0, 0, 0)))
    assert geo.opaque_triangle_count == 12
    assert geo.vertices[:, 0].max() == 5.0

    world.set_clip(split_view(0, 5, keep_below=False))
    geo = world.rebuild_mesh(world.get_chunk((0, 0, 0)))
    assert geo.vertices[:, 0].min() == 5.0

    world.set_clip(None)
    geo = world.rebuild_mesh(world.get_chunk((0, 0, 0)))
    assert geo.opaque_triangle_count == 20


def test_generated_planet_culling_and_idempotence():
    cfg = WorldConfig(world_size=1, planet_radius=6, sea_level=8, noise_amplitude=0, cave_threshold=1.0)
    world = World(cfg)
    world.generate()
    chunk = world.get_chunk((0, 0, 0))
    first = world.rebuild_mesh(chunk)
    second = world.rebuild_mesh(chunk)
    assert first.same_as(second)
    assert first.opaque_triangle_count > 0
    assert first.water_triangle_count > 0

    for pos, face in _emitted(world, chunk):
        kind = world.get_block(pos)
        neighbor = world.get_block(add(pos, face))
        if kind == BlockKind.WATER:
            assert neighbor == BlockKind.AIR
        else:
            assert BLOCK_TRANSPARENT[neighbor]
