import numpy

from config import CHUNK_SIZE

FACES = [
    ( 0, 1, 0), #up
    ( 0,-1, 0), #down
    (-1, 0, 0), #left
    ( 1, 0, 0), #right
    ( 0, 0, 1), #forward
    ( 0, 0,-1), #back
]

cb_v = numpy.array([
        [-1,+1,-1, -1,+1,+1, +1,+1,+1, +1,+1,-1],  # top
        [-1,-1,-1, +1,-1,-1, +1,-1,+1, -1,-1,+1],  # bottom
        [-1,-1,-1, -1,-1,+1, -1,+1,+1, -1,+1,-1],  # left
        [+1,-1,+1, +1,-1,-1, +1,+1,-1, +1,+1,+1],  # right
        [-1,-1,+1, +1,-1,+1, +1,+1,+1, -1,+1,+1],  # front
        [+1,-1,-1, -1,-1,-1, -1,+1,-1, +1,+1,-1],  # back
],dtype = numpy.float32)

# Unit-cube corners of each face (face, corner, xyz), counter-clockwise seen
# from outside, so triangles (0,1,2) and (0,2,3) face along the normal.
FACE_QUADS = ((cb_v.reshape(6, 4, 3) + 1.0) * 0.5).astype(numpy.float32)
QUAD_TRIANGLES = numpy.array([0, 1, 2, 0, 2, 3], dtype=numpy.int32)


def chunk_origin(position):
    """ Returns the origin of the chunk containing the global block `position`.

    Parameters
    ----------
    position : tuple of 3 ints

    Returns
    -------
    origin : tuple of 3 ints, each a multiple of CHUNK_SIZE

    """
    x, y, z = position
    return (x // CHUNK_SIZE * CHUNK_SIZE, y // CHUNK_SIZE * CHUNK_SIZE, z // CHUNK_SIZE * CHUNK_SIZE)


def local_offset(position, origin):
    return (position[0] - origin[0], position[1] - origin[1], position[2] - origin[2])


def add(a, b):
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def neg(a):
    return (-a[0], -a[1], -a[2])


def radial_down(position, center):
    """Face direction best aligned with the vector from `position` to `center`."""
    dx = center[0] - position[0]
    dy = center[1] - position[1]
    dz = center[2] - position[2]
    best = FACES[0]
    best_dot = None
    for face in FACES:
        dot = face[0] * dx + face[1] * dy + face[2] * dz
        if best_dot is None or dot > best_dot:
            best_dot = dot
            best = face
    return best


def perpendicular_faces(direction):
    up = neg(direction)
    return [face for face in FACES if face != direction and face != up]
