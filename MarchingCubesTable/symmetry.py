"""
Cube Symmetry
=============

The symmetry group of the cube acting on corner, edge and cube ids.

The 24 proper rotations are stored as permutations of the corner ids. Each
rotation permutes the coordinate axes and flips some of them, with the
combination chosen so that the determinant is +1. Rotation 0 is the
identity. The mirror is the point reflection through the cube centre
(``corner ^ 7``), which has determinant -1 and commutes with every rotation,
so the rotations together with the mirrored rotations form the full 48
element group.

Acting on fixed integer ids keeps the case table construction purely
combinatorial: no floating point rotation is ever evaluated.
"""

import itertools

import numpy as np

from MarchingCubesTable.geometry import EDGES, N_CORNERS, N_EDGES, _EDGE_LOOKUP
from MarchingCubesTable.utils import check_id

__all__ = [
    "N_ROTATIONS",
    "N_CUBE_IDS",
    "ROTATIONS",
    "rotate_corner",
    "mirror_corner",
    "rotate_edge",
    "mirror_edge",
    "rotate_cube_id",
    "mirror_cube_id",
    "compose_rotations",
    "inverse_rotation",
    "rotation_matrix",
    "cube_id_orbit",
    "group_classification",
]

N_ROTATIONS = 24
N_CUBE_IDS = 256


def _permutation_sign(perm):
    inversions = sum(
        1 for i in range(len(perm)) for j in range(i + 1, len(perm)) if perm[i] > perm[j]
    )
    return -1 if inversions % 2 else 1


def _enumerate_axis_maps():
    """(axis permutation, flip mask) pairs of all proper rotations, identity first."""
    axis_maps = []
    for perm in itertools.permutations(range(3)):
        for flips in range(8):
            flip_sign = -1 if bin(flips).count("1") % 2 else 1
            if _permutation_sign(perm) * flip_sign == 1:
                axis_maps.append((perm, flips))
    return axis_maps


def _corner_permutation(perm, flips):
    # new coordinate j is old coordinate perm[j], inverted where flips has bit j
    result = []
    for corner in range(N_CORNERS):
        rotated = 0
        for axis in range(3):
            bit = ((corner >> perm[axis]) & 1) ^ ((flips >> axis) & 1)
            rotated |= bit << axis
        result.append(rotated)
    return result


_AXIS_MAPS = _enumerate_axis_maps()
assert len(_AXIS_MAPS) == N_ROTATIONS

ROTATIONS = np.array(
    [_corner_permutation(perm, flips) for perm, flips in _AXIS_MAPS], dtype=np.int64
)
ROTATIONS.setflags(write=False)


def _find_rotation(corner_permutation):
    matches = np.flatnonzero((ROTATIONS == corner_permutation).all(axis=1))
    assert matches.size == 1, "Corner permutation is not a proper rotation"
    return int(matches[0])


# _COMPOSITION[first, second] applies first, then second
_COMPOSITION = np.array(
    [
        [_find_rotation(ROTATIONS[second][ROTATIONS[first]]) for second in range(N_ROTATIONS)]
        for first in range(N_ROTATIONS)
    ],
    dtype=np.int64,
)
_COMPOSITION.setflags(write=False)


def rotate_corner(corner_id: int, rotation_id: int) -> int:
    corner_id = check_id(corner_id, N_CORNERS, "corner_id")
    rotation_id = check_id(rotation_id, N_ROTATIONS, "rotation_id")
    return int(ROTATIONS[rotation_id, corner_id])


def mirror_corner(corner_id: int) -> int:
    """Reflect a corner through the cube centre."""
    return check_id(corner_id, N_CORNERS, "corner_id") ^ 7


def rotate_edge(edge_id: int, rotation_id: int) -> int:
    edge = EDGES[check_id(edge_id, N_EDGES, "edge_id")]
    one_id = rotate_corner(edge.from_id, rotation_id)
    other_id = rotate_corner(edge.to_id, rotation_id)
    if one_id > other_id:
        one_id, other_id = other_id, one_id
    result = int(_EDGE_LOOKUP[one_id, other_id])
    assert result >= 0, f"Rotated corners ({one_id}, {other_id}) are not an edge"
    return result


def mirror_edge(edge_id: int) -> int:
    edge = EDGES[check_id(edge_id, N_EDGES, "edge_id")]
    one_id = mirror_corner(edge.from_id)
    other_id = mirror_corner(edge.to_id)

    # the point reflection reverses the order of both endpoints
    assert one_id > other_id, f"Mirrored edge {edge_id} is not descending"

    result = int(_EDGE_LOOKUP[other_id, one_id])
    assert result >= 0, f"Mirrored corners ({other_id}, {one_id}) are not an edge"
    return result


def _permute_bits(cube_id, corner_map):
    result = 0
    for corner in range(N_CORNERS):
        if (cube_id >> corner) & 1:
            result |= 1 << int(corner_map[corner])
    return result


def rotate_cube_id(cube_id: int, rotation_id: int) -> int:
    """Move bit ``i`` of ``cube_id`` to bit ``rotate_corner(i, rotation_id)``."""
    cube_id = check_id(cube_id, N_CUBE_IDS, "cube_id")
    rotation_id = check_id(rotation_id, N_ROTATIONS, "rotation_id")
    return _permute_bits(cube_id, ROTATIONS[rotation_id])


def mirror_cube_id(cube_id: int) -> int:
    cube_id = check_id(cube_id, N_CUBE_IDS, "cube_id")
    return _permute_bits(cube_id, [corner ^ 7 for corner in range(N_CORNERS)])


def compose_rotations(first: int, second: int) -> int:
    """
    Rotation equal to applying ``first`` and then ``second``.

    For every corner ``c``::

        rotate_corner(rotate_corner(c, first), second)
            == rotate_corner(c, compose_rotations(first, second))
    """
    first = check_id(first, N_ROTATIONS, "first")
    second = check_id(second, N_ROTATIONS, "second")
    return int(_COMPOSITION[first, second])


def inverse_rotation(rotation_id: int) -> int:
    rotation_id = check_id(rotation_id, N_ROTATIONS, "rotation_id")
    return int(np.flatnonzero(_COMPOSITION[rotation_id] == 0)[0])


def rotation_matrix(rotation_id: int) -> np.ndarray:
    """
    Integer 3x3 matrix ``M`` of a rotation about the cube centre.

    A corner at ``p`` is moved to ``M @ (p - 0.5) + 0.5``.
    """
    perm, flips = _AXIS_MAPS[check_id(rotation_id, N_ROTATIONS, "rotation_id")]
    matrix = np.zeros((3, 3), dtype=np.int64)
    for axis in range(3):
        matrix[axis, perm[axis]] = -1 if (flips >> axis) & 1 else 1
    return matrix


def cube_id_orbit(cube_id: int, mirror: bool = True) -> set[int]:
    """All cube ids reachable from ``cube_id`` by rotations (and the mirror)."""
    seeds = [check_id(cube_id, N_CUBE_IDS, "cube_id")]
    if mirror:
        seeds.append(mirror_cube_id(cube_id))
    return {
        _permute_bits(seed, ROTATIONS[rotation_id])
        for seed in seeds
        for rotation_id in range(N_ROTATIONS)
    }


def group_classification() -> list[list[int]]:
    """
    Partition of the 256 cube ids into orbits of the 48 element group.

    Orbits are ordered by their smallest cube id and each orbit is sorted, so
    the first entry of every orbit is a canonical representative.
    """
    classified = set()
    orbits = []
    for cube_id in range(N_CUBE_IDS):
        if cube_id in classified:
            continue
        orbit = sorted(cube_id_orbit(cube_id))
        classified.update(orbit)
        orbits.append(orbit)
    return orbits
