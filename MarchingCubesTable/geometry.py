"""
Cube Geometry
=============

Fixed geometry of the unit cube the case table is expressed in.

Corner ``i`` sits at ``x = bit0, y = bit1, z = bit2`` of its id::

            6             7
            +-------------+               +-----6-------+
          / |           / |             / |            /|
        /   |         /   |          11   7         10   5
    2 +-----+-------+  3  |         +-----+2------+     |
      |   4 +-------+-----+ 5       |     +-----4-+-----+
      |   /         |   /           3   8         1   9
      | /           | /             | /           | /
    0 +-------------+ 1             +------0------+

The edge order below is the vocabulary of the case table and must never
change.
"""

from typing import NamedTuple

import numpy as np

from MarchingCubesTable.utils import check_id


__all__ = [
    "N_CORNERS",
    "N_EDGES",
    "CORNER_POSITIONS",
    "EDGES",
    "EDGE_FROM",
    "EDGE_TO",
    "Edge",
    "corner_position",
    "edge_id",
    "edge_interpolated_point",
    "edge_interpolated_point_at",
    "edge_midpoint",
    "crossed_edges",
]

N_CORNERS = 8
N_EDGES = 12

CORNER_POSITIONS = np.array(
    [[(i >> 0) & 1, (i >> 1) & 1, (i >> 2) & 1] for i in range(N_CORNERS)],
    dtype=np.float64,
)
CORNER_POSITIONS.setflags(write=False)

_EDGE_PAIRS = (
    (0, 1),  # 00
    (1, 3),  # 01
    (2, 3),  # 02
    (0, 2),  # 03
    (4, 5),  # 04
    (5, 7),  # 05
    (6, 7),  # 06
    (4, 6),  # 07
    (0, 4),  # 08
    (1, 5),  # 09
    (3, 7),  # 10
    (2, 6),  # 11
)


class Edge(NamedTuple):
    """One of the twelve cube edges, ``from_id < to_id``."""

    from_id: int
    to_id: int
    shift: tuple

    @property
    def origin(self) -> np.ndarray:
        return CORNER_POSITIONS[self.from_id]


def _make_edge(from_id, to_id):
    assert to_id - from_id in (1, 2, 4), f"({from_id}, {to_id}) is not a cube edge"
    shift = CORNER_POSITIONS[to_id] - CORNER_POSITIONS[from_id]
    return Edge(from_id, to_id, tuple(float(s) for s in shift))


EDGES = tuple(_make_edge(a, b) for a, b in _EDGE_PAIRS)
EDGE_FROM = np.array([e.from_id for e in EDGES], dtype=np.int64)
EDGE_TO = np.array([e.to_id for e in EDGES], dtype=np.int64)
EDGE_FROM.setflags(write=False)
EDGE_TO.setflags(write=False)

# packed (from, to) -> edge id, -1 where the corner pair is not an edge
_EDGE_LOOKUP = np.full((N_CORNERS, N_CORNERS), -1, dtype=np.int64)
for _i, (_a, _b) in enumerate(_EDGE_PAIRS):
    _EDGE_LOOKUP[_a, _b] = _i
_EDGE_LOOKUP.setflags(write=False)


def corner_position(corner_id: int) -> np.ndarray:
    """Position of a corner of the unit cube."""
    return CORNER_POSITIONS[check_id(corner_id, N_CORNERS, "corner_id")].copy()


def edge_id(from_id: int, to_id: int) -> int:
    """
    Global id of the edge joining two corners, given in ascending order.

    Raises:
        ValueError: if the corners are out of range or are not joined by an edge.
    """
    from_id = check_id(from_id, N_CORNERS, "from_id")
    to_id = check_id(to_id, N_CORNERS, "to_id")
    result = int(_EDGE_LOOKUP[from_id, to_id])
    if result < 0:
        raise ValueError(f"Corners ({from_id}, {to_id}) do not form a cube edge")
    return result


def _check_weights(weights) -> np.ndarray:
    weights = np.asarray(weights, dtype=np.float64)
    if weights.shape != (N_CORNERS,):
        raise ValueError(
            f"weights must hold exactly {N_CORNERS} values, got shape {weights.shape}"
        )
    return weights


def edge_interpolated_point(edge_id: int, weights) -> np.ndarray:
    """
    Zero crossing of the linear interpolation of the corner weights on an edge.

    Returns ``from + (to - from) * w_from / (w_from - w_to)``.

    The endpoint weights are expected to have opposite signs, which the case
    table guarantees for every edge it selects. No check is made: equal
    endpoint weights divide by zero and the result holds ``inf`` or ``nan``.

    Args:
        edge_id (int): Global edge id in ``[0, 12)``.
        weights (array-like): The eight corner weights.

    Returns:
        np.ndarray: Point of shape (3,).
    """
    edge = EDGES[check_id(edge_id, N_EDGES, "edge_id")]
    weights = _check_weights(weights)
    weight_from = weights[edge.from_id]
    weight_to = weights[edge.to_id]
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = weight_from / (weight_from - weight_to)
        return edge.origin + np.asarray(edge.shift) * ratio


def edge_interpolated_point_at(edge_id: int, ratio: float) -> np.ndarray:
    """Point at ``ratio`` along an edge, measured from its lower corner."""
    edge = EDGES[check_id(edge_id, N_EDGES, "edge_id")]
    return edge.origin + np.asarray(edge.shift) * ratio


def edge_midpoint(edge_id: int) -> np.ndarray:
    return edge_interpolated_point_at(edge_id, 0.5)


def crossed_edges(cube_id: int) -> tuple[int, ...]:
    """Ids of the edges whose corners lie on different sides for ``cube_id``."""
    cube_id = check_id(cube_id, 256, "cube_id")
    return tuple(
        i
        for i, edge in enumerate(EDGES)
        if ((cube_id >> edge.from_id) & 1) != ((cube_id >> edge.to_id) & 1)
    )
