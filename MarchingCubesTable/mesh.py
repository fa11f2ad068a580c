import logging
from typing import Optional

import gustaf as gus
import numpy as np
import torch as _torch
import trimesh

import MarchingCubesTable
from MarchingCubesTable.case_table import CaseTable, get_case_table
from MarchingCubesTable.geometry import (
    CORNER_POSITIONS,
    EDGE_FROM,
    EDGE_TO,
    N_CORNERS,
    _check_weights,
)
from MarchingCubesTable.symmetry import N_CUBE_IDS
from MarchingCubesTable.utils import check_id

logger = logging.getLogger(MarchingCubesTable.__name__)

__all__ = ["RawMesh", "is_positive", "get_cube_id", "weights_from_cube_id", "extract"]


class RawMesh:
    """
    Surface patch of one cube.

    ``triangles`` is the flat index list of the case, grouped in triples that
    index into ``vertices``. Both arrays are owned by the mesh.
    """

    def __init__(self, vertices: np.ndarray, triangles: np.ndarray):
        self.vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        self.triangles = np.asarray(triangles, dtype=np.int64).reshape(-1)

    @property
    def faces(self) -> np.ndarray:
        return self.triangles.reshape(-1, 3)

    def flipped(self) -> "RawMesh":
        """Copy with reversed winding, the back face of the patch."""
        return RawMesh(self.vertices.copy(), self.triangles[::-1].copy())

    def to_gus(self):
        return gus.Faces(self.vertices.copy(), self.faces.copy())

    def to_trimesh(self):
        return trimesh.Trimesh(
            vertices=self.vertices.copy(), faces=self.faces.copy(), process=False
        )

    def to_torch(self, device="cpu"):
        return (
            _torch.tensor(self.vertices, device=device),
            _torch.tensor(self.faces, dtype=_torch.long, device=device),
        )


def is_positive(weight: float) -> bool:
    # zero counts as negative
    return weight > 0


def get_cube_id(weights) -> int:
    """
    Cube id of eight corner weights: bit ``i`` is set iff ``weights[i] > 0``.

    Raises:
        ValueError: if ``weights`` does not hold exactly eight values.
    """
    weights = _check_weights(weights)
    cube_id = 0
    for i in range(N_CORNERS):
        if is_positive(weights[i]):
            cube_id |= 1 << i
    return cube_id


def weights_from_cube_id(cube_id: int, magnitude: float = 1.0) -> np.ndarray:
    """Corner weights of ``+magnitude`` / ``-magnitude`` following the bits of ``cube_id``."""
    cube_id = check_id(cube_id, N_CUBE_IDS, "cube_id")
    if not magnitude > 0:
        raise ValueError(f"magnitude must be positive, got {magnitude}")
    signs = np.array([1.0 if (cube_id >> i) & 1 else -1.0 for i in range(N_CORNERS)])
    return signs * magnitude


def extract(
    weights,
    scale: float = 1.0,
    cube_id: Optional[int] = None,
    table: Optional[CaseTable] = None,
) -> RawMesh:
    """
    Surface patch of a single cube.

    Looks up the case of the weights' cube id and places one vertex on every
    edge of the case, at the zero crossing of the linear interpolation of the
    weights along that edge. Vertex ``i`` lies on ``case.edges[i]``, so the
    case's triangle list indexes the vertices directly.

    Args:
        weights (array-like): The eight corner weights. Only the sign is used
            for the lookup, the magnitude places the vertices.
        scale (float): Factor applied to all vertex positions.
        cube_id (int, optional): Use this case instead of the one the weights
            classify to. The caller must make sure the weights change sign on
            the case's edges, otherwise vertices hold ``inf`` or ``nan``.
        table (CaseTable, optional): Table to use, defaults to the shared one.

    Returns:
        RawMesh: vertices (N×3) and the flat triangle index list.
    """
    weights = _check_weights(weights)
    if cube_id is None:
        cube_id = get_cube_id(weights)
    else:
        cube_id = check_id(cube_id, N_CUBE_IDS, "cube_id")
        logger.debug(
            f"Extracting case {cube_id} for weights of cube id {get_cube_id(weights)}"
        )
    if table is None:
        table = get_case_table()

    case = table[cube_id]
    edges = np.asarray(case.edges, dtype=np.int64)
    weight_from = weights[EDGE_FROM[edges]]
    weight_to = weights[EDGE_TO[edges]]
    origin = CORNER_POSITIONS[EDGE_FROM[edges]]
    shift = CORNER_POSITIONS[EDGE_TO[edges]] - origin
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = weight_from / (weight_from - weight_to)
        vertices = scale * (origin + shift * ratio[:, None])
    return RawMesh(vertices, np.array(case.triangles, dtype=np.int64))
