"""
Case Table
==========

Construction of the 256 entry marching cubes case table.

Each representative case is expanded over its orbit: the 24 rotations of the
base cube id receive the rotated case, then, unless the configuration is its
own mirror image, the 24 rotations of the mirrored cube id receive the
rotated mirror case. Rotating a case maps its edge list elementwise and keeps
the triangle list, mirroring additionally reverses the triangle list so the
winding follows the reflected geometry.

The table shared by the package is built on first use by
:func:`get_case_table` and is read-only afterwards.
"""

import functools
import logging
from typing import Iterator, NamedTuple, Optional

import numpy as np
import torch

import MarchingCubesTable
from MarchingCubesTable.geometry import crossed_edges
from MarchingCubesTable.representative_cases import RepresentativeCases
from MarchingCubesTable.symmetry import (
    N_CUBE_IDS,
    N_ROTATIONS,
    mirror_cube_id,
    mirror_edge,
    rotate_cube_id,
    rotate_edge,
)
from MarchingCubesTable.utils import check_id

logger = logging.getLogger(MarchingCubesTable.__name__)

__all__ = [
    "Case",
    "EMPTY_CASE",
    "CaseTable",
    "CaseTableBuilder",
    "rotate_case",
    "mirror_case",
    "build_case_table",
    "get_case_table",
]


class Case(NamedTuple):
    """
    Table entry of one cube id.

    Attributes:
        edges (tuple[int, ...]): Global ids of the crossed edges, in the local
            order the triangles refer to.
        triangles (tuple[int, ...]): Triples of positions into ``edges``.
    """

    edges: tuple
    triangles: tuple

    @property
    def n_triangles(self) -> int:
        return len(self.triangles) // 3

    @property
    def edge_triangles(self) -> tuple:
        """Triangle corners resolved to global edge ids."""
        return tuple(self.edges[i] for i in self.triangles)


EMPTY_CASE = Case((), ())


def rotate_case(case: Case, rotation_id: int) -> Case:
    check_id(rotation_id, N_ROTATIONS, "rotation_id")
    return Case(
        tuple(rotate_edge(edge, rotation_id) for edge in case.edges),
        tuple(case.triangles),
    )


def mirror_case(case: Case) -> Case:
    return Case(
        tuple(mirror_edge(edge) for edge in case.edges),
        tuple(reversed(case.triangles)),
    )


def _check_representative(case: Case, cube_id: int):
    """Reject representatives that cannot describe the surface of ``cube_id``."""
    if len(case.triangles) % 3 != 0:
        raise ValueError(
            f"Case {cube_id}: triangle list length {len(case.triangles)} "
            "is not a multiple of 3"
        )
    if any(not 0 <= index < len(case.edges) for index in case.triangles):
        raise ValueError(
            f"Case {cube_id}: triangle indices must be in [0, {len(case.edges)})"
        )
    if len(set(case.edges)) != len(case.edges) or set(case.edges) != set(
        crossed_edges(cube_id)
    ):
        raise ValueError(
            f"Case {cube_id}: edges {list(case.edges)} differ from the crossed "
            f"edges {list(crossed_edges(cube_id))}"
        )


class CaseTable:
    """
    Read-only table of the 256 cases, indexed by cube id.

    Attributes:
        origins (tuple[int, ...]): Base cube id of the representative each
            slot was generated from.
    """

    def __init__(self, cases, origins):
        if len(cases) != N_CUBE_IDS or len(origins) != N_CUBE_IDS:
            raise ValueError(f"A case table holds exactly {N_CUBE_IDS} cases")
        self._cases = tuple(cases)
        self.origins = tuple(origins)

    def __getitem__(self, cube_id: int) -> Case:
        return self._cases[check_id(cube_id, N_CUBE_IDS, "cube_id")]

    def __len__(self) -> int:
        return len(self._cases)

    def __iter__(self) -> Iterator[Case]:
        return iter(self._cases)

    def get_case(self, cube_id: int) -> Case:
        return self[cube_id]

    def origin(self, cube_id: int) -> int:
        return self.origins[check_id(cube_id, N_CUBE_IDS, "cube_id")]

    def padded_triangles(self, width: int = 16) -> np.ndarray:
        """
        Edge-resolved triangle table of shape (256, width), padded with -1.

        Every row ends with at least one -1, so ``width`` must exceed the
        largest number of triangle corners of any case.
        """
        needed = max(len(case.triangles) for case in self._cases) + 1
        if width < needed:
            raise ValueError(f"width must be at least {needed}, got {width}")
        table = np.full((N_CUBE_IDS, width), -1, dtype=np.int64)
        for cube_id, case in enumerate(self._cases):
            table[cube_id, : len(case.triangles)] = case.edge_triangles
        return table

    def to_torch(self, device="cpu", width: int = 16):
        """
        Upload the table for batched lookups.

        Returns:
            (torch.Tensor, torch.Tensor): Tuple of:
                - Triangle table (256×width): edge ids of the triangle corners,
                  padded with -1.
                - Triangle counts (256): number of triangles per case.
        """
        triangle_table = torch.tensor(
            self.padded_triangles(width),
            dtype=torch.long,
            device=device,
            requires_grad=False,
        )
        num_triangles = torch.tensor(
            [case.n_triangles for case in self._cases],
            dtype=torch.long,
            device=device,
            requires_grad=False,
        )
        return triangle_table, num_triangles


class CaseTableBuilder:
    """
    Write-once state of the 256 table slots during construction.

    Slots 0 and 255 start out holding the empty case. Every other slot is
    filled by :meth:`expand`; a slot claimed by two different
    representatives raises ``RuntimeError``.
    """

    def __init__(self):
        self._cases = [None] * N_CUBE_IDS
        self._origins = [None] * N_CUBE_IDS
        self._write(0, EMPTY_CASE, 0)
        self._write(N_CUBE_IDS - 1, EMPTY_CASE, N_CUBE_IDS - 1)

    def _write(self, cube_id, case, origin):
        previous = self._origins[cube_id]
        if previous is not None and previous != origin:
            raise RuntimeError(
                f"Cube id {cube_id} is generated by representative {previous} "
                f"and by representative {origin}"
            )
        self._cases[cube_id] = case
        self._origins[cube_id] = origin

    def expand(self, case: Case, base_id: int) -> set:
        """
        Write ``case`` and its symmetric variants over the orbit of ``base_id``.

        Returns:
            set[int]: The cube ids written.
        """
        base_id = check_id(base_id, N_CUBE_IDS, "base_id")
        case = Case(tuple(case.edges), tuple(case.triangles))
        _check_representative(case, base_id)

        written = set()
        for rotation_id in range(N_ROTATIONS):
            cube_id = rotate_cube_id(base_id, rotation_id)
            if cube_id in written:
                continue
            written.add(cube_id)
            self._write(cube_id, rotate_case(case, rotation_id), base_id)

        mirrored_id = mirror_cube_id(base_id)
        if mirrored_id in written:
            return written

        mirrored = mirror_case(case)
        for rotation_id in range(N_ROTATIONS):
            cube_id = rotate_cube_id(mirrored_id, rotation_id)
            if cube_id in written:
                continue
            written.add(cube_id)
            self._write(cube_id, rotate_case(mirrored, rotation_id), base_id)
        return written

    @property
    def unfilled(self) -> list:
        return [cube_id for cube_id, case in enumerate(self._cases) if case is None]

    def build(self) -> CaseTable:
        unfilled = self.unfilled
        if unfilled:
            raise RuntimeError(
                f"{len(unfilled)} cube ids are not covered by any "
                f"representative case: {unfilled}"
            )
        return CaseTable(self._cases, self._origins)


def build_case_table(representatives: Optional[RepresentativeCases] = None) -> CaseTable:
    """
    Build a complete case table from representative cases.

    Args:
        representatives (dict, optional): ``cube id -> (edges, triangles)``.
            Defaults to the built-in representative set.

    Returns:
        CaseTable: A new, fully populated table.
    """
    if representatives is None:
        representatives = RepresentativeCases()
    logger.info(f"Building case table from {len(representatives)} representative cases")

    builder = CaseTableBuilder()
    for base_id, (edges, triangles) in sorted(representatives.items()):
        written = builder.expand(Case(tuple(edges), tuple(triangles)), base_id)
        logger.debug(f"Representative {base_id} expanded to {len(written)} cube ids")
    return builder.build()


@functools.lru_cache(maxsize=None)
def get_case_table() -> CaseTable:
    """The process-wide table of the built-in representatives, built once."""
    return build_case_table()
