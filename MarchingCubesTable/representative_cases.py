"""
Representative Cases
====================

Hand-authored triangulations seeding the case table, one per orbit of the
48 element cube symmetry group. The empty configurations 0 and 255 are not
listed: the table fills them with the empty case.

Every entry maps a base cube id to ``(edges, triangles)``. ``edges`` are the
global ids of the edges the surface crosses and ``triangles`` lists triples
of positions into ``edges``. For a triangle ``(a, b, c)`` the normal
``(b - a) x (c - a)`` points away from the positive corners.

Two cubes sharing a face must cut it along the same segments, also on
ambiguous faces with diagonally opposite positive corners. The entries with
five or more positive corners are therefore not their complements with the
winding reversed: where a complement would split an ambiguous face the other
way, the surface is connected across it instead (compare 9 and 246).

A different set, e.g. one authored interactively, can be stored and loaded
with :class:`RepresentativeCases`.
"""

import copy
import json
import logging
import pathlib
from typing import Dict, Sequence, Tuple, Union

import MarchingCubesTable

logger = logging.getLogger(MarchingCubesTable.__name__)

__all__ = ["REPRESENTATIVES", "RepresentativeCases", "load_representative_cases"]

REPRESENTATIVES = {
    # one positive corner
    1: ([0, 3, 8], [0, 1, 2]),
    # two positive corners: edge, face diagonal, body diagonal
    3: ([3, 8, 1, 9], [0, 1, 2, 2, 1, 3]),
    9: ([0, 3, 8, 2, 1, 10], [0, 1, 2, 3, 4, 5]),
    129: ([0, 3, 8, 6, 10, 5], [0, 1, 2, 3, 4, 5]),
    # three positive corners
    7: ([11, 1, 2, 9, 8], [0, 1, 2, 0, 3, 1, 0, 4, 3]),
    67: ([9, 1, 8, 3, 6, 7, 11], [0, 1, 2, 2, 1, 3, 4, 5, 6]),
    41: ([9, 4, 5, 0, 3, 8, 2, 1, 10], [0, 1, 2, 3, 4, 5, 6, 7, 8]),
    # four positive corners
    15: ([8, 9, 11, 10], [0, 1, 2, 2, 1, 3]),
    23: ([7, 4, 11, 2, 9, 1], [0, 1, 2, 2, 1, 3, 3, 1, 4, 3, 4, 5]),
    105: (
        [0, 3, 8, 4, 5, 9, 11, 6, 7, 10, 2, 1],
        [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11],
    ),
    135: ([5, 6, 10, 11, 1, 2, 9, 8], [0, 1, 2, 3, 4, 5, 3, 6, 4, 3, 7, 6]),
    # chiral: its mirror image is not a rotation of it
    139: ([6, 2, 5, 3, 8, 9], [0, 1, 2, 1, 3, 4, 2, 1, 4, 2, 4, 5]),
    195: ([7, 11, 10, 5, 3, 8, 1, 9], [0, 1, 2, 0, 2, 3, 4, 5, 6, 5, 7, 6]),
    # five positive corners
    248: ([2, 1, 11, 9, 8], [0, 1, 2, 1, 3, 2, 3, 4, 2]),
    188: ([8, 1, 9, 3, 11, 7, 6], [6, 4, 3, 6, 3, 1, 6, 0, 5, 6, 2, 0, 6, 1, 2]),
    214: (
        [8, 3, 0, 2, 10, 1, 4, 9, 5],
        [3, 4, 1, 4, 8, 1, 1, 8, 0, 8, 6, 0, 2, 7, 5],
    ),
    # six positive corners
    252: ([1, 8, 3, 9], [0, 1, 2, 3, 1, 0]),
    246: ([10, 1, 2, 8, 3, 0], [2, 0, 4, 0, 3, 4, 0, 1, 5, 5, 3, 0]),
    126: ([8, 3, 0, 5, 10, 6], [0, 1, 2, 3, 4, 5]),
    # seven positive corners
    254: ([8, 3, 0], [0, 1, 2]),
}


class RepresentativeCases(dict):
    """
    A dictionary of representative cases, ``cube id -> (edges, triangles)``.

    Can be initialized from a dictionary, loaded from a JSON file, or left
    empty to start from the built-in :data:`REPRESENTATIVES`.
    """

    def __init__(self, cases: Union[Dict[int, Tuple[Sequence, Sequence]], str, None] = None):
        """
        Args:
            cases: A dictionary of cases, a JSON file path, or None for the
                   built-in set.
        """
        if isinstance(cases, (str, pathlib.Path)):
            cases = self._load_from_file(str(cases))
        elif cases is None:
            cases = REPRESENTATIVES
        super().__init__(
            {
                int(cube_id): (list(edges), list(triangles))
                for cube_id, (edges, triangles) in copy.deepcopy(cases).items()
            }
        )

    @staticmethod
    def _load_from_file(filename: str) -> Dict[int, Tuple[list, list]]:
        """
        Load cases from a JSON file of the form
        ``{"<cube id>": {"edges": [...], "triangles": [...]}}``.
        """
        if not filename.endswith(".json"):
            raise ValueError("Unsupported file format. Use .json")
        with open(filename, "r") as f:
            raw = json.load(f)
        logger.debug(f"Loaded {len(raw)} representative cases from {filename}")
        try:
            return {
                int(cube_id): (entry["edges"], entry["triangles"])
                for cube_id, entry in raw.items()
            }
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed representative case file {filename}") from exc

    def save(self, filename: str) -> None:
        """
        Save the cases to a JSON file.
        """
        if not str(filename).endswith(".json"):
            raise ValueError("Unsupported file format. Use .json")
        serializable = {
            str(cube_id): {"edges": list(edges), "triangles": list(triangles)}
            for cube_id, (edges, triangles) in sorted(self.items())
        }
        with open(filename, "w") as f:
            json.dump(serializable, f, indent=4)

    def copy(self):
        """Return a deep copy of the cases."""
        return RepresentativeCases(copy.deepcopy(dict(self)))


def load_representative_cases(filename: str) -> RepresentativeCases:
    return RepresentativeCases(filename)
