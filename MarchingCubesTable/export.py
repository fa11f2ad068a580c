"""
Table Export
============

Text and array forms of a case table for embedding it in other
implementations. Writing the text to files is left to the caller.

Functions
---------
format_table_literal
    The full table (edge lists and local triangle lists) as a Python literal.
format_triangle_table
    The classic triangle table: one row per case with the triangle corners
    resolved to edge ids and terminated by ``-1``.
flat_triangle_table
    The rows of the classic triangle table as lists.
padded_triangle_table
    The classic triangle table as a fixed width array.
"""

import logging

import numpy as np

import MarchingCubesTable
from MarchingCubesTable.case_table import CaseTable

logger = logging.getLogger(MarchingCubesTable.__name__)

#: terminates every row of the classic triangle table
SENTINEL = -1


def _format_ids(ids):
    return ", ".join(f"{i:2d}" for i in ids)


def format_table_literal(table: CaseTable, name: str = "CASE_TABLE") -> str:
    """
    Python source defining ``name`` as the list of all 256 cases.

    The entry of cube id 1 reads::

        Case(edges=[ 0,  3,  8], triangles=[ 0,  1,  2]),
    """
    lines = [f"{name} = ["]
    for case in table:
        lines.append(
            f"    Case(edges=[{_format_ids(case.edges)}], "
            f"triangles=[{_format_ids(case.triangles)}]),"
        )
    lines.append("]")
    logger.debug(f"Formatted {len(table)} cases as {name}")
    return "\n".join(lines) + "\n"


def flat_triangle_table(table: CaseTable) -> list:
    """Per cube id, the edge ids of all triangle corners followed by ``-1``."""
    return [list(case.edge_triangles) + [SENTINEL] for case in table]


def format_triangle_table(table: CaseTable, name: str = "TriangleTable") -> str:
    r"""
    The classic triangle table as a constant array literal, one case per line::

        const TriangleTable = [
        \t[-1 ],
        \t[0, 3, 8, -1 ],
        ...
        ];
    """
    result = f"const {name} = [\n"
    for case in table:
        result += "\t["
        for edge in case.edge_triangles:
            result += f"{edge}, "
        result += f"{SENTINEL} ],\n"
    result += "];"
    return result


def padded_triangle_table(table: CaseTable, width: int = 16) -> np.ndarray:
    """(256, width) int array of the classic triangle table, padded with ``-1``."""
    return table.padded_triangles(width)
