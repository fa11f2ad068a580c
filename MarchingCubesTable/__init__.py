"""
MarchingCubesTable - Marching Cubes Case Table Generation
==========================================================

MarchingCubesTable builds the 256 entry marching cubes lookup table from a
small set of hand-authored representative cases by applying the symmetry
group of the cube (24 rotations and the point reflection), and extracts the
triangulated surface patch of a single cube from its eight corner weights.

Key Components
--------------

Geometry
    - ``MarchingCubesTable.geometry``: Corners, edges and edge interpolation

Symmetry
    - ``MarchingCubesTable.symmetry``: Rotations and mirror acting on corner,
      edge and cube ids, orbit classification

Case Table
    - ``MarchingCubesTable.representative_cases``: Canonical triangulations,
      JSON loading and saving
    - ``MarchingCubesTable.case_table``: Orbit expansion into the full table

Mesh Extraction
    - ``MarchingCubesTable.mesh``: Cube id classification and ``RawMesh``
      extraction

Utilities
    - ``MarchingCubesTable.export``: Code generation formats of the table
    - ``MarchingCubesTable.utils``: Logging configuration

Examples
--------
Extract the surface patch of a cube with one positive corner::

    from MarchingCubesTable.mesh import extract

    mesh = extract([1, -1, -1, -1, -1, -1, -1, -1])
    mesh.vertices   # three points on the edges leaving corner 0
    mesh.triangles  # [0, 1, 2]

Generate the classic triangle table::

    from MarchingCubesTable.case_table import get_case_table
    from MarchingCubesTable.export import format_triangle_table

    print(format_triangle_table(get_case_table()))
"""

import MarchingCubesTable.utils

MarchingCubesTable.utils.configure_logging()

__version__ = "0.1.0"
__author__ = "MarchingCubesTable developers"
