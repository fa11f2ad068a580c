from collections import Counter, defaultdict

import numpy as np
import pytest
import torch

from MarchingCubesTable.case_table import (
    Case,
    CaseTableBuilder,
    EMPTY_CASE,
    build_case_table,
    get_case_table,
    mirror_case,
    rotate_case,
)
from MarchingCubesTable.geometry import CORNER_POSITIONS, EDGES, crossed_edges, edge_id
from MarchingCubesTable.mesh import extract, weights_from_cube_id
from MarchingCubesTable.representative_cases import REPRESENTATIVES
from MarchingCubesTable.symmetry import cube_id_orbit, mirror_cube_id


@pytest.fixture
def table():
    return get_case_table()


def signed_volume(cube_id, table):
    """Volume of the cones from the positive corners' centroid over the patch."""
    mesh = extract(weights_from_cube_id(cube_id), table=table)
    positive = [corner for corner in range(8) if (cube_id >> corner) & 1]
    center = CORNER_POSITIONS[positive].mean(axis=0)
    a, b, c = (mesh.vertices[mesh.faces[:, k]] - center for k in range(3))
    return np.einsum("ij,ij->i", a, np.cross(b, c)).sum() / 6.0


def test_table_covers_all_cube_ids(table):
    assert len(table) == 256
    for cube_id, case in enumerate(table):
        assert isinstance(case, Case)
        assert len(case.triangles) % 3 == 0
        assert all(0 <= index < len(case.edges) for index in case.triangles)


def test_empty_configurations(table):
    assert table[0] == EMPTY_CASE
    assert table[255] == EMPTY_CASE
    assert table.origin(0) == 0
    assert table.origin(255) == 255


def test_cases_use_the_crossed_edges(table):
    for cube_id, case in enumerate(table):
        assert len(set(case.edges)) == len(case.edges)
        assert set(case.edges) == set(crossed_edges(cube_id)), f"cube id {cube_id}"


def test_cases_are_consistently_wound(table):
    for cube_id, case in enumerate(table):
        faces = np.asarray(case.triangles).reshape(-1, 3)
        directed = [(f[i], f[(i + 1) % 3]) for f in faces for i in range(3)]
        # two triangles sharing an edge traverse it in opposite directions
        assert len(directed) == len(set(directed)), f"cube id {cube_id}"
        for face in faces:
            assert len(set(face)) == 3


def test_representatives_are_seeded_unchanged(table):
    for base_id, (edges, triangles) in REPRESENTATIVES.items():
        assert table[base_id] == Case(tuple(edges), tuple(triangles))


def test_orbits_partition_cube_ids():
    builder = CaseTableBuilder()
    visited = {}
    for base_id, (edges, triangles) in REPRESENTATIVES.items():
        written = builder.expand(Case(tuple(edges), tuple(triangles)), base_id)
        assert written == cube_id_orbit(base_id)
        for other_id, other in visited.items():
            assert not written & other, f"{base_id} overlaps {other_id}"
        visited[base_id] = written
    covered = set().union(*visited.values())
    assert covered == set(range(1, 255))
    assert builder.unfilled == []
    built = builder.build()
    assert list(built) == list(get_case_table())


@pytest.mark.parametrize("base_id", [1, 3, 7, 254, 139])
def test_orbit_orientation(base_id, table):
    reference = signed_volume(base_id, table)
    assert reference > 0
    for cube_id in cube_id_orbit(base_id):
        assert table.origin(cube_id) == base_id
        np.testing.assert_allclose(signed_volume(cube_id, table), reference)


def test_mirror_sweep_reverses_winding(table):
    mirrored_id = mirror_cube_id(139)
    assert mirrored_id == 209
    representative = Case(*(tuple(part) for part in REPRESENTATIVES[139]))
    assert table[mirrored_id] == mirror_case(representative)
    assert table[mirrored_id].edges == (0, 4, 3, 5, 10, 11)
    assert table[mirrored_id].triangles == tuple(reversed(representative.triangles))


def face_signature(cube_id, axis, side):
    """Signs of the four corners on one face, listed in the order of the low face."""
    return tuple(
        (cube_id >> (corner | (side << axis))) & 1
        for corner in range(8)
        if not (corner >> axis) & 1
    )


def face_segments(case, axis, side):
    """
    Directed boundary segments the patch cuts on one face.

    Edges are named by their counterpart on the low face and segments of the
    high face are reversed, so two neighbours agree iff the sets are equal.
    """
    corners = case.edge_triangles
    directed = [
        (corners[i + k], corners[i + (k + 1) % 3])
        for i in range(0, len(corners), 3)
        for k in range(3)
    ]
    sides = Counter(frozenset(segment) for segment in directed)
    shift = side << axis
    segments = set()
    for u, v in directed:
        if sides[frozenset((u, v))] != 1:
            continue
        ends = [EDGES[u].from_id, EDGES[u].to_id, EDGES[v].from_id, EDGES[v].to_id]
        if any((corner >> axis) & 1 != side for corner in ends):
            continue
        u_low = edge_id(EDGES[u].from_id - shift, EDGES[u].to_id - shift)
        v_low = edge_id(EDGES[v].from_id - shift, EDGES[v].to_id - shift)
        segments.add((v_low, u_low) if side else (u_low, v_low))
    return frozenset(segments)


@pytest.mark.parametrize("axis", [0, 1, 2])
def test_neighbouring_cubes_share_face_segments(axis, table):
    low_faces = defaultdict(dict)
    for cube_id, case in enumerate(table):
        signature = face_signature(cube_id, axis, 0)
        low_faces[signature][cube_id] = face_segments(case, axis, 0)

    mismatched = []
    for cube_id, case in enumerate(table):
        high = face_segments(case, axis, 1)
        for neighbour, low in low_faces[face_signature(cube_id, axis, 1)].items():
            if low != high:
                mismatched.append((cube_id, neighbour))
    assert not mismatched, f"{len(mismatched)} pairs, e.g. {mismatched[:5]}"


def connected_triangles(case):
    faces = [set(case.triangles[i : i + 3]) for i in range(0, len(case.triangles), 3)]
    component = {0}
    grown = True
    while grown:
        grown = False
        for i, face in enumerate(faces):
            if i not in component and any(face & faces[j] for j in component):
                component.add(i)
                grown = True
    return len(component)


def test_complement_bridges_ambiguous_face(table):
    # corners 0 and 3 alone: two separate triangles
    assert table[9].n_triangles == 2
    assert connected_triangles(table[9]) == 1
    # all but corners 0 and 3: one band through the ambiguous bottom face
    assert table[246].n_triangles == 4
    assert connected_triangles(table[246]) == 4
    assert face_segments(table[246], 2, 0) == {(3, 2), (1, 0)}


def test_rotate_case_keeps_triangles():
    case = Case((3, 8, 1, 9), (0, 1, 2, 2, 1, 3))
    for rotation_id in range(24):
        rotated = rotate_case(case, rotation_id)
        assert rotated.triangles == case.triangles
    assert rotate_case(case, 0) == case


def test_conflicting_representatives_are_rejected():
    builder = CaseTableBuilder()
    builder.expand(Case((0, 3, 8), (0, 1, 2)), 1)
    with pytest.raises(RuntimeError):
        # corner 1 alone is a rotation of corner 0 alone
        builder.expand(Case((0, 9, 1), (0, 1, 2)), 2)


def test_incomplete_table_is_rejected():
    builder = CaseTableBuilder()
    builder.expand(Case((0, 3, 8), (0, 1, 2)), 1)
    assert len(builder.unfilled) == 254 - 8
    with pytest.raises(RuntimeError):
        builder.build()
    with pytest.raises(RuntimeError):
        build_case_table({1: ([0, 3, 8], [0, 1, 2])})


def test_invalid_representatives_are_rejected():
    builder = CaseTableBuilder()
    with pytest.raises(ValueError):
        builder.expand(Case((0, 3, 8), (0, 1, 3)), 1)
    with pytest.raises(ValueError):
        builder.expand(Case((0, 3, 8), (0, 1)), 1)
    with pytest.raises(ValueError):
        builder.expand(Case((0, 3, 9), (0, 1, 2)), 1)


def test_shared_table_is_built_once(table):
    assert get_case_table() is table
    fresh = build_case_table()
    assert fresh is not table
    assert list(fresh) == list(table)


def test_table_tensors(table):
    triangle_table, num_triangles = table.to_torch(device="cpu")
    assert triangle_table.shape == (256, 16)
    assert triangle_table.dtype == torch.long
    assert torch.all(triangle_table[0] == -1)
    assert triangle_table[1, :4].tolist() == [0, 3, 8, -1]
    assert num_triangles[105].item() == 4
    assert num_triangles.sum().item() * 3 == (triangle_table >= 0).sum().item()
    with pytest.raises(ValueError):
        table.to_torch(width=12)


if __name__ == "__main__":
    test_orbits_partition_cube_ids()
    test_rotate_case_keeps_triangles()
    test_conflicting_representatives_are_rejected()
    test_incomplete_table_is_rejected()
    test_invalid_representatives_are_rejected()
