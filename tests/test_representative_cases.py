import json

import pytest

from MarchingCubesTable.case_table import build_case_table, get_case_table
from MarchingCubesTable.representative_cases import (
    REPRESENTATIVES,
    RepresentativeCases,
    load_representative_cases,
)
from MarchingCubesTable.symmetry import cube_id_orbit, group_classification


def test_one_representative_per_orbit():
    orbits = group_classification()
    assert len(REPRESENTATIVES) == len(orbits) - 2
    seen = set()
    for base_id in REPRESENTATIVES:
        orbit = frozenset(cube_id_orbit(base_id))
        assert orbit not in seen
        seen.add(orbit)
    assert frozenset([0]) not in seen and frozenset([255]) not in seen


def test_default_cases_are_copies():
    cases = RepresentativeCases()
    assert cases == {k: (list(e), list(t)) for k, (e, t) in REPRESENTATIVES.items()}
    cases[1][0].append(99)
    assert REPRESENTATIVES[1][0] == [0, 3, 8]
    copied = cases.copy()
    copied[3][1].clear()
    assert cases[3][1] == [0, 1, 2, 2, 1, 3]


def test_json_round_trip(tmp_path):
    filename = str(tmp_path / "representatives.json")
    RepresentativeCases().save(filename)
    with open(filename) as f:
        raw = json.load(f)
    assert raw["1"] == {"edges": [0, 3, 8], "triangles": [0, 1, 2]}

    loaded = load_representative_cases(filename)
    assert loaded == RepresentativeCases()
    assert list(build_case_table(loaded)) == list(get_case_table())


def test_unsupported_files_are_rejected(tmp_path):
    with pytest.raises(ValueError):
        RepresentativeCases(str(tmp_path / "cases.yaml"))
    with pytest.raises(ValueError):
        RepresentativeCases().save(str(tmp_path / "cases.txt"))

    malformed = tmp_path / "malformed.json"
    malformed.write_text(json.dumps({"1": {"edges": [0, 3, 8]}}))
    with pytest.raises(ValueError):
        load_representative_cases(str(malformed))


if __name__ == "__main__":
    test_one_representative_per_orbit()
    test_default_cases_are_copies()
