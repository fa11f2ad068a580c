import time

import numpy as np

from MarchingCubesTable.case_table import build_case_table, get_case_table
from MarchingCubesTable.mesh import extract


def run_benchmark():
    results = []

    start_time = time.perf_counter()
    build_case_table()
    elapsed = time.perf_counter() - start_time
    results.append({"Task": "build table", "Calls": 1, "Time": elapsed})

    table = get_case_table()
    rng = np.random.default_rng(0)
    for n_cubes in [10**3, 10**4, 10**5]:
        weights = rng.uniform(-1, 1, size=(n_cubes, 8))

        start_time = time.perf_counter()
        for cube_weights in weights:
            _ = extract(cube_weights, table=table)
        elapsed = time.perf_counter() - start_time
        results.append({"Task": "extract", "Calls": n_cubes, "Time": elapsed})

    print(f"{'Task':<15} | {'Calls':<10} | {'Time (s)':<10} | {'Per call (us)':<10}")
    print("-" * 58)
    for row in results:
        per_call = 1e6 * row["Time"] / row["Calls"]
        print(
            f"{row['Task']:<15} | {row['Calls']:<10} | {row['Time']:<10.4f} | {per_call:.2f}"
        )
    return results


if __name__ == "__main__":
    run_benchmark()
