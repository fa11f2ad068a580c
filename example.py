from MarchingCubesTable.case_table import get_case_table
from MarchingCubesTable.export import format_triangle_table
from MarchingCubesTable.mesh import extract, get_cube_id
from MarchingCubesTable.symmetry import group_classification

weights = [0.8, 0.3, -0.4, -1.0, 0.2, -0.6, -0.9, -0.5]
print(f"cube id {get_cube_id(weights)}")

mesh = extract(weights, scale=2.0)
print(mesh.vertices)
print(mesh.faces)

# the patch and its back face, e.g. for a quick look with trimesh
two_sided = mesh.to_trimesh() + mesh.flipped().to_trimesh()
print(f"{len(two_sided.faces)} faces with back face")

for category, orbit in enumerate(group_classification()):
    print(f"{category:2d}: representative {orbit[0]:3d}, {len(orbit):2d} cube ids")

print(format_triangle_table(get_case_table()))
