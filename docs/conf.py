# Sphinx configuration of the MarchingCubesTable API documentation.
from importlib.metadata import version as package_version

project = "MarchingCubesTable"
author = "MarchingCubesTable developers"
copyright = f"2025, {author}"
release = str(package_version("MarchingCubesTable"))

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx_autodoc_typehints",
]
exclude_patterns = ["_build"]

# mocked while rendering the API pages
autodoc_mock_imports = ["torch", "gustaf", "trimesh"]
autodoc_default_options = {"members": True, "undoc-members": True}
autodoc_typehints = "description"

html_theme = "pydata_sphinx_theme"
html_theme_options = {"navigation_depth": 3}
