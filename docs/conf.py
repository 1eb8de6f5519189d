"""Sphinx configuration for metasys-py documentation."""

import sys
from pathlib import Path

# autodoc imports the package from the source tree.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from metasys_py import __version__

project = "metasys-py"
author = "metasys-py contributors"
copyright = "2026, metasys-py contributors"

version = __version__
release = version

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx_autodoc_typehints",
]

master_doc = "index"
exclude_patterns = ["_build"]

# -- Autodoc -----------------------------------------------------------------

autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}
# The runtime dependencies are not needed to render the API reference.
autodoc_mock_imports = ["aiohttp", "orjson"]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "aiohttp": ("https://docs.aiohttp.org/en/stable", None),
}

# -- HTML output -------------------------------------------------------------

html_theme = "furo"
html_title = f"metasys-py {version}"
