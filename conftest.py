"""Root-level conftest.py: make the working tree's probedash importable.

Tests run against the checkout even when an older probedash is installed in
the environment: this directory goes first on sys.path and any cached import
is dropped so pytest reloads it from here.
"""

import sys
from pathlib import Path

_root = str(Path(__file__).parent)
if _root not in sys.path:
    sys.path.insert(0, _root)

for _mod in list(sys.modules):
    if _mod == "probedash" or _mod.startswith("probedash."):
        del sys.modules[_mod]
