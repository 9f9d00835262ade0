"""
Pytest configuration for the test suite.

Adds the project root to sys.path so that imports like
``from pedigree_scan.parsing import ...`` work without installing the
package or per-file sys.path hacks.
"""

import sys
from pathlib import Path

# Add project root so ``from pedigree_scan.*`` imports work
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)
