import sys
from pathlib import Path

import pytest

# Run against src/ without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from roguely.core.random import RandomSource  # noqa: E402


@pytest.fixture()
def seeded():
    """A fresh deterministic random source."""
    return RandomSource(1234)
