import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

from qrseal.crypto import kdf  # noqa: E402


@pytest.fixture
def fast_kdf(monkeypatch: pytest.MonkeyPatch) -> kdf.Argon2Params:
    """Swap in a cheap Argon2 profile for tests that derive many keys."""
    params = kdf.Argon2Params(mem_cost_kib=8 * 1024, time_cost=1, parallelism=1)
    monkeypatch.setattr(kdf, "FORMAT_PARAMS", params)
    return params
