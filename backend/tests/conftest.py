import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from settings import settings  # noqa: E402


@pytest.fixture(autouse=True)
def _no_real_credentials(monkeypatch):
    """Keys from a developer's shell or .env must never reach a test."""
    for name in ("SERPAPI_KEY", "OPENCAGE_API_KEY", "OPENTRIPMAP_API_KEY", "RAPIDAPI_KEY"):
        monkeypatch.setattr(settings, name, None)
