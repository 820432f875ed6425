"""
Pytest fixtures for Dopamine Reset Coach tests.
"""
import sys
from pathlib import Path

import pytest

# Ensure the repository root is on sys.path so tests can import storage, logic, etc.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import storage
from logic.logic_checkin import default_checkin


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point all persistence at a temporary directory."""
    monkeypatch.setattr(storage, "BASE_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def make_checkin():
    """Build a check-in dict with overrides on top of the defaults."""

    def _make(date_str="2026-01-01", **overrides):
        record = default_checkin(date_str)
        record.update(overrides)
        return record

    return _make
