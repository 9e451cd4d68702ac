"""Pytest conftest — path setup so tests can import doorstats and helpers."""

import sys
from pathlib import Path

import pytest

# Add backend/ to sys.path so `from doorstats import ...` works
BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# Add tests/ to sys.path so `from helpers import ...` works
TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from helpers import XTRN_INI, make_settings  # noqa: E402


@pytest.fixture
def log_dir(tmp_path):
    directory = tmp_path / "log"
    directory.mkdir()
    return directory


@pytest.fixture
def xtrn_config(tmp_path):
    path = tmp_path / "xtrn.ini"
    path.write_text(XTRN_INI)
    return path


@pytest.fixture
def settings(log_dir, xtrn_config):
    return make_settings(log_dir, xtrn_config)
