"""Pytest configuration for tests.

Sets up Python path and fixtures for all tests.
"""

import sys
from pathlib import Path

# Add project root to Python path so imports work correctly
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import shutil

import pytest

from tests.fixtures.git_fixtures import make_fake_repo


@pytest.fixture
def fake_repo(tmp_path):
    """A directory with .git metadata; git itself is scripted per test."""
    return str(make_fake_repo(tmp_path))


@pytest.fixture
def requires_git():
    """Skip tests that shell out to a real git binary when it is missing."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
