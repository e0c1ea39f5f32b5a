"""
Pytest configuration and fixtures.

This file ensures proper path setup for imports and provides shared keys.
"""

import os
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from docseal import DocumentEncryptor  # noqa: E402


@pytest.fixture
def primary_key() -> bytes:
    return os.urandom(32)


@pytest.fixture
def deterministic_key() -> bytes:
    return os.urandom(32)


@pytest.fixture
def encryptor(primary_key, deterministic_key) -> DocumentEncryptor:
    return DocumentEncryptor(primary_key=primary_key, deterministic_key=deterministic_key)
