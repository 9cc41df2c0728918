# tests/conftest.py
from __future__ import annotations

import pytest

from fakes import FakeLogger, load_wizard


@pytest.fixture(scope="session")
def wizard():
    return load_wizard()


@pytest.fixture
def logger() -> FakeLogger:
    return FakeLogger()
