"""Shared test fixtures."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from microchron.engine import GregorianEngine

UTC = ZoneInfo("UTC")


@pytest.fixture
def engine():
    return GregorianEngine()


@pytest.fixture
def amsterdam_engine():
    return GregorianEngine("Europe/Amsterdam")


@pytest.fixture
def moment():
    """Thursday 2014-10-09 09:17:50 UTC, whole seconds."""
    return datetime(2014, 10, 9, 9, 17, 50, tzinfo=UTC)
