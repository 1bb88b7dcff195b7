"""Shared fixtures for the stempel tests."""
import time

import pytest
from arrow import Arrow

from stempel.ledger import Ledger


@pytest.fixture(autouse=True)
def berlin_time(monkeypatch):
    """Pin the local timezone so that calendar dates are predictable."""
    # Central European time, spelled out so that no zoneinfo files are needed
    monkeypatch.setenv('TZ', 'CET-1CEST,M3.5.0,M10.5.0/3')
    if hasattr(time, 'tzset'):
        time.tzset()
    yield
    monkeypatch.undo()
    if hasattr(time, 'tzset'):
        time.tzset()


@pytest.fixture
def t0():
    return Arrow(2021, 1, 27, 14, 19, 21, tzinfo='UTC')


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def working(t0):
    ledger = Ledger()
    ledger.start(t0)
    return ledger


@pytest.fixture
def on_break(t0):
    ledger = Ledger()
    ledger.start(t0)
    ledger.start_break(t0.shift(hours=1))
    return ledger


@pytest.fixture
def paths(tmp_path):
    """Config and ledger locations for command line runs."""
    return {
        'config': str(tmp_path / 'config' / 'config.toml'),
        'storage': str(tmp_path / 'data' / 'stempel.json'),
    }
