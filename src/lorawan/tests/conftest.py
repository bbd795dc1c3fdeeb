"""Pytest configuration and fixtures for pylorawan tests.

This module provides shared fixtures and helpers for the test suite.
"""

import random

import pytest

from lorawan.band import get, get_latest

# Fixed seed for reproducible tests
RANDOM_SEED = 42


def h(text: str) -> bytes:
    """Bytes from a hex string, ignoring spaces."""
    return bytes.fromhex(text.replace(" ", ""))


def random_bytes(n: int) -> bytes:
    """Seeded random bytes of length ``n``."""
    return bytes(random.getrandbits(8) for _ in range(n))


@pytest.fixture(autouse=True)
def seed_random():
    """Seed the random number generator for reproducible tests.

    This fixture runs automatically before each test so random_bytes()
    and the channel vector generators produce the same values every run.
    """
    random.seed(RANDOM_SEED)
    yield


@pytest.fixture
def eu868():
    """EU_863_870 at its latest PHY version."""
    return get_latest("EU_863_870")


@pytest.fixture
def us915():
    """US_902_928 at its latest PHY version."""
    return get_latest("US_902_928")


@pytest.fixture
def ism2400():
    """ISM_2400 at its latest PHY version (200 Hz frequency unit)."""
    return get_latest("ISM_2400")


@pytest.fixture
def cn470_rp001():
    """CN_470_510 at RP001 1.0.3 rev A."""
    return get("CN_470_510", "RP001_V1_0_3_REV_A")
