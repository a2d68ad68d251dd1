"""
Pytest configuration and shared fixtures.

This module provides fixed "now" instants and sample records for all
tests in the Pulse Discovery test suite.
"""

import pytest
from factories import local, make_deal

from pulse_discovery.models.deal import DiscountType
from pulse_discovery.models.service import Service, Venue


@pytest.fixture
def wednesday_evening():
    """Wednesday 2026-02-18 at 17:00 Pacific."""
    return local(2026, 2, 18, 17, 0)


@pytest.fixture
def saturday_afternoon():
    """Saturday 2026-02-21 at 15:00 Pacific."""
    return local(2026, 2, 21, 15, 0)


@pytest.fixture
def sunday_noon():
    """Sunday 2026-02-22 at 12:00 Pacific."""
    return local(2026, 2, 22, 12, 0)


@pytest.fixture
def percent_deal():
    return make_deal(
        id="percent",
        title="45% off growlers",
        discount_type=DiscountType.PERCENT,
        discount_value=45,
    )


@pytest.fixture
def vague_special():
    return make_deal(
        id="vague",
        title="Happy Hour",
        discount_type=DiscountType.SPECIAL,
        discount="Special Offer",
    )


@pytest.fixture
def sample_venues():
    return [
        Venue(id="v1", name="Brackendale Art Gallery", verified=True),
        Venue(id="v2", name="Squamish Public Library"),
    ]


@pytest.fixture
def sample_services():
    return [
        Service(name="Sea to Sky Auto", category="Auto Services", address="1 Main St"),
        Service(name="Chief Yoga", category="Fitness & Gyms", address="38 Cleveland Ave"),
        Service(name="Garibaldi Glass", category="Glass Repair", address="9 Industrial Way"),
    ]


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to every test not marked otherwise."""
    for item in items:
        if not any(marker.name in ["integration", "slow"] for marker in item.iter_markers()):
            item.add_marker(pytest.mark.unit)
