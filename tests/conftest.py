"""
Shared fixtures for schedule tests.
"""

import pytest

from helpers import DAY, NEXT_DAY, solar_times


@pytest.fixture
def today():
    """Day D: dawn 05:30, solar noon 12:10, dusk 21:00 (UTC)."""
    return solar_times(DAY)


@pytest.fixture
def tomorrow():
    """Day D+1 with dawn at 05:28 (UTC)."""
    return solar_times(NEXT_DAY, dawn=(5, 28), sunrise=(5, 58))


@pytest.fixture
def early_tomorrow():
    """Day D+1 with dawn at 04:00, early enough to trip the dusk floor."""
    return solar_times(NEXT_DAY, dawn=(4, 0), sunrise=(4, 30))
