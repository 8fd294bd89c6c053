"""
Test Configuration
==================

Pytest fixtures shared by the FrameTC tests.
"""

import pytest

from frametc import Timecode


@pytest.fixture
def five_seconds():
    """5 seconds at 25 fps."""
    return Timecode(5 * 25, 25)


@pytest.fixture
def film_tc():
    """An hour and a half of film at 24 fps."""
    return Timecode((90 * 60) * 24, 24)


@pytest.fixture
def packed_tc():
    """05:34:42:05 and its BCD-packed integer."""
    return 87310853, Timecode.at(5, 34, 42, 5)
