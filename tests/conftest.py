"""Shared fixtures for nexavalidate tests."""

import pytest

from nexavalidate.core.config import reset_options


@pytest.fixture(autouse=True)
def default_options():
    """Run every test against default global options."""
    reset_options()
    yield
    reset_options()


@pytest.fixture
def user_data():
    """Mapping used across engine tests."""
    return {
        "name": "inhere",
        "age": 100,
        "oldSt": 1,
        "newSt": 2,
        "email": "some@e.com",
    }
