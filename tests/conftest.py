"""Shared fixtures for role_tracker tests."""

import pytest

from factories import FakeClock
from role_tracker.filters.validity import JobValidityClassifier
from role_tracker.storage.memory_store import InMemoryRoleStore


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def classifier():
    return JobValidityClassifier()


@pytest.fixture
def memory_store():
    return InMemoryRoleStore()
