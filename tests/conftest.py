"""Shared fixtures for all test modules."""

import pytest

from helpers import VALID_ANALYSIS, FailingModelClient, FakeModelClient, GatedModelClient


@pytest.fixture
def make_client():
    return FakeModelClient


@pytest.fixture
def failing_client():
    return FailingModelClient()


@pytest.fixture
def gated_client():
    return GatedModelClient()


@pytest.fixture
def valid_analysis():
    return dict(VALID_ANALYSIS)
