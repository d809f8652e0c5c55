"""Pytest fixtures for deal lookup, page loader and analytics tests."""

import pytest

from src.analytics.sink import AnalyticsSink
from src.utils.config_loader import LandingSettings


class RecordingSink(AnalyticsSink):
    """Collects analytics events in memory."""

    def __init__(self):
        self.events = []

    def notify(self, event_name, category, label=None, value=None):
        self.events.append((event_name, category, label, value))

    def names(self):
        return [e[0] for e in self.events]


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def settings_without_token():
    return LandingSettings(hubspot_access_token=None, integrations_mode="real")


@pytest.fixture
def settings_with_token():
    return LandingSettings(hubspot_access_token="test-token", integrations_mode="real")
