"""Pytest configuration and fixtures for MANAS360 tests."""

import pytest
import random
import tempfile
import logging
from datetime import datetime, timezone
from pathlib import Path

import yaml
from pubsub import pub

from manas360.catalog import Catalog
from manas360.config import PortalConfig
from manas360.models import Role, User
from manas360.scheduling import ManualClock, ManualScheduler
from manas360.services import SessionManager


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

T0 = datetime(2025, 3, 14, 18, 0, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no real time or I/O waits")


class EventRecorder:
    """Pub/sub listener that keeps every event it receives."""

    def __init__(self, topic: str):
        self.topic = topic
        self.events = []
        pub.subscribe(self.on_event, topic)

    def on_event(self, event):
        self.events.append(event)

    @property
    def last(self):
        return self.events[-1] if self.events else None


@pytest.fixture(autouse=True)
def clean_pubsub():
    """Drop every listener after each test."""
    yield
    pub.unsubAll()


@pytest.fixture
def record():
    """Factory that subscribes a recorder to a topic."""
    recorders = []

    def _record(topic: str) -> EventRecorder:
        recorder = EventRecorder(topic)
        recorders.append(recorder)
        return recorder

    return _record


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def test_config():
    """Test configuration settings."""
    return {
        "logging": {
            "level": "DEBUG",
            "file_path": "logs/manas360.log",
            "console_output": False,
        },
        "operator": {"id": "th-1", "name": "Dr. Emily Chen"},
        "patient": {"id": "pt-1", "name": "Anonymous User"},
        "sessions": {
            "group_capacity": 15,
            "drop_in_moderator": "Certified Moderator",
            "default_vr_modules": ["thought_record", "grounding"],
        },
        "yield": {
            "group_rate": 499,
            "vr_rate": 2499,
            "individual_rate": 1499,
            "payout_fraction": 0.6,
            "currency": "INR",
        },
        "live": {
            "tick_seconds": 1,
            "join_delay_seconds": 2,
            "initial_waitlist": 8,
            "waitlist_max": 15,
            "waitlist_probability": 0.05,
        },
    }


@pytest.fixture
def config_file(temp_data_dir, test_config):
    """Write the test configuration to a YAML file."""
    path = Path(temp_data_dir) / "manas360.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(test_config, f)
    return str(path)


@pytest.fixture
def config(config_file):
    return PortalConfig(config_file)


@pytest.fixture
def catalog():
    return Catalog.load()


@pytest.fixture
def clock():
    return ManualClock(T0)


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def operator():
    return User(id="th-1", name="Dr. Emily Chen", role=Role.THERAPIST)


@pytest.fixture
def patient():
    return User(id="pt-1", name="Anonymous User", role=Role.PATIENT)


@pytest.fixture
def session_manager(config, catalog, operator, clock, rng):
    return SessionManager(config, catalog, operator, clock=clock, rng=rng)
