import pytest

from tests.unit.fakes import FakeConfig, RecordingDriver


@pytest.fixture
def driver() -> RecordingDriver:
    return RecordingDriver()


@pytest.fixture
def fake_config() -> FakeConfig:
    return FakeConfig()
