"""
Shared test fixtures for simulation unit tests.
"""

import pytest

from boatsim.simulation.controls import ControlInput
from boatsim.simulation.quality import QualityTier
from boatsim.simulation.wave_field import WaveField, WaveFieldConfig
from boatsim.simulation.watercraft import Watercraft, WatercraftConfig
from boatsim.simulation.camera_rig import CameraRig
from boatsim.simulation.session import SessionConfig, SimulationSession


@pytest.fixture
def wave_field():
    """Default FULL-tier wave field at t=0."""
    return WaveField(WaveFieldConfig(), QualityTier.FULL)


@pytest.fixture
def reduced_wave_field():
    """Default REDUCED-tier wave field at t=0."""
    return WaveField(WaveFieldConfig(), QualityTier.REDUCED)


@pytest.fixture
def flat_wave_field():
    """Wave field with every amplitude zeroed."""
    config = WaveFieldConfig(swell_amplitude=0.0, wave_amplitude=0.0, chop_amplitude=0.0)
    return WaveField(config, QualityTier.FULL)


@pytest.fixture
def watercraft():
    """Watercraft with default configuration at spawn."""
    return Watercraft(WatercraftConfig())


@pytest.fixture
def camera_rig():
    return CameraRig()


@pytest.fixture
def neutral():
    """No input."""
    return ControlInput.neutral()


@pytest.fixture
def full_throttle():
    return ControlInput(move_y=1.0)


@pytest.fixture
def session():
    """Session with default configuration, closed after the test."""
    s = SimulationSession(SessionConfig())
    yield s
    s.close()


class FakeClock:
    """Manually advanced clock for driving frame loops in tests."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()
