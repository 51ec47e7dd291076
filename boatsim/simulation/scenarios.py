"""
Scenarios Module
================

Scripted control programs for headless runs. Each scenario pairs a sea
state and quality tier with a program that maps elapsed simulated time to
a control snapshot.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Union
import logging

from .controls import ControlInput
from .quality import QualityTier
from .wave_field import WaveFieldConfig

logger = logging.getLogger(__name__)


ControlProgram = Callable[[float], ControlInput]


class ScenarioType(Enum):
    """Types of scripted runs."""
    IDLE = "idle"
    STRAIGHT = "straight"
    CIRCLE = "circle"
    BOOST_RUN = "boost_run"
    SLALOM = "slalom"
    RESET_DRILL = "reset_drill"


@dataclass
class Scenario:
    """Complete scripted run definition."""
    name: str
    description: str
    program: ControlProgram
    duration_s: float = 30.0
    quality_tier: QualityTier = QualityTier.FULL
    wave_config: WaveFieldConfig = field(default_factory=WaveFieldConfig)

    def controls_at(self, elapsed: float) -> ControlInput:
        return self.program(elapsed)


def _idle(elapsed: float) -> ControlInput:
    return ControlInput.neutral()


def _straight(elapsed: float) -> ControlInput:
    return ControlInput(move_y=1.0)


def _circle(elapsed: float) -> ControlInput:
    # Slowly orbit the camera to watch the boat from all sides
    return ControlInput(move_y=1.0, move_x=0.6, look_x=0.2)


def _boost_run(elapsed: float) -> ControlInput:
    if elapsed < 3.0:
        return ControlInput(move_y=1.0)
    if elapsed < 6.0:
        return ControlInput(move_y=1.0, boost=True)
    return ControlInput.neutral()


def _slalom(elapsed: float) -> ControlInput:
    # Alternate hard turns every 3 seconds
    direction = 1.0 if math.sin(elapsed * math.pi / 3.0) >= 0 else -1.0
    return ControlInput(move_y=1.0, move_x=0.8 * direction)


def _reset_drill(elapsed: float) -> ControlInput:
    # Reset is momentary: held for a fraction of a second
    if 5.0 <= elapsed < 5.05:
        return ControlInput(reset_requested=True)
    if elapsed < 5.0:
        return ControlInput(move_y=1.0, move_x=0.3)
    return ControlInput(move_y=0.5)


_SCENARIOS = {
    ScenarioType.IDLE: lambda: Scenario(
        name="idle",
        description="No input; the boat settles onto the swell",
        program=_idle,
        duration_s=20.0,
    ),
    ScenarioType.STRAIGHT: lambda: Scenario(
        name="straight",
        description="Full throttle on a constant heading",
        program=_straight,
        duration_s=15.0,
    ),
    ScenarioType.CIRCLE: lambda: Scenario(
        name="circle",
        description="Full throttle with a steady turn and orbiting camera",
        program=_circle,
        duration_s=30.0,
    ),
    ScenarioType.BOOST_RUN: lambda: Scenario(
        name="boost_run",
        description="Accelerate, boost past max speed, then coast",
        program=_boost_run,
        duration_s=15.0,
    ),
    ScenarioType.SLALOM: lambda: Scenario(
        name="slalom",
        description="Alternating hard turns in rough water",
        program=_slalom,
        duration_s=30.0,
        wave_config=WaveFieldConfig(swell_amplitude=4.0, wave_amplitude=2.5, chop_amplitude=0.6),
    ),
    ScenarioType.RESET_DRILL: lambda: Scenario(
        name="reset_drill",
        description="Drive off, press reset, drive on at half throttle",
        program=_reset_drill,
        duration_s=10.0,
        quality_tier=QualityTier.REDUCED,
    ),
}


def get_scenario(scenario_type: Union[ScenarioType, str]) -> Scenario:
    """
    Get a predefined scenario.

    Args:
        scenario_type: Scenario type or its name

    Returns:
        Configured Scenario object

    Raises:
        ValueError: If the name is not a known scenario
    """
    if not isinstance(scenario_type, ScenarioType):
        scenario_type = ScenarioType(scenario_type)
    return _SCENARIOS[scenario_type]()


def list_scenarios() -> List[str]:
    """Names of all predefined scenarios."""
    return [t.value for t in ScenarioType]
