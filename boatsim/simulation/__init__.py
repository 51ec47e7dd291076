"""
Simulation Module
=================

Real-time watercraft simulation on a procedural ocean.
Provides the wave field, watercraft dynamics, chase camera and the
session/frame-driver pipeline that runs them.
"""

from .vector import Vector3
from .quality import QualityTier, QualityProfile, parse_tier
from .wave_field import WaveField, WaveFieldConfig
from .controls import ControlInput, joystick_axes
from .watercraft import Watercraft, WatercraftConfig, WatercraftState, WatercraftPose
from .camera_rig import CameraRig, CameraConfig, CameraView
from .telemetry import TelemetryReadout
from .session import SimulationSession, SessionConfig, FrameSnapshot
from .frame_driver import FrameDriver, DriverConfig, FrameRateMonitor, clamp_dt
from .scenarios import Scenario, ScenarioType, get_scenario, list_scenarios

__all__ = [
    'Vector3',
    'QualityTier', 'QualityProfile', 'parse_tier',
    'WaveField', 'WaveFieldConfig',
    'ControlInput', 'joystick_axes',
    'Watercraft', 'WatercraftConfig', 'WatercraftState', 'WatercraftPose',
    'CameraRig', 'CameraConfig', 'CameraView',
    'TelemetryReadout',
    'SimulationSession', 'SessionConfig', 'FrameSnapshot',
    'FrameDriver', 'DriverConfig', 'FrameRateMonitor', 'clamp_dt',
    'Scenario', 'ScenarioType', 'get_scenario', 'list_scenarios',
]
