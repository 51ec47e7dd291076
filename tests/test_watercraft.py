"""
Tests for Watercraft Dynamics
=============================

Throttle, boost, steering, buoyancy, attitude and reset behaviour.
"""

import math
import random

import pytest

from boatsim.simulation.controls import ControlInput
from boatsim.simulation.watercraft import (
    BOOST_HAPTIC_PATTERN,
    RESET_HAPTIC_PATTERN,
    Watercraft,
    WatercraftConfig,
)


def run(boat, field, controls, frames, dt=0.1):
    for _ in range(frames):
        boat.update(dt, field, controls)
    return boat.state


class TestConstruction:
    """Tests for watercraft construction."""

    def test_spawn_pose(self, watercraft):
        state = watercraft.state
        assert state.position.as_tuple() == (0.0, 5.0, 0.0)
        assert state.velocity.as_tuple() == (0.0, 0.0, 0.0)
        assert state.speed == 0.0
        assert state.yaw == 0.0

    def test_zero_max_speed_rejected(self):
        with pytest.raises(ValueError):
            Watercraft(WatercraftConfig(max_speed=0.0))

    def test_negative_max_speed_rejected(self):
        with pytest.raises(ValueError):
            Watercraft(WatercraftConfig(max_speed=-5.0))


class TestThrottle:
    """Tests for speed integration and limits."""

    def test_straight_acceleration(self, watercraft, flat_wave_field, full_throttle):
        """One time-unit at full throttle from rest reaches 10."""
        run(watercraft, flat_wave_field, full_throttle, frames=10)
        assert watercraft.state.speed == pytest.approx(10.0)

    def test_clamps_at_max_speed(self, watercraft, flat_wave_field, full_throttle):
        run(watercraft, flat_wave_field, full_throttle, frames=30)
        assert watercraft.state.speed == pytest.approx(20.0)

    def test_reverse_limited_to_half(self, watercraft, flat_wave_field):
        run(watercraft, flat_wave_field, ControlInput(move_y=-1.0), frames=30)
        assert watercraft.state.speed == pytest.approx(-10.0)

    def test_deadzone(self, watercraft, flat_wave_field):
        """Axis values within 0.1 count as released."""
        run(watercraft, flat_wave_field, ControlInput(move_y=0.1), frames=5)
        assert watercraft.state.speed == 0.0

    def test_passive_decay(self, watercraft, flat_wave_field, full_throttle, neutral):
        run(watercraft, flat_wave_field, full_throttle, frames=10)
        previous = watercraft.state.speed
        for _ in range(50):
            watercraft.update(0.1, flat_wave_field, neutral)
            assert watercraft.state.speed == pytest.approx(previous * 0.95)
            assert abs(watercraft.state.speed) < abs(previous)
            previous = watercraft.state.speed
        assert abs(watercraft.state.speed) < 1.0

    def test_speed_bounds_without_boost(self, watercraft, wave_field):
        rng = random.Random(7)
        for _ in range(500):
            controls = ControlInput(
                move_x=rng.uniform(-1, 1),
                move_y=rng.uniform(-1, 1),
            )
            watercraft.update(rng.uniform(0.0, 0.1), wave_field, controls)
            assert -10.0 <= watercraft.state.speed <= 20.0


class TestBoost:
    """Tests for the boost override."""

    def test_boost_exceeds_throttle_ceiling(self, watercraft, flat_wave_field):
        run(watercraft, flat_wave_field, ControlInput(boost=True), frames=50)
        assert watercraft.state.speed == pytest.approx(30.0)

    def test_throttle_reclamps_before_boost(self, watercraft, flat_wave_field):
        """With the throttle held, each frame clamps to max before boosting."""
        run(watercraft, flat_wave_field, ControlInput(move_y=1.0, boost=True), frames=50)
        assert watercraft.state.speed == pytest.approx(22.0)

    def test_boost_never_exceeds_one_and_a_half_max(self, watercraft, wave_field):
        rng = random.Random(3)
        for _ in range(500):
            controls = ControlInput(
                move_y=rng.uniform(-1, 1),
                boost=rng.random() < 0.5,
            )
            watercraft.update(0.1, wave_field, controls)
            assert watercraft.state.speed <= 30.0 + 1e-9

    def test_boost_ignores_throttle_deadzone(self, watercraft, flat_wave_field):
        """Boost applies even with the throttle released."""
        watercraft.update(0.1, flat_wave_field, ControlInput(boost=True))
        assert watercraft.state.speed == pytest.approx(2.0)

    def test_boost_haptic_pulse(self, flat_wave_field):
        pulses = []
        boat = Watercraft(haptic_sink=pulses.append)
        boat.update(0.1, flat_wave_field, ControlInput(boost=True))
        assert pulses == [BOOST_HAPTIC_PATTERN]


class TestSteering:
    """Tests for turning and yaw integration."""

    def test_no_turning_in_place(self, watercraft, flat_wave_field):
        run(watercraft, flat_wave_field, ControlInput(move_x=1.0), frames=10)
        assert watercraft.state.angular_velocity == pytest.approx(-2.0)
        assert watercraft.state.yaw == 0.0

    def test_turn_rate_scales_with_speed(self, watercraft, flat_wave_field, full_throttle):
        run(watercraft, flat_wave_field, full_throttle, frames=30)
        yaw_before = watercraft.state.yaw
        watercraft.update(0.1, flat_wave_field, ControlInput(move_y=1.0, move_x=1.0))
        # Full speed: yaw changes by -turn_speed * dt
        assert watercraft.state.yaw - yaw_before == pytest.approx(-0.2)

    def test_angular_decay(self, watercraft, flat_wave_field, neutral):
        watercraft.update(0.1, flat_wave_field, ControlInput(move_x=-1.0))
        previous = watercraft.state.angular_velocity
        assert previous == pytest.approx(2.0)
        for _ in range(40):
            watercraft.update(0.1, flat_wave_field, neutral)
            assert watercraft.state.angular_velocity == pytest.approx(previous * 0.9)
            assert abs(watercraft.state.angular_velocity) < abs(previous)
            previous = watercraft.state.angular_velocity
        assert abs(previous) < 0.05


class TestMotion:
    """Tests for translation and buoyancy."""

    def test_moves_along_heading(self, watercraft, flat_wave_field, full_throttle):
        watercraft.update(0.1, flat_wave_field, full_throttle)
        state = watercraft.state
        assert state.velocity.z == pytest.approx(1.0)
        assert state.velocity.x == pytest.approx(0.0)
        assert state.position.z == pytest.approx(0.1)
        assert state.position.x == pytest.approx(0.0)

    def test_heading_direction(self, watercraft, flat_wave_field):
        watercraft.state.yaw = math.pi / 2
        watercraft.state.speed = 10.0
        watercraft.update(0.1, flat_wave_field, ControlInput(move_y=0.5))
        assert watercraft.state.velocity.x > 0
        assert abs(watercraft.state.velocity.z) < 1e-9

    def test_buoyancy_single_step(self, watercraft, flat_wave_field, neutral):
        """Spring, then damping, then integration, then bob."""
        watercraft.update(0.1, flat_wave_field, neutral)
        vy = (1.0 - 5.0) * 15.0 * 0.1 * 0.95
        expected_y = 5.0 + vy * 0.1 + math.sin(0.2) * 0.05
        assert watercraft.state.velocity.y == pytest.approx(vy)
        assert watercraft.state.position.y == pytest.approx(expected_y)

    def test_settles_near_surface(self, watercraft, flat_wave_field, neutral):
        run(watercraft, flat_wave_field, neutral, frames=600, dt=1 / 60)
        assert abs(watercraft.state.position.y - 1.0) < 1.5

    def test_rides_the_swell(self, watercraft, wave_field, neutral):
        for _ in range(600):
            wave_field.advance(1 / 60)
            watercraft.update(1 / 60, wave_field, neutral)
        surface = wave_field.height_at(watercraft.state.position.x, watercraft.state.position.z)
        assert abs(watercraft.state.position.y - (surface + 1.0)) < 2.5


class TestAttitude:
    """Tests for surface alignment and banking."""

    def test_level_on_flat_water(self, watercraft, flat_wave_field, full_throttle):
        run(watercraft, flat_wave_field, full_throttle, frames=20)
        assert watercraft.state.pitch == 0.0
        assert watercraft.state.roll == 0.0

    def test_alignment_step(self, watercraft, wave_field, neutral):
        watercraft.update(0.1, wave_field, neutral)
        state = watercraft.state
        normal = wave_field.normal_at(state.position.x, state.position.z)
        target_pitch = math.atan2(normal.z, normal.y)
        target_roll = math.atan2(-normal.x, normal.y)
        assert state.pitch_smoothed == pytest.approx(target_pitch * 0.3)
        assert state.roll_smoothed == pytest.approx(target_roll * 0.3)

    def test_wave_following_reduced_at_rest(self, watercraft, wave_field, neutral):
        run(watercraft, wave_field, neutral, frames=5)
        state = watercraft.state
        assert state.speed == 0.0
        assert state.pitch == pytest.approx(state.pitch_smoothed * 0.3)
        assert state.roll == pytest.approx(state.roll_smoothed * 0.3)

    def test_banking_into_turn(self, watercraft, flat_wave_field, full_throttle):
        run(watercraft, flat_wave_field, full_throttle, frames=30)
        watercraft.update(0.1, flat_wave_field, ControlInput(move_y=1.0, move_x=1.0))
        # Full speed: roll = angular_velocity * 0.2
        assert watercraft.state.roll == pytest.approx(-2.0 * 0.2)


class TestReset:
    """Tests for the reset override."""

    def _drive(self, boat, field):
        run(boat, field, ControlInput(move_y=1.0, move_x=0.5), frames=20)

    def test_reset_restores_spawn(self, watercraft, wave_field):
        self._drive(watercraft, wave_field)
        watercraft.update(0.1, wave_field, ControlInput(move_y=1.0, boost=True, reset_requested=True))
        state = watercraft.state
        assert state.position.as_tuple() == (0.0, 5.0, 0.0)
        assert state.velocity.as_tuple() == (0.0, 0.0, 0.0)
        assert (state.yaw, state.pitch, state.roll) == (0.0, 0.0, 0.0)
        assert state.speed == 0.0
        assert state.angular_velocity == 0.0

    def test_reset_idempotent(self, watercraft, wave_field):
        self._drive(watercraft, wave_field)
        reset = ControlInput(reset_requested=True)
        watercraft.update(0.1, wave_field, reset)
        once = watercraft.pose()
        watercraft.update(0.1, wave_field, reset)
        twice = watercraft.pose()
        assert once == twice
        assert watercraft.state.speed == 0.0
        assert watercraft.state.angular_velocity == 0.0

    def test_reset_keeps_attitude_accumulators(self, watercraft, wave_field):
        """Reset levels the published attitude but keeps the smoothed wave following."""
        run(watercraft, wave_field, ControlInput(move_y=1.0), frames=20)
        watercraft.update(0.1, wave_field, ControlInput(reset_requested=True))
        state = watercraft.state
        assert state.pitch_smoothed != 0.0
        assert state.bob_phase != 0.0
        assert (state.pitch, state.roll) == (0.0, 0.0)

    def test_next_frame_after_reset_follows_surface(self, watercraft, wave_field):
        run(watercraft, wave_field, ControlInput(move_y=1.0), frames=20)
        watercraft.update(0.1, wave_field, ControlInput(reset_requested=True))
        carried = watercraft.state.pitch_smoothed
        watercraft.update(0.1, wave_field, ControlInput())
        normal = wave_field.normal_at(0.0, 0.0)
        target_pitch = math.atan2(normal.z, normal.y)
        # Eases from the carried value, not from level
        assert watercraft.state.pitch_smoothed == pytest.approx(carried + (target_pitch - carried) * 0.3)

    def test_reset_haptic_pattern(self, flat_wave_field):
        pulses = []
        boat = Watercraft(haptic_sink=pulses.append)
        boat.update(0.1, flat_wave_field, ControlInput(reset_requested=True))
        assert pulses == [RESET_HAPTIC_PATTERN]


class TestPose:
    """Tests for the published transform."""

    def test_pose_is_a_copy(self, watercraft):
        pose = watercraft.pose()
        pose.position.x = 99.0
        assert watercraft.state.position.x == 0.0

    def test_update_returns_state(self, watercraft, flat_wave_field, neutral):
        assert watercraft.update(0.1, flat_wave_field, neutral) is watercraft.state
