"""
Frame Driver
============

Single-threaded frame loop for a simulation session.

- Reads elapsed time from an injectable clock
- Clamps each frame's dt before any model sees it
- Pulls one ControlInput per frame from an input source
- Hands each FrameSnapshot to an optional render callback
- Tracks frame rate and flags degraded performance on reduced-tier devices
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional
import logging

from .controls import ControlInput
from .session import FrameSnapshot, SimulationSession

logger = logging.getLogger(__name__)


InputSource = Callable[[float], ControlInput]
FrameCallback = Callable[[FrameSnapshot], None]


def clamp_dt(dt: float, max_dt: float) -> float:
    """Limit a frame time to [0, max_dt] so a stall cannot destabilise integration."""
    return max(0.0, min(dt, max_dt))


@dataclass
class DriverConfig:
    """Configuration for the frame driver."""
    target_fps: float = 60.0       # Pacing rate for realtime runs
    max_dt: float = 0.1            # Frame time clamp (seconds)

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.target_fps


class FrameRateMonitor:
    """
    Counts frames per wall-clock second.

    When ``adaptive`` is set and a one-second window falls below the
    threshold, ``degraded`` latches true so the renderer can drop detail.
    """

    def __init__(self, threshold: float = 25.0, adaptive: bool = False):
        self.threshold = threshold
        self.adaptive = adaptive
        self.degraded = False
        self.fps: Optional[float] = None
        self._frames = 0
        self._window_start: Optional[float] = None

    def record(self, now: float) -> Optional[float]:
        """
        Count a frame at clock time ``now``.

        Returns:
            Frames counted in the window just closed, or None mid-window
        """
        if self._window_start is None:
            self._window_start = now

        self._frames += 1

        if now - self._window_start <= 1.0:
            return None

        self.fps = float(self._frames)
        self._frames = 0
        self._window_start = now

        if self.adaptive and not self.degraded and self.fps < self.threshold:
            self.degraded = True
            logger.warning(f"Frame rate {self.fps:.0f} fps below {self.threshold:.0f} fps, "
                           f"reducing render detail")
        return self.fps


class FrameDriver:
    """
    Frame loop owning the clock for one simulation session.

    The order within a frame is fixed by the session; the driver only
    supplies a clamped dt and the frame's control snapshot.
    """

    def __init__(self,
                 session: SimulationSession,
                 input_source: Optional[InputSource] = None,
                 config: Optional[DriverConfig] = None,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep,
                 on_frame: Optional[FrameCallback] = None):
        """
        Initialize frame driver.

        Args:
            session: Session to drive
            input_source: Maps simulated elapsed seconds to a control snapshot
            config: Driver configuration
            clock: Monotonic clock in seconds
            sleep: Sleep function used for realtime pacing
            on_frame: Render callback receiving each snapshot
        """
        self.session = session
        self.input_source = input_source or (lambda elapsed: ControlInput.neutral())
        self.config = config or DriverConfig()
        self.clock = clock
        self.sleep = sleep
        self.on_frame = on_frame

        profile = session.profile
        self.monitor = FrameRateMonitor(
            threshold=profile.low_fps_threshold,
            adaptive=profile.adapts_to_frame_rate,
        )

        self.running = False
        self._last_time: Optional[float] = None

    def tick(self) -> FrameSnapshot:
        """Run one frame using the clock's elapsed time."""
        now = self.clock()
        if self._last_time is None:
            self._last_time = now

        dt = clamp_dt(now - self._last_time, self.config.max_dt)
        self._last_time = now

        snapshot = self.step(dt)
        self.monitor.record(now)
        return snapshot

    def step(self, dt: float) -> FrameSnapshot:
        """Run one frame with an explicit dt (clamped before use)."""
        dt = clamp_dt(dt, self.config.max_dt)
        controls = self.input_source(self.session.elapsed)
        snapshot = self.session.step(dt, controls)
        self._publish(snapshot)
        return snapshot

    def _publish(self, snapshot: FrameSnapshot):
        if self.on_frame is None:
            return
        try:
            self.on_frame(snapshot)
        except Exception as e:
            logger.error(f"Frame callback error on frame {snapshot.frame}: {e}")

    def run(self, frames: Optional[int] = None, duration: Optional[float] = None,
            realtime: bool = True) -> int:
        """
        Run frames until a limit is reached or ``stop`` is called.

        Args:
            frames: Maximum number of frames
            duration: Maximum simulated time (seconds)
            realtime: If True, pace to the target frame rate using the clock;
                if False, step a fixed dt as fast as possible

        Returns:
            Number of frames run
        """
        self.running = True
        interval = self.config.frame_interval
        count = 0
        start_elapsed = self.session.elapsed

        logger.info(f"Frame driver started ({'realtime' if realtime else 'fixed-step'}, "
                    f"{self.config.target_fps:.0f} fps)")

        if realtime:
            self._last_time = self.clock()
            next_frame = self._last_time + interval

        try:
            while self.running:
                if frames is not None and count >= frames:
                    break
                if duration is not None and self.session.elapsed - start_elapsed >= duration:
                    break

                if realtime:
                    now = self.clock()
                    if next_frame > now:
                        self.sleep(next_frame - now)
                    self.tick()
                    next_frame += interval
                    now = self.clock()
                    if next_frame < now - self.config.max_dt:
                        # Fell behind, resynchronise instead of bursting
                        next_frame = now + interval
                else:
                    self.step(interval)

                count += 1
        finally:
            self.running = False
            logger.info(f"Frame driver stopped after {count} frames")

        return count

    def stop(self):
        """Stop scheduling frames. The current frame always completes."""
        self.running = False
