"""
Headless Boat Simulator
=======================

Runs a scripted scenario through the full frame pipeline without a
renderer, optionally writing every frame snapshot as JSON lines.

Usage:
    boatsim --scenario circle --duration 20 --fast --output frames.jsonl
"""

import argparse
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from .simulation.frame_driver import DriverConfig, FrameDriver
from .simulation.quality import parse_tier
from .simulation.scenarios import get_scenario, list_scenarios
from .simulation.session import FrameSnapshot, SessionConfig, SimulationSession

logger = logging.getLogger(__name__)


class SnapshotRecorder:
    """Frame callback that writes snapshots as JSON lines and tracks peaks."""

    def __init__(self, output_path: Optional[Path] = None, log_interval: float = 1.0):
        self.output_path = output_path
        self.log_interval = log_interval
        self.max_speed = 0.0
        self.frames = 0
        self._next_log = log_interval
        self._file = None

        if output_path is not None:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(output_path, 'w')

    def __call__(self, snapshot: FrameSnapshot):
        self.frames += 1
        self.max_speed = max(self.max_speed, snapshot.telemetry.speed)

        if self._file is not None:
            self._file.write(json.dumps(snapshot.to_dict()) + "\n")

        if snapshot.elapsed >= self._next_log:
            self._next_log += self.log_interval
            position = snapshot.pose.position
            logger.info(
                f"t={snapshot.elapsed:5.1f}s speed={snapshot.telemetry.speed_text:>3} "
                f"wave={snapshot.telemetry.wave_height_text:>5} "
                f"pos=({position.x:.1f}, {position.y:.1f}, {position.z:.1f})"
            )

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None
            logger.info(f"Wrote {self.frames} frames to {self.output_path}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Headless boat simulator")
    parser.add_argument("--scenario", "-s", default="circle",
                        help=f"Scenario name ({', '.join(list_scenarios())})")
    parser.add_argument("--duration", "-d", type=float, default=None,
                        help="Simulated duration in seconds (default: scenario length)")
    parser.add_argument("--quality", "-q", default=None,
                        help="Quality tier: full or reduced (default: scenario tier)")
    parser.add_argument("--fps", type=float, default=60.0,
                        help="Target frame rate")
    parser.add_argument("--fast", action="store_true",
                        help="Run as fast as possible (not realtime)")
    parser.add_argument("--output", "-o", default=None,
                        help="Write frame snapshots as JSON lines to this path")
    parser.add_argument("--surface", action="store_true",
                        help="Include the surface height grid in snapshots")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Verbose logging")

    args = parser.parse_args()

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        scenario = get_scenario(args.scenario)
        tier = parse_tier(args.quality) if args.quality else scenario.quality_tier
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    session = SimulationSession(SessionConfig(
        quality_tier=tier,
        wave_config=scenario.wave_config,
        publish_surface=args.surface,
    ))
    recorder = SnapshotRecorder(Path(args.output) if args.output else None)
    driver = FrameDriver(
        session,
        input_source=scenario.controls_at,
        config=DriverConfig(target_fps=args.fps),
        on_frame=recorder,
    )

    # Signal handler for graceful shutdown
    def signal_handler(sig, frame):
        logger.info("Shutdown signal received")
        driver.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    duration = args.duration if args.duration is not None else scenario.duration_s
    logger.info(f"Running scenario '{scenario.name}': {scenario.description} ({duration:.0f}s)")

    try:
        driver.run(duration=duration, realtime=not args.fast)
    finally:
        recorder.close()
        session.close()

    logger.info(f"Peak speed {recorder.max_speed:.1f}, "
                f"frame rate degraded: {driver.monitor.degraded}")


if __name__ == "__main__":
    main()
