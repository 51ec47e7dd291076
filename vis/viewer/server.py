#!/usr/bin/env python3
"""
Boat Simulator Viewer Server
============================

Flask server that runs a simulation session in a background thread and
provides:
- SSE streaming of frame snapshots for a browser renderer
- REST API for posting control input and reading the surface grid

Usage:
    python vis/viewer/server.py --host 0.0.0.0 --port 8080 --quality reduced
"""

import argparse
import json
import logging
import sys
import threading
import time
from pathlib import Path
from typing import Optional, Tuple

from flask import Flask, Response, jsonify, request

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from boatsim.simulation.controls import ControlInput, joystick_axes
from boatsim.simulation.frame_driver import FrameDriver
from boatsim.simulation.quality import QualityTier, parse_tier
from boatsim.simulation.session import FrameSnapshot, SessionConfig, SimulationSession

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Simulation state shared with the driver thread
session: Optional[SimulationSession] = None
driver: Optional[FrameDriver] = None
driver_thread: Optional[threading.Thread] = None
latest_snapshot: Optional[FrameSnapshot] = None

_lock = threading.Lock()
_controls = ControlInput.neutral()
_reset_pending = False


def current_controls(elapsed: float) -> ControlInput:
    """
    Input source for the frame driver.

    Returns the last posted controls. A pending reset is delivered on
    exactly one frame.
    """
    global _reset_pending

    with _lock:
        controls = _controls
        if _reset_pending:
            _reset_pending = False
            controls = ControlInput(
                move_x=controls.move_x,
                move_y=controls.move_y,
                look_x=controls.look_x,
                look_y=controls.look_y,
                boost=controls.boost,
                reset_requested=True,
            )
    return controls


def _store_snapshot(snapshot: FrameSnapshot):
    global latest_snapshot
    with _lock:
        latest_snapshot = snapshot


def init_simulation(tier: QualityTier = QualityTier.FULL) -> SimulationSession:
    """Create a fresh session and driver, stopping any running one."""
    global session, driver, latest_snapshot, _controls, _reset_pending

    stop_simulation()

    session = SimulationSession(SessionConfig(quality_tier=tier))
    driver = FrameDriver(session, input_source=current_controls, on_frame=_store_snapshot)

    with _lock:
        latest_snapshot = None
        _controls = ControlInput.neutral()
        _reset_pending = False

    logger.info(f"Simulation initialized (quality={tier.value})")
    return session


def start_simulation():
    """Run the frame driver in a background thread."""
    global driver_thread

    if driver is None:
        raise RuntimeError("Simulation not initialized")

    driver_thread = threading.Thread(
        target=driver.run,
        kwargs={"realtime": True},
        daemon=True,
        name="FrameDriver"
    )
    driver_thread.start()


def stop_simulation():
    """Stop the driver thread and close the session."""
    global driver_thread

    if driver is not None:
        driver.stop()
    if driver_thread is not None and driver_thread.is_alive():
        driver_thread.join(timeout=2.0)
    driver_thread = None

    if session is not None:
        session.close()


# =============================================================================
# SSE Streaming
# =============================================================================

@app.route('/stream')
def stream():
    """
    Server-Sent Events endpoint for frame snapshots.

    Streams JSON at ~30Hz: boat transform, camera viewpoint and telemetry.
    """
    def generate():
        last_frame = -1
        interval = 1.0 / 30.0

        while True:
            with _lock:
                snapshot = latest_snapshot

            if snapshot is None:
                data = {"running": False, "error": "Simulation not running"}
                yield f"data: {json.dumps(data)}\n\n"
            elif snapshot.frame != last_frame:
                last_frame = snapshot.frame
                yield f"data: {json.dumps(snapshot.to_dict())}\n\n"

            time.sleep(interval)

    return Response(
        generate(),
        mimetype='text/event-stream',
        headers={
            'Cache-Control': 'no-cache',
            'Connection': 'keep-alive',
            'X-Accel-Buffering': 'no'  # Disable nginx buffering
        }
    )


# =============================================================================
# REST API
# =============================================================================

@app.route('/api/status')
def get_status():
    """
    Get simulation status and quality profile.

    Frame data comes from the last published snapshot, never from the
    live session, so every field describes the same frame.
    """
    if session is None:
        return jsonify({"running": False, "error": "Simulation not initialized"})

    with _lock:
        snapshot = latest_snapshot

    profile = session.profile

    return jsonify({
        "running": driver is not None and driver.running,
        "frame": snapshot.frame if snapshot else 0,
        "elapsed": round(snapshot.elapsed, 3) if snapshot else 0.0,
        "boat": snapshot.to_dict()["boat"] if snapshot else None,
        "telemetry": snapshot.telemetry.to_dict() if snapshot else None,
        "quality": {
            "tier": profile.tier.value,
            "surface_segments": profile.surface_segments,
            "fog_far": profile.fog_far,
            "camera_far": profile.camera_far,
            "shadows": profile.shadows,
            "antialias": profile.antialias,
            "flat_shading": profile.flat_shading,
            "surface_shininess": profile.surface_shininess,
            "degraded": driver.monitor.degraded if driver else False,
        },
    })


def _number(data: dict, key: str) -> float:
    """Read a numeric field, rejecting strings and booleans."""
    value = data.get(key, 0.0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    return float(value)


def _stick(data: dict, key: str, invert_y: bool) -> Optional[Tuple[float, float]]:
    """Normalize a raw thumb-stick displacement {"dx", "dy"} in pixels."""
    stick = data.get(key)
    if stick is None:
        return None
    if not isinstance(stick, dict):
        raise ValueError(f"{key} must be an object with dx and dy")
    return joystick_axes(_number(stick, "dx"), _number(stick, "dy"), invert_y=invert_y)


@app.route('/api/controls', methods=['POST'])
def post_controls():
    """
    Set the control input used for subsequent frames.

    Expects JSON with any of:
        move_x, move_y, look_x, look_y: Normalized axes, clamped to [-1, 1]
        move_stick, look_stick: Raw stick displacement {"dx": px, "dy": px},
            normalized like the on-screen joysticks (screen-up drives forward
            on the movement stick). Takes precedence over the matching axes.
        boost: JSON boolean
    """
    global _controls

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400

    try:
        move_x, move_y = _number(data, "move_x"), _number(data, "move_y")
        look_x, look_y = _number(data, "look_x"), _number(data, "look_y")

        move = _stick(data, "move_stick", invert_y=True)
        if move is not None:
            move_x, move_y = move
        look = _stick(data, "look_stick", invert_y=False)
        if look is not None:
            look_x, look_y = look

        boost = data.get("boost", False)
        if not isinstance(boost, bool):
            raise ValueError(f"boost must be true or false, got {boost!r}")
    except ValueError as e:
        return jsonify({"error": f"Invalid control value: {e}"}), 400

    controls = ControlInput.clamped(
        move_x=move_x, move_y=move_y, look_x=look_x, look_y=look_y, boost=boost
    )
    with _lock:
        _controls = controls

    return jsonify({
        "success": True,
        "controls": {
            "move_x": controls.move_x,
            "move_y": controls.move_y,
            "look_x": controls.look_x,
            "look_y": controls.look_y,
            "boost": controls.boost,
        }
    })


@app.route('/api/reset', methods=['POST'])
def post_reset():
    """Request a watercraft reset on the next frame."""
    global _reset_pending

    if session is None:
        return jsonify({"error": "Simulation not initialized"}), 503

    with _lock:
        _reset_pending = True

    return jsonify({"success": True})


@app.route('/api/surface')
def get_surface():
    """
    Get the current surface height grid for mesh deformation.

    Query params:
        segments: Grid subdivisions per side (default: quality tier detail)
    """
    if session is None:
        return jsonify({"error": "Simulation not initialized"}), 503

    segments = request.args.get('segments', type=int)
    if segments is not None and not 1 <= segments <= 256:
        return jsonify({"error": "segments must be between 1 and 256"}), 400

    with _lock:
        xs, zs, heights = session.wave_field.sample_grid(segments)
        wave_time = session.wave_field.time

    return jsonify({
        "segments": heights.shape[0] - 1,
        "size": session.wave_field.config.surface_size,
        "wave_time": round(wave_time, 4),
        "heights": heights.round(3).tolist(),
    })


def main():
    parser = argparse.ArgumentParser(description="Boat simulator viewer server")
    parser.add_argument('--host', default='127.0.0.1', help='Host to bind to')
    parser.add_argument('--port', type=int, default=8080, help='Port to listen on')
    parser.add_argument('--quality', default='full', help='Quality tier: full or reduced')
    parser.add_argument('--debug', action='store_true', help='Enable Flask debug mode')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        tier = parse_tier(args.quality)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    init_simulation(tier)
    start_simulation()

    logger.info(f"Starting server on http://{args.host}:{args.port}")

    try:
        app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
    finally:
        stop_simulation()


if __name__ == '__main__':
    main()
