"""
Boat Simulator
==============

Watercraft on a procedurally animated ocean with a trailing chase camera.
"""

__version__ = "0.1.0"
