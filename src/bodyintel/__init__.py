"""Body intelligence and energy calibration engine for nutrition tracking."""

__version__ = "0.1.0"
