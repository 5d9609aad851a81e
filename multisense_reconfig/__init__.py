"""MultiSense sensor reconfiguration: reconcile desired camera, lighting and IMU state."""

__version__ = "0.1.0"
