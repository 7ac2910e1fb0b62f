"""repcounter: IMU rep counting core plus the companion set-history service."""

__version__ = "1.0.0"
