"""ZTAuth Core - account lifecycle and authentication service."""

__version__ = "0.1.0"
