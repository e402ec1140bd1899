"""Live peer connection table."""

__version__ = "0.1.0"
