"""FMS report interpretation service."""

__version__ = "0.1.0"
