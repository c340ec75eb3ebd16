"""Exceptions raised at the boundaries of the presence pipeline."""


class PresenceGateError(Exception):
    """Base exception for presence detection failures."""


class EstimatorError(PresenceGateError):
    """Raised when the pose engine fails to process a frame."""


class EstimatorUnavailable(EstimatorError):
    """Raised when the pose engine cannot be created."""


class CameraError(PresenceGateError):
    """Raised when the camera cannot be opened."""


class ConfigError(PresenceGateError, ValueError):
    """Raised for unknown presets or invalid threshold values."""
