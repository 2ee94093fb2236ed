"""
Custom exceptions for RelayTune package.
"""


class RelayTuneError(Exception):
    """Base exception for all RelayTune related errors."""
    pass


class ConfigurationError(RelayTuneError):
    """Exception raised when invalid configuration parameters are provided."""
    pass
