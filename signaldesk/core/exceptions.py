class SignalDeskError(Exception):
    """Base class for all SignalDesk exceptions."""


class ConfigError(SignalDeskError):
    """Raised for missing/malformed configuration."""


class DataValidationError(SignalDeskError):
    """Raised when an incoming payload fails sanity or schema validation."""


class InvalidFieldPathError(SignalDeskError, ValueError):
    """Raised when a dotted field path cannot be parsed."""


class UnknownFilterError(SignalDeskError, ValueError):
    """Raised when a filter category is not part of the table's category set."""


class RecordNotFoundError(SignalDeskError, LookupError):
    """Raised when a repository lookup matches no stored record."""


class RecordInUseError(SignalDeskError):
    """Raised when a record cannot be removed while other records reference it."""


__all__ = [
    "SignalDeskError",
    "ConfigError",
    "DataValidationError",
    "InvalidFieldPathError",
    "UnknownFilterError",
    "RecordNotFoundError",
    "RecordInUseError",
]
