"""Exceptions raised by the scoring core."""


class ScoringError(ValueError):
    """Base class for scoring-core errors."""


class InsufficientDataError(ScoringError):
    """Raised when a comparison needs more scored entities than were given."""

    def __init__(self, message: str, required: int, available: int):
        super().__init__(message)
        self.required = required
        self.available = available


class ConfigurationError(ScoringError):
    """Raised when notification preferences are outside their valid ranges."""

    def __init__(self, message: str, field: str, value: object):
        super().__init__(message)
        self.field = field
        self.value = value
