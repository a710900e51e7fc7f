"""
Apex Load Generator - Errors

Validation errors map to HTTP 400, allocation failures to HTTP 500.
"""


class LoadGeneratorError(Exception):
    """Base class for all load generator errors."""
    pass


class ParameterError(LoadGeneratorError):
    """A path parameter failed validation."""

    def __init__(self, param: str, reason: str):
        self.param = param
        self.reason = reason
        super().__init__(f"{param}: {reason}")


class ParseError(ParameterError):
    """Raised when a token is not an integer."""
    pass


class RangeFormatError(ParameterError):
    """Raised when a range is not of the form min..max."""
    pass


class BoundsError(ParameterError):
    """Raised when a value is negative, inverted or above its ceiling."""
    pass


class AllocationFailure(LoadGeneratorError):
    """Raised when the memory stressor cannot satisfy a request."""

    def __init__(self, size_kb: int):
        self.size_kb = size_kb
        super().__init__(f"could not allocate {size_kb} KB")
