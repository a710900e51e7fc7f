"""
Apex Load Generator

HTTP service that puts bounded CPU, memory and payload load on a host
for benchmarking and capacity testing.
"""

__version__ = "1.0.0"

from .config import Settings, load_settings
from .errors import (
    AllocationFailure,
    BoundsError,
    LoadGeneratorError,
    ParameterError,
    ParseError,
    RangeFormatError,
)
from .generators import allocate_memory, create_hex_string, fibonacci, fibonacci_recursive, generate_primes
from .ranges import ParsedValue, parse_int_or_range
from .telemetry import MetricsRecorder, RequestMetrics

__all__ = [
    "Settings",
    "load_settings",
    "LoadGeneratorError",
    "ParameterError",
    "ParseError",
    "RangeFormatError",
    "BoundsError",
    "AllocationFailure",
    "ParsedValue",
    "parse_int_or_range",
    "generate_primes",
    "create_hex_string",
    "allocate_memory",
    "fibonacci",
    "fibonacci_recursive",
    "MetricsRecorder",
    "RequestMetrics",
]
