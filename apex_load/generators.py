"""
Load Generators

CPU, payload and memory workloads. Each generator times itself and
returns a result model ready to be serialized into a response.
"""

import logging
import random
import time
from typing import Optional, Tuple

from pydantic import BaseModel

from .errors import AllocationFailure

logger = logging.getLogger(__name__)

HEX_ALPHABET = "0123456789abcdef"
KILOBYTE = 1024
PAGE_SIZE = 4096


# ==============================
# RESULT MODELS
# ==============================

class WorkloadResult(BaseModel):
    """Timing shared by every workload result."""
    duration_us: int = 0
    duration_ms: float = 0.0
    requested_range: Optional[str] = None


class PrimeResult(WorkloadResult):
    count: int
    last_prime: int


class HexResult(WorkloadResult):
    size_kb: int
    length: int
    hex_string: str


class MemoryResult(WorkloadResult):
    size_kb: int


class FibonacciResult(WorkloadResult):
    n: int
    result: int


def _elapsed(start_ns: int) -> Tuple[int, float]:
    """Return (microseconds, milliseconds) since start_ns"""
    elapsed_ns = time.perf_counter_ns() - start_ns
    return elapsed_ns // 1000, round(elapsed_ns / 1_000_000, 3)


# ==============================
# PRIMES
# ==============================

def generate_primes(n: int) -> PrimeResult:
    """
    Find the first n primes by trial division.

    Candidates are divided only by primes already found, stopping once
    the divisor's square exceeds the candidate. Only the count and the
    largest prime are reported.
    """
    start = time.perf_counter_ns()
    primes = []

    if n >= 1:
        primes.append(2)

    candidate = 3
    while len(primes) < n:
        is_prime = True
        for p in primes:
            if p * p > candidate:
                break
            if candidate % p == 0:
                is_prime = False
                break
        if is_prime:
            primes.append(candidate)
        candidate += 2

    duration_us, duration_ms = _elapsed(start)
    return PrimeResult(
        count=len(primes),
        last_prime=primes[-1] if primes else 0,
        duration_us=duration_us,
        duration_ms=duration_ms,
    )


# ==============================
# HEX PAYLOAD
# ==============================

def create_hex_string(n: int, rng: Optional[random.Random] = None) -> HexResult:
    """Build an n-kilobyte string of random hex digits"""
    start = time.perf_counter_ns()
    rng = rng or random
    hex_string = "".join(rng.choices(HEX_ALPHABET, k=n * KILOBYTE))

    duration_us, duration_ms = _elapsed(start)
    return HexResult(
        size_kb=n,
        length=len(hex_string),
        hex_string=hex_string,
        duration_us=duration_us,
        duration_ms=duration_ms,
    )


# ==============================
# MEMORY
# ==============================

def allocate_memory(k: int) -> MemoryResult:
    """
    Allocate k kilobytes and touch every page.

    Writing one byte per page forces the OS to back the buffer with
    physical memory. The buffer is dropped on return and left to the
    normal collector.

    Raises:
        AllocationFailure: If the allocation cannot be satisfied
    """
    start = time.perf_counter_ns()
    try:
        buf = bytearray(k * KILOBYTE)
        for offset in range(0, len(buf), PAGE_SIZE):
            buf[offset] = 1
    except MemoryError:
        logger.error(f"Allocation of {k} KB failed")
        raise AllocationFailure(k) from None
    del buf

    duration_us, duration_ms = _elapsed(start)
    return MemoryResult(size_kb=k, duration_us=duration_us, duration_ms=duration_ms)


# ==============================
# FIBONACCI (DEPRECATED)
# ==============================

def fibonacci_recursive(n: int) -> int:
    # Exponential on purpose, do not memoize.
    if n <= 1:
        return n
    return fibonacci_recursive(n - 1) + fibonacci_recursive(n - 2)


def fibonacci(n: int) -> FibonacciResult:
    """Compute F(n) the slow way. Deprecated in favour of generate_primes"""
    start = time.perf_counter_ns()
    result = fibonacci_recursive(n)

    duration_us, duration_ms = _elapsed(start)
    return FibonacciResult(n=n, result=result, duration_us=duration_us, duration_ms=duration_ms)
