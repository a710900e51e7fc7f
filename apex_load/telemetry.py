"""
Request Telemetry

Before/after snapshots of process-wide counters around a single request.

The readings are approximate. Memory is the process resident set size
and tasks are the live asyncio tasks on the event loop, so concurrent
requests bleed into each other's numbers. cpu_usage_percent is derived
from wall-clock duration alone and is a load indicator, not real CPU
accounting.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Optional

import psutil
from pydantic import BaseModel


@dataclass(frozen=True)
class RuntimeReading:
    allocated_bytes: int
    tasks: int


@dataclass(frozen=True)
class Snapshot:
    """State captured when a request starts."""
    start_ns: int
    allocated_bytes: int
    tasks: int


class RequestMetrics(BaseModel):
    """
    Per-request telemetry returned with every response.

    memory_used_bytes is the change in process RSS, not a heap-allocation
    count, and includes whatever else the process did meanwhile.
    cpu_usage_percent equals duration_ms.
    """
    duration_us: int
    duration_ms: float
    cpu_usage_percent: float
    memory_used_bytes: int
    tasks_before: int
    tasks_after: int


class RuntimeProbe:
    """Reads runtime counters. Subclass to plug in another source."""

    def read(self) -> RuntimeReading:
        raise NotImplementedError


class ProcessProbe(RuntimeProbe):
    """Reads RSS through psutil and counts asyncio tasks."""

    def __init__(self, process: Optional[psutil.Process] = None):
        self.process = process or psutil.Process()

    def _task_count(self) -> int:
        try:
            return len(asyncio.all_tasks())
        except RuntimeError:
            # no running event loop
            return 0

    def read(self) -> RuntimeReading:
        return RuntimeReading(
            allocated_bytes=self.process.memory_info().rss,
            tasks=self._task_count(),
        )


class MetricsRecorder:
    """
    Wraps one request end to end.

    Usage:
        recorder = MetricsRecorder()
        snapshot = recorder.start()
        ...
        metrics = recorder.finish(snapshot)
    """

    def __init__(self, probe: Optional[RuntimeProbe] = None):
        self.probe = probe or ProcessProbe()

    def start(self) -> Snapshot:
        reading = self.probe.read()
        return Snapshot(
            start_ns=time.perf_counter_ns(),
            allocated_bytes=reading.allocated_bytes,
            tasks=reading.tasks,
        )

    def finish(self, snapshot: Snapshot) -> RequestMetrics:
        elapsed_ns = time.perf_counter_ns() - snapshot.start_ns
        reading = self.probe.read()
        duration_ms = round(elapsed_ns / 1_000_000, 3)

        return RequestMetrics(
            duration_us=elapsed_ns // 1000,
            duration_ms=duration_ms,
            # Heuristic: wall-clock milliseconds stand in for CPU percent.
            cpu_usage_percent=duration_ms,
            memory_used_bytes=reading.allocated_bytes - snapshot.allocated_bytes,
            tasks_before=snapshot.tasks,
            tasks_after=reading.tasks,
        )
