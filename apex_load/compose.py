"""
Workload Composition

Runs one to three generators for a single request. Every parameter is
validated, left to right, before any generator starts, so a bad last
parameter never pays for an expensive first one.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from .ranges import ParsedValue, parse_int_or_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """One workload in a request: which parameter feeds which generator."""
    param: str
    key: str
    ceiling: int
    run: Callable[[int], BaseModel]


PlannedStep = Tuple[Step, ParsedValue]


def validate_steps(
    steps: Sequence[Step],
    raw: Dict[str, str],
    rng: Optional[random.Random] = None,
) -> List[PlannedStep]:
    """
    Parse every parameter in order.

    Raises:
        ParameterError: On the first invalid parameter
    """
    planned = []
    for step in steps:
        parsed = parse_int_or_range(raw[step.param], step.ceiling, step.param, rng)
        planned.append((step, parsed))
    return planned


def execute_steps(planned: Sequence[PlannedStep]) -> Dict[str, Any]:
    """Run validated steps in order and key the results by step"""
    results: Dict[str, Any] = {}
    for step, parsed in planned:
        result = step.run(parsed.value)
        if parsed.is_range:
            result.requested_range = parsed.requested_range
        logger.debug(f"{step.key} done for {step.param}={parsed.value}")
        results[step.key] = result
    return results
