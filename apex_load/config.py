"""
Apex Load Generator - Settings

Defaults, overlaid by an optional YAML file, overlaid by APEX_* environment
variables.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "APEX_"
CONFIG_ENV = "APEX_CONFIG"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseModel):
    """Server and workload limits."""
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)

    # Per-parameter ceilings, enforced before any workload runs
    max_primes: int = Field(10_000, ge=0)
    max_fibonacci: int = Field(45, ge=0)
    max_hex_kb: int = Field(10_000, ge=0)
    max_memory_kb: int = Field(1_000_000, ge=0)

    random_seed: Optional[int] = None
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return level


def _from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    values = {}
    for name in Settings.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            values[name] = environ[key]
    return values


def load_settings(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build settings from defaults, a YAML file and the environment.

    Args:
        path: YAML file; falls back to $APEX_CONFIG when omitted
        environ: Environment mapping, os.environ by default

    Raises:
        yaml.YAMLError: If the file is malformed
        ValidationError: If a value is invalid
    """
    environ = os.environ if environ is None else environ
    path = path or environ.get(CONFIG_ENV)

    data: Dict[str, Any] = {}
    if path:
        with open(path) as f:
            data.update(yaml.safe_load(f) or {})
        logger.info(f"Loaded settings from {path}")

    data.update(_from_env(environ))
    return Settings(**data)
