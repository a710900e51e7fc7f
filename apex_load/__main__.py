"""
Run the Apex Load Generator API.

Usage:
    python -m apex_load
    python -m apex_load --config apex.yaml --port 9090
"""

import argparse
import logging

import uvicorn

from .app import create_app
from .config import load_settings

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Apex Load Generator API")
    parser.add_argument("--config", help="YAML settings file (default: $APEX_CONFIG)")
    parser.add_argument("--host", help="Bind address")
    parser.add_argument("--port", type=int, help="Bind port")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR")
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    overrides = {
        "host": args.host,
        "port": args.port,
        "log_level": args.log_level,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        settings = settings.model_validate({**settings.model_dump(), **overrides})

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    logger.info(
        f"Starting on {settings.host}:{settings.port} "
        f"(primes<={settings.max_primes}, hex<={settings.max_hex_kb}KB, "
        f"memory<={settings.max_memory_kb}KB, fibonacci<={settings.max_fibonacci})"
    )

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
