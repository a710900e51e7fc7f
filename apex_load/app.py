"""
Apex Load Generator - HTTP API

Bounded CPU, memory and payload load on demand, with per-request
telemetry attached to every response.
"""
import asyncio
import functools
import logging
import random
import socket
import time
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from . import __version__
from .compose import Step, execute_steps, validate_steps
from .config import Settings, load_settings
from .errors import AllocationFailure, ParameterError
from .generators import allocate_memory, create_hex_string, fibonacci, generate_primes
from .telemetry import MetricsRecorder

logger = logging.getLogger(__name__)

SERVER_ID = socket.gethostname()

router = APIRouter()

# ==============================
# HELPER FUNCTIONS
# ==============================

def add_tracking_headers(response: JSONResponse, endpoint: str, start_time: float):
    """Add tracking headers"""
    elapsed = time.time() - start_time
    response.headers["X-Server-ID"] = SERVER_ID
    response.headers["X-Response-Time-Ms"] = str(round(elapsed * 1000, 2))
    response.headers["X-Request-ID"] = str(uuid.uuid4())
    response.headers["X-Endpoint"] = endpoint


def workload_steps(settings: Settings, rng: random.Random) -> Dict[str, Step]:
    """Map each path parameter to its generator and ceiling"""
    return {
        "p": Step("p", "prime_result", settings.max_primes, generate_primes),
        "f": Step("f", "fibonacci_result", settings.max_fibonacci, fibonacci),
        "h": Step("h", "hex_result", settings.max_hex_kb, functools.partial(create_hex_string, rng=rng)),
        "m": Step("m", "memory_result", settings.max_memory_kb, allocate_memory),
    }


async def run_workloads(
    request: Request,
    endpoint: str,
    params: Dict[str, str],
    single: bool = False,
) -> JSONResponse:
    """Validate params left to right, run their generators, wrap with metrics"""
    start = time.time()
    state = request.app.state
    snapshot = state.recorder.start()

    available = workload_steps(state.settings, state.rng)
    planned = validate_steps([available[name] for name in params], params, state.rng)

    # Generators block; keep the event loop free for other requests
    results = await asyncio.to_thread(execute_steps, planned)
    metrics = state.recorder.finish(snapshot)

    dumped = {key: result.model_dump(exclude_none=True) for key, result in results.items()}
    data: Any = next(iter(dumped.values())) if single else dumped

    response = JSONResponse({
        "data": data,
        "request_metrics": metrics.model_dump(),
    })
    add_tracking_headers(response, endpoint, start)
    return response


def _warn_deprecated(endpoint: str):
    logger.warning(f"Deprecated endpoint called: {endpoint}, use the primes endpoints instead")


# ==============================
# BASIC ENDPOINTS
# ==============================

INDEX_HTML = """<!DOCTYPE html>
<html>
<head><title>Apex Load Generator API</title></head>
<body>
<h1>Apex Load Generator API</h1>
<p>Every parameter accepts a non-negative integer or an inclusive range <code>min..max</code>.</p>
<ul>
<li><code>GET /primes/{p}</code> - first p primes (max {max_primes})</li>
<li><code>GET /hex/{h}</code> - h KB of random hex (max {max_hex_kb})</li>
<li><code>GET /memory/{m}</code> - allocate and touch m KB (max {max_memory_kb})</li>
<li><code>GET /primes/hex/{p}/{h}</code></li>
<li><code>GET /primes/hex/memory/{p}/{h}/{m}</code></li>
<li><code>GET /fibonacci/{f}</code> - deprecated, recursive F(f) (max {max_fibonacci})</li>
<li><code>GET /fibonacci/hex/{f}/{h}</code> - deprecated</li>
<li><code>GET /fibonacci/hex/memory/{f}/{h}/{m}</code> - deprecated</li>
</ul>
<p>Interactive docs: <a href="/docs">/docs</a></p>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Endpoint overview"""
    settings = request.app.state.settings
    html = INDEX_HTML
    for name in ("max_primes", "max_hex_kb", "max_memory_kb", "max_fibonacci"):
        html = html.replace("{" + name + "}", f"{getattr(settings, name):,}")
    return HTMLResponse(html)


@router.get("/health")
async def health():
    """Health check"""
    return {"status": "healthy", "server_id": SERVER_ID}

# ==============================
# WORKLOAD ENDPOINTS
# ==============================

@router.get("/primes/{p}")
async def get_primes(request: Request, p: str):
    """CPU load - first p primes by trial division"""
    return await run_workloads(request, "primes", {"p": p}, single=True)


@router.get("/hex/{h}")
async def get_hex_string(request: Request, h: str):
    """Payload - h KB of random hex digits"""
    return await run_workloads(request, "hex", {"h": h}, single=True)


@router.get("/memory/{m}")
async def get_memory(request: Request, m: str):
    """Memory - allocate and page-touch m KB"""
    return await run_workloads(request, "memory", {"m": m}, single=True)


@router.get("/primes/hex/{p}/{h}")
async def get_primes_hex(request: Request, p: str, h: str):
    return await run_workloads(request, "primes-hex", {"p": p, "h": h})


@router.get("/primes/hex/memory/{p}/{h}/{m}")
async def get_primes_hex_memory(request: Request, p: str, h: str, m: str):
    return await run_workloads(request, "primes-hex-memory", {"p": p, "h": h, "m": m})

# ==============================
# LEGACY FIBONACCI ENDPOINTS
# ==============================

@router.get("/fibonacci/{f}", deprecated=True)
async def get_fibonacci(request: Request, f: str):
    """Exponential CPU load - recursive F(f). Prefer /primes"""
    _warn_deprecated("fibonacci")
    return await run_workloads(request, "fibonacci", {"f": f}, single=True)


@router.get("/fibonacci/hex/{f}/{h}", deprecated=True)
async def get_fibonacci_hex(request: Request, f: str, h: str):
    _warn_deprecated("fibonacci-hex")
    return await run_workloads(request, "fibonacci-hex", {"f": f, "h": h})


@router.get("/fibonacci/hex/memory/{f}/{h}/{m}", deprecated=True)
async def get_fibonacci_hex_memory(request: Request, f: str, h: str, m: str):
    _warn_deprecated("fibonacci-hex-memory")
    return await run_workloads(request, "fibonacci-hex-memory", {"f": f, "h": h, "m": m})

# ==============================
# ERROR HANDLERS
# ==============================

async def parameter_error_handler(request: Request, exc: ParameterError):
    logger.warning(f"Rejected {request.url.path}: {exc}")
    return JSONResponse({"message": str(exc)}, status_code=400)


async def allocation_failure_handler(request: Request, exc: AllocationFailure):
    logger.error(f"Allocation failed on {request.url.path}: {exc}")
    return JSONResponse({"message": "could not allocate memory"}, status_code=500)

# ==============================
# APP FACTORY
# ==============================

def create_app(
    settings: Optional[Settings] = None,
    rng: Optional[random.Random] = None,
    recorder: Optional[MetricsRecorder] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        settings: Limits and server options, loaded from the environment if omitted
        rng: Shared random source for ranges and hex payloads
        recorder: Request telemetry recorder
    """
    settings = settings or load_settings()

    app = FastAPI(title="Apex Load Generator API", version=__version__)
    app.state.settings = settings
    app.state.rng = rng or random.Random(settings.random_seed)
    app.state.recorder = recorder or MetricsRecorder()

    app.include_router(router)
    app.add_exception_handler(ParameterError, parameter_error_handler)
    app.add_exception_handler(AllocationFailure, allocation_failure_handler)
    return app
