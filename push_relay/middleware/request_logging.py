"""
Access logging for the relay endpoints
"""
from fastapi import Request
from typing import Callable
import logging
import time

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


async def logging_middleware(request: Request, call_next: Callable):
    """Log method, path, client, status and duration; set X-Process-Time."""
    started = time.perf_counter()
    route = f"{request.method} {request.url.path}"
    client = request.client.host if request.client else "unknown"
    logger.info(f"📥 {route} from {client}")

    try:
        response = await call_next(request)
    except Exception as exc:
        logger.error(f"❌ {route} raised after {_elapsed_ms(started):.0f}ms: {exc}")
        raise

    elapsed = _elapsed_ms(started)
    log = logger.info if response.status_code < 400 else logger.warning
    log(f"{route} → {response.status_code} ({elapsed:.0f}ms)")
    response.headers["X-Process-Time"] = f"{elapsed:.2f}ms"
    return response
