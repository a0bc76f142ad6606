import os
import time

import redis
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

logger = get_logger(__name__).bind(component="common", layer="health")


def _redis_ping(url: str, timeout: float = 0.3):
    try:
        client = redis.from_url(
            url, socket_connect_timeout=timeout, socket_timeout=timeout
        )
        ok = bool(client.ping())
    except redis.RedisError as exc:
        logger.warning("Redis health check failed", error=str(exc))
        return {"status": "fail", "error": str(exc)}
    if not ok:
        logger.warning("Redis health check returned unexpected response")
        return {"status": "fail"}
    logger.debug("Redis health check succeeded")
    return {"status": "ok"}


def _db_check(alias="default"):
    started = time.monotonic()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
    except OperationalError as exc:
        logger.warning(
            "Database health check encountered operational error",
            alias=alias,
            error=str(exc),
        )
        return {"status": "fail", "error": str(exc)}
    latency = round((time.monotonic() - started) * 1000, 2)
    logger.debug("Database health check succeeded", alias=alias, latency_ms=latency)
    return {"status": "ok", "latency_ms": latency}


def live_health(request):
    """Liveness probe: the process is up and serving requests."""
    logger.debug("Liveness probe served")
    return JsonResponse({"status": "alive"})


def ready_health(request):
    """Readiness probe: the database answers and, when configured, Redis does too."""
    checks = {"database": _db_check()}

    redis_url = os.getenv("REDIS_URL")
    if redis_url:
        checks["redis"] = _redis_ping(redis_url)
    else:
        checks["redis"] = {"status": "skipped", "detail": "REDIS_URL not set"}

    failing = [name for name, result in checks.items() if result.get("status") == "fail"]
    overall = "ok" if not failing else "degraded"
    logger.info("Readiness probe evaluated", status=overall, failing_components=failing)
    return JsonResponse(
        {"status": overall, "checks": checks}, status=200 if not failing else 503
    )
