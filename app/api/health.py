"""Liveness, readiness and the plain-text root banner.

  /health  — "is the process alive?"  Always 200; the body reports each
             dependency so a dashboard can show "alive but degraded".
  /ready   — "should the load balancer send traffic here?"  503 when
             MongoDB is configured but not answering.  Without MONGO_URL
             the service runs on in-memory stores and is always ready.
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse

from app.db import mongo

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Course enrollment server is running"


@router.get("/health")
async def health() -> dict:
    checks: dict[str, str] = {}
    overall = "ok"

    if mongo.mongo_client is not None:
        if await mongo.ping():
            checks["mongo"] = "ok"
        else:
            checks["mongo"] = "degraded"
            overall = "degraded"
    else:
        checks["mongo"] = "not_configured"

    return {"status": overall, "checks": checks}


@router.get("/ready")
async def ready() -> Response:
    if mongo.mongo_client is not None and not await mongo.ping():
        return Response(status_code=503)
    return Response(status_code=200)
