# netswitch/api/discovery.py
"""
Root-level health endpoint.
"""
from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict:
    infra = getattr(request.app.state, "infra", None)
    env = infra.environment if infra else None
    return {
        "status": "healthy",
        "multi_network": bool(env and env.multi_network),
        "host_version": env.version if env else None,
        "hooks": len(infra.hooks) if infra else 0,
    }
