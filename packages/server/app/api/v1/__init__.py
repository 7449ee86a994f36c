"""
API v1 Router

Membership workflow endpoints live under /memberships; resource
registration and the per-resource membership view under /resources.
"""

from fastapi import APIRouter
from . import memberships, resources

router = APIRouter()

router.include_router(resources.router, prefix="/resources", tags=["Resources"])
router.include_router(memberships.router, prefix="/memberships", tags=["Memberships"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/resources",
            "/resources/{resource_id}/membership",
            "/memberships/join",
            "/memberships/cancel",
            "/memberships/{request_id}/decide",
            "/memberships/mine",
        ],
    }
