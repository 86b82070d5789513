"""
API v1 Router - aggregates provider, admin and dispatch endpoints.
"""
from fastapi import APIRouter

from provider_availability.api.v1 import admin, availability, dispatch, leaves

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(availability.router)
router.include_router(leaves.router)
router.include_router(admin.router)
router.include_router(dispatch.router)


@router.get("/health", tags=["Health"])
def health() -> dict:
    return {"status": "ok"}
