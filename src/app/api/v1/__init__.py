"""API v1 versioned router.

Router structure
----------------
PUBLIC (no auth):
  /health, /ready, /live  → health checks (liveness, readiness)

AUTHENTICATED (require valid JWT):
  /trainees/*        → roster list/get/edit, CSV import (preview + import),
                       template download, CSV export
"""
from fastapi import APIRouter, Depends

from ...core.security import require_authentication
from .endpoints import health, trainees

router = APIRouter(prefix="/api/v1")

# =========================================================================
# PUBLIC ENDPOINTS: no auth required
# =========================================================================

router.include_router(health.router, tags=["Health"])

# =========================================================================
# AUTHENTICATED ENDPOINTS: require valid JWT
# =========================================================================

# The import route additionally resolves the acting user from the token and
# refuses the upload when the token names none.
router.include_router(
    trainees.router,
    tags=["Trainees"],
    dependencies=[Depends(require_authentication)],
)
