"""V1 REST API routes.

Combines all sub-routers under the ``/api/v1`` prefix, behind the API key.
"""

from fastapi import APIRouter, Depends

from ganji_gateway.api.dependencies import require_api_key
from ganji_gateway.api.v1.litecoin import router as litecoin_router
from ganji_gateway.api.v1.solana import router as solana_router

v1_router = APIRouter(prefix="/api/v1", dependencies=[Depends(require_api_key)])

v1_router.include_router(litecoin_router)
v1_router.include_router(solana_router)

__all__ = ["v1_router"]
