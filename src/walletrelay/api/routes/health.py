"""Health check endpoints."""

from fastapi import APIRouter, Request

from walletrelay import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "walletrelay"}


@router.get("/health/detailed")
async def detailed_health(request: Request):
    """Detailed health check with configuration info."""
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "service": "walletrelay",
        "version": __version__,
        "chain_provider": request.app.state.chain_client.name,
        "symbols": sorted(request.app.state.routes),
        "config": settings.get_safe_dict(),
    }
