"""
Health check endpoints for the web-view host.
"""

from fastapi import APIRouter
from civic_client.core.settings import settings
from datetime import datetime


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if the host is running; says nothing about the backend.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api_base_url": settings.API_BASE_URL,
        "timestamp": datetime.utcnow().isoformat()
    }
