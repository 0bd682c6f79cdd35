"""
Civic Issue Reporter - web-view host.

Serves the HTML documents the screens embed (issue map, speech recognition)
so any embedded browser can load them by URL. All issue data still comes
from the external backend at API_BASE_URL.

Run with `civic-webview` (or `uvicorn civic_client.main:app`).
"""

import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from civic_client.core.logging import configure_logging
from civic_client.core.settings import settings
from civic_client.routes import health, webview

logger = logging.getLogger(__name__)


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Web-view pages for the civic issue reporting client",
    debug=settings.DEBUG
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Internal server error: {str(exc)}"}
    )


@app.on_event("startup")
async def startup_event():
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} (backend: {settings.API_BASE_URL})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}")


app.include_router(health.router)
app.include_router(webview.router)


@app.get("/")
async def root():
    """
    Root endpoint - host information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "health": "/health",
        "map": "/map?latitude={lat}&longitude={lng}",
        "speech": "/speech?lang={code}"
    }


def run():
    """Entry point for the civic-webview command."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
