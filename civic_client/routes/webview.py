"""Web-view pages - the HTML documents the screens load into embedded browsers.

- /map     the home screen's Leaflet map, built from a live issue fetch
- /speech  the voice report's speech-recognition page
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from civic_client.core.exceptions import CivicClientError
from civic_client.services.api_client import CivicApiClient
from civic_client.services.device import DeviceLocation
from civic_client.services.map_service import generate_map_html
from civic_client.services.speech import DEFAULT_LANGUAGE, render_speech_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Web view"])

_client: Optional[CivicApiClient] = None


def get_api_client() -> CivicApiClient:
    global _client
    if _client is None:
        _client = CivicApiClient()
    return _client


@router.get("/map", response_class=HTMLResponse)
async def map_page(
    latitude: Optional[float] = Query(None, ge=-90, le=90, description="Device latitude (optional)"),
    longitude: Optional[float] = Query(None, ge=-180, le=180, description="Device longitude (optional)"),
    client: CivicApiClient = Depends(get_api_client),
):
    """
    Render the issue map.

    If the backend is unreachable the map still renders, just without issue
    markers, so the web view never shows an error page.
    """
    location = None
    if latitude is not None and longitude is not None:
        location = DeviceLocation(latitude=latitude, longitude=longitude)

    issues = []
    try:
        # Blocking HTTP call; keep it off the event loop
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, client.list_issues)
        issues = data.issues
    except CivicClientError as e:
        logger.error(f"Failed to load issues for map: {e}")

    return HTMLResponse(generate_map_html(issues, location))


@router.get("/speech", response_class=HTMLResponse)
async def speech_page(lang: str = Query(DEFAULT_LANGUAGE.code, description="Recognition locale, e.g. hi-IN")):
    return HTMLResponse(render_speech_page(lang))
