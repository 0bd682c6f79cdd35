"""
Map service - turn issues into a Leaflet map document for the home web view.

Two steps:
- build_map_view(): issues + device location -> typed MapView (center,
  zoom, color-coded markers with pre-escaped popups)
- render_map_html(): MapView -> complete HTML document via folium

Leaflet, tiles and marker icons are all loaded from public CDNs at render
time; nothing is bundled. Issue text only ever reaches the document through
escape_popup_text().
"""

import html
import logging
from typing import List, Optional

import folium
from pydantic import BaseModel, Field

from civic_client.core.settings import settings
from civic_client.models.issue import Issue, IssueStatus
from civic_client.services.device import DeviceLocation

logger = logging.getLogger(__name__)

MARKER_ICON_URL = "https://raw.githubusercontent.com/pointhi/leaflet-color-markers/master/img/marker-icon-2x-{color}.png"
MARKER_SHADOW_URL = "https://cdnjs.cloudflare.com/ajax/libs/leaflet/0.7.7/images/marker-shadow.png"
USER_MARKER_COLOR = "blue"

_MARKER_COLORS = {
    IssueStatus.REPORTED.value: "red",
    IssueStatus.ACKNOWLEDGED.value: "orange",
    IssueStatus.IN_PROGRESS.value: "blue",
    IssueStatus.RESOLVED.value: "green",
}


def marker_color(status: str) -> str:
    return _MARKER_COLORS.get(status, "gray")


def marker_icon_url(color: str) -> str:
    return MARKER_ICON_URL.format(color=color)


def escape_popup_text(value: Optional[str]) -> str:
    """
    HTML-escape untrusted text for a popup.

    folium places popup HTML inside a JS template literal, so backslash, "$"
    and backtick become entities as well. A raw backslash would start an escape
    sequence in the script and "${...}" would be evaluated.
    """
    escaped = html.escape(value or "", quote=True)
    return escaped.replace("\\", "&#92;").replace("$", "&#36;").replace("`", "&#96;")


def issue_popup_html(issue: Issue) -> str:
    parts = [
        f"<b>{escape_popup_text(issue.title)}</b>",
        f"Type: {escape_popup_text(issue.issue_type)}",
        f"Status: {escape_popup_text(issue.status)}",
    ]
    if issue.address:
        parts.append(escape_popup_text(issue.address))
    return "<br/>".join(parts)


class MapMarker(BaseModel):
    latitude: float
    longitude: float
    color: str
    popup_html: Optional[str] = None

    @property
    def icon_url(self) -> str:
        return marker_icon_url(self.color)


class MapView(BaseModel):
    center_latitude: float
    center_longitude: float
    zoom: int = 13
    markers: List[MapMarker] = Field(default_factory=list)


def build_map_view(
    issues: List[Issue],
    location: Optional[DeviceLocation] = None,
    zoom: Optional[int] = None,
) -> MapView:
    """
    Center on the device when known, else on the configured default.
    Issues without coordinates are skipped. The user marker goes last.
    """
    if location is not None:
        center_lat, center_lng = location.latitude, location.longitude
    else:
        center_lat, center_lng = settings.MAP_DEFAULT_LATITUDE, settings.MAP_DEFAULT_LONGITUDE

    markers: List[MapMarker] = []
    skipped = 0
    for issue in issues:
        if not issue.has_coordinates():
            skipped += 1
            continue
        markers.append(MapMarker(
            latitude=issue.latitude,
            longitude=issue.longitude,
            color=marker_color(issue.status),
            popup_html=issue_popup_html(issue),
        ))
    if skipped:
        logger.debug(f"Skipped {skipped} issue(s) without coordinates")

    if location is not None:
        markers.append(MapMarker(
            latitude=location.latitude,
            longitude=location.longitude,
            color=USER_MARKER_COLOR,
            popup_html="Your Location",
        ))

    return MapView(
        center_latitude=center_lat,
        center_longitude=center_lng,
        zoom=zoom if zoom is not None else settings.MAP_ZOOM,
        markers=markers,
    )


def _icon(color: str) -> folium.CustomIcon:
    return folium.CustomIcon(
        icon_image=marker_icon_url(color),
        icon_size=(25, 41),
        icon_anchor=(12, 41),
        popup_anchor=(1, -34),
        shadow_image=MARKER_SHADOW_URL,
        shadow_size=(41, 41),
    )


def render_map_html(view: MapView) -> str:
    """Render a complete, self-contained HTML document for the web view."""
    fmap = folium.Map(
        location=[view.center_latitude, view.center_longitude],
        zoom_start=view.zoom,
        tiles="OpenStreetMap",
    )
    for marker in view.markers:
        popup = folium.Popup(marker.popup_html, max_width=250) if marker.popup_html else None
        folium.Marker(
            location=[marker.latitude, marker.longitude],
            popup=popup,
            icon=_icon(marker.color),
        ).add_to(fmap)
    return fmap.get_root().render()


def generate_map_html(issues: List[Issue], location: Optional[DeviceLocation] = None) -> str:
    return render_map_html(build_map_view(issues, location))
