"""
Display helpers shared by the screens' view-models.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from civic_client.models.issue import ISSUE_TYPE_LABELS, IssueStatus

logger = logging.getLogger(__name__)

_STATUS_COLORS = {
    IssueStatus.REPORTED.value: "#e74c3c",
    IssueStatus.ACKNOWLEDGED.value: "#f39c12",
    IssueStatus.IN_PROGRESS.value: "#3498db",
    IssueStatus.RESOLVED.value: "#27ae60",
}
DEFAULT_STATUS_COLOR = "#7f8c8d"


def status_color(status: str) -> str:
    return _STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


def status_text(status: str) -> str:
    """'in_progress' -> 'IN PROGRESS'. Only the first underscore is replaced."""
    return (status or "").replace("_", " ", 1).upper()


def issue_type_label(issue_type: str) -> str:
    return ISSUE_TYPE_LABELS.get(issue_type, issue_type)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date(value: Optional[str]) -> str:
    """
    Render a backend timestamp as local date plus HH:MM.
    Unparseable values are shown as-is.
    """
    dt = _parse_timestamp(value)
    if dt is None:
        return value or ""
    local = dt.astimezone()
    return f"{local.strftime('%x')} {local.strftime('%H:%M')}"
