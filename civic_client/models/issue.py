"""
Pydantic view-models for issues and dashboard statistics.
These mirror the backend's JSON; the client never owns this data.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union
from enum import Enum


class IssueType(str, Enum):
    POTHOLE = "pothole"
    STREETLIGHT = "streetlight"
    TRASH = "trash"
    GRAFFITI = "graffiti"
    WATER_LEAK = "water_leak"
    OTHER = "other"


class IssueStatus(str, Enum):
    """
    Status lifecycle as reported by the backend.

    The client only reads it and requests transitions; the backend decides.
    """
    REPORTED = "reported"
    ACKNOWLEDGED = "acknowledged"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


ISSUE_TYPE_LABELS: Dict[str, str] = {
    IssueType.POTHOLE.value: "Pothole",
    IssueType.STREETLIGHT.value: "Malfunctioning Streetlight",
    IssueType.TRASH.value: "Overflowing Trash Bin",
    IssueType.GRAFFITI.value: "Graffiti",
    IssueType.WATER_LEAK.value: "Water Leak",
    IssueType.OTHER.value: "Other",
}


class StatusAction(BaseModel):
    """A status transition button on the admin dashboard."""
    label: str
    value: IssueStatus
    color: str


STATUS_ACTIONS: List[StatusAction] = [
    StatusAction(label="Acknowledge", value=IssueStatus.ACKNOWLEDGED, color="#f39c12"),
    StatusAction(label="In Progress", value=IssueStatus.IN_PROGRESS, color="#3498db"),
    StatusAction(label="Resolve", value=IssueStatus.RESOLVED, color="#27ae60"),
]


class Issue(BaseModel):
    """
    A single reported civic problem, as returned by GET /api/issues.

    issue_type and status are kept as plain strings: the server owns the
    vocabulary and may send values this client does not know yet.
    """
    id: Union[int, str]
    title: Optional[str] = ""
    description: Optional[str] = ""
    issue_type: Optional[str] = IssueType.OTHER.value
    status: Optional[str] = IssueStatus.REPORTED.value
    priority: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    image_url: Optional[str] = None
    reported_by: Optional[Union[int, str]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "id": 5,
                "title": "Deep pothole near bus stop",
                "description": "Two-wheelers are swerving into traffic to avoid it.",
                "issue_type": "pothole",
                "status": "reported",
                "priority": "high",
                "latitude": 11.0168,
                "longitude": 76.9558,
                "address": "Avinashi Road, Coimbatore",
                "image_url": "/uploads/issue-5.jpg",
                "reported_by": 12,
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
            }
        }

    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class IssueListResponse(BaseModel):
    """Body of GET /api/issues."""
    issues: List[Issue] = Field(default_factory=list)
    total: Optional[int] = 0

    class Config:
        extra = "ignore"


class AdminStats(BaseModel):
    """
    Aggregate snapshot from GET /api/admin/stats.
    Read-only; re-fetched after every admin mutation.
    """
    total_issues: Optional[int] = 0
    pending_issues: Optional[int] = 0
    in_progress_issues: Optional[int] = 0
    resolved_issues: Optional[int] = 0
    recent_issues: Optional[int] = 0
    # null when nothing has been resolved yet
    response_time_avg: Optional[float] = None
    issue_types: Optional[Dict[str, int]] = Field(default_factory=dict)

    class Config:
        extra = "ignore"


class HomeStats(BaseModel):
    """Counts shown on the home screen, derived from one issue list fetch."""
    total_issues: int = 0
    resolved_issues: int = 0
    pending_issues: int = 0

    @classmethod
    def from_issue_list(cls, data: IssueListResponse) -> "HomeStats":
        total = data.total or 0
        resolved = len([i for i in data.issues if i.status == IssueStatus.RESOLVED.value])
        return cls(
            total_issues=total,
            resolved_issues=resolved,
            pending_issues=total - resolved,
        )


class IssueFormData(BaseModel):
    """
    Client-local draft owned by the report screen for one submission.
    `translated` is only used by the voice variant.
    """
    title: str = ""
    description: str = ""
    translated: str = ""
    issue_type: str = ""
    latitude: float = 0
    longitude: float = 0
    accuracy: float = 0


class PhotoAttachment(BaseModel):
    """The single photo attached to a report, as a local file URI/path."""
    uri: str

    @property
    def extension(self) -> str:
        tail = self.uri.rsplit("/", 1)[-1]
        return tail.rsplit(".", 1)[-1].lower() if "." in tail else "jpg"

    @property
    def mime_type(self) -> str:
        return f"image/{self.extension}"

    @property
    def filename(self) -> str:
        return f"issue-photo.{self.extension}"
