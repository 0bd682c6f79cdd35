from civic_client.models.issue import (
    AdminStats,
    HomeStats,
    ISSUE_TYPE_LABELS,
    Issue,
    IssueFormData,
    IssueListResponse,
    IssueStatus,
    IssueType,
    PhotoAttachment,
    STATUS_ACTIONS,
    StatusAction,
)
from civic_client.models.user import User

__all__ = [
    "AdminStats",
    "HomeStats",
    "ISSUE_TYPE_LABELS",
    "Issue",
    "IssueFormData",
    "IssueListResponse",
    "IssueStatus",
    "IssueType",
    "PhotoAttachment",
    "STATUS_ACTIONS",
    "StatusAction",
    "User",
]
