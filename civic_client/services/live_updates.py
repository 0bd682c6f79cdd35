"""
Live issue updates over socket.io.

Socket events are decoded into typed events and applied to the in-memory
issue list through a pure reducer:

- new_issue      -> list unchanged, caller must re-fetch once
- issue_updated  -> status patch on the entry with the matching id only
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError
from pydantic import BaseModel, ValidationError as PydanticValidationError

from civic_client.models.issue import Issue

logger = logging.getLogger(__name__)

NEW_ISSUE = "new_issue"
ISSUE_UPDATED = "issue_updated"


class NewIssueEvent(BaseModel):
    payload: Any = None


class IssueUpdatedEvent(BaseModel):
    issue_id: Union[int, str]
    status: str

    class Config:
        extra = "ignore"


IssueEvent = Union[NewIssueEvent, IssueUpdatedEvent]


class ReduceResult(BaseModel):
    issues: List[Issue]
    refetch: bool = False


def parse_event(name: str, data: Any) -> Optional[IssueEvent]:
    """Decode a raw socket event. Unknown or malformed events yield None."""
    if name == NEW_ISSUE:
        return NewIssueEvent(payload=data)
    if name == ISSUE_UPDATED:
        try:
            return IssueUpdatedEvent.model_validate(data or {})
        except PydanticValidationError as e:
            logger.warning(f"Ignoring malformed {ISSUE_UPDATED} payload {data!r}: {e}")
            return None
    return None


def reduce_issues(issues: List[Issue], event: IssueEvent) -> ReduceResult:
    """
    Apply one socket event to the issue list without mutating it.

    Ids are compared as strings so a numeric id pushed as "5" still matches.
    """
    if isinstance(event, NewIssueEvent):
        return ReduceResult(issues=list(issues), refetch=True)

    target = str(event.issue_id)
    patched = [
        issue.model_copy(update={"status": event.status}) if str(issue.id) == target else issue
        for issue in issues
    ]
    return ReduceResult(issues=patched, refetch=False)


EventHandler = Callable[[IssueEvent], Awaitable[None]]


class LiveUpdates:
    """
    One socket.io connection for the lifetime of a screen.

    No reconnection or ordering logic beyond the transport defaults.
    """

    def __init__(self, base_url: str, handler: EventHandler, client: Optional[socketio.AsyncClient] = None):
        self.base_url = base_url
        self.handler = handler
        self.client = client or socketio.AsyncClient()
        self.client.on("connect", self._on_connect)
        self.client.on(NEW_ISSUE, self._on_new_issue)
        self.client.on(ISSUE_UPDATED, self._on_issue_updated)

    async def _on_connect(self):
        logger.info(f"Connected to live updates at {self.base_url}")

    async def _on_new_issue(self, data=None):
        await self._dispatch(NEW_ISSUE, data)

    async def _on_issue_updated(self, data=None):
        await self._dispatch(ISSUE_UPDATED, data)

    async def _dispatch(self, name: str, data: Any) -> None:
        event = parse_event(name, data)
        if event is not None:
            await self.handler(event)

    async def connect(self) -> bool:
        try:
            await self.client.connect(self.base_url)
            return True
        except SocketConnectionError as e:
            logger.error(f"Live updates connection to {self.base_url} failed: {e}")
            return False

    async def disconnect(self) -> None:
        if self.client.connected:
            await self.client.disconnect()
