"""
Admin dashboard - stats, searchable issue list, status changes, deletes.

Every successful mutation re-fetches both stats and list instead of patching
local state, so the dashboard converges on the backend's view.
"""

import asyncio
import logging
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel

from civic_client.config.storage import Session
from civic_client.core.exceptions import CivicClientError
from civic_client.core.settings import settings
from civic_client.models.issue import AdminStats, Issue, IssueStatus, STATUS_ACTIONS
from civic_client.services.api_client import CivicApiClient, IssueId
from civic_client.services.debounce import Debouncer
from civic_client.services.interaction import Alerter, Navigator
from civic_client.screens.base import Screen
from civic_client.utils.formatting import format_date, status_color, status_text

logger = logging.getLogger(__name__)


class AdminState(str, Enum):
    LOGIN_REQUIRED = "login_required"
    ACCESS_DENIED = "access_denied"
    LOADING = "loading"
    READY = "ready"


class CardAction(BaseModel):
    label: str
    value: str
    color: str
    disabled: bool


class IssueCard(BaseModel):
    """Everything the dashboard shows for one issue."""
    id: Union[int, str]
    title: str
    type_label: str
    status: str
    status_text: str
    status_color: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    address: Optional[str] = None
    reported_at: str = ""
    actions: List[CardAction]


class AdminScreen(Screen):

    def __init__(
        self,
        session: Session,
        client: CivicApiClient,
        alerter: Optional[Alerter] = None,
        navigator: Optional[Navigator] = None,
        debounce_seconds: Optional[float] = None,
    ):
        super().__init__(session, client, alerter, navigator)
        self.user = None
        self.stats: Optional[AdminStats] = None
        self.issues: List[Issue] = []
        self.loading = True
        self.refreshing = False
        self.search_query = ""
        delay = settings.SEARCH_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        self._search_debouncer = Debouncer(delay, self.load_issues)

    @property
    def state(self) -> AdminState:
        if self.user is None:
            return AdminState.LOGIN_REQUIRED
        if not self.user.is_admin:
            return AdminState.ACCESS_DENIED
        if self.loading:
            return AdminState.LOADING
        return AdminState.READY

    @property
    def welcome(self) -> str:
        if self.user is None:
            return ""
        if not self.user.department:
            return f"Welcome, {self.user.name}"
        return f"Welcome, {self.user.name} - {self.user.department}"

    async def mount(self) -> None:
        self.user = self.session.user
        if self.user is not None and self.user.is_admin:
            await asyncio.gather(self.load_stats(), self.load_issues())
        self.loading = False

    async def unmount(self) -> None:
        self._search_debouncer.cancel()

    # --- loading ---

    async def load_stats(self) -> None:
        try:
            self.stats = await self._call(self.client.get_admin_stats, self.session.token)
        except CivicClientError as e:
            logger.error(f"Error loading admin stats: {e}")
            self.alerter.alert("Error", "Failed to load statistics")

    async def load_issues(self) -> None:
        try:
            data = await self._call(
                self.client.list_issues,
                search=self.search_query or None,
                token=self.session.token,
            )
        except CivicClientError as e:
            logger.error(f"Error loading issues: {e}")
            self.alerter.alert("Error", "Failed to load issues")
            return
        self.issues = data.issues

    async def refresh(self) -> None:
        self.refreshing = True
        try:
            await asyncio.gather(self.load_stats(), self.load_issues())
        finally:
            self.refreshing = False

    async def set_search_query(self, query: str) -> None:
        """
        Non-empty queries reload once typing pauses; clearing the box
        reloads immediately.
        """
        self.search_query = query
        if self.state in (AdminState.LOGIN_REQUIRED, AdminState.ACCESS_DENIED):
            return
        if query:
            self._search_debouncer.trigger()
        else:
            self._search_debouncer.cancel()
            await self.load_issues()

    async def wait_for_search(self) -> None:
        await self._search_debouncer.wait()

    # --- mutations ---

    async def update_issue_status(self, issue_id: IssueId, status: Union[IssueStatus, str]) -> bool:
        value = status.value if isinstance(status, IssueStatus) else status
        if value not in {a.value.value for a in STATUS_ACTIONS}:
            logger.warning(f"Refusing unknown status '{value}' for issue {issue_id}")
            self.alerter.alert("Error", "Failed to update issue status")
            return False
        try:
            await self._call(self.client.update_issue_status, issue_id, value, self.session.token)
        except CivicClientError as e:
            logger.error(f"Error updating issue status: {e}")
            self.alerter.alert("Error", "Failed to update issue status")
            return False
        self.alerter.alert("Success", "Issue status updated successfully")
        await self.refresh()
        return True

    async def delete_issue(self, issue_id: IssueId) -> bool:
        if not self.alerter.confirm("Confirm Delete", "Are you sure you want to remove this issue?"):
            return False
        try:
            await self._call(self.client.delete_issue, issue_id, self.session.token)
        except CivicClientError as e:
            logger.error(f"Error deleting issue: {e}")
            self.alerter.alert("Error", "Failed to remove issue")
            return False
        self.alerter.alert("Success", "Issue removed successfully")
        await self.refresh()
        return True

    # --- view-model ---

    @property
    def empty_message(self) -> Optional[str]:
        if self.issues:
            return None
        return "No issues match your search" if self.search_query else "No issues reported yet"

    def issue_cards(self) -> List[IssueCard]:
        cards = []
        for issue in self.issues:
            cards.append(IssueCard(
                id=issue.id,
                title=issue.title or "",
                type_label=(issue.issue_type or "").upper(),
                status=issue.status or "",
                status_text=status_text(issue.status),
                status_color=status_color(issue.status),
                description=issue.description or None,
                image_url=self.client.image_url(issue.image_url),
                address=issue.address or None,
                reported_at=format_date(issue.created_at),
                actions=[
                    CardAction(
                        label=action.label,
                        value=action.value.value,
                        color=action.color,
                        disabled=issue.status == action.value.value,
                    )
                    for action in STATUS_ACTIONS
                ],
            ))
        return cards
