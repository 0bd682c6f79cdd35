"""
Home screen - issue map, counts and live updates.

Unlike the admin dashboard, this screen patches its list in place when the
backend pushes a status change; only new issues trigger a re-fetch.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from civic_client.config.storage import Session
from civic_client.core.exceptions import CivicClientError
from civic_client.models.issue import HomeStats, Issue
from civic_client.services.api_client import CivicApiClient
from civic_client.services.device import Device, DeviceLocation
from civic_client.services.interaction import Alerter, Navigator, ROUTE_REPORT
from civic_client.services.live_updates import EventHandler, IssueEvent, LiveUpdates, reduce_issues
from civic_client.services.map_service import MapView, build_map_view, render_map_html
from civic_client.screens.base import Screen

logger = logging.getLogger(__name__)

LiveUpdatesFactory = Callable[[str, EventHandler], LiveUpdates]


class HomeScreen(Screen):

    def __init__(
        self,
        session: Session,
        client: CivicApiClient,
        device: Device,
        alerter: Optional[Alerter] = None,
        navigator: Optional[Navigator] = None,
        live_updates_factory: Optional[LiveUpdatesFactory] = None,
    ):
        super().__init__(session, client, alerter, navigator)
        self.device = device
        self.live_updates_factory = live_updates_factory or LiveUpdates
        self.live: Optional[LiveUpdates] = None
        self.issues: List[Issue] = []
        self.stats = HomeStats()
        self.location: Optional[DeviceLocation] = None
        self.user = None
        self.loading = True

    # --- lifecycle ---

    async def mount(self) -> None:
        await asyncio.gather(
            self._acquire_location(),
            self._load_user(),
            self.load_issues(),
            self.load_stats(),
            self.connect_live_updates(),
        )
        self.loading = False

    async def unmount(self) -> None:
        if self.live is not None:
            await self.live.disconnect()
            self.live = None

    async def connect_live_updates(self) -> None:
        self.live = self.live_updates_factory(self.client.base_url, self.handle_event)
        await self.live.connect()

    async def _acquire_location(self) -> None:
        try:
            if not await self.device.request_location_permission():
                self.alerter.alert("Permission denied", "Location permission is required to show nearby issues")
                return
            self.location = await self.device.get_current_position()
        except Exception as e:
            logger.error(f"Error getting location: {e}")

    async def _load_user(self) -> None:
        self.user = self.session.user

    # --- data ---

    async def load_issues(self) -> None:
        try:
            data = await self._call(self.client.list_issues)
        except CivicClientError as e:
            logger.error(f"Error loading issues: {e}")
            self.alerter.alert("Error", "Failed to load issues")
            return
        self.issues = data.issues

    async def load_stats(self) -> None:
        try:
            data = await self._call(self.client.list_issues)
        except CivicClientError as e:
            logger.error(f"Error loading stats: {e}")
            self.alerter.alert("Error", "Failed to load statistics")
            return
        self.stats = HomeStats.from_issue_list(data)

    async def handle_event(self, event: IssueEvent) -> None:
        result = reduce_issues(self.issues, event)
        self.issues = result.issues
        if result.refetch:
            await self.load_issues()

    # --- view-model ---

    @property
    def greeting(self) -> str:
        return f"Welcome, {self.user.name}" if self.user is not None else "Welcome, Guest"

    def map_view(self) -> MapView:
        return build_map_view(self.issues, self.location)

    def map_html(self) -> str:
        return render_map_html(self.map_view())

    def open_report(self) -> None:
        self.navigator.push(ROUTE_REPORT)
