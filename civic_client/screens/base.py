import asyncio
import functools
import logging
from typing import Any, Callable, Optional, TypeVar

from civic_client.config.storage import Session
from civic_client.services.api_client import CivicApiClient
from civic_client.services.interaction import Alerter, HistoryNavigator, LoggingAlerter, Navigator, ROUTE_LOGIN

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Screen:
    """
    Shared plumbing for screen controllers.

    Every screen owns its state privately for the lifetime of one mount;
    nothing is shared between screens except the injected collaborators.
    """

    def __init__(
        self,
        session: Session,
        client: CivicApiClient,
        alerter: Optional[Alerter] = None,
        navigator: Optional[Navigator] = None,
    ):
        self.session = session
        self.client = client
        self.alerter = alerter or LoggingAlerter()
        self.navigator = navigator or HistoryNavigator()

    def open_login(self) -> None:
        """Action behind every login prompt."""
        self.navigator.push(ROUTE_LOGIN)

    async def _call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run a blocking call (HTTP) in the default executor so other work proceeds."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))
