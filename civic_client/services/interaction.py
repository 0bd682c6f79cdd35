"""
User-facing interaction seams: blocking alerts, confirmations, navigation.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional
import logging

logger = logging.getLogger(__name__)

# Navigation targets
ROUTE_ISSUE_LIST = "/(tabs)/explore"
ROUTE_LOGIN = "/login"
ROUTE_REPORT = "/report"


class Alerter(ABC):
    @abstractmethod
    def alert(self, title: str, message: str) -> None:
        """Show a blocking message."""
        raise NotImplementedError

    @abstractmethod
    def confirm(self, title: str, message: str) -> bool:
        """Ask a yes/no question; True means the destructive/affirmative choice."""
        raise NotImplementedError


class Navigator(ABC):
    @abstractmethod
    def push(self, path: str) -> None:
        raise NotImplementedError


class LoggingAlerter(Alerter):
    """Headless alerter: logs alerts and answers confirmations with a fixed choice."""

    def __init__(self, auto_confirm: bool = False):
        self.auto_confirm = auto_confirm

    def alert(self, title: str, message: str) -> None:
        logger.info(f"[ALERT] {title}: {message}")

    def confirm(self, title: str, message: str) -> bool:
        logger.info(f"[CONFIRM] {title}: {message} -> {'yes' if self.auto_confirm else 'no'}")
        return self.auto_confirm


class ConsoleAlerter(Alerter):
    """Terminal alerter for the CLI."""

    def __init__(self, output: Callable[[str], None] = print, prompt: Callable[[str], str] = input):
        self.output = output
        self.prompt = prompt

    def alert(self, title: str, message: str) -> None:
        self.output(f"{title}: {message}")

    def confirm(self, title: str, message: str) -> bool:
        answer = self.prompt(f"{title}: {message} [y/N] ")
        return answer.strip().lower() in ("y", "yes")


class HistoryNavigator(Navigator):
    """Records pushed routes; the CLI and tests inspect `history`."""

    def __init__(self):
        self.history: List[str] = []

    @property
    def current(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def push(self, path: str) -> None:
        logger.debug(f"Navigate -> {path}")
        self.history.append(path)
