import logging
import sys
from typing import Optional

from civic_client.core.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for CLI and web-view host entry points.

    Library modules only ever call logging.getLogger(__name__); handlers are
    attached here once, at the process edge.
    """
    level_name = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    if settings.DEBUG:
        logging.getLogger("civic_client").setLevel(logging.DEBUG)
