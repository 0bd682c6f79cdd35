"""
Device-local key-value storage and the session built from it.

The login flow (out of scope here) writes two keys:
- "user":  JSON blob of the logged-in user
- "token": opaque bearer token

Screens never read storage ad hoc; they receive a Session built once from it.
"""

import json
import logging
import os
from typing import Dict, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from civic_client.core.settings import settings
from civic_client.models.user import User

logger = logging.getLogger(__name__)

USER_KEY = "user"
TOKEN_KEY = "token"


class LocalStore:
    """
    String-to-string store persisted as one JSON file.

    Values are strings, like the mobile key-value store this replaces, so the
    user blob stays JSON-encoded inside the file.
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Local store at {self.path} is unreadable: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Local store at {self.path} is not a JSON object; ignoring it")
            return {}
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else json.dumps(value)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)


class Session(BaseModel):
    """Explicit credentials context handed to every screen."""
    user: Optional[User] = None
    token: Optional[str] = None

    @classmethod
    def from_store(cls, store: LocalStore) -> "Session":
        """
        Load user and token from the store.

        A corrupt user blob is logged and treated as "not logged in".
        """
        user = None
        raw_user = store.get_item(USER_KEY)
        if raw_user:
            try:
                user = User.model_validate(json.loads(raw_user))
            except (json.JSONDecodeError, PydanticValidationError) as e:
                logger.error(f"Error loading user: {e}")
        return cls(user=user, token=store.get_item(TOKEN_KEY))


_store: Optional[LocalStore] = None


def get_store() -> LocalStore:
    """Shared store at STORAGE_PATH."""
    global _store
    if _store is None:
        _store = LocalStore(settings.STORAGE_PATH)
        logger.debug(f"Local store initialized at {settings.STORAGE_PATH}")
    return _store


def load_session() -> Session:
    return Session.from_store(get_store())
