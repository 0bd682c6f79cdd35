"""
Shared fakes for screen and service tests.

No test touches the network: HTTP goes through FakeSession/FakeApiClient,
the device is scripted, and alerts/navigation are recorded.
"""

import threading
from typing import Any, Dict, List, Optional

import pytest

from civic_client.config.storage import Session
from civic_client.core.exceptions import ServerError
from civic_client.models.issue import AdminStats, Issue, IssueListResponse
from civic_client.models.user import User
from civic_client.services.device import Device, DeviceLocation
from civic_client.services.interaction import Alerter, HistoryNavigator
from civic_client.services.live_updates import parse_event

BASE_URL = "http://api.test"


# --- HTTP level ---

class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = None, invalid_json: bool = False):
        self.status_code = status_code
        self._json = json_data if json_data is not None else {}
        self._invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeSession:
    """Stands in for requests.Session; queued responses or exceptions are returned in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method, url, **kwargs):
        call = {"method": method, "url": url}
        call.update(kwargs)
        if "files" in kwargs:
            # Snapshot file parts while the handle is still open
            snapshot = {}
            for name, part in kwargs["files"].items():
                filename, content, *rest = part
                if hasattr(content, "read"):
                    content = content.read()
                snapshot[name] = (filename, content, *rest)
            call["files"] = snapshot
        self.calls.append(call)
        result = self.responses.pop(0) if self.responses else FakeResponse()
        if isinstance(result, Exception):
            raise result
        return result

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)


# --- API level ---

def make_issue(issue_id, status="reported", **extra) -> Issue:
    data = {
        "id": issue_id,
        "title": f"Issue {issue_id}",
        "description": f"Description {issue_id}",
        "issue_type": "pothole",
        "status": status,
        "latitude": 11.0 + issue_id / 1000,
        "longitude": 76.9 + issue_id / 1000,
        "address": f"{issue_id} Main Road",
        "created_at": "2024-01-15T10:30:00Z",
    }
    data.update(extra)
    return Issue.model_validate(data)


class FakeApiClient:
    """
    Records every call. Set `fail` to {method_name: exception} to make a
    method raise instead of answering.
    """

    def __init__(self, issues: Optional[List[Issue]] = None, stats: Optional[AdminStats] = None, total: Optional[int] = None):
        self.base_url = BASE_URL
        self.issues = list(issues or [])
        self.total = total
        self.stats = stats or AdminStats(total_issues=3, pending_issues=1, in_progress_issues=1, resolved_issues=1)
        self.fail: Dict[str, Exception] = {}
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    def _record(self, name, *args):
        with self._lock:
            self.calls.append((name,) + args)
        if name in self.fail:
            raise self.fail[name]

    def calls_to(self, name) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]

    def create_issue(self, form, token, photo=None, description=None):
        self._record("create_issue", form.model_copy(), token, photo, description)
        return {"message": "Issue created", "issue_id": 99}

    def list_issues(self, search=None, token=None):
        self._record("list_issues", search, token)
        total = self.total if self.total is not None else len(self.issues)
        return IssueListResponse(issues=list(self.issues), total=total)

    def get_admin_stats(self, token):
        self._record("get_admin_stats", token)
        return self.stats

    def update_issue_status(self, issue_id, status, token):
        self._record("update_issue_status", issue_id, status, token)
        return {"message": "updated"}

    def delete_issue(self, issue_id, token):
        self._record("delete_issue", issue_id, token)
        self.issues = [i for i in self.issues if str(i.id) != str(issue_id)]
        return {"message": "deleted"}

    def image_url(self, image_url):
        return f"{BASE_URL}{image_url}" if image_url else None


def server_error(status=500, message=None):
    return ServerError(status, message, {"error": message} if message else {})


# --- device / interaction ---

class RecordingAlerter(Alerter):
    def __init__(self, confirm_answer: bool = True):
        self.alerts: List[tuple] = []
        self.confirms: List[tuple] = []
        self.confirm_answer = confirm_answer

    def alert(self, title, message):
        self.alerts.append((title, message))

    def confirm(self, title, message):
        self.confirms.append((title, message))
        return self.confirm_answer

    @property
    def titles(self) -> List[str]:
        return [t for t, _ in self.alerts]


class ScriptedDevice(Device):
    def __init__(
        self,
        location_granted: bool = True,
        camera_granted: bool = True,
        position: Optional[DeviceLocation] = None,
        camera_uri: Optional[str] = "file:///tmp/camera-shot.jpg",
        gallery_uri: Optional[str] = "file:///tmp/gallery.png",
        position_error: Optional[Exception] = None,
    ):
        self.location_granted = location_granted
        self.camera_granted = camera_granted
        self.position = position or DeviceLocation(latitude=11.0168, longitude=76.9558, accuracy=12.4)
        self.camera_uri = camera_uri
        self.gallery_uri = gallery_uri
        self.position_error = position_error
        self.captures: List[str] = []

    async def request_camera_permission(self):
        return self.camera_granted

    async def request_location_permission(self):
        return self.location_granted

    async def get_current_position(self):
        if self.position_error is not None:
            raise self.position_error
        return self.position

    async def capture_photo(self, facing="back"):
        self.captures.append(facing)
        return self.camera_uri

    async def pick_image(self):
        return self.gallery_uri


class FakeLiveUpdates:
    """Drop-in for LiveUpdates; tests push events with emit()."""

    instances: List["FakeLiveUpdates"] = []

    def __init__(self, base_url, handler):
        self.base_url = base_url
        self.handler = handler
        self.connected = False
        self.disconnected = False
        FakeLiveUpdates.instances.append(self)

    async def connect(self):
        self.connected = True
        return True

    async def disconnect(self):
        self.connected = False
        self.disconnected = True

    async def emit(self, name, data=None):
        event = parse_event(name, data)
        if event is not None:
            await self.handler(event)


# --- fixtures ---

@pytest.fixture
def admin_session():
    return Session(user=User(id=1, name="Priya", role="admin", department="Roads"), token="admin-token")


@pytest.fixture
def citizen_session():
    return Session(user=User(id=7, name="Arun", role="citizen"), token="citizen-token")


@pytest.fixture
def anonymous_session():
    return Session()


@pytest.fixture
def alerter():
    return RecordingAlerter()


@pytest.fixture
def navigator():
    return HistoryNavigator()


@pytest.fixture
def device():
    return ScriptedDevice()


@pytest.fixture(autouse=True)
def _reset_fake_live_updates():
    FakeLiveUpdates.instances = []
    yield
    FakeLiveUpdates.instances = []
