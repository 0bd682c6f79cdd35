"""
Tests for the REST client:
- request shapes for the five endpoints
- bearer token handling
- error mapping (network vs server failures)
"""

import pytest
import requests

from civic_client.core.exceptions import InvalidResponseError, NetworkError, ServerError, ValidationError
from civic_client.models.issue import IssueFormData, IssueStatus, PhotoAttachment
from civic_client.services.api_client import CivicApiClient, resolve_image_url
from tests.conftest import BASE_URL, FakeResponse, FakeSession


def make_client(*responses):
    session = FakeSession(*responses)
    return CivicApiClient(base_url=BASE_URL + "/", session=session, timeout=3), session


@pytest.fixture
def form():
    return IssueFormData(
        title="Broken light",
        description="Dark street at night",
        issue_type="streetlight",
        latitude=11.5,
        longitude=76.25,
        accuracy=8,
    )


# --- list / stats ---

def test_list_issues_with_search():
    client, session = make_client(FakeResponse(200, {"issues": [{"id": 1, "title": "A"}], "total": 1}))

    data = client.list_issues(search="pothole", token="tok")

    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == f"{BASE_URL}/api/issues"
    assert call["params"] == {"search": "pothole"}
    assert call["headers"] == {"Authorization": "Bearer tok"}
    assert call["timeout"] == 3
    assert data.total == 1
    assert data.issues[0].title == "A"


def test_search_query_is_url_encoded_by_requests():
    client, session = make_client(FakeResponse(200, {"issues": [], "total": 0}))
    client.list_issues(search="pot hole & co")

    call = session.calls[0]
    prepared = requests.Request("GET", call["url"], params=call["params"]).prepare()
    assert prepared.url == f"{BASE_URL}/api/issues?search=pot+hole+%26+co"


def test_list_issues_without_search_or_token():
    client, session = make_client(FakeResponse(200, {"issues": []}))
    data = client.list_issues()

    call = session.calls[0]
    assert call["params"] is None
    assert call["headers"] == {}
    assert data.issues == []
    assert data.total == 0


def test_admin_stats_parsed():
    payload = {
        "total_issues": 10,
        "pending_issues": 4,
        "in_progress_issues": 3,
        "resolved_issues": 3,
        "recent_issues": 2,
        "response_time_avg": 1.5,
        "issue_types": {"pothole": 6, "trash": 4},
    }
    client, session = make_client(FakeResponse(200, payload))

    stats = client.get_admin_stats("tok")

    assert session.calls[0]["url"] == f"{BASE_URL}/api/admin/stats"
    assert session.calls[0]["headers"]["Authorization"] == "Bearer tok"
    assert stats.pending_issues == 4
    assert stats.issue_types["pothole"] == 6


def test_admin_stats_accepts_nulls():
    client, _ = make_client(FakeResponse(200, {"total_issues": 0, "resolved_issues": None, "response_time_avg": None, "issue_types": None}))

    stats = client.get_admin_stats("tok")

    assert stats.total_issues == 0
    assert stats.resolved_issues is None
    assert stats.response_time_avg is None


def test_issue_with_null_text_fields_is_accepted():
    client, _ = make_client(FakeResponse(200, {"issues": [{"id": 3, "title": None, "issue_type": None, "status": None}], "total": None}))

    data = client.list_issues()

    assert data.issues[0].title is None
    assert data.total is None


def test_malformed_body_becomes_client_error():
    client, _ = make_client(FakeResponse(200, {"issues": [{"title": "no id"}], "total": 1}))
    with pytest.raises(InvalidResponseError):
        client.list_issues()

    client, _ = make_client(FakeResponse(200, {"total_issues": "many"}))
    with pytest.raises(InvalidResponseError):
        client.get_admin_stats("tok")


# --- mutations ---

def test_update_issue_status_puts_json_body():
    client, session = make_client(FakeResponse(200, {"message": "ok"}))
    client.update_issue_status(5, IssueStatus.RESOLVED, "tok")

    call = session.calls[0]
    assert call["method"] == "PUT"
    assert call["url"] == f"{BASE_URL}/api/issues/5"
    assert call["json"] == {"status": "resolved"}
    assert call["headers"] == {"Authorization": "Bearer tok"}


def test_delete_issue():
    client, session = make_client(FakeResponse(200, {}))
    client.delete_issue(5, "tok")

    call = session.calls[0]
    assert call["method"] == "DELETE"
    assert call["url"] == f"{BASE_URL}/api/issues/5"


# --- create ---

def test_create_issue_without_photo_is_multipart(form):
    client, session = make_client(FakeResponse(201, {"issue_id": 3}))

    result = client.create_issue(form, "tok")

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == f"{BASE_URL}/api/issues"
    assert call["headers"] == {"Authorization": "Bearer tok"}
    assert "Content-Type" not in call["headers"]
    files = call["files"]
    assert files["title"] == (None, "Broken light")
    assert files["issue_type"] == (None, "streetlight")
    assert files["latitude"] == (None, "11.5")
    assert files["accuracy"] == (None, "8.0")
    assert "image" not in files
    assert result == {"issue_id": 3}


def test_create_issue_with_photo(form, tmp_path):
    photo_path = tmp_path / "shot.PNG"
    photo_path.write_bytes(b"\x89PNG fake")
    client, session = make_client(FakeResponse(201, {}))

    client.create_issue(form, "tok", PhotoAttachment(uri=f"file://{photo_path}"), description="Translated text")

    call = session.calls[0]
    assert call["files"]["image"] == ("issue-photo.png", b"\x89PNG fake", "image/png")
    assert call["data"]["description"] == "Translated text"
    assert call["data"]["longitude"] == "76.25"


def test_create_issue_with_missing_photo_file(form, tmp_path):
    client, session = make_client()
    with pytest.raises(ValidationError):
        client.create_issue(form, "tok", PhotoAttachment(uri=str(tmp_path / "missing.jpg")))
    assert session.calls == []


# --- errors ---

def test_server_error_carries_backend_message():
    client, _ = make_client(FakeResponse(400, {"error": "Title is required"}))

    with pytest.raises(ServerError) as exc_info:
        client.list_issues()

    assert exc_info.value.status_code == 400
    assert exc_info.value.server_message == "Title is required"


def test_server_error_with_non_json_body():
    client, _ = make_client(FakeResponse(502, invalid_json=True))

    with pytest.raises(ServerError) as exc_info:
        client.delete_issue(1, "tok")

    assert exc_info.value.status_code == 502
    assert exc_info.value.server_message is None
    assert exc_info.value.message


@pytest.mark.parametrize("exc", [
    requests.exceptions.ConnectionError("refused"),
    requests.exceptions.Timeout("slow"),
])
def test_transport_failures_become_network_errors(exc):
    client, _ = make_client(exc)
    with pytest.raises(NetworkError) as exc_info:
        client.get_admin_stats("tok")
    assert exc_info.value.message == "Network error. Please try again."


def test_resolve_image_url():
    assert resolve_image_url("/uploads/a.jpg", "http://host:5000/") == "http://host:5000/uploads/a.jpg"
    assert resolve_image_url("https://cdn.example/a.jpg", "http://host") == "https://cdn.example/a.jpg"
    assert resolve_image_url(None, "http://host") is None
    assert resolve_image_url("", "http://host") is None
