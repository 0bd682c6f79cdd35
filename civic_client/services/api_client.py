"""
REST client for the civic issue backend.

Endpoints (exact paths/methods):
- POST   /api/issues             multipart, bearer token
- GET    /api/issues[?search=q]  -> {issues, total}
- GET    /api/admin/stats        bearer token
- PUT    /api/issues/<id>        {"status": ...}, bearer token
- DELETE /api/issues/<id>        bearer token

Every method either returns parsed data or raises a CivicClientError
subclass; callers decide how to surface it.
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar, Union

import requests
from pydantic import BaseModel, ValidationError as PydanticValidationError

from civic_client.core.exceptions import InvalidResponseError, NetworkError, ServerError, ValidationError
from civic_client.core.settings import settings
from civic_client.models.issue import (
    AdminStats,
    IssueFormData,
    IssueListResponse,
    IssueStatus,
    PhotoAttachment,
)

logger = logging.getLogger(__name__)

IssueId = Union[int, str]
M = TypeVar("M", bound=BaseModel)


def resolve_image_url(image_url: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """Image paths from the backend are relative to the API base URL."""
    if not image_url:
        return None
    if image_url.startswith(("http://", "https://")):
        return image_url
    return f"{(base_url or settings.API_BASE_URL).rstrip('/')}{image_url}"


def _local_path(uri: str) -> str:
    return uri[len("file://"):] if uri.startswith("file://") else uri


class CivicApiClient:
    """
    Thin synchronous client; screens run it in an executor.

    A requests.Session is reused across calls. Tests pass their own session.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _headers(token: Optional[str]) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    @staticmethod
    def _json_body(resp: requests.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _parse(model: Type[M], data: Dict[str, Any], action: str) -> M:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"{action}: unexpected response body: {e}")
            raise InvalidResponseError() from e

    def _request(self, method: str, path: str, action: str, **kwargs) -> Dict[str, Any]:
        url = self._url(path)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error(f"{action}: request to {url} timed out: {e}")
            raise NetworkError() from e
        except requests.exceptions.RequestException as e:
            logger.error(f"{action}: request to {url} failed: {e}")
            raise NetworkError() from e

        data = self._json_body(resp)
        logger.debug(f"{action} response: {resp.status_code} {data}")
        if not resp.ok:
            message = data.get("error") or data.get("message") or data.get("detail")
            if not isinstance(message, str):
                message = None
            logger.warning(f"{action} failed with status {resp.status_code}")
            raise ServerError(resp.status_code, message, data)
        return data

    def create_issue(
        self,
        form: IssueFormData,
        token: Optional[str],
        photo: Optional[PhotoAttachment] = None,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Submit a new issue as multipart/form-data.

        `description` overrides form.description (the voice variant sends the
        English translation). requests builds the multipart boundary itself,
        so no Content-Type header is set here.
        """
        fields = {
            "title": form.title,
            "description": form.description if description is None else description,
            "issue_type": form.issue_type,
            "latitude": str(form.latitude),
            "longitude": str(form.longitude),
            "accuracy": str(form.accuracy),
        }
        if photo is None:
            # Force a multipart body even without a file part.
            files = {name: (None, value) for name, value in fields.items()}
            return self._request(
                "POST", "/api/issues", "Create issue",
                headers=self._headers(token), files=files,
            )

        path = _local_path(photo.uri)
        try:
            fh = open(path, "rb")
        except OSError as e:
            logger.error(f"Cannot read photo {path}: {e}")
            raise ValidationError("Could not read the attached photo") from e
        with fh:
            files = {"image": (photo.filename, fh, photo.mime_type)}
            return self._request(
                "POST", "/api/issues", "Create issue",
                headers=self._headers(token), data=fields, files=files,
            )

    def list_issues(self, search: Optional[str] = None, token: Optional[str] = None) -> IssueListResponse:
        params = {"search": search} if search else None
        data = self._request(
            "GET", "/api/issues", "List issues",
            headers=self._headers(token), params=params,
        )
        return self._parse(IssueListResponse, data, "List issues")

    def get_admin_stats(self, token: Optional[str]) -> AdminStats:
        data = self._request("GET", "/api/admin/stats", "Admin stats", headers=self._headers(token))
        return self._parse(AdminStats, data, "Admin stats")

    def update_issue_status(self, issue_id: IssueId, status: Union[IssueStatus, str], token: Optional[str]) -> Dict[str, Any]:
        value = status.value if isinstance(status, IssueStatus) else status
        return self._request(
            "PUT", f"/api/issues/{issue_id}", "Update issue",
            headers=self._headers(token), json={"status": value},
        )

    def delete_issue(self, issue_id: IssueId, token: Optional[str]) -> Dict[str, Any]:
        return self._request(
            "DELETE", f"/api/issues/{issue_id}", "Delete issue",
            headers=self._headers(token),
        )

    def image_url(self, image_url: Optional[str]) -> Optional[str]:
        return resolve_image_url(image_url, self.base_url)

