"""
Report screen - collect an issue draft and submit it.

Flow:
- mount(): location permission + fix, camera permission, cached user (concurrently)
- fill the form, attach at most one photo (camera or gallery)
- submit(): multipart POST /api/issues with the bearer token

VoiceReportScreen adds speech-to-text in a web view and translation of the
description to English; it submits the translation.
"""

import asyncio
import logging
from typing import List, Optional

from civic_client.config.storage import Session
from civic_client.core.exceptions import CivicClientError, NetworkError, ServerError, ValidationError
from civic_client.models.issue import ISSUE_TYPE_LABELS, IssueFormData, IssueType, PhotoAttachment
from civic_client.services.api_client import CivicApiClient
from civic_client.services.device import CAMERA_BACK, CAMERA_FRONT, Device, DeviceLocation
from civic_client.services.interaction import Alerter, Navigator, ROUTE_ISSUE_LIST
from civic_client.services.speech import DEFAULT_LANGUAGE, LANGUAGES, Language, find_language, parse_voice_message, render_speech_page
from civic_client.services.translation import TranslationProvider, translate_to_english
from civic_client.screens.base import Screen

logger = logging.getLogger(__name__)


class ReportScreen(Screen):
    """Standard report form: title and issue type are required."""

    def __init__(
        self,
        session: Session,
        client: CivicApiClient,
        device: Device,
        alerter: Optional[Alerter] = None,
        navigator: Optional[Navigator] = None,
    ):
        super().__init__(session, client, alerter, navigator)
        self.device = device
        self.form = IssueFormData()
        self.photo: Optional[PhotoAttachment] = None
        self.location: Optional[DeviceLocation] = None
        self.user = None
        self.has_camera_permission: Optional[bool] = None
        self.has_location_permission: Optional[bool] = None
        self.camera_visible = False
        self.camera_facing = CAMERA_BACK
        self.loading = False

    # --- lifecycle ---

    async def mount(self) -> None:
        await asyncio.gather(
            self._acquire_location(),
            self._acquire_camera_permission(),
            self._load_user(),
        )

    async def _acquire_location(self) -> None:
        try:
            granted = await self.device.request_location_permission()
            self.has_location_permission = granted
            if not granted:
                self.alerter.alert("Permission denied", "Location permission is required")
                return
            location = await self.device.get_current_position()
        except Exception as e:
            logger.error(f"Error getting location: {e}")
            self.alerter.alert("Location Error", "Unable to get your location")
            return

        self.location = location
        self.form = self.form.model_copy(update={
            "latitude": location.latitude,
            "longitude": location.longitude,
            "accuracy": location.accuracy or 0,
        })

    async def _acquire_camera_permission(self) -> None:
        try:
            self.has_camera_permission = await self.device.request_camera_permission()
        except Exception as e:
            logger.error(f"Error getting camera permission: {e}")
            self.has_camera_permission = False
            self.alerter.alert("Camera Error", "Unable to access camera")

    async def _load_user(self) -> None:
        self.user = self.session.user
        if self.user is None:
            self.alerter.alert("Authentication Required", "Please login to report an issue")
            self.open_login()

    # --- photo ---

    def open_camera(self) -> bool:
        if not self.has_camera_permission:
            self.alerter.alert("Camera Error", "Camera permission is required")
            return False
        self.camera_visible = True
        return True

    def close_camera(self) -> None:
        self.camera_visible = False

    def toggle_camera_facing(self) -> str:
        self.camera_facing = CAMERA_FRONT if self.camera_facing == CAMERA_BACK else CAMERA_BACK
        return self.camera_facing

    async def take_photo(self) -> bool:
        if not self.has_camera_permission:
            self.alerter.alert("Camera Error", "Camera permission is required")
            return False
        try:
            uri = await self.device.capture_photo(self.camera_facing)
        except Exception as e:
            logger.error(f"Error taking picture: {e}")
            self.alerter.alert("Camera Error", "Failed to take picture")
            return False
        if not uri:
            return False
        self.photo = PhotoAttachment(uri=uri)
        self.close_camera()
        return True

    async def pick_image(self) -> bool:
        try:
            uri = await self.device.pick_image()
        except Exception as e:
            logger.error(f"Error picking image: {e}")
            self.alerter.alert("Error", "Failed to pick image from gallery")
            return False
        if not uri:
            # cancelled
            return False
        self.photo = PhotoAttachment(uri=uri)
        return True

    def retake_photo(self) -> None:
        self.photo = None

    # --- form ---

    def set_title(self, text: str) -> None:
        self.form.title = text

    def set_description(self, text: str) -> None:
        self.form.description = text

    def select_issue_type(self, value: str) -> None:
        if value not in ISSUE_TYPE_LABELS:
            raise ValidationError(f"Unknown issue type: {value}")
        self.form.issue_type = IssueType(value).value

    @property
    def issue_type_label(self) -> str:
        return ISSUE_TYPE_LABELS.get(self.form.issue_type, "Select issue type")

    @property
    def location_status(self) -> str:
        if self.location is None:
            return "Acquiring location..."
        return f"Location acquired (Accuracy: {round(self.location.accuracy or 0)}m)"

    def _missing_required(self) -> bool:
        return not self.form.title.strip() or not self.form.issue_type

    def _submission_description(self) -> str:
        return self.form.description

    @property
    def can_submit(self) -> bool:
        return not self.loading and not self._missing_required()

    # --- submit ---

    async def submit(self) -> bool:
        """
        Validate and POST the report.

        Returns True on success (form reset, navigated to the issue list).
        On any failure an alert is shown and the form is left as it was.
        """
        if self.user is None:
            self.alerter.alert("Authentication Required", "Please login to submit a report")
            return False
        if self._missing_required():
            self.alerter.alert("Missing Information", "Please fill in all required fields")
            return False
        if not self.has_location_permission:
            self.alerter.alert("Permission denied", "Location permission is required")
            return False

        self.loading = True
        try:
            await self._call(
                self.client.create_issue,
                self.form,
                self.session.token,
                self.photo,
                description=self._submission_description(),
            )
        except ServerError as e:
            logger.error(f"Error submitting report: {e}")
            self.alerter.alert("Error", e.server_message or "Failed to submit report")
            return False
        except NetworkError as e:
            logger.error(f"Error submitting report: {e}")
            self.alerter.alert("Error", "Network error. Please try again.")
            return False
        except CivicClientError as e:
            logger.error(f"Error submitting report: {e}")
            self.alerter.alert("Error", e.message)
            return False
        finally:
            self.loading = False

        self.alerter.alert("Success", "Issue reported successfully!")
        self.reset_form()
        self.navigator.push(ROUTE_ISSUE_LIST)
        return True

    def reset_form(self) -> None:
        """Back to an empty draft; coordinates default to the last known location."""
        loc = self.location
        self.form = IssueFormData(
            latitude=loc.latitude if loc else 0,
            longitude=loc.longitude if loc else 0,
            accuracy=(loc.accuracy or 0) if loc else 0,
        )
        self.photo = None


class VoiceReportScreen(ReportScreen):
    """
    Report form with multilingual voice input.

    Required: issue type, description and its English translation. Every
    description change clears the translation and schedules a new one; the
    submit button stays disabled until it lands.
    """

    languages: List[Language] = LANGUAGES

    def __init__(
        self,
        session: Session,
        client: CivicApiClient,
        device: Device,
        alerter: Optional[Alerter] = None,
        navigator: Optional[Navigator] = None,
        translator: Optional[TranslationProvider] = None,
    ):
        super().__init__(session, client, device, alerter, navigator)
        self.translator = translator
        self.language: Language = DEFAULT_LANGUAGE
        self._translation_task: Optional[asyncio.Task] = None

    def select_language(self, code: str) -> None:
        lang = find_language(code)
        if lang is None:
            raise ValidationError(f"Unsupported language: {code}")
        self.language = lang
        if self.form.description:
            self._schedule_translation()

    @property
    def speech_page_html(self) -> str:
        return render_speech_page(self.language.code)

    def on_voice_message(self, raw: str) -> None:
        """Handle a message posted by the speech page."""
        message = parse_voice_message(raw)
        if message.is_error:
            self.alerter.alert("Voice Error", message.error)
            return
        if not message.transcript:
            return
        current = self.form.description
        self.set_description(f"{current} {message.transcript}" if current else message.transcript)

    def set_description(self, text: str) -> None:
        self.form.description = text
        self.form.translated = ""
        if text:
            self._schedule_translation()
        else:
            self._cancel_translation()

    def _cancel_translation(self) -> None:
        if self._translation_task is not None and not self._translation_task.done():
            self._translation_task.cancel()
        self._translation_task = None

    def _schedule_translation(self) -> None:
        self._cancel_translation()
        self.form.translated = ""
        loop = asyncio.get_running_loop()
        self._translation_task = loop.create_task(
            self._translate(self.form.description, self.language.code)
        )

    async def _translate(self, text: str, code: str) -> None:
        translated = await self._call(translate_to_english, text, code, self.translator)
        # Drop stale results: the text or language changed while we waited.
        if self.form.description == text and self.language.code == code:
            self.form.translated = translated

    async def wait_for_translation(self) -> None:
        task = self._translation_task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Translation superseded")

    def _missing_required(self) -> bool:
        return (
            not self.form.issue_type
            or not self.form.description.strip()
            or not self.form.translated.strip()
        )

    def _submission_description(self) -> str:
        return self.form.translated

    def reset_form(self) -> None:
        self._cancel_translation()
        super().reset_form()
