"""
Device capabilities used by the screens: permissions, GPS, camera, gallery.

Screens depend on the Device interface only. StaticDevice is the desktop/CLI
implementation: a fixed position from settings and photos given as file
paths.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging
import os

from pydantic import BaseModel

from civic_client.core.exceptions import PermissionDeniedError
from civic_client.core.settings import settings

logger = logging.getLogger(__name__)

CAMERA_BACK = "back"
CAMERA_FRONT = "front"


class DeviceLocation(BaseModel):
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


class Device(ABC):
    """
    Contract:
    - request_*_permission() returns True only when granted.
    - get_current_position() may raise; callers alert and carry on.
    - capture_photo()/pick_image() return a local image URI, or None when
      the user cancels.
    """

    @abstractmethod
    async def request_camera_permission(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def request_location_permission(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def get_current_position(self) -> DeviceLocation:
        raise NotImplementedError

    @abstractmethod
    async def capture_photo(self, facing: str = CAMERA_BACK) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    async def pick_image(self) -> Optional[str]:
        raise NotImplementedError


class StaticDevice(Device):
    """
    Device for hosts without sensors.

    Location permission is granted only when a position is configured
    (DEVICE_LATITUDE / DEVICE_LONGITUDE). The "camera" and the "gallery" both
    hand back a preselected image path.
    """

    def __init__(
        self,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        accuracy: Optional[float] = None,
        image_path: Optional[str] = None,
    ):
        self.latitude = settings.DEVICE_LATITUDE if latitude is None else latitude
        self.longitude = settings.DEVICE_LONGITUDE if longitude is None else longitude
        self.accuracy = settings.DEVICE_ACCURACY if accuracy is None else accuracy
        self.image_path = image_path

    async def request_camera_permission(self) -> bool:
        return True

    async def request_location_permission(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    async def get_current_position(self) -> DeviceLocation:
        if self.latitude is None or self.longitude is None:
            raise PermissionDeniedError("location", "No device position configured")
        return DeviceLocation(latitude=self.latitude, longitude=self.longitude, accuracy=self.accuracy)

    async def capture_photo(self, facing: str = CAMERA_BACK) -> Optional[str]:
        return await self.pick_image()

    async def pick_image(self) -> Optional[str]:
        if not self.image_path:
            return None
        if not os.path.exists(self.image_path):
            raise FileNotFoundError(f"Image not found: {self.image_path}")
        return os.path.abspath(self.image_path)
