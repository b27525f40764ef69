"""Drive API access for gdrivefs."""

from __future__ import annotations

from .api_wrapper import API_CALLS, DriveApiWrapper
from .drive_controller import FILES_LIST_PAGE_SIZE_MAX, GoogleDriveController

__all__ = ["API_CALLS", "DriveApiWrapper", "FILES_LIST_PAGE_SIZE_MAX", "GoogleDriveController"]
