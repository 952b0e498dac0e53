import logging
from typing import Optional

from leave_portal.core.config import settings
from leave_portal.core.schemas import ToastInfo
from leave_portal.schemas.settings import UISettings

logger = logging.getLogger(__name__)


def truncate_message(message: Optional[str], limit: Optional[int] = None, fallback: str = "Something went wrong") -> str:
    """Bounds a server message for display: first `limit` chars plus '...'."""
    limit = limit or settings.message_display_limit
    if not message:
        return fallback
    return message[:limit] + "..." if len(message) > limit else message


class NotificationService:
    """Builds transient user-visible notifications using the current UI settings."""

    def __init__(self, ui_settings: Optional[UISettings] = None):
        self.ui_settings = ui_settings or UISettings()

    def _toast(self, kind: str, message: str) -> ToastInfo:
        return ToastInfo(
            kind=kind,
            message=message,
            position=self.ui_settings.toast_position,
            duration_ms=self.ui_settings.toast_duration,
        )

    def success(self, message: str) -> ToastInfo:
        return self._toast("success", message)

    def info(self, message: str) -> ToastInfo:
        return self._toast("info", message)

    def error(self, message: Optional[str], fallback: str = "Something went wrong") -> ToastInfo:
        text = truncate_message(message, fallback=fallback)
        logger.info(f"User-visible error: {text}")
        return self._toast("error", text)
