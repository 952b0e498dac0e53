from pydantic import Field
from typing import Literal, Optional

from leave_portal.core.config import settings as app_settings
from leave_portal.schemas.base import CamelModel

Theme = Literal["light", "dark"]
ToastPosition = Literal["top-right", "top-left", "bottom-right", "bottom-left"]


class UISettings(CamelModel):
    theme: Theme = "light"
    toast_position: ToastPosition = "top-right"
    toast_duration: int = Field(default=app_settings.default_toast_duration_ms, ge=0)


class UISettingsUpdate(CamelModel):
    theme: Optional[Theme] = None
    toast_position: Optional[ToastPosition] = None
    toast_duration: Optional[int] = Field(default=None, ge=0)
