import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()


class UpstreamSettings(BaseModel):
    base_url: str = Field(default=os.getenv("UPSTREAM_API_URL", "http://localhost:8080"))
    timeout_seconds: float = Field(default=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15")))
    # Reads only. Mutations are sent exactly once.
    read_retry_attempts: int = Field(default=int(os.getenv("READ_RETRY_ATTEMPTS", "2")))
    retry_wait_seconds: float = Field(default=float(os.getenv("RETRY_WAIT_SECONDS", "0.5")))


class Config(BaseModel):
    app_name: str = "College Leave Portal"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = os.getenv("API_PREFIX", "/portal")

    # External leave-management API
    upstream: UpstreamSettings = UpstreamSettings()

    # Local session state (auth token, UI settings)
    state_database_url: str = os.getenv("STATE_DATABASE_URL", "sqlite:///./portal_state.db")
    encryption_key: str = os.getenv("ENCRYPTION_KEY", "ZGV2LW9ubHkta2V5LWRvLW5vdC11c2UtaW4tcHJvZCE=")

    # Presentation
    message_display_limit: int = int(os.getenv("MESSAGE_DISPLAY_LIMIT", "100"))
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    page_size_options: List[int] = Field(
        default_factory=lambda: [
            int(o.strip())
            for o in os.getenv("PAGE_SIZE_OPTIONS", "5,10,20,50,100").split(",")
            if o.strip()
        ]
    )
    default_toast_duration_ms: int = 3000

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
            if o.strip()
        ]
    )

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"


settings = Config()

_DEV_ENCRYPTION_KEY = "ZGV2LW9ubHkta2V5LWRvLW5vdC11c2UtaW4tcHJvZCE="

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if settings.encryption_key == _DEV_ENCRYPTION_KEY:
        raise RuntimeError(
            "FATAL: ENCRYPTION_KEY must be set for non-development environments. "
            "Set it as an environment variable."
        )
else:
    if settings.encryption_key == _DEV_ENCRYPTION_KEY:
        _logger.warning("⚠ Using insecure default ENCRYPTION_KEY; only acceptable in development.")
