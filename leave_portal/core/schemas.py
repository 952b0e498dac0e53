from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone

T = TypeVar("T")


class ToastInfo(BaseModel):
    kind: str  # "success" | "error" | "info"
    message: str
    position: str
    duration_ms: int


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for successful mutations; failures are rendered by the exception handlers."""
    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    success: bool
    data: Optional[T] = None
    toast: Optional[ToastInfo] = None
    metadata: Dict[str, Any] = {}
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def ok(cls, data: T, toast: Optional[ToastInfo] = None, metadata: Optional[Dict[str, Any]] = None) -> "ApiResponse[T]":
        return cls(success=True, data=data, toast=toast, metadata=metadata or {})
