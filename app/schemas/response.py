from typing import Any, Optional

from app.schemas.app import CamelModel


class ErrorDetail(CamelModel):
    message: str
    code: Optional[str] = None


class ApiResponse(CamelModel):
    """Uniform envelope returned by every folder endpoint."""
    success: bool
    data: Optional[Any] = None
    error: Optional[ErrorDetail] = None
