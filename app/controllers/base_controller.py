"""
Request context and response envelope shared by controllers.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.app import CamelModel


@dataclass
class RouteContext:
    """Everything a handler needs about the current request."""
    user: User
    db: Session
    path_params: Dict[str, str] = field(default_factory=dict)


@dataclass
class ControllerResponse:
    status_code: int
    body: Dict[str, Any]


def serialize(data: Any) -> Any:
    if isinstance(data, CamelModel):
        return data.model_dump(by_alias=True, mode="json")
    return data


def create_success_response(data: Any, status_code: int = 200) -> ControllerResponse:
    return ControllerResponse(status_code, {"success": True, "data": serialize(data)})


def create_error_response(message: str, status_code: int = 500, code: Optional[str] = None) -> ControllerResponse:
    error: Dict[str, Any] = {"message": message}
    if code:
        error["code"] = code
    return ControllerResponse(status_code, {"success": False, "error": error})
