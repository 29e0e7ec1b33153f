from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base for every payload crossing the HTTP boundary (camelCase on the wire)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AppSummary(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    framework: Optional[str] = None
    status: str
    visibility: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
