from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Index
from sqlalchemy.sql import func
import uuid
from app.database import Base


def generate_id() -> str:
    return uuid.uuid4().hex


class App(Base):
    __tablename__ = "apps"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False, default="Untitled App")
    description = Column(Text, nullable=True)
    framework = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default="generating")
    visibility = Column(String(20), nullable=False, default="private")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("apps_user_idx", "user_id"),
    )
