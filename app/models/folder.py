from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Index, func
from app.database import Base
from app.models.app import generate_id


class Folder(Base):
    __tablename__ = "folders"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(50), nullable=True)  # hex string, not validated
    icon = Column(String(50), nullable=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("folders_user_idx", "user_id"),
        Index("folders_user_order_idx", "user_id", "order"),
    )


class AppFolder(Base):
    """Links an app to the folder it is filed under.

    The storage layer only guarantees (app_id, folder_id) uniqueness; "one folder
    per app" is kept by the service deleting existing rows before inserting.
    """
    __tablename__ = "app_folders"

    id = Column(String(32), primary_key=True, default=generate_id)
    app_id = Column(String(32), ForeignKey("apps.id", ondelete="CASCADE"), nullable=False)
    folder_id = Column(String(32), ForeignKey("folders.id", ondelete="CASCADE"), nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("app_folders_app_folder_idx", "app_id", "folder_id", unique=True),
        Index("app_folders_app_idx", "app_id"),
        Index("app_folders_folder_idx", "folder_id"),
    )
