from typing import Optional, List
from datetime import datetime

from app.schemas.app import CamelModel, AppSummary

FOLDER_NAME_MAX_LENGTH = 50


class FolderCreate(CamelModel):
    # Optional so a missing name reaches the controller and gets a 400, not a 422
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class FolderUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    order: Optional[int] = None


class MoveToFolderRequest(CamelModel):
    app_id: Optional[str] = None
    # None means "remove the app from its folder"
    folder_id: Optional[str] = None


class FolderWithAppCount(CamelModel):
    id: str
    user_id: int
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    app_count: int = 0


class FoldersListData(CamelModel):
    folders: List[FolderWithAppCount]


class SingleFolderData(CamelModel):
    folder: FolderWithAppCount


class FolderDeleteData(CamelModel):
    success: bool
    message: str


class MoveToFolderData(CamelModel):
    success: bool
    message: str


class AppsInFolderData(CamelModel):
    apps: List[AppSummary]
