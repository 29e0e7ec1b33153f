"""
Folder management services: ownership-scoped CRUD and app filing.

Every read and write is filtered by the caller's user id. Ownership checks are
read-then-act, so a folder deleted between the check and the write simply
produces a no-op write rather than an error.
"""
from typing import List, Optional, Dict, Any

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.app import App
from app.models.folder import Folder, AppFolder
from app.schemas.app import AppSummary
from app.schemas.folder import FolderWithAppCount
from app.services.base_service import BaseService

UPDATABLE_FIELDS = ("name", "description", "color", "icon", "order")


class FolderService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def _folders_with_counts(self, user_id: int):
        # LEFT JOIN so folders without apps still come back with a zero count
        return self.db.query(
            Folder,
            func.count(AppFolder.app_id).label("app_count"),
        ).outerjoin(
            AppFolder, Folder.id == AppFolder.folder_id
        ).filter(
            Folder.user_id == user_id
        ).group_by(Folder.id)

    @staticmethod
    def _enrich(folder: Folder, app_count: int) -> FolderWithAppCount:
        enriched = FolderWithAppCount.model_validate(folder)
        enriched.app_count = app_count
        return enriched

    def get_user_folders(self, user_id: int) -> List[FolderWithAppCount]:
        """
        Get all folders for a user with their app counts.

        Args:
            user_id: ID of the owning user

        Returns:
            Folders ordered by ``order`` descending, then name ascending
        """
        try:
            rows = self._folders_with_counts(user_id).order_by(
                desc(Folder.order),
                Folder.name,
            ).all()
            return [self._enrich(folder, app_count) for folder, app_count in rows]
        except SQLAlchemyError as e:
            self.handle_database_error(e, "get_user_folders", {"user_id": user_id})

    def get_folder_by_id(self, folder_id: str, user_id: int) -> Optional[FolderWithAppCount]:
        """
        Get a single folder with its app count.

        Returns None both when the folder does not exist and when it belongs to
        another user, so callers cannot tell the two apart.
        """
        try:
            row = self._folders_with_counts(user_id).filter(
                Folder.id == folder_id
            ).first()
            if row is None:
                return None
            folder, app_count = row
            return self._enrich(folder, app_count)
        except SQLAlchemyError as e:
            self.handle_database_error(e, "get_folder_by_id", {"folder_id": folder_id, "user_id": user_id})

    def create_folder(
        self,
        user_id: int,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> FolderWithAppCount:
        """
        Create a folder at the top of the user's ordering.

        The new folder gets ``max(order) + 1``; a user with no folders starts
        at 0. Names are not required to be unique.

        Args:
            user_id: ID of the owning user
            name: Display name (validated by the caller)
            description: Optional free text
            color: Optional hex color, stored as given
            icon: Optional icon identifier

        Returns:
            The created folder with an app count of 0
        """
        try:
            max_order = self.db.query(
                func.coalesce(func.max(Folder.order), -1)
            ).filter(
                Folder.user_id == user_id
            ).scalar()

            folder = Folder(
                user_id=user_id,
                name=name,
                description=description,
                color=color,
                icon=icon,
                order=max_order + 1,
            )
            self.db.add(folder)
            self.db.commit()
            self.db.refresh(folder)
            return self._enrich(folder, 0)
        except SQLAlchemyError as e:
            self.handle_database_error(
                e,
                "create_folder",
                {"user_id": user_id, "name": name, "description": description, "color": color, "icon": icon},
            )

    def update_folder(self, folder_id: str, user_id: int, updates: Dict[str, Any]) -> Optional[FolderWithAppCount]:
        """
        Apply the provided fields to a folder owned by the user.

        Args:
            folder_id: ID of the folder
            user_id: ID of the requesting user
            updates: Subset of name/description/color/icon/order; other keys are ignored

        Returns:
            The updated folder, or None if it is missing or not owned
        """
        try:
            existing = self.get_folder_by_id(folder_id, user_id)
            if existing is None:
                return None

            values = {key: value for key, value in updates.items() if key in UPDATABLE_FIELDS}
            values["updated_at"] = func.now()

            self.db.query(Folder).filter(
                Folder.id == folder_id,
                Folder.user_id == user_id,
            ).update(values, synchronize_session=False)
            self.db.commit()

            return self.get_folder_by_id(folder_id, user_id)
        except SQLAlchemyError as e:
            self.handle_database_error(
                e, "update_folder", {"folder_id": folder_id, "user_id": user_id, "updates": updates}
            )

    def delete_folder(self, folder_id: str, user_id: int) -> bool:
        """
        Delete a folder owned by the user, unfiling its apps first.

        Returns:
            True when the folder was deleted, False if missing or not owned
        """
        try:
            existing = self.get_folder_by_id(folder_id, user_id)
            if existing is None:
                return False

            self.db.query(AppFolder).filter(
                AppFolder.folder_id == folder_id
            ).delete(synchronize_session=False)

            self.db.query(Folder).filter(
                Folder.id == folder_id,
                Folder.user_id == user_id,
            ).delete(synchronize_session=False)

            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.handle_database_error(e, "delete_folder", {"folder_id": folder_id, "user_id": user_id})

    def move_app_to_folder(self, app_id: str, folder_id: Optional[str], user_id: int) -> bool:
        """
        File an app under a folder, or unfile it when ``folder_id`` is None.

        An app has at most one association. It is kept that way by deleting any
        existing association before inserting the new one; the two statements are
        committed separately, so concurrent moves of the same app can interleave
        and a failure between them leaves the app unfiled.

        Args:
            app_id: ID of the app to move
            folder_id: Target folder, or None to unfile
            user_id: ID of the requesting user, who must own both app and folder

        Returns:
            True on success, False if the app or folder is missing or not owned
        """
        try:
            app = self.db.query(App).filter(App.id == app_id).first()
            if app is None or app.user_id != user_id:
                return False

            if folder_id is None:
                self.db.query(AppFolder).filter(
                    AppFolder.app_id == app_id
                ).delete(synchronize_session=False)
                self.db.commit()
                return True

            folder = self.get_folder_by_id(folder_id, user_id)
            if folder is None:
                return False

            self.db.query(AppFolder).filter(
                AppFolder.app_id == app_id
            ).delete(synchronize_session=False)
            self.db.commit()

            self.db.add(AppFolder(app_id=app_id, folder_id=folder_id))
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.handle_database_error(
                e, "move_app_to_folder", {"app_id": app_id, "folder_id": folder_id, "user_id": user_id}
            )

    def get_apps_in_folder(self, folder_id: str, user_id: int) -> List[AppSummary]:
        """
        List the user's apps filed under a folder, most recently updated first.

        Returns an empty list when the folder is missing or not owned.
        """
        try:
            folder = self.get_folder_by_id(folder_id, user_id)
            if folder is None:
                return []

            apps = self.db.query(App).join(
                AppFolder, App.id == AppFolder.app_id
            ).filter(
                AppFolder.folder_id == folder_id,
                App.user_id == user_id,
            ).order_by(desc(App.updated_at)).all()

            return [AppSummary.model_validate(app) for app in apps]
        except SQLAlchemyError as e:
            self.handle_database_error(e, "get_apps_in_folder", {"folder_id": folder_id, "user_id": user_id})

    def get_app_folder(self, app_id: str) -> Optional[str]:
        """
        Get the folder ID an app is filed under.

        Not scoped to a user: callers are expected to have checked app ownership.
        """
        try:
            row = self.db.query(AppFolder.folder_id).filter(
                AppFolder.app_id == app_id
            ).first()
            return row.folder_id if row else None
        except SQLAlchemyError as e:
            self.handle_database_error(e, "get_app_folder", {"app_id": app_id})
