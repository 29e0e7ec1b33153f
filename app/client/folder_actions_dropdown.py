"""
View model for the per-folder actions menu (edit, delete with confirmation).
"""
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from app.client.api_client import ApiClient
from app.client.folder_dialog import FolderDialog
from app.client.folders import update_folder, delete_folder
from app.schemas.folder import FolderWithAppCount

logger = logging.getLogger(__name__)


@dataclass
class ToastLog:
    """Collects toast notifications; a UI binds these to its own toaster."""
    toasts: List[Tuple[str, str]] = field(default_factory=list)

    def success(self, message: str):
        self.toasts.append(("success", message))

    def error(self, message: str):
        self.toasts.append(("error", message))


@dataclass
class MenuItem:
    label: str
    action: Callable[[], Any]
    destructive: bool = False


async def _call(callback: Optional[Callable[[], Any]]):
    if callback is None:
        return
    result = callback()
    if inspect.isawaitable(result):
        await result


class FolderActionsDropdown:
    def __init__(
        self,
        folder: FolderWithAppCount,
        client: ApiClient,
        toaster=None,
        on_folder_updated: Optional[Callable[[], Any]] = None,
        on_folder_deleted: Optional[Callable[[], Any]] = None,
    ):
        self.folder = folder
        self.client = client
        self.toaster = toaster if toaster is not None else ToastLog()
        self.on_folder_updated = on_folder_updated
        self.on_folder_deleted = on_folder_deleted
        self.edit_dialog = FolderDialog(mode="edit", on_save=self.handle_edit_folder, folder=folder)
        self.is_delete_dialog_open = False
        self.is_deleting = False

    @property
    def menu_items(self) -> List[MenuItem]:
        return [
            MenuItem("Edit folder", self.open_edit),
            MenuItem("Delete folder", self.request_delete, destructive=True),
        ]

    @property
    def delete_confirmation(self) -> Dict[str, str]:
        return {
            "title": "Delete Folder",
            "description": (
                f'Are you sure you want to delete "{self.folder.name}"? '
                "Apps in this folder will not be deleted, but will be unfiled."
            ),
        }

    def open_edit(self):
        self.edit_dialog.open()

    async def handle_edit_folder(self, data: Dict[str, Any]):
        # Errors propagate so the dialog can show them and stay open
        try:
            self.folder = await update_folder(self.client, self.folder.id, data)
        except Exception as e:
            logger.error(f"Error updating folder: {e}")
            raise
        self.edit_dialog.folder = self.folder
        self.toaster.success("Folder updated successfully")
        await _call(self.on_folder_updated)

    def request_delete(self):
        self.is_delete_dialog_open = True

    def cancel_delete(self):
        self.is_delete_dialog_open = False

    async def confirm_delete(self) -> bool:
        self.is_deleting = True
        try:
            await delete_folder(self.client, self.folder.id)
        except Exception as e:
            logger.error(f"Error deleting folder: {e}")
            self.toaster.error("Failed to delete folder")
            return False
        finally:
            self.is_deleting = False

        self.toaster.success("Folder deleted successfully")
        self.is_delete_dialog_open = False
        await _call(self.on_folder_deleted)
        return True
