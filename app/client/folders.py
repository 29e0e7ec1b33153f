"""
Client-side folder state and mutations.

`FolderStore` holds the fetched folder list; the module-level helpers wrap the
HTTP client and turn transport errors into readable messages; `FolderActions`
puts each mutation behind the auth guard.
"""
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

from app.client.api_client import ApiClient, ApiError
from app.client.auth_guard import AuthGuard
from app.schemas.folder import FolderWithAppCount

logger = logging.getLogger(__name__)


class FolderActionError(Exception):
    """A folder mutation failed; the message is ready to show to the user."""


class FolderStore:
    """Fetch-and-cache holder for the signed-in user's folders."""

    def __init__(self, client: ApiClient, on_change: Optional[Callable[["FolderStore"], Any]] = None):
        self.client = client
        self.on_change = on_change
        self.folders: List[FolderWithAppCount] = []
        self.loading = True
        self.error: Optional[str] = None

    async def _notify(self):
        if self.on_change is None:
            return
        result = self.on_change(self)
        if inspect.isawaitable(result):
            await result

    async def mount(self):
        await self.refetch()

    async def refetch(self):
        self.loading = True
        self.error = None
        await self._notify()
        try:
            response = await self.client.get_folders()
            if not (response.success and response.data):
                raise ApiError(response.error.message if response.error else "Failed to fetch folders")
            self.folders = [FolderWithAppCount.model_validate(f) for f in response.data["folders"]]
        except ApiError as e:
            logger.error(f"Failed to fetch folders: {e.message}")
            self.error = f"Failed to fetch folders: {e.message}"
        except Exception as e:
            logger.error(f"Failed to fetch folders: {e}")
            self.error = "Failed to fetch folders"
        finally:
            self.loading = False
            await self._notify()


def _unwrap(response, key: str, fallback: str):
    if response.success and response.data:
        return response.data[key]
    raise FolderActionError(response.error.message if response.error else fallback)


async def create_folder(client: ApiClient, folder_data: Dict[str, Any]) -> FolderWithAppCount:
    try:
        response = await client.create_folder(folder_data)
        return FolderWithAppCount.model_validate(_unwrap(response, "folder", "Failed to create folder"))
    except Exception as e:
        raise FolderActionError(f"Failed to create folder: {e}") from e


async def update_folder(client: ApiClient, folder_id: str, updates: Dict[str, Any]) -> FolderWithAppCount:
    try:
        response = await client.update_folder(folder_id, updates)
        return FolderWithAppCount.model_validate(_unwrap(response, "folder", "Failed to update folder"))
    except Exception as e:
        raise FolderActionError(f"Failed to update folder: {e}") from e


async def delete_folder(client: ApiClient, folder_id: str) -> bool:
    try:
        response = await client.delete_folder(folder_id)
        return _unwrap(response, "success", "Failed to delete folder")
    except Exception as e:
        raise FolderActionError(f"Failed to delete folder: {e}") from e


async def move_app_to_folder(client: ApiClient, app_id: str, folder_id: Optional[str]) -> bool:
    """Move an app to a folder, or out of any folder when folder_id is None."""
    try:
        response = await client.move_app_to_folder(app_id, folder_id)
        return _unwrap(response, "success", "Failed to move app to folder")
    except Exception as e:
        raise FolderActionError(f"Failed to move app to folder: {e}") from e


class FolderActions:
    """Folder mutations that need a full (non-guest) session.

    Each method returns None without calling the API when the guard blocks it.
    """

    def __init__(self, client: ApiClient, auth_guard: AuthGuard):
        self.client = client
        self.auth_guard = auth_guard

    async def create_folder(self, folder_data: Dict[str, Any]) -> Optional[FolderWithAppCount]:
        if not self.auth_guard.require_auth(require_full_auth=True, action_context="to create a folder"):
            return None
        return await create_folder(self.client, folder_data)

    async def update_folder(self, folder_id: str, updates: Dict[str, Any]) -> Optional[FolderWithAppCount]:
        if not self.auth_guard.require_auth(require_full_auth=True, action_context="to update a folder"):
            return None
        return await update_folder(self.client, folder_id, updates)

    async def delete_folder(self, folder_id: str) -> Optional[bool]:
        if not self.auth_guard.require_auth(require_full_auth=True, action_context="to delete a folder"):
            return None
        return await delete_folder(self.client, folder_id)

    async def move_app_to_folder(self, app_id: str, folder_id: Optional[str]) -> Optional[bool]:
        if not self.auth_guard.require_auth(require_full_auth=True, action_context="to move an app to a folder"):
            return None
        return await move_app_to_folder(self.client, app_id, folder_id)
