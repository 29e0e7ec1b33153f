"""
Folder request handlers.

Each handler validates input, delegates to FolderService and maps the result to
the response envelope: 200 success, 400 validation failure, 404 missing or not
owned (never distinguished), 500 anything unexpected.
"""
from typing import Optional

from app.controllers.base_controller import (
    RouteContext,
    ControllerResponse,
    create_success_response,
    create_error_response,
)
from app.schemas.folder import (
    FOLDER_NAME_MAX_LENGTH,
    FolderCreate,
    FolderUpdate,
    MoveToFolderRequest,
    FoldersListData,
    SingleFolderData,
    FolderDeleteData,
    MoveToFolderData,
    AppsInFolderData,
)
from app.services.folder_service import FolderService
from app.folderdeck_logger import logger

NAME_REQUIRED = "Folder name is required"
NAME_EMPTY = "Folder name cannot be empty"
NAME_TOO_LONG = f"Folder name must be {FOLDER_NAME_MAX_LENGTH} characters or less"
ORDER_REQUIRED = "Folder order cannot be null"


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def get_user_folders(context: RouteContext) -> ControllerResponse:
    try:
        folders = FolderService(context.db).get_user_folders(context.user.id)
        return create_success_response(FoldersListData(folders=folders))
    except Exception as e:
        logger.error(f"Error fetching user folders: {e}")
        return create_error_response("Failed to fetch folders", 500)


def get_folder(context: RouteContext) -> ControllerResponse:
    try:
        folder_id = context.path_params.get("id")
        if not folder_id:
            return create_error_response("Folder ID is required", 400)

        folder = FolderService(context.db).get_folder_by_id(folder_id, context.user.id)
        if folder is None:
            return create_error_response("Folder not found", 404)

        return create_success_response(SingleFolderData(folder=folder))
    except Exception as e:
        logger.error(f"Error fetching folder: {e}")
        return create_error_response("Failed to fetch folder", 500)


def create_folder(body: FolderCreate, context: RouteContext) -> ControllerResponse:
    try:
        if not body.name or not body.name.strip():
            return create_error_response(NAME_REQUIRED, 400)
        if len(body.name) > FOLDER_NAME_MAX_LENGTH:
            return create_error_response(NAME_TOO_LONG, 400)

        service = FolderService(context.db)
        folder = service.create_folder(
            context.user.id,
            name=body.name.strip(),
            description=_strip(body.description),
            color=body.color,
            icon=body.icon,
        )

        folder_with_count = service.get_folder_by_id(folder.id, context.user.id)
        return create_success_response(SingleFolderData(folder=folder_with_count))
    except Exception as e:
        logger.error(f"Error creating folder: {e}")
        return create_error_response("Failed to create folder", 500)


def update_folder(body: FolderUpdate, context: RouteContext) -> ControllerResponse:
    try:
        folder_id = context.path_params.get("id")
        if not folder_id:
            return create_error_response("Folder ID is required", 400)

        updates = body.model_dump(exclude_unset=True)
        if "name" in updates:
            if updates["name"] is None or not updates["name"].strip():
                return create_error_response(NAME_EMPTY, 400)
            if len(updates["name"]) > FOLDER_NAME_MAX_LENGTH:
                return create_error_response(NAME_TOO_LONG, 400)
            updates["name"] = updates["name"].strip()
        if "order" in updates and updates["order"] is None:
            return create_error_response(ORDER_REQUIRED, 400)
        if "description" in updates:
            updates["description"] = _strip(updates["description"])

        service = FolderService(context.db)
        updated = service.update_folder(folder_id, context.user.id, updates)
        if updated is None:
            return create_error_response("Folder not found", 404)

        return create_success_response(SingleFolderData(folder=updated))
    except Exception as e:
        logger.error(f"Error updating folder: {e}")
        return create_error_response("Failed to update folder", 500)


def delete_folder(context: RouteContext) -> ControllerResponse:
    try:
        folder_id = context.path_params.get("id")
        if not folder_id:
            return create_error_response("Folder ID is required", 400)

        deleted = FolderService(context.db).delete_folder(folder_id, context.user.id)
        if not deleted:
            return create_error_response("Folder not found", 404)

        return create_success_response(
            FolderDeleteData(success=True, message="Folder deleted successfully")
        )
    except Exception as e:
        logger.error(f"Error deleting folder: {e}")
        return create_error_response("Failed to delete folder", 500)


def move_app_to_folder(body: MoveToFolderRequest, context: RouteContext) -> ControllerResponse:
    try:
        if not body.app_id:
            return create_error_response("App ID is required", 400)

        moved = FolderService(context.db).move_app_to_folder(body.app_id, body.folder_id, context.user.id)
        if not moved:
            return create_error_response("App or folder not found", 404)

        message = "App moved to folder" if body.folder_id else "App removed from folder"
        return create_success_response(MoveToFolderData(success=True, message=message))
    except Exception as e:
        logger.error(f"Error moving app to folder: {e}")
        return create_error_response("Failed to move app to folder", 500)


def get_apps_in_folder(context: RouteContext) -> ControllerResponse:
    try:
        folder_id = context.path_params.get("id")
        if not folder_id:
            return create_error_response("Folder ID is required", 400)

        apps = FolderService(context.db).get_apps_in_folder(folder_id, context.user.id)
        return create_success_response(AppsInFolderData(apps=apps))
    except Exception as e:
        logger.error(f"Error fetching apps in folder: {e}")
        return create_error_response("Failed to fetch apps in folder", 500)
