from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.controllers import folder_controller
from app.controllers.base_controller import RouteContext, ControllerResponse
from app.database import get_db
from app.models.user import User
from app.routers.auth import get_current_user_required
from app.schemas.folder import FolderCreate, FolderUpdate, MoveToFolderRequest

router = APIRouter(prefix="/api/folders", tags=["Folders"])


def to_json(result: ControllerResponse) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.get("", summary="List the user's folders with app counts")
def list_folders(
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    return to_json(folder_controller.get_user_folders(RouteContext(user=user, db=db)))


@router.post("", summary="Create a folder")
def create_folder(
    body: FolderCreate,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    return to_json(folder_controller.create_folder(body, RouteContext(user=user, db=db)))


@router.post("/move", summary="Move an app into a folder, or unfile it")
def move_app_to_folder(
    body: MoveToFolderRequest,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """
    Body: `{"appId": "...", "folderId": "..." | null}`. A null folderId removes
    the app from whatever folder it is in.
    """
    return to_json(folder_controller.move_app_to_folder(body, RouteContext(user=user, db=db)))


@router.get("/{id}", summary="Get one folder")
def get_folder(
    id: str,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    context = RouteContext(user=user, db=db, path_params={"id": id})
    return to_json(folder_controller.get_folder(context))


@router.put("/{id}", summary="Update a folder")
def update_folder(
    id: str,
    body: FolderUpdate,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    context = RouteContext(user=user, db=db, path_params={"id": id})
    return to_json(folder_controller.update_folder(body, context))


@router.delete("/{id}", summary="Delete a folder and unfile its apps")
def delete_folder(
    id: str,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    context = RouteContext(user=user, db=db, path_params={"id": id})
    return to_json(folder_controller.delete_folder(context))


@router.get("/{id}/apps", summary="List apps in a folder")
def get_apps_in_folder(
    id: str,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    context = RouteContext(user=user, db=db, path_params={"id": id})
    return to_json(folder_controller.get_apps_in_folder(context))
