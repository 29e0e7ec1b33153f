"""
Client-side folder store, mutation helpers and auth-guarded actions.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.client.api_client import ApiError
from app.client.auth_guard import AuthGuard, AuthSession
from app.client.folders import (
    FolderActionError,
    FolderActions,
    FolderStore,
    create_folder,
    delete_folder,
    move_app_to_folder,
    update_folder,
)
from app.schemas.response import ApiResponse


def folder_payload(**overrides) -> dict:
    payload = {
        "id": "f1",
        "userId": 1,
        "name": "Work",
        "description": None,
        "color": None,
        "icon": None,
        "order": 0,
        "createdAt": "2024-01-01T00:00:00",
        "updatedAt": "2024-01-01T00:00:00",
        "appCount": 2,
    }
    payload.update(overrides)
    return payload


def ok(data) -> ApiResponse:
    return ApiResponse(success=True, data=data)


@pytest.fixture
def client():
    return MagicMock()


class TestFolderStore:
    @pytest.mark.asyncio
    async def test_mount_loads_folders(self, client):
        client.get_folders = AsyncMock(return_value=ok({"folders": [folder_payload(), folder_payload(id="f2")]}))
        states = []
        store = FolderStore(client, on_change=lambda s: states.append(s.loading))

        assert store.loading is True
        await store.mount()

        assert [f.id for f in store.folders] == ["f1", "f2"]
        assert store.folders[0].app_count == 2
        assert store.loading is False
        assert store.error is None
        assert states == [True, False]

    @pytest.mark.asyncio
    async def test_failure_sets_prefixed_error_and_keeps_previous_folders(self, client):
        client.get_folders = AsyncMock(return_value=ok({"folders": [folder_payload()]}))
        store = FolderStore(client)
        await store.mount()

        client.get_folders = AsyncMock(side_effect=ApiError("Server unavailable", 500))
        await store.refetch()

        assert store.error == "Failed to fetch folders: Server unavailable"
        assert [f.id for f in store.folders] == ["f1"]
        assert store.loading is False

    @pytest.mark.asyncio
    async def test_malformed_payload_sets_generic_error(self, client):
        client.get_folders = AsyncMock(return_value=ok({"folders": [{"name": "No id"}]}))
        store = FolderStore(client)

        await store.refetch()

        assert store.error == "Failed to fetch folders"
        assert store.loading is False

    @pytest.mark.asyncio
    async def test_refetch_clears_previous_error(self, client):
        client.get_folders = AsyncMock(side_effect=ApiError("boom"))
        store = FolderStore(client)
        await store.mount()
        assert store.error is not None

        client.get_folders = AsyncMock(return_value=ok({"folders": []}))
        await store.refetch()

        assert store.error is None
        assert store.folders == []


class TestMutationHelpers:
    @pytest.mark.asyncio
    async def test_create_returns_folder(self, client):
        client.create_folder = AsyncMock(return_value=ok({"folder": folder_payload(name="New")}))

        folder = await create_folder(client, {"name": "New"})

        assert folder.name == "New"
        client.create_folder.assert_awaited_once_with({"name": "New"})

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "helper, method, args, prefix",
        [
            (create_folder, "create_folder", ({"name": "x"},), "Failed to create folder"),
            (update_folder, "update_folder", ("f1", {"name": "x"}), "Failed to update folder"),
            (delete_folder, "delete_folder", ("f1",), "Failed to delete folder"),
            (move_app_to_folder, "move_app_to_folder", ("a1", None), "Failed to move app to folder"),
        ],
    )
    async def test_api_errors_are_rewrapped(self, client, helper, method, args, prefix):
        setattr(client, method, AsyncMock(side_effect=ApiError("Folder not found", 404)))

        with pytest.raises(FolderActionError) as exc_info:
            await helper(client, *args)

        assert str(exc_info.value) == f"{prefix}: Folder not found"

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_raises_its_message(self, client):
        client.delete_folder = AsyncMock(
            return_value=ApiResponse.model_validate({"success": False, "error": {"message": "Nope"}})
        )

        with pytest.raises(FolderActionError) as exc_info:
            await delete_folder(client, "f1")

        assert str(exc_info.value) == "Failed to delete folder: Nope"

    @pytest.mark.asyncio
    async def test_malformed_folder_payload_is_rewrapped(self, client):
        client.create_folder = AsyncMock(return_value=ok({"folder": {"name": "No id"}}))

        with pytest.raises(FolderActionError, match=r"^Failed to create folder: "):
            await create_folder(client, {"name": "No id"})

    @pytest.mark.asyncio
    async def test_move_and_delete_return_success_flag(self, client):
        client.move_app_to_folder = AsyncMock(return_value=ok({"success": True, "message": "App moved to folder"}))
        client.delete_folder = AsyncMock(return_value=ok({"success": True, "message": "Folder deleted successfully"}))

        assert await move_app_to_folder(client, "a1", "f1") is True
        assert await delete_folder(client, "f1") is True


class TestFolderActions:
    @pytest.mark.asyncio
    async def test_signed_out_user_is_prompted_and_api_not_called(self, client):
        prompts = []
        client.create_folder = AsyncMock()
        actions = FolderActions(client, AuthGuard(on_auth_required=prompts.append))

        assert await actions.create_folder({"name": "Work"}) is None

        client.create_folder.assert_not_awaited()
        assert prompts == ["Please sign in to create a folder"]

    @pytest.mark.asyncio
    async def test_guest_session_is_not_enough(self, client):
        prompts = []
        client.move_app_to_folder = AsyncMock()
        guard = AuthGuard(AuthSession(user_id=5, username="guest_ab", is_guest=True), on_auth_required=prompts.append)

        assert await FolderActions(client, guard).move_app_to_folder("a1", "f1") is None

        client.move_app_to_folder.assert_not_awaited()
        assert prompts == ["Please sign in to move an app to a folder"]

    @pytest.mark.asyncio
    async def test_full_session_passes_through(self, client):
        client.update_folder = AsyncMock(return_value=ok({"folder": folder_payload(name="Renamed")}))
        client.delete_folder = AsyncMock(return_value=ok({"success": True, "message": "Folder deleted successfully"}))
        guard = AuthGuard(AuthSession(user_id=1, username="alice"))
        actions = FolderActions(client, guard)

        updated = await actions.update_folder("f1", {"name": "Renamed"})
        deleted = await actions.delete_folder("f1")

        assert updated.name == "Renamed"
        assert deleted is True

    def test_guard_without_full_auth_accepts_guests(self):
        guard = AuthGuard(AuthSession(user_id=5, username="guest_ab", is_guest=True))

        assert guard.require_auth() is True
        assert guard.require_auth(require_full_auth=True) is False

    @pytest.mark.asyncio
    async def test_refresh_clears_session_when_check_fails(self, client):
        client.check_auth = AsyncMock(side_effect=ApiError("offline"))
        guard = AuthGuard(AuthSession(user_id=1, username="alice"))

        assert await guard.refresh(client) is None
        assert guard.session is None
