"""
View model for the create/edit folder dialog.
"""
from dataclasses import dataclass, asdict
from typing import Any, Awaitable, Callable, Dict, Literal, Optional

from app.schemas.folder import FOLDER_NAME_MAX_LENGTH, FolderWithAppCount

DialogMode = Literal["create", "edit"]


@dataclass
class FolderFormData:
    name: str = ""
    description: str = ""
    color: str = ""
    icon: str = ""


class FolderDialog:
    def __init__(
        self,
        mode: DialogMode,
        on_save: Callable[[Dict[str, Any]], Awaitable[Any]],
        folder: Optional[FolderWithAppCount] = None,
        on_open_change: Optional[Callable[[bool], None]] = None,
    ):
        self.mode = mode
        self.on_save = on_save
        self.folder = folder
        self.on_open_change = on_open_change
        self.is_open = False
        self.form_data = FolderFormData()
        self.is_loading = False
        self.error: Optional[str] = None

    def set_open(self, open_: bool):
        if open_:
            # Edit mode starts from the folder's current values, create mode from blanks
            if self.mode == "edit" and self.folder is not None:
                self.form_data = FolderFormData(
                    name=self.folder.name,
                    description=self.folder.description or "",
                    color=self.folder.color or "",
                    icon=self.folder.icon or "",
                )
            else:
                self.form_data = FolderFormData()
            self.error = None
        self.is_open = open_
        if self.on_open_change:
            self.on_open_change(open_)

    def open(self):
        self.set_open(True)

    def close(self):
        self.set_open(False)

    def set_field(self, field: str, value: str):
        if field not in asdict(self.form_data):
            raise KeyError(field)
        setattr(self.form_data, field, value)

    def validate(self) -> Optional[str]:
        if not self.form_data.name.strip():
            return "Folder name is required"
        if len(self.form_data.name) > FOLDER_NAME_MAX_LENGTH:
            return f"Folder name must be {FOLDER_NAME_MAX_LENGTH} characters or less"
        return None

    def _payload(self) -> Dict[str, Any]:
        # Empty optional fields are left out so an edit keeps the stored values
        payload = {"name": self.form_data.name.strip()}
        description = self.form_data.description.strip()
        if description:
            payload["description"] = description
        if self.form_data.color:
            payload["color"] = self.form_data.color
        if self.form_data.icon:
            payload["icon"] = self.form_data.icon
        return payload

    async def save(self) -> bool:
        """
        Validate and submit the form.

        Returns:
            True when ``on_save`` succeeded and the dialog closed; False when
            validation or the save failed, with the reason left in ``error``
        """
        error = self.validate()
        if error:
            self.error = error
            return False

        self.is_loading = True
        self.error = None
        try:
            await self.on_save(self._payload())
            self.close()
            return True
        except Exception as e:
            self.error = str(e) or "Failed to save folder"
            return False
        finally:
            self.is_loading = False

    @property
    def title(self) -> str:
        return "Create Folder" if self.mode == "create" else "Edit Folder"

    @property
    def description(self) -> str:
        if self.mode == "create":
            return "Create a new folder to organize your apps."
        return "Edit folder details."

    @property
    def submit_label(self) -> str:
        if self.is_loading:
            return "Creating..." if self.mode == "create" else "Saving..."
        return "Create Folder" if self.mode == "create" else "Save Changes"
