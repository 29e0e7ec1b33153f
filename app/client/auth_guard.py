import logging
from dataclasses import dataclass
from typing import Callable, Optional

from app.client.api_client import ApiClient, ApiError

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    user_id: int
    username: str
    is_guest: bool = False


class AuthGuard:
    """Blocks actions that need a session and asks the user to sign in instead.

    A guest session counts as authenticated but not as a full session.
    """

    def __init__(
        self,
        session: Optional[AuthSession] = None,
        on_auth_required: Optional[Callable[[str], None]] = None,
    ):
        self.session = session
        self.on_auth_required = on_auth_required

    async def refresh(self, client: ApiClient) -> Optional[AuthSession]:
        try:
            response = await client.check_auth()
        except ApiError as e:
            logger.warning(f"Could not check authentication: {e.message}")
            self.session = None
            return None

        data = response.data or {}
        user = data.get("user") if data.get("authenticated") else None
        if user:
            self.session = AuthSession(
                user_id=user["id"],
                username=user["username"],
                is_guest=bool(user.get("is_guest")),
            )
        else:
            self.session = None
        return self.session

    def require_auth(self, require_full_auth: bool = False, action_context: str = "to continue") -> bool:
        """
        Check the current session before running an action.

        Returns:
            True if the action may proceed; otherwise the re-authentication prompt
            is raised through ``on_auth_required`` and False is returned
        """
        if self.session is not None and not (require_full_auth and self.session.is_guest):
            return True

        message = f"Please sign in {action_context}"
        logger.info(f"Action blocked: {message}")
        if self.on_auth_required:
            self.on_auth_required(message)
        return False
