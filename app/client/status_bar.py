"""
View model for the chat status bar: current operation, connection health and
the recent slice of the activity log.
"""
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional, Sequence

from app.client.status_tracker import StatusActivity, StatusTracker

STALL_THRESHOLD_SECONDS = 30
RECENT_ACTIVITY_LIMIT = 10

ConnectionHealth = Literal["connected", "disconnected", "stalled"]


@dataclass
class ProjectStage:
    id: str
    title: str
    status: Literal["pending", "active", "completed"]
    metadata: Optional[str] = None


@dataclass
class OperationState:
    is_generating: bool = False
    is_deploying: bool = False
    is_preview_deploying: bool = False
    is_thinking: bool = False
    is_generating_blueprint: bool = False

    @property
    def is_active(self) -> bool:
        return (
            self.is_generating
            or self.is_deploying
            or self.is_preview_deploying
            or self.is_thinking
            or self.is_generating_blueprint
        )


@dataclass
class CurrentOperation:
    text: str
    icon: str
    status: Literal["active", "idle"]


def format_elapsed(seconds: float) -> str:
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    return f"{minutes // 60}h ago"


class StatusBar:
    def __init__(self, tracker: StatusTracker, clock: Optional[Callable[[], float]] = None):
        self.tracker = tracker
        self.clock = clock or tracker.clock
        self.is_expanded = False

    def toggle(self):
        self.is_expanded = not self.is_expanded

    def current_operation(self, state: OperationState, stages: Sequence[ProjectStage] = ()) -> CurrentOperation:
        # Order matters: deployment outranks planning, which outranks generation
        if state.is_deploying:
            return CurrentOperation("Deploying to Cloudflare", "deploy", "active")
        if state.is_preview_deploying:
            return CurrentOperation("Deploying Preview", "deploy", "active")
        if state.is_generating_blueprint:
            return CurrentOperation("Creating Blueprint", "blueprint", "active")
        if state.is_thinking:
            return CurrentOperation("Planning Next Phase", "thinking", "active")
        if state.is_generating:
            return CurrentOperation("Generating Code", "generating", "active")

        active_stage = next((s for s in stages if s.status == "active"), None)
        if active_stage is not None:
            return CurrentOperation(active_stage.title, "stage", "active")

        return CurrentOperation("Ready", "idle", "idle")

    def seconds_since_last_message(self) -> float:
        return self.clock() - self.tracker.last_message_timestamp

    def connection_health(self, state: OperationState) -> ConnectionHealth:
        if not self.tracker.websocket_connected:
            return "disconnected"
        if state.is_active and self.seconds_since_last_message() > STALL_THRESHOLD_SECONDS:
            return "stalled"
        return "connected"

    def time_since_last_activity(self) -> str:
        if not self.tracker.last_message_timestamp:
            return "N/A"
        return format_elapsed(self.seconds_since_last_message())

    @staticmethod
    def progress_percent(progress: int, total: int) -> float:
        return (progress / total) * 100 if total > 0 else 0.0

    def recent_activities(self, limit: int = RECENT_ACTIVITY_LIMIT) -> List[StatusActivity]:
        """Newest first."""
        return list(reversed(self.tracker.activities[-limit:]))
