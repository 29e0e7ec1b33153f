"""
Bounded activity log fed by the generation event stream.

Each inbound message is mapped to a human-readable line and one of four states
(active, completed, error, info). Only the most recent MAX_ACTIVITIES entries
are kept. High-frequency message kinds are dropped without being logged.
"""
import time
import uuid
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Literal, Mapping, Optional, Tuple

ActivityStatus = Literal["active", "completed", "error", "info"]

MAX_ACTIVITIES = 50
MAX_UNKNOWN_TYPE_LENGTH = 50

SUPPRESSED_MESSAGE_TYPES = frozenset({
    "cf_agent_state",
    "file_chunk_generated",
})


@dataclass
class StatusActivity:
    id: str
    timestamp: float
    type: str
    message: str
    status: ActivityStatus


# (activity type, message, status); None means "record nothing"
Mapped = Optional[Tuple[str, str, ActivityStatus]]


def _fixed(text: str, status: ActivityStatus) -> Callable[[str, Mapping[str, Any]], Mapped]:
    return lambda kind, message: (kind, text, status)


def _from_field(key: str, status: ActivityStatus, template: str = "{}") -> Callable[[str, Mapping[str, Any]], Mapped]:
    return lambda kind, message: (kind, template.format(message.get(key, "")), status)


def _file_path(message: Mapping[str, Any]) -> str:
    return (message.get("file") or {}).get("filePath", "")


def _conversation_response(kind: str, message: Mapping[str, Any]) -> Mapped:
    tool = message.get("tool")
    if not tool:
        return None
    name = tool.get("name")
    tool_status = tool.get("status")
    if tool_status == "start":
        return ("tool_start", f"Running tool: {name}", "active")
    if tool_status == "success":
        return ("tool_success", f"Tool completed: {name}", "completed")
    if tool_status == "error":
        return ("tool_error", f"Tool failed: {name}", "error")
    return None


MESSAGE_HANDLERS: Dict[str, Callable[[str, Mapping[str, Any]], Mapped]] = {
    "generation_started": lambda kind, m: (
        kind, f"Starting code generation ({m.get('totalFiles')} files)", "active"
    ),
    "phase_generating": _from_field("message", "active"),
    "phase_generated": _from_field("message", "completed"),
    "phase_implementing": _from_field("message", "active"),
    "phase_implemented": _from_field("message", "completed"),
    "phase_validating": _from_field("message", "active"),
    "phase_validated": _from_field("message", "completed"),
    "file_generating": _from_field("filePath", "active", "Generating: {}"),
    "file_generated": lambda kind, m: (kind, f"Completed: {_file_path(m)}", "completed"),
    "file_regenerating": _from_field("filePath", "active", "Regenerating: {}"),
    "file_regenerated": lambda kind, m: (kind, f"Regenerated: {_file_path(m)}", "completed"),
    "deployment_started": _fixed("Deploying to preview sandbox", "active"),
    "deployment_completed": _fixed("Preview deployment completed", "completed"),
    "deployment_failed": _from_field("message", "error", "Deployment failed: {}"),
    "code_reviewing": _fixed("Reviewing generated code", "active"),
    "code_reviewed": _fixed("Code review completed", "completed"),
    "generation_complete": _fixed("Code generation completed", "completed"),
    "generation_stopped": _fixed("Code generation stopped", "info"),
    "generation_resumed": _fixed("Code generation resumed", "active"),
    "cloudflare_deployment_started": _fixed("Deploying to Cloudflare Workers", "active"),
    "cloudflare_deployment_completed": _fixed("Cloudflare deployment completed", "completed"),
    "cloudflare_deployment_error": _from_field("error", "error", "Deployment error: {}"),
    "runtime_error_found": _from_field("count", "error", "Runtime errors detected ({})"),
    "deterministic_code_fix_started": _fixed("Fixing code issues", "active"),
    "deterministic_code_fix_completed": _fixed("Code fixes applied", "completed"),
    "conversation_response": _conversation_response,
    "error": _from_field("error", "error"),
    "rate_limit_error": _fixed("Rate limit exceeded", "error"),
}


def map_message(message: Mapping[str, Any]) -> Mapped:
    """Translate one stream message into an activity, or None to skip it."""
    kind = str(message.get("type", ""))
    if kind in SUPPRESSED_MESSAGE_TYPES:
        return None
    handler = MESSAGE_HANDLERS.get(kind)
    if handler is not None:
        return handler(kind, message)
    if len(kind) <= MAX_UNKNOWN_TYPE_LENGTH:
        return (kind, f"Event: {kind}", "info")
    return None


class StatusTracker:
    def __init__(self, clock: Callable[[], float] = time.time, max_activities: int = MAX_ACTIVITIES):
        self.clock = clock
        self._activities: Deque[StatusActivity] = deque(maxlen=max_activities)
        self.last_message_timestamp = clock()
        self.websocket_connected = False

    @property
    def activities(self) -> List[StatusActivity]:
        return list(self._activities)

    def update_websocket_status(self, connected: bool):
        self.websocket_connected = connected

    def add_activity(self, type: str, message: str, status: ActivityStatus = "info") -> StatusActivity:
        now = self.clock()
        activity = StatusActivity(
            id=f"{int(now * 1000)}-{uuid.uuid4().hex[:7]}",
            timestamp=now,
            type=type,
            message=message,
            status=status,
        )
        self._activities.append(activity)
        self.last_message_timestamp = now
        return activity

    def track_message(self, message: Mapping[str, Any]) -> Optional[StatusActivity]:
        """
        Record a stream message.

        Every message, including suppressed ones, refreshes
        ``last_message_timestamp`` so stall detection sees the connection alive.
        """
        self.last_message_timestamp = self.clock()
        mapped = map_message(message)
        if mapped is None:
            return None
        kind, text, status = mapped
        return self.add_activity(kind, text, status)
