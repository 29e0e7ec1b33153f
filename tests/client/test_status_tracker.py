import pytest

from app.client.status_tracker import MAX_ACTIVITIES, StatusTracker, map_message


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(clock):
    return StatusTracker(clock=clock)


def test_log_keeps_only_most_recent_entries(tracker, clock):
    for i in range(60):
        clock.advance(1)
        tracker.track_message({"type": "phase_generating", "message": f"Phase {i}"})

    activities = tracker.activities
    assert len(activities) == MAX_ACTIVITIES
    assert activities[0].message == "Phase 10"
    assert activities[-1].message == "Phase 59"
    assert tracker.last_message_timestamp == clock.now
    assert activities[-1].timestamp == clock.now


@pytest.mark.parametrize("kind", ["cf_agent_state", "file_chunk_generated"])
def test_suppressed_messages_refresh_timestamp_only(tracker, clock, kind):
    clock.advance(5)

    assert tracker.track_message({"type": kind}) is None

    assert tracker.activities == []
    assert tracker.last_message_timestamp == clock.now


def test_unknown_short_type_is_logged_as_info(tracker):
    activity = tracker.track_message({"type": "sandbox_warming"})

    assert activity.type == "sandbox_warming"
    assert activity.message == "Event: sandbox_warming"
    assert activity.status == "info"


def test_unknown_long_type_is_dropped(tracker):
    assert tracker.track_message({"type": "x" * 51}) is None
    assert tracker.track_message({"type": "y" * 50}) is not None
    assert len(tracker.activities) == 1


@pytest.mark.parametrize(
    "message, expected",
    [
        (
            {"type": "generation_started", "totalFiles": 12},
            ("generation_started", "Starting code generation (12 files)", "active"),
        ),
        (
            {"type": "phase_implemented", "message": "Phase 2 done"},
            ("phase_implemented", "Phase 2 done", "completed"),
        ),
        (
            {"type": "file_generating", "filePath": "src/App.tsx"},
            ("file_generating", "Generating: src/App.tsx", "active"),
        ),
        (
            {"type": "file_generated", "file": {"filePath": "src/App.tsx"}},
            ("file_generated", "Completed: src/App.tsx", "completed"),
        ),
        (
            {"type": "file_regenerated", "file": {"filePath": "src/main.ts"}},
            ("file_regenerated", "Regenerated: src/main.ts", "completed"),
        ),
        (
            {"type": "deployment_failed", "message": "sandbox timeout"},
            ("deployment_failed", "Deployment failed: sandbox timeout", "error"),
        ),
        (
            {"type": "runtime_error_found", "count": 3},
            ("runtime_error_found", "Runtime errors detected (3)", "error"),
        ),
        ({"type": "generation_stopped"}, ("generation_stopped", "Code generation stopped", "info")),
        ({"type": "rate_limit_error"}, ("rate_limit_error", "Rate limit exceeded", "error")),
    ],
)
def test_known_message_kinds(message, expected):
    assert map_message(message) == expected


@pytest.mark.parametrize(
    "tool_status, expected",
    [
        ("start", ("tool_start", "Running tool: search", "active")),
        ("success", ("tool_success", "Tool completed: search", "completed")),
        ("error", ("tool_error", "Tool failed: search", "error")),
    ],
)
def test_tool_events_from_conversation_response(tool_status, expected):
    message = {"type": "conversation_response", "tool": {"name": "search", "status": tool_status}}

    assert map_message(message) == expected


def test_conversation_response_without_tool_is_not_logged(tracker):
    assert tracker.track_message({"type": "conversation_response", "message": "hi"}) is None
    assert tracker.activities == []


def test_add_activity_and_connection_flag(tracker, clock):
    clock.advance(2.5)
    activity = tracker.add_activity("manual", "Hello", "completed")

    assert activity.timestamp == clock.now
    assert activity.id.startswith(str(int(clock.now * 1000)))
    assert tracker.websocket_connected is False

    tracker.update_websocket_status(True)
    assert tracker.websocket_connected is True


def test_activity_ids_are_unique(tracker):
    first = tracker.add_activity("a", "one")
    second = tracker.add_activity("a", "two")

    assert first.id != second.id
