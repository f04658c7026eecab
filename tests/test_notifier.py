# tests/test_notifier.py

from conftest import single
from testdesk.engine.registry import SessionRegistry
from testdesk.engine.session import TestSession
from testdesk.utils.notifier import CollectingNotifier, SocketNotifier


class FakeSocketIO:
    def __init__(self):
        self.emitted = []

    def emit(self, event, payload, to=None):
        self.emitted.append((event, payload, to))


def test_collecting_notifier_drains_toasts():
    notifier = CollectingNotifier()
    notifier.success("Saved")
    notifier.error("Save failed", "Try again")

    assert notifier.drain() == [
        {"type": "success", "title": "Saved", "description": None},
        {"type": "error", "title": "Save failed", "description": "Try again"},
    ]
    assert notifier.toasts == []


def test_socket_notifier_emits_to_room():
    socketio = FakeSocketIO()
    SocketNotifier("session_1_2", socketio=socketio).warning("Time is up")

    assert socketio.emitted == [
        ("toast", {"type": "warning", "title": "Time is up", "description": None}, "session_1_2"),
    ]


def make_session(student_id=1, test_id=2):
    return TestSession(test_id, student_id, [single(1, "A")], 1)


def test_registry_replaces_and_closes_previous_session():
    registry = SessionRegistry()
    first = registry.add(make_session())
    second = registry.add(make_session())

    assert first.is_closed
    assert registry.get(1, 2) is second
    assert len(registry) == 1


def test_registry_discard_closes_session():
    registry = SessionRegistry()
    session = registry.add(make_session())

    assert registry.discard(1, 2) is session
    assert session.is_closed
    assert registry.get(1, 2) is None
    assert registry.discard(1, 2) is None


def test_registry_release_only_removes_the_registered_session():
    registry = SessionRegistry()
    old = registry.add(make_session())
    current = registry.add(make_session())

    assert registry.release(old) is False
    assert registry.get(1, 2) is current

    assert registry.release(current) is True
    assert current.is_closed
    assert len(registry) == 0
