"""
Notifiers
Non-blocking toast notifications handed to components explicitly
"""
from __future__ import annotations

from dataclasses import dataclass

TOAST_KINDS = ('success', 'error', 'warning', 'info')


@dataclass(frozen=True)
class Toast:
    kind: str
    title: str
    description: str | None = None

    def to_dict(self):
        return {'type': self.kind, 'title': self.title, 'description': self.description}


class Notifier:
    """Base notifier; subclasses deliver a Toast somewhere"""

    def notify(self, toast: Toast) -> None:
        raise NotImplementedError

    def _send(self, kind, title, description=None):
        toast = Toast(kind, title, description)
        self.notify(toast)
        return toast

    def success(self, title, description=None):
        return self._send('success', title, description)

    def error(self, title, description=None):
        return self._send('error', title, description)

    def warning(self, title, description=None):
        return self._send('warning', title, description)

    def info(self, title, description=None):
        return self._send('info', title, description)


class NullNotifier(Notifier):
    def notify(self, toast):
        pass


class CollectingNotifier(Notifier):
    """Keeps toasts in memory so callers can return or inspect them"""

    def __init__(self) -> None:
        self.toasts: list[Toast] = []

    def notify(self, toast):
        self.toasts.append(toast)

    def drain(self):
        toasts, self.toasts = self.toasts, []
        return [toast.to_dict() for toast in toasts]


class SocketNotifier(Notifier):
    """Emits toasts into a Socket.IO room"""

    def __init__(self, room, socketio=None) -> None:
        self.room = room
        self._socketio = socketio

    def notify(self, toast):
        socketio = self._socketio
        if socketio is None:
            from testdesk.extensions import socketio
        socketio.emit('toast', toast.to_dict(), to=self.room)
