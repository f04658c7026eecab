"""
Sockets Package
"""
from testdesk.sockets.session_events import register_socket_events, start_countdown

__all__ = ['register_socket_events', 'start_countdown']
