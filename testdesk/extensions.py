"""
Flask Extensions
Centralized extension initialization
"""
from flask_sqlalchemy import SQLAlchemy
from flask_socketio import SocketIO

from testdesk.engine.registry import SessionRegistry

# Initialize extensions (without app binding)
db = SQLAlchemy()
socketio = SocketIO()

# Live test sessions, one per (student, test)
active_sessions = SessionRegistry()
