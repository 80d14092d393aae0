from .app import create_app
from .config import Settings, get_settings
from .sessions import Session, SessionRegistry, SessionState

__all__ = ["create_app", "Settings", "get_settings", "Session", "SessionRegistry", "SessionState"]
