"""
Core module - Configuration, database, authentication, and email delivery.
"""

from regdesk.core.auth import AdminGate, AdminUser, require_admin
from regdesk.core.config import Settings, get_settings, settings
from regdesk.core.database import Base, close_db, get_db, init_db, init_engine
from regdesk.core.email import Notifier, build_notifier

__all__ = [
    # Config
    "Settings",
    "settings",
    "get_settings",
    # Database
    "Base",
    "init_engine",
    "get_db",
    "init_db",
    "close_db",
    # Auth
    "AdminGate",
    "AdminUser",
    "require_admin",
    # Email
    "Notifier",
    "build_notifier",
]
