"""Database models package."""
from database.models.file import File
from database.models.user import User
from database.models.appointment import Appointment
from database.models.notification import Notification

__all__ = [
    "File",
    "User",
    "Appointment",
    "Notification",
]
