"""Business logic services for tasktrack."""

from tasktrack.services.auth_service import AuthService
from tasktrack.services.password_service import PasswordService
from tasktrack.services.session_service import SessionService
from tasktrack.services.task_service import TaskService

__all__ = [
    "AuthService",
    "PasswordService",
    "SessionService",
    "TaskService",
]
