"""Audit event type definitions."""

from enum import Enum


class EventType(str, Enum):
    """Audit event types."""

    # Credential events
    CRED_READ = "credential.read"
    CRED_WRITE = "credential.write"
    CRED_DELETE = "credential.delete"

    # Backend events
    BACKEND_SELECT = "backend.select"

    # Error events
    ERROR_CRED = "error.credential"
