"""Process-local credential storage."""

import threading
from typing import Dict, Optional

from ..models import DEFAULT_DRIVER_NAME
from .base import BackendKind, CredentialStore


class InMemoryStore(CredentialStore):
    """Credential store kept in a dictionary for the life of the process.

    Useful as a stand-in for a native backend in tests, and for hosts that
    only want to avoid repeated logins within one process.
    """

    kind = BackendKind.MEMORY

    def __init__(self, driver_name: str = DEFAULT_DRIVER_NAME):
        super().__init__(driver_name)
        self._entries: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get_credential(self, host: str, user: str) -> Optional[str]:
        with self._lock:
            return self._entries.get(self._target_name(host, user))

    def set_credential(self, host: str, user: str, token: str) -> None:
        with self._lock:
            self._entries[self._target_name(host, user)] = token

    def delete_credential(self, host: str, user: str) -> None:
        with self._lock:
            self._entries.pop(self._target_name(host, user), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
