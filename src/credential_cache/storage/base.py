"""Base interfaces and types for credential storage."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from ..models import DEFAULT_DRIVER_NAME, CredentialKey


class OSKind(str, Enum):
    """Operating systems the cache knows how to serve."""

    MAC = "mac"
    WINDOWS = "windows"
    LINUX = "linux"
    UNKNOWN = "unknown"


class BackendKind(str, Enum):
    """Tagged storage backend variants."""

    MACOS = "macos"
    WINDOWS = "windows"
    LINUX = "linux"
    MEMORY = "memory"
    NONE = "none"


class CredentialStore(ABC):
    """Abstract base class for secure storage backends.

    A backend maps a (host, user) pair to a single token. Implementations
    must treat a missing entry as a normal result, not an error, and set
    ``kind`` to the variant they implement.
    """

    kind: BackendKind

    def __init__(self, driver_name: str = DEFAULT_DRIVER_NAME):
        """Initialize the store.

        Args:
            driver_name: Client identifier embedded in native entry names.
        """
        self._driver_name = driver_name

    def _key(self, host: str, user: str) -> CredentialKey:
        return CredentialKey(host=host, user=user)

    def _target_name(self, host: str, user: str) -> str:
        return self._key(host, user).target_name(self._driver_name)

    @abstractmethod
    def get_credential(self, host: str, user: str) -> Optional[str]:
        """Retrieve the token stored for a host and user.

        Args:
            host: Normalized host name.
            user: User name.

        Returns:
            The stored token, or None if there is no entry.

        Raises:
            CredentialStoreError: If the native store fails.
        """
        ...

    @abstractmethod
    def set_credential(self, host: str, user: str, token: str) -> None:
        """Store a token, replacing any existing entry.

        Args:
            host: Normalized host name.
            user: User name.
            token: Token to store.

        Raises:
            CredentialStoreError: If the native store fails.
        """
        ...

    @abstractmethod
    def delete_credential(self, host: str, user: str) -> None:
        """Delete the entry for a host and user. Missing entries are ignored.

        Args:
            host: Normalized host name.
            user: User name.

        Raises:
            CredentialStoreError: If the native store fails.
        """
        ...


class CredentialStoreError(Exception):
    """Base exception for credential store operations."""


class BackendUnavailableError(CredentialStoreError):
    """Raised when a backend's native dependency is not present."""
