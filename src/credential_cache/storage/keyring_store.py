"""Shared implementation for stores backed by a ``keyring`` backend class."""

from typing import Optional

import structlog
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

from ..models import DEFAULT_DRIVER_NAME
from .base import BackendUnavailableError, CredentialStore, CredentialStoreError

logger = structlog.get_logger(__name__)


class KeyringCredentialStore(CredentialStore):
    """Credential store delegating to one concrete keyring backend.

    The backend class is fixed per subclass; the default keyring resolution
    is bypassed so the selected OS facility is always the one used.
    Backend failures of any type, including the win32 ``pywintypes.error``,
    are reported as ``CredentialStoreError``.
    """

    backend_class: type[KeyringBackend]
    requirement: str = "keyring"

    def __init__(self, driver_name: str = DEFAULT_DRIVER_NAME):
        """Initialize the store.

        Raises:
            BackendUnavailableError: If the keyring backend cannot run here.
        """
        super().__init__(driver_name)
        if not self.backend_class.viable:
            raise BackendUnavailableError(
                f"{self.backend_class.__name__} is not usable. "
                f"Please install {self.requirement}."
            )
        self._backend = self.backend_class()

    def get_credential(self, host: str, user: str) -> Optional[str]:
        """Retrieve a token from the keyring backend."""
        key = self._key(host, user)
        try:
            token = self._backend.get_password(
                key.target_name(self._driver_name), key.account
            )
        except Exception as e:
            raise CredentialStoreError(f"Failed to retrieve credential: {e}") from e
        return token or None

    def set_credential(self, host: str, user: str, token: str) -> None:
        """Store a token in the keyring backend."""
        key = self._key(host, user)
        try:
            self._backend.set_password(
                key.target_name(self._driver_name), key.account, token
            )
        except Exception as e:
            raise CredentialStoreError(f"Failed to store credential: {e}") from e

    def delete_credential(self, host: str, user: str) -> None:
        """Delete a token from the keyring backend."""
        key = self._key(host, user)
        try:
            self._backend.delete_password(
                key.target_name(self._driver_name), key.account
            )
        except PasswordDeleteError:
            # Already deleted or doesn't exist
            logger.debug("keyring_entry_absent", account=key.account)
        except Exception as e:
            raise CredentialStoreError(f"Failed to delete credential: {e}") from e
