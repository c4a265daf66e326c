"""Windows credential storage using Windows Credential Manager."""

from keyring.backends.Windows import WinVaultKeyring

from .base import BackendKind
from .keyring_store import KeyringCredentialStore


class WindowsCredentialStore(KeyringCredentialStore):
    """Credential store implementation using Windows Credential Manager."""

    kind = BackendKind.WINDOWS
    backend_class = WinVaultKeyring
    requirement = "pywin32-ctypes"
