"""macOS credential storage using the login Keychain."""

from keyring.backends.macOS import Keyring as MacOSKeyring

from .base import BackendKind
from .keyring_store import KeyringCredentialStore


class KeychainStore(KeyringCredentialStore):
    """Credential store implementation using the macOS Keychain."""

    kind = BackendKind.MACOS
    backend_class = MacOSKeyring
    requirement = "the macOS Security framework"
