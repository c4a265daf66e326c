"""
Credential cache: id tokens kept in the operating system's secure storage.

Tokens are keyed by (host, user) and stored in the macOS Keychain, the
Windows Credential Manager or the Linux Secret Service. When none of these
is usable the cache stays inert and callers fall back to a normal login.
"""

from .config import CacheSettings
from .exceptions import CredentialCacheError, ErrorCode, InternalError
from .manager import (
    CredentialManager,
    get_credential_manager,
    initialize_credential_manager,
)
from .models import CredentialKey, LoginInput, LoginOutput
from .normalize import extract_host_from_server_url

__version__ = "1.0.0"

__all__ = [
    "CacheSettings",
    "CredentialCacheError",
    "CredentialKey",
    "CredentialManager",
    "ErrorCode",
    "InternalError",
    "LoginInput",
    "LoginOutput",
    "extract_host_from_server_url",
    "get_credential_manager",
    "initialize_credential_manager",
]
