"""Cross-platform credential storage."""

import platform
from typing import NamedTuple, Union

import structlog

from ..models import DEFAULT_DRIVER_NAME
from .base import (
    BackendKind,
    BackendUnavailableError,
    CredentialStore,
    CredentialStoreError,
    OSKind,
)
from .memory import InMemoryStore

logger = structlog.get_logger(__name__)


class BackendUnavailable(NamedTuple):
    """Result of a backend construction that could not complete."""

    kind: BackendKind
    reason: str


_OS_BACKENDS = {
    OSKind.MAC: BackendKind.MACOS,
    OSKind.WINDOWS: BackendKind.WINDOWS,
    OSKind.LINUX: BackendKind.LINUX,
}


def detect_os() -> OSKind:
    """Detect the operating system of the running process."""
    system = platform.system().lower()
    if system == "darwin":
        return OSKind.MAC
    elif system == "windows":
        return OSKind.WINDOWS
    elif system == "linux":
        return OSKind.LINUX
    return OSKind.UNKNOWN


def select_backend_kind(os_kind: OSKind) -> BackendKind:
    """Choose the backend variant for an operating system.

    Args:
        os_kind: Detected operating system.

    Returns:
        The matching backend kind, or ``BackendKind.NONE`` for unsupported systems.
    """
    kind = _OS_BACKENDS.get(os_kind, BackendKind.NONE)
    if kind is BackendKind.NONE:
        logger.warning(
            "unsupported_operating_system",
            os=os_kind.value,
            expected="macOS, Windows, Linux",
        )
    return kind


def create_store(
    kind: BackendKind, driver_name: str = DEFAULT_DRIVER_NAME
) -> CredentialStore:
    """Construct the credential store for a backend kind.

    Platform modules are imported lazily so a missing optional dependency
    only affects the platform that needs it.

    Args:
        kind: Backend variant to build.
        driver_name: Client identifier embedded in native entry names.

    Returns:
        CredentialStore: The constructed store.

    Raises:
        BackendUnavailableError: If the native dependency is missing.
        ImportError: If the backend's Python module cannot be loaded.
        ValueError: If ``kind`` is ``BackendKind.NONE``.
    """
    if kind is BackendKind.MACOS:
        from .macos import KeychainStore

        return KeychainStore(driver_name)
    elif kind is BackendKind.WINDOWS:
        from .windows import WindowsCredentialStore

        return WindowsCredentialStore(driver_name)
    elif kind is BackendKind.LINUX:
        from .linux import LibSecretStore

        return LibSecretStore(driver_name)
    elif kind is BackendKind.MEMORY:
        return InMemoryStore(driver_name)
    raise ValueError(f"No store for backend kind: {kind.value}")


def try_construct_store(
    kind: BackendKind, driver_name: str = DEFAULT_DRIVER_NAME
) -> Union[CredentialStore, BackendUnavailable]:
    """Construct a store, reporting a missing dependency as a value.

    Args:
        kind: Backend variant to build.
        driver_name: Client identifier embedded in native entry names.

    Returns:
        The store, or a ``BackendUnavailable`` describing why none could be built.
    """
    if kind is BackendKind.NONE:
        return BackendUnavailable(kind, "no backend for this platform")
    try:
        return create_store(kind, driver_name)
    except (BackendUnavailableError, ImportError) as e:
        return BackendUnavailable(kind, str(e))
    except Exception as e:
        logger.warning(
            "backend_construction_failed",
            backend=kind.value,
            error_type=type(e).__name__,
            error=str(e),
        )
        return BackendUnavailable(kind, f"{type(e).__name__}: {e}")


__all__ = [
    "BackendKind",
    "BackendUnavailable",
    "BackendUnavailableError",
    "CredentialStore",
    "CredentialStoreError",
    "InMemoryStore",
    "OSKind",
    "create_store",
    "detect_os",
    "select_backend_kind",
    "try_construct_store",
]
