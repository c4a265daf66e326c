"""Thread-safe id token cache backed by the OS secure storage."""

import threading
from typing import Optional

import structlog

from .config import CacheSettings
from .models import LoginInput, LoginOutput
from .normalize import extract_host_from_server_url
from .storage import (
    BackendKind,
    BackendUnavailable,
    CredentialStore,
    detect_os,
    select_backend_kind,
    try_construct_store,
)

logger = structlog.get_logger(__name__)

STORAGE_UNAVAILABLE_MESSAGE = (
    "Secure local storage needs the native credential store for this platform. "
    "Falling back to normal login."
)


class CredentialManager:
    """Cache of id tokens keyed by (host, user).

    The store is chosen once, when the manager is built, and never changes.
    A manager without a store is inert: reads return None and writes do
    nothing. Every public operation holds the manager's lock for its whole
    duration.

    Only a malformed server URL is reported to callers, as ``InternalError``.
    Store failures of any kind are logged and treated as a cache miss.
    """

    def __init__(self, store: Optional[CredentialStore] = None):
        """Initialize the manager.

        Args:
            store: Backend to use, or None for an inert manager.
        """
        self._store = store
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Optional[CacheSettings] = None) -> "CredentialManager":
        """Build a manager, selecting the store from settings.

        With ``backend="auto"`` the store matching the running OS is used.
        A missing native dependency yields an inert manager instead of an error.

        Args:
            settings: Settings to use. Defaults to values from the environment.

        Returns:
            The new manager.
        """
        settings = settings or CacheSettings()
        if settings.backend == "auto":
            kind = select_backend_kind(detect_os())
        else:
            kind = BackendKind(settings.backend)

        if kind is BackendKind.NONE:
            logger.info("credential_cache_disabled", backend=kind.value)
            return cls(None)

        result = try_construct_store(kind, settings.driver_name)
        if isinstance(result, BackendUnavailable):
            logger.info(
                "secure_storage_unavailable",
                backend=result.kind.value,
                reason=result.reason,
                message=STORAGE_UNAVAILABLE_MESSAGE,
            )
            return cls(None)

        logger.info("backend_selected", backend=kind.value)
        return cls(result)

    @property
    def backend_kind(self) -> BackendKind:
        """Variant of the attached store, or ``BackendKind.NONE`` when inert."""
        if self._store is None:
            return BackendKind.NONE
        return self._store.kind

    @property
    def is_active(self) -> bool:
        """Whether a store is attached."""
        return self._store is not None

    def get(self, url: str, username: str) -> Optional[str]:
        """Look up the cached token for a server URL and user.

        Args:
            url: Full server URL; only its host is used.
            username: Login user name.

        Returns:
            The cached token, or None if there is none.

        Raises:
            InternalError: If ``url`` is malformed.
        """
        host = extract_host_from_server_url(url)
        with self._lock:
            if self._store is None:
                logger.debug("credential_cache_inert", operation="get")
                return None

            try:
                token = self._store.get_credential(host, username)
            except Exception as e:
                logger.warning(
                    "credential_read_failed",
                    host=host,
                    user=username,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return None

            if token is None:
                logger.debug("credential_cache_miss", host=host, user=username)
                return None
            if not token:
                logger.debug("credential_cache_empty", host=host, user=username)
                return None

            logger.debug("credential_cache_hit", host=host, user=username)
            return token

    def set(self, url: str, username: str, token: Optional[str]) -> bool:
        """Cache a token for a server URL and user.

        Empty or missing tokens are never written.

        Args:
            url: Full server URL; only its host is used.
            username: Login user name.
            token: Token to cache.

        Returns:
            True if the token was written to the store.

        Raises:
            InternalError: If ``url`` is malformed.
        """
        host = extract_host_from_server_url(url)
        with self._lock:
            if self._store is None:
                logger.debug("credential_cache_inert", operation="set")
                return False
            if not token:
                logger.debug("no_id_token_given", host=host, user=username)
                return False

            try:
                self._store.set_credential(host, username, token)
            except Exception as e:
                logger.warning(
                    "credential_write_failed",
                    host=host,
                    user=username,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return False
            logger.debug("credential_cached", host=host, user=username)
            return True

    def delete(self, host: str, username: str) -> None:
        """Remove the cached token for an already normalized host and user.

        Args:
            host: Host name as returned by ``extract_host_from_server_url``.
            username: Login user name.
        """
        with self._lock:
            if self._store is None:
                logger.debug("credential_cache_inert", operation="delete")
                return

            try:
                self._store.delete_credential(host, username)
            except Exception as e:
                logger.warning(
                    "credential_delete_failed",
                    host=host,
                    user=username,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return
            logger.debug("credential_deleted", host=host, user=username)

    def fill_cached_id_token(self, login_input: LoginInput) -> None:
        """Attach the cached id token, or None, to a login input."""
        login_input.id_token = self.get(login_input.server_url, login_input.user_name)

    def write_credential(self, login_input: LoginInput, login_output: LoginOutput) -> bool:
        """Cache the id token returned by a login. Returns whether it was written."""
        return self.set(login_input.server_url, login_input.user_name, login_output.id_token)

    def delete_credential(self, host: str, user: str) -> None:
        """Drop the id token cached for a host and user."""
        self.delete(host, user)


# Process-wide instance
_MANAGER_INSTANCE: Optional[CredentialManager] = None
_manager_lock = threading.Lock()


def initialize_credential_manager(
    settings: Optional[CacheSettings] = None,
    store: Optional[CredentialStore] = None,
) -> CredentialManager:
    """Create the process-wide manager once and return it.

    Later calls return the existing manager; their arguments are ignored.

    Args:
        settings: Settings used to select the store.
        store: Explicit store, taking precedence over ``settings``.

    Returns:
        The process-wide manager.
    """
    global _MANAGER_INSTANCE

    # Quick check first without lock
    instance = _MANAGER_INSTANCE
    if instance is not None:
        return instance

    with _manager_lock:
        if _MANAGER_INSTANCE is None:
            if store is not None:
                _MANAGER_INSTANCE = CredentialManager(store)
            else:
                _MANAGER_INSTANCE = CredentialManager.from_settings(settings)
        return _MANAGER_INSTANCE


def get_credential_manager() -> CredentialManager:
    """Get the process-wide manager, creating it from the environment if needed."""
    return initialize_credential_manager()


def _reset_credential_manager() -> None:
    """Drop the process-wide manager so the next access builds a new one.

    Test hook only: backend selection is meant to happen once per process.
    """
    global _MANAGER_INSTANCE
    with _manager_lock:
        _MANAGER_INSTANCE = None
