"""Linux credential storage using libsecret."""

import subprocess
from typing import Optional

import structlog

from ..models import DEFAULT_DRIVER_NAME
from .base import (
    BackendKind,
    BackendUnavailableError,
    CredentialStore,
    CredentialStoreError,
)

logger = structlog.get_logger(__name__)

SECRET_TOOL = "secret-tool"


class LibSecretStore(CredentialStore):
    """Credential store implementation using the libsecret ``secret-tool`` command.

    Entries are addressed by two attributes: ``service`` holds the target
    name built from host and user, ``account`` holds the upper-cased user.
    """

    kind = BackendKind.LINUX

    def __init__(self, driver_name: str = DEFAULT_DRIVER_NAME):
        """Initialize the store."""
        super().__init__(driver_name)
        self._check_libsecret()

    def _check_libsecret(self) -> None:
        """Check if libsecret and a Secret Service are available."""
        try:
            result = subprocess.run(
                [SECRET_TOOL, "search", "dummy", "dummy"],
                capture_output=True,
                check=False,
            )
        except FileNotFoundError:
            raise BackendUnavailableError(
                "libsecret not found. Please install libsecret-tools."
            )
        except OSError as e:
            raise BackendUnavailableError(f"Cannot run {SECRET_TOOL}: {e}") from e

        # A search with no matches exits non-zero silently; stderr means no service.
        if result.returncode != 0 and result.stderr.strip():
            raise BackendUnavailableError(
                f"Secret Service not reachable: {_decode(result.stderr).strip()}"
            )

    def _attributes(self, host: str, user: str) -> list[str]:
        key = self._key(host, user)
        return [
            "service",
            key.target_name(self._driver_name),
            "account",
            key.account,
        ]

    def _run(self, args: list[str], **kwargs) -> subprocess.CompletedProcess:
        try:
            return subprocess.run([SECRET_TOOL, *args], capture_output=True, **kwargs)
        except FileNotFoundError as e:
            raise BackendUnavailableError(f"{SECRET_TOOL} disappeared: {e}") from e
        except OSError as e:
            raise CredentialStoreError(f"Cannot run {SECRET_TOOL}: {e}") from e

    def get_credential(self, host: str, user: str) -> Optional[str]:
        """Retrieve a token using libsecret."""
        result = self._run(["lookup", *self._attributes(host, user)], check=False)
        if result.returncode != 0:
            if result.stderr.strip():
                raise CredentialStoreError(
                    f"Failed to retrieve credential: {_decode(result.stderr).strip()}"
                )
            logger.debug("secret_tool_lookup_miss", account=user.upper())
            return None

        try:
            token = result.stdout.decode()
        except UnicodeDecodeError as e:
            raise CredentialStoreError(f"Stored credential is not valid UTF-8: {e}") from e
        # secret-tool appends a newline only when writing to a terminal.
        if token.endswith("\n"):
            token = token[:-1]
        return token or None

    def set_credential(self, host: str, user: str, token: str) -> None:
        """Store a token using libsecret."""
        try:
            self._run(
                [
                    "store",
                    "--label",
                    self._target_name(host, user),
                    *self._attributes(host, user),
                ],
                input=token.encode(),
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise CredentialStoreError(f"Failed to store credential: {e}") from e

    def delete_credential(self, host: str, user: str) -> None:
        """Delete a token from libsecret."""
        result = self._run(["clear", *self._attributes(host, user)], check=False)
        # Clearing a missing entry exits non-zero without output on some versions.
        if result.returncode != 0 and result.stderr.strip():
            raise CredentialStoreError(
                f"Failed to delete credential: {_decode(result.stderr).strip()}"
            )


def _decode(output: bytes) -> str:
    return output.decode(errors="replace")
