"""Errors surfaced to callers of the credential cache."""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes carried by credential cache errors."""

    INTERNAL_ERROR = "internal_error"


class CredentialCacheError(Exception):
    """Base exception for errors that reach callers of the cache.

    Args:
        code: Error code describing the failure category.
        message: Human readable description.
    """

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class InternalError(CredentialCacheError):
    """Raised for configuration or input defects, such as a malformed server URL."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.INTERNAL_ERROR, message)
