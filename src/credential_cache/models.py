"""Login input/output and key models exchanged with the credential cache."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ID_TOKEN = "ID_TOKEN"
DEFAULT_DRIVER_NAME = "CREDENTIAL-CACHE"


class LoginInput(BaseModel):
    """Connection parameters of a login attempt."""

    server_url: str
    user_name: str
    id_token: Optional[str] = Field(default=None, repr=False)


class LoginOutput(BaseModel):
    """Result of a successful login."""

    id_token: Optional[str] = Field(default=None, repr=False)


class CredentialKey(BaseModel):
    """Normalized (host, user) pair identifying a cached token."""

    model_config = ConfigDict(frozen=True)

    host: str
    user: str

    def target_name(self, driver_name: str = DEFAULT_DRIVER_NAME) -> str:
        """Build the native storage entry name for this key.

        Host and user are upper-cased so lookups are case-insensitive.

        Args:
            driver_name: Client identifier embedded in the entry name.

        Returns:
            Entry name such as ``ACCT.EXAMPLE.COM:ALICE:CREDENTIAL-CACHE:ID_TOKEN``.
        """
        return ":".join(
            [self.host.upper(), self.user.upper(), driver_name, ID_TOKEN]
        )

    @property
    def account(self) -> str:
        """Account name used for the native entry."""
        return self.user.upper()
