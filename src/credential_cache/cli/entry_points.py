"""CLI entry points for the credential cache."""

from .cli import main


def entrypoint() -> None:
    """Entry point for the ``credential-cache`` console script."""
    main()
