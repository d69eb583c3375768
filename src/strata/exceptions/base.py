"""Base exception for Strata."""

from typing import Any


class StrataError(Exception):
    """Base exception for all Strata errors.

    Keyword arguments become ``details``: string-valued context shown after
    the message, in the order given.
    """

    #: Process exit status the CLI uses when this error ends a command.
    exit_code = 1

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = {key: str(value) for key, value in details.items()}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
