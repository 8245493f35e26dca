from __future__ import annotations


class ClientError(Exception):
    """Base error raised by the data-access client."""


class ConnectivityError(ClientError):
    """The remote API could not be reached (refused, DNS, timeout)."""


class ApplicationError(ClientError):
    """The backend answered and rejected the operation."""

    def __init__(self, message: str, status: int = 400, code: str = "error"):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def __repr__(self) -> str:
        return f"ApplicationError({self.message!r}, status={self.status}, code={self.code!r})"
