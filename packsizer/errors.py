"""Application error type carrying an HTTP status and a client-facing message."""

from __future__ import annotations

from http import HTTPStatus

CID_CONTEXT_KEY = "cid"

_UNEXPECTED_MESSAGE = "Unexpected error happened"


class CustomError(Exception):
    """An error with an HTTP status, a message for clients and the underlying cause."""

    def __init__(
        self,
        status: int,
        message: str,
        original_error: BaseException | None = None,
    ) -> None:
        self.status = int(status)
        self.message = message
        self.original_error = original_error
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.message}: {self.original_error}"

    def __repr__(self) -> str:
        return (
            f"CustomError(status={self.status!r}, message={self.message!r}, "
            f"original_error={self.original_error!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CustomError):
            return NotImplemented
        return (
            self.status == other.status
            and self.message == other.message
            and self.original_error == other.original_error
        )

    def __hash__(self) -> int:
        return hash((self.status, self.message))


def get_custom_error(err: BaseException) -> CustomError:
    """Wrap any error as a CustomError, keeping status and message if it already is one."""
    if isinstance(err, CustomError):
        return CustomError(err.status, err.message, err)
    return CustomError(HTTPStatus.INTERNAL_SERVER_ERROR, _UNEXPECTED_MESSAGE, err)