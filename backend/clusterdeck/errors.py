"""Service-layer errors rendered by the HTTP layer."""
from typing import Optional


class ApiError(Exception):
    """Error carrying separate internal and user-facing messages.

    The internal message goes to the logs, the user message to the client.
    """

    status_code = 500
    code = "000"

    def __init__(
        self,
        internal_message: str,
        user_message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(internal_message)
        self.internal_message = internal_message
        self.user_message = user_message or internal_message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "internalMessage": self.internal_message,
            "userMessage": self.user_message,
        }


class NotFoundError(ApiError):
    """Target row of an update or delete does not exist."""

    status_code = 404
    code = "404"


class StorageError(ApiError):
    """A repository write failed."""

    status_code = 500
    code = "500"


class ConflictError(ApiError):
    status_code = 409
    code = "409"
