from dataclasses import dataclass, field
from typing import Any

from fastapi import HTTPException


@dataclass
class ErrorBody:
    """``detail`` payload of every error response raised by the API."""

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class AppHTTPException(HTTPException):
    def __init__(self, status_code: int, body: ErrorBody):
        super().__init__(status_code=status_code, detail=body.to_dict())
        self.body = body


def source_unavailable(reason: str) -> AppHTTPException:
    return AppHTTPException(
        status_code=500,
        body=ErrorBody(
            code="restaurant_source_unavailable",
            message="Failed to load restaurants",
            details={"reason": reason},
        ),
    )
