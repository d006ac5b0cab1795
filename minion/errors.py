from __future__ import annotations


class MinionError(Exception):
    """Base class for every failure raised by the maintenance core."""


class AuthError(MinionError):
    pass


class ApiError(MinionError):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class DecodeError(MinionError):
    pass


class ParseError(MinionError):
    pass


class SourceError(MinionError):
    pass
