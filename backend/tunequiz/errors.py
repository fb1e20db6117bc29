"""Errors reported back to the originating connection as ``error`` messages."""


class GameError(Exception):
    """Base class for every non-fatal error a client request can produce."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedMessage(GameError):
    pass


class UnknownMessageType(GameError):
    pass


class ValidationError(GameError):
    pass


class NotFoundError(GameError):
    pass


class AuthorizationError(GameError):
    pass
