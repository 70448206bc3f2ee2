class GameError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(GameError):
    status_code = 404


class ForbiddenError(GameError):
    status_code = 403


class InvalidStateError(GameError):
    status_code = 400


class SessionExpiredError(GameError):
    status_code = 410


class ValidationError(GameError):
    status_code = 400


class ConflictError(GameError):
    status_code = 409


class AuthenticationError(GameError):
    status_code = 401
