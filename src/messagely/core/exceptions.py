class MessagelyError(Exception):
    """
    Base error carrying an HTTP-equivalent status.
    :param message: Human readable description
    :param status: HTTP status code the error maps to
    """
    status: int = 500

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    def to_dict(self) -> dict:
        return {"error": {"message": self.message, "status": self.status}}


class ValidationError(MessagelyError):
    status = 400


class InvalidCredentials(MessagelyError):
    status = 400


class NotFoundError(MessagelyError):
    status = 404


class ConflictError(MessagelyError):
    status = 409


class StoreError(MessagelyError):
    status = 500
