"""Domain errors raised by services; mapped to HTTP status codes in main."""


class TrainerError(Exception):
    """Base class for errors reported to the client."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TrainerError):
    """User, scenario or progress record does not exist."""

    status_code = 404


class InvalidStateError(TrainerError):
    """Transition not allowed from the record's current state."""

    status_code = 409


class InputValidationError(TrainerError):
    """Missing or malformed request fields."""

    status_code = 400


class GenerationError(TrainerError):
    """Text generation failed or returned an unusable payload."""

    status_code = 502
