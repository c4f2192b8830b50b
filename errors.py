# errors.py
# Error taxonomy shared by the judging logic and the JSON routes


class JudgingError(Exception):
    """Base class for errors a client can act on.

    ``kind`` is stable and is what clients switch on; ``message`` is
    for humans.
    """

    kind = 'error'
    status_code = 400

    def __init__(self, message=None, **details):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.details = details

    def to_dict(self):
        payload = {'success': False, 'error': self.kind, 'message': self.message}
        payload.update(self.details)
        return payload


class Unauthorized(JudgingError):
    kind = 'unauthorized'
    status_code = 403


class NotFound(JudgingError):
    kind = 'not_found'
    status_code = 404


class InvalidState(JudgingError):
    kind = 'invalid_state'
    status_code = 409


class ValidationError(JudgingError):
    kind = 'validation_error'
    status_code = 400


class Conflict(JudgingError):
    kind = 'conflict'
    status_code = 409


class BatchValidationError(ValidationError):
    """Raised when a batch write is rejected; ``items`` has one outcome per input item."""

    def __init__(self, message, items):
        super().__init__(message, items=items)
        self.items = items
