# durood_tracker/errors.py


class DuroodTrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DuroodTrackerError):
    status_code = 400


class NotFoundError(DuroodTrackerError):
    status_code = 404
