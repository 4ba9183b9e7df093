class OrderError(Exception):
    """Base for failures raised by the order service; the API maps ``status_code``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(OrderError):
    status_code = 404


class InvalidArgument(OrderError):
    status_code = 400


class Forbidden(OrderError):
    status_code = 403
