from werkzeug.exceptions import HTTPException


class ValidationError(HTTPException):
    """
    Exception raised when request input is not valid.
    """
    code = 400
    description = "The input was not valid."


class InvalidDateError(ValidationError):
    description = "Invalid date provided."


class InvalidDurationError(ValidationError):
    description = "Invalid duration. Please select either 'week' or 'month'."


class MissingParameterError(ValidationError):
    description = "A required parameter is missing."


class NotFoundError(HTTPException):
    """
    Exception raised when there is a request for data that does not exist.
    """
    code = 404
    description = "The requested data was not found."


class TitleNotFoundError(NotFoundError):
    pass


class UpstreamError(HTTPException):
    """
    Exception raised when there is an issue talking to the pageviews API.
    The description carries the upstream message when one is available.
    """
    code = 500
    description = "Error fetching from Wikipedia."


class UpstreamFetchError(UpstreamError):
    pass


class InternalError(HTTPException):
    code = 500
    description = "An unknown error occurred."
