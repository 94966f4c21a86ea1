class StringAnalyzerError(Exception):
    """Base error; rendered to the client as {"error": message}."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StringAnalyzerError):
    """Missing or malformed input"""
    status_code = 400


class InvalidTypeError(ValidationError):
    """Input is present but has the wrong type"""
    status_code = 422


class InvalidQueryNumberError(ValidationError):
    """A recognised query template captured a number that is not finite"""
    status_code = 422


class ConflictError(StringAnalyzerError):
    status_code = 409


class NotFoundError(StringAnalyzerError):
    status_code = 404


class UninterpretableQueryError(StringAnalyzerError):
    status_code = 400
