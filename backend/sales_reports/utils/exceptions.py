from typing import Dict, Any

class BaseAppException(Exception):
    """Base exception for application"""

    status_code: int = 500

    def __init__(self, message: str, code: str = None, details: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}


class ValidationError(BaseAppException):
    """Report filters could not be parsed; the request is rejected as a client error"""

    status_code = 400


class ExecutorError(BaseAppException):
    """The storage executor failed to run a report query"""

    status_code = 500
