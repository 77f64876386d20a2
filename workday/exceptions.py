"""
Custom exceptions for the workday backend.
Provides specific exception types for better error handling and recovery.
"""


class WorkdayException(Exception):
    """Base exception for workday application"""
    pass


class DayRecordNotFoundException(WorkdayException):
    """Raised when an explicit day record is not found"""
    def __init__(self, day):
        self.day = day
        super().__init__(f"No day record for {day}")


class FeedFetchException(WorkdayException):
    """Raised when the holiday feed cannot be downloaded"""
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Holiday feed fetch from {url} failed: {reason}")


class FeedParseException(WorkdayException):
    """Raised when the holiday feed payload cannot be decoded"""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Holiday feed could not be parsed: {reason}")


class FetchInProgressException(WorkdayException):
    """Raised when a holiday refresh is requested while another one runs"""
    def __init__(self):
        super().__init__("Holiday refresh already in progress")


class ValidationException(WorkdayException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")
