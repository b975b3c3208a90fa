"""
Custom exceptions for image analysis.
Provider failures are recovered by the simulator; input errors reach the user.
"""

from enum import Enum

from SharedStore.exc.base import BaseErrorCode


class ProviderFailure(Enum):
    QUOTA_EXHAUSTED = "quota_exhausted"
    HTTP_ERROR = "http_error"
    TIMEOUT = "timeout"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_OUTPUT = "malformed_output"
    UNKNOWN = "unknown"


class AnalysisError(Exception):
    """Base exception for analysis-related errors"""
    pass


class AnalysisInputError(AnalysisError):
    """Image payload is unusable (empty, corrupted, too small or too large)"""
    pass


class ProviderError(AnalysisError):
    """A provider could not produce a verdict"""

    def __init__(self, failure: ProviderFailure, message: str = ""):
        self.failure = failure
        super().__init__(f"{failure.value}: {message}" if message else failure.value)


class AnalysisErrorCode(BaseErrorCode):
    INVALID_IMAGE = (3000, "{detail}")
