from typing import Any, Optional

from fastapi import status


class ReportsServiceError(Exception):
    """Base error for calls against the external reporting service."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class MissingCredentialsError(ReportsServiceError):
    """Credentials are absent or incomplete. Configuration problem, retrying will not help."""
    status_code = status.HTTP_400_BAD_REQUEST


class MissingCronIdError(ReportsServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamError(ReportsServiceError):
    """Transport failure or non-2xx answer from the reporting service."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
