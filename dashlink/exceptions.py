"""Exception hierarchy for calendar sync and linking operations."""

from enum import Enum


class DashlinkError(Exception):
    """Base exception for dashlink operations."""

    pass


class FetchErrorKind(str, Enum):
    """Reason a calendar feed could not be fetched."""

    NETWORK = "network"
    STATUS = "status"
    TIMEOUT = "timeout"
    INVALID_URL = "invalid_url"


class FetchError(DashlinkError):
    """Calendar feed could not be retrieved."""

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind = FetchErrorKind.NETWORK,
        url: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.url = url
        self.status_code = status_code


class NotFoundError(DashlinkError):
    """Calendar source or linked event not found."""

    pass


class StorageError(DashlinkError):
    """Reading or writing a JSON document failed."""

    pass


class ValidationError(DashlinkError):
    """Request payload failed validation."""

    pass
