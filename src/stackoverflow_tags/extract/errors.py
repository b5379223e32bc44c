"""
Fetch errors raised by the API client.

Every failure of a page fetch is one of three variants. The paginator
decides what to do with each one; the client never recovers on its own.
`transient` describes the fault; whether another attempt is made is
decided by `is_retryable` alone.
"""

from typing import Optional


class FetchError(Exception):
    """Base class for a failed page fetch"""

    kind = "unknown"
    transient = False

    def __init__(self, message: str, page: Optional[int] = None):
        super().__init__(message)
        self.page = page


class TransportError(FetchError):
    """Connection refused, DNS failure, timeout, broken stream"""

    kind = "transport"
    transient = True


class StatusError(FetchError):
    """Response arrived with a status other than 200"""

    kind = "status"
    transient = True

    def __init__(
        self, status_code: int, page: Optional[int] = None, body: str = ""
    ):
        super().__init__(
            f"The status code is not correct. status:{status_code}", page=page
        )
        self.status_code = status_code
        self.body = body


class DecodeError(FetchError):
    """Response body is not the expected JSON envelope"""

    kind = "decode"
    transient = False


def is_retryable(error: FetchError, retry_decode_errors: bool = True) -> bool:
    """Whether another attempt at the same page is allowed after `error`"""
    if isinstance(error, (TransportError, StatusError)):
        return True
    if isinstance(error, DecodeError):
        return retry_decode_errors
    return False
