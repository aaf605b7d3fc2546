"""Custom exceptions for the navigation toolkit."""


class NavError(Exception):
    """Base exception for navkit errors."""

    def __init__(self, message: str, source: str = "unknown") -> None:
        """Initialize error.

        Args:
            message: Error message
            source: Component or host the error originated from
        """
        self.source = source
        super().__init__(f"[{source}] {message}")


class InvalidURLError(NavError):
    """Raised when a URL is malformed or uses an unsupported scheme."""

    def __init__(self, url: str, reason: str = "invalid URL") -> None:
        """Initialize error.

        Args:
            url: Offending URL
            reason: Why the URL was rejected
        """
        self.url = url
        super().__init__(f"{reason}: {url!r}", source="url")


class TransientNetworkError(NavError):
    """Raised for connection refused/reset and DNS failures."""

    pass


class RequestTimeoutError(TransientNetworkError):
    """Raised when a request exceeds its timeout."""

    pass


class UnexpectedStatusError(NavError):
    """Raised when a response carries a non-2xx status."""

    def __init__(self, status_code: int, url: str, source: str = "http") -> None:
        """Initialize error.

        Args:
            status_code: HTTP status returned by the server
            url: Requested URL
            source: Pipeline step name
        """
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} for {url}", source=source)


class FetchFailedError(NavError):
    """Raised when a page cannot be retrieved after all attempts."""

    pass


class IconError(NavError):
    """Base exception for non-fatal icon failures."""

    pass


class NoIconFoundError(IconError):
    """Raised when no icon candidate passes validation."""

    pass


class IconDownloadError(IconError):
    """Raised when an icon cannot be downloaded after all attempts."""

    pass


class EmptyResponseError(IconDownloadError):
    """Raised when an icon response has an empty body."""

    pass


class IconInvalidError(IconError):
    """Raised when downloaded content is not a recognizable image."""

    pass


class PersistenceError(NavError):
    """Raised when a written file fails its integrity check."""

    pass


class UploadError(NavError):
    """Raised when an uploaded or served file fails validation."""

    pass


RETRYABLE_ERRORS = (TransientNetworkError, UnexpectedStatusError, EmptyResponseError)
