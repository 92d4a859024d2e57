"""
Typed failures surfaced by the Product Page Extractor.

Only identifier validation and the upstream fetch can fail a request; every
parsing problem inside the extraction cascade is recovered locally.
"""
from typing import Optional


class ProductExtractionError(Exception):
    """Base class for request-fatal extraction failures."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.url = url


class IdentifierNotFound(ProductExtractionError):
    """The URL matches none of the known product URL shapes."""

    def __init__(self, url: str):
        super().__init__("Could not extract product ID from URL", url=url)


class FetchFailed(ProductExtractionError):
    """The product page could not be fetched. Carries the underlying cause."""

    def __init__(
        self,
        url: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            if status_code is not None:
                message = f"HTTP error! status: {status_code}"
            else:
                message = f"Failed to fetch product: {cause}"
        super().__init__(message, url=url)
        self.cause = cause
        self.status_code = status_code


class FetchTimeout(FetchFailed):
    """The product page fetch exceeded the request timeout."""

    def __init__(
        self,
        url: str,
        cause: Optional[BaseException] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(
            url,
            cause=cause,
            message=f"Timed out after {timeout}s fetching product page",
        )
        self.timeout = timeout
