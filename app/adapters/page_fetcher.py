"""
Page Fetcher Adapter.
Single-attempt HTTP GET of a product page with static browser headers.
"""
from typing import Optional

import httpx

from app.config import config
from app.errors import FetchFailed, FetchTimeout
from app.utils.logger import LayerLogger


class PageFetcher:
    """
    Fetch raw product page HTML.

    Failures are not retried: a timeout raises FetchTimeout, any other HTTP
    or transport problem raises FetchFailed carrying the underlying cause.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[LayerLogger] = None,
    ):
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.transport = transport
        self.logger = logger or LayerLogger("page_fetcher")

    async def fetch(self, url: str) -> str:
        self.logger.log_action("fetch_html", "started", url=url)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url, headers=self._get_headers())
                response.raise_for_status()
                html = response.text

        except httpx.TimeoutException as e:
            self.logger.log_error(
                f"Timed out fetching URL after {self.timeout}s",
                error_type="timeout",
                url=url,
            )
            raise FetchTimeout(url, cause=e, timeout=self.timeout) from e

        except httpx.HTTPStatusError as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type="http_status",
                url=url,
                status_code=e.response.status_code,
            )
            raise FetchFailed(url, cause=e, status_code=e.response.status_code) from e

        except httpx.HTTPError as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type="http_error",
                url=url,
            )
            raise FetchFailed(url, cause=e) from e

        self.logger.log_action(
            "fetch_html",
            "completed",
            url=url,
            status_code=response.status_code,
            content_length=len(html),
        )
        return html

    def _get_headers(self) -> dict:
        """Get request headers mimicking a browser."""
        return {
            "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
        }
