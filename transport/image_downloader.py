"""Download of user-attached images from the chat platform."""

import base64
import logging
from typing import Callable, Optional

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

logger = logging.getLogger(__name__)


class ImageDownloader:
    """
    Fetches attachment images as base64 for the vision model.

    Connection errors and timeouts are retried with linear backoff
    (retry_delay, 2 * retry_delay, ...); other errors propagate at once.
    """

    def __init__(
        self,
        token_provider: Optional[Callable[[], str]] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 5.0
    ):
        """
        Initialize downloader.

        Args:
            token_provider: Returns a bearer token for the platform, or None for anonymous access
            max_retries: Maximum attempts per download
            retry_delay: Base backoff delay in seconds
            timeout: Request timeout in seconds
        """
        self.token_provider = token_provider
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout

    def _get_headers(self) -> dict:
        """Get request headers with authentication."""
        headers = {}
        if self.token_provider:
            headers["Authorization"] = f"Bearer {self.token_provider()}"
        return headers

    def download(self, url: str) -> bytes:
        """
        Download raw image bytes.

        Raises:
            requests.exceptions.RequestException: After the last failed attempt
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            retry=retry_if_exception_type((requests.exceptions.ConnectionError, requests.exceptions.Timeout)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )
        return retrying(self._fetch, url)

    def _fetch(self, url: str) -> bytes:
        response = requests.get(url, headers=self._get_headers(), timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def download_base64(self, url: str) -> str:
        """Download an image and return it base64-encoded."""
        return base64.b64encode(self.download(url)).decode("ascii")
