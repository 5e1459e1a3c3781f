"""Page retrieval for the BVG mobile site."""

import logging

import requests

from ..config import Settings, get_settings
from .exceptions import NetworkError

logger = logging.getLogger(__name__)


class PageFetcher:
    """Fetches pages as text in the service's legacy encoding.

    Never retries; callers that want retries wrap :meth:`fetch`.
    """

    def __init__(self, settings: Settings | None = None):
        """Initialize the fetcher.

        Args:
            settings: Settings to use, defaults to the environment's
        """
        self.settings = settings or get_settings()
        self.timeout = self.settings.timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": self.settings.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "de-DE,de;q=0.9,en;q=0.5",
                "Connection": "keep-alive",
            }
        )

    def fetch(self, url: str) -> str:
        """Fetch a page.

        Args:
            url: Absolute URL

        Returns:
            Page text decoded with the configured encoding

        Raises:
            NetworkError: If the request fails
        """
        logger.debug(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Failed to fetch {url}: {str(e)}") from e

        response.encoding = self.settings.encoding
        return response.text

    __call__ = fetch

    def close(self) -> None:
        self.session.close()
