"""
Content fetching for Cluttarex.

Retrieves raw page markup for the server variant of the pipeline. A single
attempt is made per request; failures surface as FetchFailed and the body
of a failed response is never handed to the parser.
"""

import logging
from http.cookiejar import DefaultCookiePolicy
from typing import Optional

import requests

from .constants import DEFAULT_REQUEST_TIMEOUT, DEFAULT_USER_AGENT
from .errors import FetchFailed, MissingInput
from .models import FetchedPage

logger = logging.getLogger(__name__)


class ContentFetcher:
    """Fetch raw markup for a remote page."""

    def __init__(self, timeout: int = DEFAULT_REQUEST_TIMEOUT,
                 user_agent: Optional[str] = None, verify_ssl: bool = True):
        """
        Initialize the content fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: Custom user agent string
            verify_ssl: Verify TLS certificates
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.verify_ssl = verify_ssl
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": self.user_agent})
        # Never keep cookies between fetches
        self.session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

    def fetch(self, url: Optional[str]) -> FetchedPage:
        """
        Fetch a URL.

        Args:
            url: The URL to fetch

        Returns:
            FetchedPage whose ``url`` is the final URL after redirects

        Raises:
            MissingInput: If no URL was given
            FetchFailed: On transport errors or a non-2xx response
        """
        if not url or not url.strip():
            raise MissingInput("Missing URL parameter")
        url = url.strip()

        try:
            response = self.session.get(
                url, timeout=self.timeout, allow_redirects=True, verify=self.verify_ssl
            )
        except requests.Timeout:
            raise FetchFailed("Failed to fetch URL: Request timeout", status_code=504)
        except (requests.exceptions.MissingSchema,
                requests.exceptions.InvalidSchema,
                requests.exceptions.InvalidURL) as e:
            raise FetchFailed("Failed to fetch URL: Invalid URL", details=str(e), status_code=400)
        except requests.ConnectionError as e:
            raise FetchFailed("Failed to fetch URL: Connection error", details=str(e))
        except requests.RequestException as e:
            raise FetchFailed(f"Failed to fetch URL: {e}")

        if not 200 <= response.status_code < 300:
            reason = response.reason or f"HTTP {response.status_code}"
            logger.error(f"Fetching {url} returned HTTP {response.status_code}")
            # Redirects are followed, so a leftover 1xx/3xx is reported as a bad gateway
            status = response.status_code if response.status_code >= 400 else 502
            raise FetchFailed(f"Failed to fetch URL: {reason}", status_code=status)

        logger.debug(f"Fetched {len(response.content)} bytes from {response.url or url}")

        return FetchedPage(
            url=response.url or url,
            markup=response.content,
            status_code=response.status_code,
            encoding=declared_charset(response),
            content_type=response.headers.get("Content-Type", ""),
        )


def create_fetcher(**kwargs) -> ContentFetcher:
    """Create a ContentFetcher instance with optional configuration."""
    return ContentFetcher(**kwargs)


def declared_charset(response: requests.Response) -> Optional[str]:
    """Charset from the Content-Type header, or None when the header names none."""
    content_type = response.headers.get("Content-Type", "")
    if "charset=" not in content_type.lower():
        return None
    return response.encoding
