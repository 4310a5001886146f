"""WordPress REST API client with retry logic and paginated post fetching."""

import json
import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from models import ExportSettings

logger = logging.getLogger('wordpress_markdown_exporter.client')

MAX_PER_PAGE = 100
API_PREFIX = '/wp-json/wp/v2/'


class WordPressApiError(Exception):
    """Raised when the WordPress REST API returns an unexpected response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class WordPressApiNotFoundError(WordPressApiError):
    """Raised when the REST API v2 collection endpoint does not exist."""


class WordPressClient:
    """WordPress REST API client with authentication, retry logic, and error handling."""

    def __init__(
        self,
        base_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        verify_ssl: bool = True,
        timeout: float = 30,
        max_retries: int = 3,
        retry_backoff_factor: float = 2.0,
        rate_limit: float = 0.0,
        session: Optional[requests.Session] = None,
        media_session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Site URL (e.g., "https://blog.example.com")
            username: Username for basic auth (application password user)
            password: Password for basic auth
            verify_ssl: Whether to verify SSL certificates
            timeout: HTTP request timeout in seconds
            max_retries: Maximum retry attempts for transient errors
            retry_backoff_factor: Exponential backoff factor
            rate_limit: Minimum seconds between requests (0.0 = no rate limiting)
            session: Optional pre-built session for API calls
            media_session: Optional pre-built session for media downloads
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff_factor = retry_backoff_factor
        self.rate_limit = rate_limit
        self.last_request_time = 0.0

        self.session = session or self._build_session(verify_ssl)
        # Media is often served from a CDN; credentials stay on the API session
        self.media_session = media_session or self._build_session(verify_ssl)

        if username and password:
            self.session.auth = (username, password)
            logger.info(f"Initialized WordPress client with Basic auth for {self.base_url}")
        elif username or password:
            raise ValueError("Basic auth requires both username and password")
        else:
            logger.info(f"Initialized anonymous WordPress client for {self.base_url}")

        if not verify_ssl:
            logger.warning("SSL verification disabled - this is insecure!")
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        logger.debug(f"Client configured with timeout={timeout}s, max_retries={max_retries}, "
                     f"backoff_factor={retry_backoff_factor}, rate_limit={rate_limit}s")

    def _build_session(self, verify_ssl: bool) -> requests.Session:
        """Create a session with the retry strategy mounted."""
        session = requests.Session()
        session.verify = verify_ssl

        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=self.retry_backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _enforce_rate_limit(self) -> None:
        """Enforce rate limiting if configured."""
        if self.rate_limit <= 0:
            return

        time_since_last = time.time() - self.last_request_time

        if time_since_last < self.rate_limit:
            sleep_time = self.rate_limit - time_since_last
            logger.debug(f"Rate limiting: sleeping for {sleep_time:.2f}s")
            time.sleep(sleep_time)

        self.last_request_time = time.time()

    def _make_request(
        self,
        method: str,
        endpoint: str,
        full_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        **kwargs
    ) -> requests.Response:
        """
        Make an HTTP request with rate limiting and logging.

        Status handling is left to the caller.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path (e.g., "/wp-json/wp/v2/posts")
            full_url: Optional full URL (overrides base_url + endpoint)
            session: Session to use (defaults to the API session)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            requests.exceptions.RequestException: For transport errors
        """
        self._enforce_rate_limit()

        url = full_url if full_url else urljoin(self.base_url + '/', endpoint.lstrip('/'))
        session = session or self.session

        start_time = time.time()
        logger.debug(f"API Request: {method} {url}")

        try:
            response = session.request(method, url, timeout=self.timeout, **kwargs)
            elapsed = time.time() - start_time
            logger.debug(f"API Response: {response.status_code} {url} ({elapsed:.3f}s)")
            return response

        except requests.exceptions.Timeout:
            logger.error(f"Request timeout after {self.timeout}s: {method} {url}")
            raise

        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {method} {url} - {str(e)}")
            raise

        finally:
            self.last_request_time = time.time()

    def fetch_posts(self, post_type: str = 'posts', limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Fetch posts of a type page by page with embedded terms, author and media.

        Pagination ends on an empty page, on HTTP 400 (WordPress answers 400 when
        the page number runs past the last page), or once ``limit`` is reached.

        Args:
            post_type: REST collection name ("posts", "pages" or a custom type)
            limit: Maximum number of posts to return (None = all)

        Returns:
            List of post dictionaries in API order

        Raises:
            WordPressApiNotFoundError: If the collection endpoint returns 404
            WordPressApiError: For any other non-2xx response
        """
        logger.info(f"Fetching {post_type} entries...")

        posts: List[Dict[str, Any]] = []
        page = 1
        endpoint = f"{API_PREFIX}{post_type}"

        while True:
            if limit is not None:
                remaining = limit - len(posts)
                if remaining <= 0:
                    break
                per_page = min(MAX_PER_PAGE, remaining)
            else:
                per_page = MAX_PER_PAGE

            params = {'page': page, 'per_page': per_page, '_embed': 1}
            response = self._make_request('GET', endpoint, params=params)

            if response.status_code == 404:
                raise WordPressApiNotFoundError(
                    f"WordPress REST API v2 not found at {self.base_url}{endpoint}. "
                    "Verify that the site URL is correct and that the REST API is enabled.",
                    status_code=404
                )

            if response.status_code == 400:
                logger.debug(f"Page {page} of {post_type} returned 400 - no more results")
                break

            if not response.ok:
                raise WordPressApiError(
                    f"HTTP error {response.status_code} fetching {post_type} page {page}"
                    f"{self._error_details(response)}",
                    status_code=response.status_code
                )

            try:
                batch = response.json()
            except ValueError as e:
                raise WordPressApiError(f"Invalid JSON fetching {post_type} page {page}: {e}")

            if not isinstance(batch, list):
                raise WordPressApiError(
                    f"Unexpected response for {post_type} page {page}: expected a list"
                )

            if not batch:
                break

            posts.extend(batch)
            limit_note = f" (limit: {limit})" if limit is not None else ""
            logger.info(f"Fetched {len(posts)} {post_type}{limit_note}...")

            if limit is not None and len(posts) >= limit:
                posts = posts[:limit]
                break

            page += 1

        limit_note = f" (limited to {limit})" if limit is not None else ""
        logger.info(f"Found {len(posts)} {post_type}{limit_note}")
        return posts

    def download_media(self, url: str) -> bytes:
        """
        Download a media file with exponential backoff on transient errors.

        Args:
            url: Absolute media URL

        Returns:
            File content

        Raises:
            requests.exceptions.RequestException: After retries or on permanent errors
        """
        max_attempts = self.max_retries + 1

        for attempt in range(max_attempts):
            try:
                response = self._make_request('GET', '', full_url=url, session=self.media_session)
                response.raise_for_status()
                return response.content

            except requests.exceptions.RequestException as e:
                if not self._is_transient_error(e) or attempt >= self.max_retries:
                    if attempt > 0:
                        logger.error(f"Download failed after {attempt + 1} attempts: {url}")
                    raise

                wait_time = self.retry_backoff_factor * (2 ** attempt)
                logger.warning(
                    f"Download attempt {attempt + 1} failed ({str(e)}), "
                    f"retrying in {wait_time:.1f}s: {url}"
                )
                time.sleep(wait_time)

        raise requests.exceptions.RequestException(f"Download failed after {max_attempts} attempts: {url}")

    def _is_transient_error(self, exception: Exception) -> bool:
        """
        Determine if an error is transient (should retry) or permanent (fail fast).

        Args:
            exception: The exception to check

        Returns:
            True if error is transient, False if permanent
        """
        response = getattr(exception, 'response', None)
        if response is not None:
            return response.status_code in [429, 500, 502, 503, 504]

        if isinstance(exception, (requests.exceptions.Timeout, requests.exceptions.ConnectionError)):
            return True

        logger.debug(f"Treating error as permanent (no retry): {type(exception).__name__}")
        return False

    @staticmethod
    def _error_details(response: requests.Response) -> str:
        """Extract the error message WordPress puts in JSON error bodies."""
        try:
            error_json = response.json()
        except ValueError:
            return ""
        if isinstance(error_json, dict) and error_json.get('message'):
            logger.debug(f"Error details: {json.dumps(error_json)}")
            return f" - {error_json['message']}"
        return ""

    @classmethod
    def from_settings(cls, settings: ExportSettings) -> 'WordPressClient':
        """
        Initialize a client from export settings.

        Args:
            settings: ExportSettings instance

        Returns:
            WordPressClient instance
        """
        return cls(
            base_url=settings.site_url,
            username=settings.username,
            password=settings.password,
            verify_ssl=settings.verify_ssl,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
            retry_backoff_factor=settings.retry_backoff_factor,
            rate_limit=settings.rate_limit
        )


__all__ = ['WordPressApiError', 'WordPressApiNotFoundError', 'WordPressClient']
