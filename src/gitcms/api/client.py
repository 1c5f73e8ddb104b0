"""Shared REST transport for Git hosting API clients."""

import time
import logging
from typing import Dict, List, Any, Optional, Iterator, Union
from urllib.parse import urljoin
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .base import ContentGateway
from .exceptions import (
    GatewayError,
    AuthenticationError,
    RateLimitError,
    ResourceNotFoundError,
    PermissionError,
    ConflictError
)


logger = logging.getLogger(__name__)


class RateLimiter:
    """Simple rate limiter for API requests."""

    def __init__(self, requests_per_second: float = 3.0):
        self.requests_per_second = requests_per_second
        self.min_interval = 1.0 / requests_per_second if requests_per_second > 0 else 0
        self.last_request_time = 0

    def wait_if_needed(self):
        """Wait if necessary to respect rate limit."""
        current_time = time.time()
        time_since_last_request = current_time - self.last_request_time

        if time_since_last_request < self.min_interval:
            sleep_time = self.min_interval - time_since_last_request
            logger.debug(f"Rate limiting: sleeping for {sleep_time:.2f} seconds")
            time.sleep(sleep_time)

        self.last_request_time = time.time()


class RestClient(ContentGateway):
    """Base client with rate limiting, status mapping and pagination.

    Subclasses provide the provider-specific authentication headers and
    endpoint layout.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        config: Optional[Dict[str, Any]] = None,
        verify_ssl: bool = True
    ):
        """Initialize client.

        Args:
            base_url: API root URL
            token: Static access token
            config: Optional configuration dict (rate_limit, timeout, retry_count, page_size)
            verify_ssl: Whether to verify SSL certificates
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.verify_ssl = verify_ssl
        self.config = config or {}

        self.rate_limiter = RateLimiter(self.config.get('rate_limit', 10))
        self.page_size = self.config.get('page_size', 100)

        self.session = self._create_session()

    def _auth_headers(self) -> Dict[str, str]:
        """Return provider-specific authentication headers."""
        raise NotImplementedError

    def _create_session(self) -> requests.Session:
        """Create a requests session with auth headers and connection pooling."""
        session = requests.Session()

        session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })
        session.headers.update(self._auth_headers())

        # Upstream calls are not retried unless explicitly configured, and
        # then only for idempotent reads. The last response is always
        # returned so its status maps to the right exception
        retry_strategy = Retry(
            total=self.config.get('retry_count', 0),
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False
        )

        adapter = HTTPAdapter(
            max_retries=retry_strategy,
            pool_connections=10,
            pool_maxsize=10
        )

        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith('http://') or endpoint.startswith('https://'):
            return endpoint
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _send(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Send a request and map error statuses to exceptions.

        Raises:
            GatewayError: On API or network errors
        """
        self.rate_limiter.wait_if_needed()

        url = self._build_url(endpoint)

        if 'timeout' not in kwargs:
            kwargs['timeout'] = self.config.get('timeout', 30)

        try:
            response = self.session.request(
                method,
                url,
                verify=self.verify_ssl,
                **kwargs
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {method} {url} - {e}")
            raise GatewayError(f"Request failed: {e}")

        self._raise_for_status(response, method, endpoint)
        return response

    def _raise_for_status(self, response: requests.Response, method: str, endpoint: str):
        status = response.status_code
        if status < 400:
            return

        if status == 429 or (status == 403 and response.headers.get('X-RateLimit-Remaining') == '0'):
            retry_after = int(response.headers.get('Retry-After', 60))
            raise RateLimitError(
                f"Rate limit exceeded. Retry after {retry_after} seconds",
                retry_after=retry_after
            )

        if status == 401:
            raise AuthenticationError("Invalid or expired token", status_code=status)

        if status == 403:
            raise PermissionError("Insufficient permissions for this operation", status_code=status)

        if status == 404:
            raise ResourceNotFoundError(f"Resource not found: {endpoint}", status_code=status)

        response_data = self._error_payload(response)
        message = response_data.get('message') or response_data.get('error') or response.reason

        if status in (409, 422) or (status == 405 and method == 'PUT'):
            raise ConflictError(f"Conflict on {method} {endpoint}: {message}",
                                status_code=status, response_data=response_data)

        raise GatewayError(f"HTTP {status} on {method} {endpoint}: {message}",
                           status_code=status, response_data=response_data)

    @staticmethod
    def _error_payload(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def _request(self, method: str, endpoint: str, **kwargs) -> Union[Dict, List]:
        """Make a request and return the decoded JSON body.

        Args:
            method: HTTP method
            endpoint: API endpoint (relative to base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response data as dict or list
        """
        response = self._send(method, endpoint, **kwargs)
        if response.text:
            return response.json()
        return {}

    def _next_page(self, response: requests.Response, params: Dict[str, Any]) -> Optional[int]:
        """Return the next page number, or None when done."""
        next_page = response.headers.get('X-Next-Page')
        if next_page:
            return int(next_page)
        return None

    def _paginated_get(self, endpoint: str, **params) -> Iterator[Dict]:
        """Get paginated results.

        Yields:
            Individual items from all pages
        """
        params['per_page'] = self.page_size
        params['page'] = 1

        while True:
            response = self._send('GET', endpoint, params=dict(params))
            data = response.json()

            if not data:
                break

            for item in data:
                yield item

            next_page = self._next_page(response, params)
            if next_page is None:
                break
            params['page'] = next_page
