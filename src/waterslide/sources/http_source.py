"""
HTTP JSON Source - Pulls records from a JSON HTTP API.

Pages are fetched lazily: nothing is requested until the first item is
pulled, and the next page only when the current one is used up.
Each iteration opens its own requests session, so the source is restartable.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


@dataclass
class HttpSourceConfig:
    """Configuration for the HTTP JSON source."""
    timeout_seconds: int = 30
    max_retries: int = 3
    verify_ssl: bool = True
    user_agent: str = "waterslide/1.0"

    # Response layout
    items_key: Optional[str] = None  # key holding the list when the body is an object
    next_key: Optional[str] = None  # key holding the next page URL
    max_pages: Optional[int] = None

    # Retry settings
    retry_backoff_factor: float = 2.0
    retry_on_status: List[int] = None

    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Set default retry status codes."""
        if self.retry_on_status is None:
            self.retry_on_status = [429, 500, 502, 503, 504]


class HttpSourceError(Exception):
    """Raised when a response does not have the expected layout."""
    pass


class HttpJsonSource:
    """
    Iterable over the records returned by a JSON endpoint.

    The body must be a list of records, or an object holding the list under
    ``config.items_key``. With ``config.next_key`` set, the URL found under
    that key (absolute or relative) is followed until it is missing or null.
    """

    def __init__(self, url: str, config: Optional[HttpSourceConfig] = None):
        self.url = url
        self.config = config or HttpSourceConfig()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.pages_fetched = 0

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        retry_strategy = Retry(
            total=self.config.max_retries,
            backoff_factor=self.config.retry_backoff_factor,
            status_forcelist=self.config.retry_on_status,
            allowed_methods=["GET", "HEAD"],
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({
            'User-Agent': self.config.user_agent,
            'Accept': 'application/json',
        })
        session.headers.update(self.config.headers)
        return session

    def _extract_items(self, payload: Any, url: str) -> List[Any]:
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict) and self.config.items_key:
            items = payload.get(self.config.items_key)
            if isinstance(items, list):
                return items
            raise HttpSourceError(
                f"Expected a list under '{self.config.items_key}' in response from {url}"
            )
        raise HttpSourceError(
            f"Response from {url} is not a list; set items_key to locate the records"
        )

    def _next_url(self, payload: Any, url: str) -> Optional[str]:
        if not self.config.next_key or not isinstance(payload, dict):
            return None
        next_url = payload.get(self.config.next_key)
        return urljoin(url, next_url) if next_url else None

    def __iter__(self) -> Iterator[Any]:
        session = self._create_session()
        url = self.url
        pages = 0
        try:
            while url:
                if self.config.max_pages is not None and pages >= self.config.max_pages:
                    self.logger.debug(f"Stopping after {pages} pages (max_pages)")
                    break

                self.logger.debug(f"Fetching {url}")
                response = session.get(url, timeout=self.config.timeout_seconds,
                                       verify=self.config.verify_ssl)
                response.raise_for_status()
                payload = response.json()
                pages += 1
                self.pages_fetched += 1

                items = self._extract_items(payload, url)
                self.logger.debug(f"Fetched {len(items)} records from {url}")
                yield from items

                url = self._next_url(payload, url)
        finally:
            session.close()

    def __repr__(self) -> str:
        return f"HttpJsonSource(url='{self.url}')"
