# scopus_fetcher/scopus_client.py
"""
Client for the Scopus Search API.
"""
import html
import json
import logging
from urllib.parse import quote

import requests

from . import config
from .exceptions import DecodeError, NetworkError, UpstreamError
from .types import ScopusResponse

log = logging.getLogger(__name__)


def create_session() -> requests.Session:
    """Builds a plain session. No retrying adapter is mounted."""
    session = requests.Session()
    session.headers["User-Agent"] = config.USER_AGENT
    return session


def normalize_escapes(text: str) -> str:
    """
    Replaces literal unicode escapes of HTML-special characters, then
    unescapes HTML entities over the whole body.
    """
    for escaped, literal in config.ESCAPE_REPLACEMENTS:
        text = text.replace(escaped, literal)
    return html.unescape(text)


class ScopusClient:
    """
    Looks up DOIs one request at a time against the Scopus search endpoint.
    """

    def __init__(
        self,
        api_key: str,
        session: requests.Session | None = None,
        timeout: float | None = config.REQUEST_TIMEOUT,
    ):
        self.api_key = api_key
        self._owns_session = session is None
        self.session = session or create_session()
        self.timeout = timeout
        self.api_url = config.SCOPUS_SEARCH_URL

    def close(self) -> None:
        """Closes the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "ScopusClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def build_url(self, doi: str) -> str:
        # Both values are percent-encoded so reserved characters cannot
        # leak into the query string.
        return (
            f"{self.api_url}?query=DOI({quote(doi, safe='')})"
            f"&apiKey={quote(self.api_key, safe='')}"
            f"&httpAccept=application/json"
        )

    def _masked(self, url: str) -> str:
        return url.replace(quote(self.api_key, safe=""), "***") if self.api_key else url

    def fetch(self, doi: str) -> ScopusResponse:
        """
        Gets the search response for a DOI.

        Raises NetworkError, UpstreamError or DecodeError; never retries.
        """
        url = self.build_url(doi)
        log.debug("Requesting %s", self._masked(url))

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"Request to Scopus API failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise UpstreamError(response.status_code)

        body = normalize_escapes(response.content.decode("utf-8", errors="replace"))

        try:
            data = json.loads(body)
            return ScopusResponse.model_validate(data)
        except ValueError as e:
            raise DecodeError(f"Could not decode Scopus response: {e}") from e
