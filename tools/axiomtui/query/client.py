"""
HTTP query client for the observability service.

This module is the only place that knows how to reach the remote
endpoint. The TUI hands it a query string and gets back a QueryResult,
or a QueryError describing why it couldn't.

Purpose:
    The controller treats a query as an opaque, blocking call. Keeping
    credentials, URL handling and response decoding here means the rest
    of the program never touches HTTP.

Design Decisions:
    - Configuration comes from the environment (AXIOM_TOKEN,
      AXIOM_ORG_ID, AXIOM_URL), validated once at construction time
    - A single requests.Session is reused so refreshes share a connection
    - Every failure mode (network, HTTP status, bad JSON) surfaces as
      QueryError so the caller has exactly one exception to catch
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from .. import __version__
from .result import QueryResult

DEFAULT_URL = "https://api.axiom.co"
DEFAULT_TIMEOUT = 60.0

# Personal tokens are scoped to a user, so the service also needs to know
# which organization the request is for
PERSONAL_TOKEN_PREFIX = "xapt-"

QUERY_PATH = "/v1/datasets/_apl"


class AxiomTuiError(Exception):
    """Base class for errors raised by axiomtui."""


class ClientConfigError(AxiomTuiError):
    """The client could not be constructed from the given configuration."""


class QueryError(AxiomTuiError):
    """
    A query could not be completed.

    Attributes:
        status_code: HTTP status of the failed response, if there was one.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class ClientConfig:
    """
    Connection settings for the query service.

    Attributes:
        token: API or personal token.
        org_id: Organization identifier (required for personal tokens).
        url: Base URL of the service.
        timeout: Per-request timeout in seconds.
    """
    token: str
    org_id: Optional[str] = None
    url: str = DEFAULT_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ=None, timeout: float = DEFAULT_TIMEOUT) -> "ClientConfig":
        """
        Build a config from AXIOM_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ).
            timeout: Request timeout in seconds.

        Returns:
            ClientConfig: A validated configuration.

        Raises:
            ClientConfigError: If a required variable is missing or invalid.
        """
        env = os.environ if environ is None else environ
        config = cls(
            token=(env.get("AXIOM_TOKEN") or "").strip(),
            org_id=(env.get("AXIOM_ORG_ID") or "").strip() or None,
            url=(env.get("AXIOM_URL") or "").strip() or DEFAULT_URL,
            timeout=timeout,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ClientConfigError if this configuration can't work."""
        if not self.token:
            raise ClientConfigError("AXIOM_TOKEN is not set")

        if self.token.startswith(PERSONAL_TOKEN_PREFIX) and not self.org_id:
            raise ClientConfigError(
                "AXIOM_ORG_ID is required when using a personal token"
            )

        parsed = urlparse(self.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ClientConfigError(f"AXIOM_URL is not a valid http(s) URL: {self.url}")

        if self.timeout <= 0:
            raise ClientConfigError("timeout must be positive")


class QueryClient:
    """
    Runs queries against the service and decodes the responses.

    Attributes:
        config: The validated connection settings.
        session: The requests session used for every call.

    Example:
        >>> client = QueryClient(ClientConfig.from_env())
        >>> result = client.query("['logs'] | summarize count() by bin_auto(_time)")
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        config.validate()
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update(self._headers())

    @classmethod
    def from_env(cls, timeout: float = DEFAULT_TIMEOUT) -> "QueryClient":
        return cls(ClientConfig.from_env(timeout=timeout))

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"axiomtui/{__version__}",
        }
        if self.config.org_id:
            headers["X-Axiom-Org-Id"] = self.config.org_id
        return headers

    @property
    def endpoint(self) -> str:
        return self.config.url.rstrip("/") + QUERY_PATH

    def query(self, apl: str) -> QueryResult:
        """
        Run a query and return its decoded result.

        This call blocks until the service answers or the timeout expires,
        so the TUI runs it on a worker thread.

        Args:
            apl: The query text.

        Returns:
            QueryResult: The decoded response.

        Raises:
            QueryError: On network failure, an error status, or a body
                        that isn't a valid result.
        """
        try:
            resp = self.session.post(
                self.endpoint,
                params={"format": "legacy"},
                json={"apl": apl},
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            raise QueryError(f"request failed: {exc}") from exc

        if resp.status_code >= 400:
            raise QueryError(_error_message(resp), status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise QueryError("response is not valid JSON", status_code=resp.status_code) from exc

        try:
            return QueryResult.from_dict(payload)
        except (ValueError, TypeError, AttributeError) as exc:
            raise QueryError(f"unexpected response shape: {exc}", status_code=resp.status_code) from exc

    def close(self) -> None:
        self.session.close()


def _error_message(resp: requests.Response) -> str:
    """Pull a human-readable message out of an error response."""
    body: Any = None
    try:
        body = resp.json()
    except ValueError:
        pass

    if isinstance(body, dict):
        for key in ("message", "error"):
            if body.get(key):
                return f"HTTP {resp.status_code}: {body[key]}"

    return f"HTTP {resp.status_code}"
