"""
Remote Resource Gateway

Builds and sends one request to the Aura management API and decodes the
``{"data": ...}`` success envelope or the ``{"errors": [...]}`` error envelope.
Which envelope is read is decided by the HTTP status code alone.
"""

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

import requests

from . import __version__
from .auth import AuthProvider, get_auth_provider
from .config import AuraConfig
from .constants import AUTHORIZATION_BEARER_PREFIX, CONTENT_TYPE_JSON, USER_AGENT_PRODUCT
from .exceptions import MalformedErrorResponse, MalformedResponse, RemoteError, TransportError

logger = logging.getLogger(__name__)

ResponseData = Union[Dict[str, Any], List[Any], None]
QueryParams = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]


def _query_value(key: str, value: Any) -> str:
    if value is None:
        raise ValueError(f"Query parameter '{key}' has no value")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Request:
    """One management API request. Never mutated after construction."""
    method: str
    path: str
    query: Tuple[Tuple[str, str], ...] = ()
    body: Optional[Dict[str, Any]] = None

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        query: QueryParams = None,
        body: Optional[Dict[str, Any]] = None
    ) -> "Request":
        """
        Build a request.

        Query parameters keep the order supplied. A repeated key keeps the
        position of its first occurrence and the value of its last. Booleans
        are sent as ``true``/``false``.

        Args:
            method: HTTP method
            path: Path relative to the configured base URL
            query: Mapping or sequence of (key, value) pairs
            body: JSON body, or None to send no payload

        Raises:
            ValueError: If a query value is None
        """
        pairs = query.items() if isinstance(query, Mapping) else (query or ())
        merged: Dict[str, str] = {}
        for key, value in pairs:
            merged[key] = _query_value(key, value)
        return cls(
            method=method.upper(),
            path=path,
            query=tuple(merged.items()),
            body=copy.deepcopy(body) if body is not None else None
        )


def build_url(base_url: str, path: str, query: Tuple[Tuple[str, str], ...] = ()) -> str:
    """
    Join the base URL and a request path, then append query parameters.

    Args:
        base_url: e.g. https://api.neo4j.io/v1
        path: e.g. /instances/abc
        query: Ordered (key, value) pairs

    Returns:
        Full request URL
    """
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    if query:
        url = f"{url}?{urlencode(list(query))}"
    return url


def is_successful(status_code: int) -> bool:
    """Any 2xx status is a success."""
    return 200 <= status_code < 300


def _new_session() -> requests.Session:
    session = requests.Session()
    # Only the gateway's own headers are sent
    session.headers.clear()
    return session


class ResourceGateway:
    """
    Sends requests to the Aura management API.

    Each call issues exactly one HTTP request. Transport failures are never
    retried here.
    """

    def __init__(
        self,
        config: AuraConfig,
        auth_provider: Optional[AuthProvider] = None,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None
    ):
        """
        Initialize gateway.

        Args:
            config: CLI configuration (base URL is read from it)
            auth_provider: Token provider (derived from config if not provided)
            session: Optional requests session (created if not provided)
            user_agent: Override for the User-Agent header
        """
        self.config = config
        self.auth_provider = auth_provider or get_auth_provider(config)
        self.session = session or _new_session()
        self.user_agent = user_agent or f"{USER_AGENT_PRODUCT}/{__version__}"

    def _headers(self) -> Dict[str, str]:
        """Get the three headers every request carries."""
        return {
            'Content-Type': CONTENT_TYPE_JSON,
            'Authorization': f'{AUTHORIZATION_BEARER_PREFIX} {self.auth_provider.get_token()}',
            'User-Agent': self.user_agent
        }

    def send(self, request: Request) -> Tuple[ResponseData, int]:
        """
        Send a request and decode its response envelope.

        Args:
            request: The request to send

        Returns:
            Tuple of (data member of the success envelope, HTTP status code)

        Raises:
            TransportError: Network level failure
            MalformedResponse: 2xx with an undecodable body
            MalformedErrorResponse: non-2xx with an undecodable error body
            RemoteError: non-2xx with an error envelope
            AuthError: No usable token
        """
        url = build_url(self.config.base_url, request.path, request.query)
        headers = self._headers()
        payload = None
        if request.body is not None:
            payload = json.dumps(request.body).encode('utf-8')

        logger.debug("%s %s", request.method, url)
        try:
            response = self.session.request(request.method, url, data=payload, headers=headers)
        except requests.RequestException as e:
            raise TransportError(request.method, url, str(e)) from e
        logger.debug("%s %s -> HTTP %s", request.method, url, response.status_code)

        if is_successful(response.status_code):
            return self._decode_data(response), response.status_code

        raise self._decode_error(response)

    def _decode_data(self, response: requests.Response) -> ResponseData:
        """Decode the data member of a success envelope."""
        status_code = response.status_code
        try:
            text = response.content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedResponse(status_code, f"body is not UTF-8: {e}") from e

        if not text.strip():
            return None

        try:
            envelope = json.loads(text)
        except ValueError as e:
            raise MalformedResponse(status_code, f"body is not valid JSON: {e}", text) from e

        if not isinstance(envelope, dict) or 'data' not in envelope:
            raise MalformedResponse(status_code, "body has no 'data' member", text)

        data = envelope['data']
        if data is not None and not isinstance(data, (dict, list)):
            raise MalformedResponse(
                status_code, f"'data' is a {type(data).__name__}, expected an object or array", text
            )
        return data

    def _decode_error(self, response: requests.Response) -> Exception:
        """Decode an error envelope into the exception to raise."""
        status_code = response.status_code
        text = response.content.decode('utf-8', errors='replace')

        try:
            envelope = json.loads(text)
        except ValueError:
            return MalformedErrorResponse(status_code, "body is not valid JSON", text)

        errors = envelope.get('errors') if isinstance(envelope, dict) else None
        if not isinstance(errors, list) or not all(isinstance(e, dict) for e in errors):
            return MalformedErrorResponse(status_code, "body has no 'errors' array", text)

        messages = [str(e.get('message', '')) for e in errors]
        return RemoteError(status_code, messages, errors)

    def get(self, path: str, query: QueryParams = None) -> Tuple[ResponseData, int]:
        """Send a GET request."""
        return self.send(Request.build('GET', path, query=query))

    def post(self, path: str, body: Optional[Dict[str, Any]] = None,
             query: QueryParams = None) -> Tuple[ResponseData, int]:
        """Send a POST request."""
        return self.send(Request.build('POST', path, query=query, body=body))

    def patch(self, path: str, body: Optional[Dict[str, Any]] = None) -> Tuple[ResponseData, int]:
        """Send a PATCH request."""
        return self.send(Request.build('PATCH', path, body=body))

    def delete(self, path: str) -> Tuple[ResponseData, int]:
        """Send a DELETE request."""
        return self.send(Request.build('DELETE', path))
