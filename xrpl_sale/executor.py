"""Authenticated request execution against the XRPL.Sale API."""

import threading
import time
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

import requests
import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from xrpl_sale.config import ClientConfig
from xrpl_sale.errors import ParseError, error_from_response
from xrpl_sale.metrics import REQUEST_LATENCY, REQUESTS_TOTAL
from xrpl_sale.retry import RetryPolicy, RetryState
from xrpl_sale.version import __version__

logger = structlog.get_logger(__name__)

USER_AGENT = f"XRPL.Sale-Python-SDK/{__version__}"


@lru_cache(maxsize=None)
def _type_adapter(response_model: Any) -> TypeAdapter:
    return TypeAdapter(response_model)


class RequestExecutor:
    """Sends requests with credentials, retries and typed error mapping.

    The bearer token is the only mutable state and is shared by every
    request issued through this executor.
    """

    def __init__(
        self,
        config: ClientConfig,
        session: Optional[requests.Session] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        """Initialize the executor.

        Args:
            config: Client configuration
            session: Optional requests session; one is created if omitted
            retry_policy: Optional retry policy; built from config if omitted
        """
        self.config = config
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.retry_policy = retry_policy or RetryPolicy(
            max_retries=config.max_retries, base_delay=config.retry_delay
        )
        self._auth_token: Optional[str] = None
        self._token_lock = threading.Lock()

    @property
    def auth_token(self) -> Optional[str]:
        with self._token_lock:
            return self._auth_token

    def set_auth_token(self, token: Optional[str]) -> None:
        """Set the bearer token used by subsequent requests."""
        with self._token_lock:
            self._auth_token = token or None

    def clear_auth_token(self) -> None:
        self.set_auth_token(None)

    def build_headers(self) -> Dict[str, str]:
        """Default headers plus exactly one credential header, if any."""
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        token = self.auth_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        elif self.config.api_key:
            headers["X-API-Key"] = self.config.api_key
        return headers

    def _timeout(self, has_body: bool) -> Tuple[float, float]:
        # requests applies one socket timeout to both sending and receiving
        socket_timeout = self.config.read_timeout
        if has_body:
            socket_timeout = max(socket_timeout, self.config.write_timeout)
        return (self.config.connect_timeout, socket_timeout)

    def send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        retry_state: Optional[RetryState] = None,
    ) -> requests.Response:
        """Send a request through the retry policy.

        Args:
            method: HTTP method
            path: Endpoint path relative to the base URL
            params: Query parameters; ``None`` values are dropped
            json: JSON-serializable request body
            retry_state: Optional state object recording attempts

        Returns:
            The successful (2xx) response

        Raises:
            APIError: If the final response is not successful
            TransportError: If no response could be obtained
        """
        method = method.upper()
        url = f"{self.config.resolved_base_url}/{path.lstrip('/')}"
        headers = self.build_headers()
        query = {k: v for k, v in (params or {}).items() if v is not None} or None
        timeout = self._timeout(json is not None)

        if self.config.debug:
            logger.debug("api_request", method=method, url=url, params=query, body=json)

        def attempt() -> requests.Response:
            start_time = time.time()
            try:
                response = self.session.request(
                    method, url, params=query, json=json, headers=headers, timeout=timeout
                )
            except requests.exceptions.RequestException:
                REQUESTS_TOTAL.labels(method=method, status="error").inc()
                raise
            REQUEST_LATENCY.observe(time.time() - start_time)
            REQUESTS_TOTAL.labels(method=method, status=str(response.status_code)).inc()
            return response

        response = self.retry_policy.execute(attempt, retry_state)

        if self.config.debug:
            logger.debug(
                "api_response",
                method=method,
                url=url,
                status=response.status_code,
                body=response.text[:1000],
            )

        if not 200 <= response.status_code < 300:
            error = error_from_response(response.status_code, response.text, response.headers)
            logger.error(
                "api_request_failed",
                method=method,
                url=url,
                status=response.status_code,
                error_type=type(error).__name__,
                error_code=error.error_code,
            )
            raise error

        return response

    def execute(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        response_model: Any = None,
        retry_state: Optional[RetryState] = None,
    ) -> Any:
        """Send a request and deserialize the response body.

        Args:
            method: HTTP method
            path: Endpoint path relative to the base URL
            params: Query parameters
            json: JSON-serializable request body
            response_model: Type to validate the body into, e.g. ``Project``
                or ``List[Tier]``; the decoded JSON is returned when omitted
            retry_state: Optional state object recording attempts

        Returns:
            Parsed response, or None for an empty body

        Raises:
            APIError: If the final response is not successful
            TransportError: If no response could be obtained
            ParseError: If the body does not match ``response_model``
        """
        response = self.send(method, path, params=params, json=json, retry_state=retry_state)
        return self.parse(response, response_model)

    def parse(self, response: requests.Response, response_model: Any = None) -> Any:
        """Decode a successful response into ``response_model``."""
        if not response.content or not response.content.strip():
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(
                f"Failed to parse response: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        if response_model is None:
            return data

        try:
            return _type_adapter(response_model).validate_python(data)
        except PydanticValidationError as e:
            raise ParseError(
                f"Response does not match {getattr(response_model, '__name__', response_model)}",
                status_code=response.status_code,
                details={"errors": e.errors(include_url=False)},
                body=response.text,
            ) from e

    def close(self) -> None:
        """Close the session if this executor created it."""
        if self._owns_session:
            self.session.close()
