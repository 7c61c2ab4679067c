"""Error definitions for the XRPL.Sale SDK."""

import json
from typing import Any, Dict, List, Mapping, Optional


class XRPLSaleError(Exception):
    """Base error class for all SDK errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        body: Optional[str] = None,
    ) -> None:
        """Initialize base error.

        Args:
            message: Error message
            status_code: HTTP status of the failed response, if any
            error_code: Machine-readable error code returned by the API
            details: Optional structured error details
            body: Raw response body text
        """
        super().__init__(message)
        self._message = message
        self._status_code = status_code
        self._error_code = error_code
        self._details = dict(details or {})
        self._body = body

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    @property
    def error_code(self) -> Optional[str]:
        return self._error_code

    @property
    def details(self) -> Dict[str, Any]:
        return dict(self._details)

    @property
    def body(self) -> Optional[str]:
        return self._body

    def __repr__(self) -> str:
        """Return detailed string representation of error."""
        return (
            f"{self.__class__.__name__}({self._message!r}, "
            f"status_code={self._status_code}, error_code={self._error_code!r})"
        )


class ConfigurationError(XRPLSaleError):
    """Use this error when client configuration is invalid."""


class TransportError(XRPLSaleError):
    """Use this error when the request never produced an HTTP response."""


class ParseError(XRPLSaleError):
    """Use this error when a response body does not match the expected shape."""


class APIError(XRPLSaleError):
    """Non-successful HTTP response from the API."""


class AuthenticationError(APIError):
    """401/403 response."""


class NotFoundError(APIError):
    """404 response."""


class ValidationError(APIError):
    """Request rejected with field-level validation errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        body: Optional[str] = None,
        field_errors: Optional[Mapping[str, List[str]]] = None,
    ) -> None:
        super().__init__(message, status_code, error_code, details, body)
        self._field_errors = {field: list(msgs) for field, msgs in (field_errors or {}).items()}

    @property
    def field_errors(self) -> Dict[str, List[str]]:
        """Mapping of field name to validation messages."""
        return {field: list(msgs) for field, msgs in self._field_errors.items()}


class RateLimitError(APIError):
    """429 response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        body: Optional[str] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message, status_code, error_code, details, body)
        self._retry_after = retry_after

    @property
    def retry_after(self) -> Optional[float]:
        """Seconds the server asked us to wait, when it said so."""
        return self._retry_after


def _normalize_field_errors(raw: Any) -> Dict[str, List[str]]:
    if not isinstance(raw, Mapping):
        return {}
    normalized = {}
    for field, messages in raw.items():
        if isinstance(messages, (list, tuple)):
            normalized[str(field)] = [str(m) for m in messages]
        elif messages is not None:
            normalized[str(field)] = [str(messages)]
    return normalized


def _parse_retry_after(headers: Mapping[str, str], payload: Dict[str, Any]) -> Optional[float]:
    value = headers.get("Retry-After") if headers else None
    if value is None:
        value = payload.get("retry_after")
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        # HTTP-date form is not interpreted
        return None


def _parse_error_body(body: str) -> Optional[Dict[str, Any]]:
    """Extract message, code, details and field errors from an error body.

    Accepts both ``{"message", "code", "errors"}`` and
    ``{"error": {"message", "code", "details"}}`` shapes. Returns None when
    the body is not a JSON object.
    """
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None

    error = payload.get("error")
    if isinstance(error, dict):
        source = {**payload, **error}
    else:
        source = dict(payload)
        if isinstance(error, str) and "message" not in source:
            source["message"] = error

    details = source.get("details")
    field_errors = _normalize_field_errors(source.get("errors"))
    if not field_errors and isinstance(details, Mapping):
        field_errors = _normalize_field_errors(details.get("errors") or details.get("fields"))

    code = source.get("code")
    return {
        "payload": payload,
        "message": source.get("message"),
        "code": str(code) if code is not None else None,
        "details": dict(details) if isinstance(details, Mapping) else {},
        "field_errors": field_errors,
    }


def error_from_response(
    status_code: int, body: str, headers: Optional[Mapping[str, str]] = None
) -> APIError:
    """Build the typed error for a final non-successful response.

    When the body is not a JSON object, the error keeps the class chosen by
    the status code (e.g. a 404 is still a NotFoundError, a 502 a plain
    APIError); only the code, details and field errors are missing, and the
    raw body, or ``HTTP <status>`` when empty, becomes the message.

    Args:
        status_code: HTTP status code
        body: Raw response body text
        headers: Response headers

    Returns:
        APIError subclass matching the status code
    """
    headers = headers or {}
    parsed = _parse_error_body(body)

    if parsed is None:
        message = body or f"HTTP {status_code}"
        if status_code in (401, 403):
            return AuthenticationError(message, status_code, body=body)
        if status_code == 404:
            return NotFoundError(message, status_code, body=body)
        if status_code == 422:
            return ValidationError(message, status_code, body=body)
        if status_code == 429:
            return RateLimitError(
                message, status_code, body=body, retry_after=_parse_retry_after(headers, {})
            )
        return APIError(message, status_code, body=body)

    message = parsed["message"] or f"HTTP {status_code}"
    kwargs = {
        "status_code": status_code,
        "error_code": parsed["code"],
        "details": parsed["details"],
        "body": body,
    }
    field_errors = parsed["field_errors"]

    if status_code in (401, 403):
        return AuthenticationError(message, **kwargs)
    if status_code == 404:
        return NotFoundError(message, **kwargs)
    if status_code == 422 or (status_code == 400 and field_errors):
        return ValidationError(message, field_errors=field_errors, **kwargs)
    if status_code == 429:
        return RateLimitError(
            message, retry_after=_parse_retry_after(headers, parsed["payload"]), **kwargs
        )
    return APIError(message, **kwargs)
