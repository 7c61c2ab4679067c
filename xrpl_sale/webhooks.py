"""Inbound webhook parsing, verification and dispatch."""

import threading
from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from xrpl_sale.errors import ParseError
from xrpl_sale.models import WebhookEvent
from xrpl_sale.signature import SIGNATURE_HEADER, verify_signature

logger = structlog.get_logger(__name__)

EventHandler = Callable[[WebhookEvent], None]


class WebhookEventType(str, Enum):
    """Event types the SDK knows about."""

    INVESTMENT_CREATED = "investment.created"
    INVESTMENT_CONFIRMED = "investment.confirmed"
    PROJECT_LAUNCHED = "project.launched"
    PROJECT_COMPLETED = "project.completed"
    TIER_COMPLETED = "tier.completed"
    UNKNOWN = "unknown"

    @classmethod
    def from_value(cls, value: str) -> "WebhookEventType":
        try:
            event_type = cls(value)
        except ValueError:
            return cls.UNKNOWN
        return event_type


def event_type_of(event: WebhookEvent) -> WebhookEventType:
    """Known type of an event, or ``UNKNOWN``."""
    return WebhookEventType.from_value(event.type)


def parse_webhook_event(payload: Union[bytes, str]) -> WebhookEvent:
    """Parse a webhook event from the raw request body.

    Args:
        payload: Raw JSON body

    Returns:
        Parsed event; unknown ``type`` values are accepted

    Raises:
        ParseError: If the body is not a JSON object with a ``type`` field
    """
    try:
        return WebhookEvent.model_validate_json(payload)
    except PydanticValidationError as e:
        raise ParseError(f"Failed to parse webhook event: {e}") from e


class WebhookDispatcher:
    """Routes events to handlers registered per event type.

    Events of unknown type go to the ``UNKNOWN`` handlers when any are
    registered and are otherwise ignored.
    """

    def __init__(self):
        self._handlers: Dict[WebhookEventType, List[EventHandler]] = defaultdict(list)
        self._lock = threading.Lock()

    def register(self, event_type: Union[WebhookEventType, str], handler: EventHandler) -> None:
        event_type = WebhookEventType(event_type)
        with self._lock:
            self._handlers[event_type].append(handler)

    def on(
        self, event_type: Union[WebhookEventType, str]
    ) -> Callable[[EventHandler], EventHandler]:
        """Register the decorated function as a handler for ``event_type``.

        Example:
            >>> dispatcher = WebhookDispatcher()
            >>> @dispatcher.on(WebhookEventType.INVESTMENT_CREATED)
            ... def handle(event):
            ...     print(event.data["amount_xrp"])
        """

        def decorator(handler: EventHandler) -> EventHandler:
            self.register(event_type, handler)
            return handler

        return decorator

    def handlers_for(self, event_type: WebhookEventType) -> List[EventHandler]:
        with self._lock:
            return list(self._handlers.get(event_type, ()))

    def dispatch(self, event: WebhookEvent) -> int:
        """Call every handler registered for the event's type.

        Handler exceptions propagate to the caller.

        Returns:
            Number of handlers called
        """
        event_type = event_type_of(event)
        handlers = self.handlers_for(event_type)
        if event_type is WebhookEventType.UNKNOWN:
            logger.info("webhook_event_unknown_type", event_type=event.type, event_id=event.id)
        elif not handlers:
            logger.debug("webhook_event_unhandled", event_type=event.type, event_id=event.id)

        for handler in handlers:
            handler(event)
        return len(handlers)


class WebhookReceiver:
    """Verifies and dispatches webhook deliveries from any web framework.

    Example:
        >>> receiver = WebhookReceiver(secret="whsec", dispatcher=dispatcher)
        >>> event = receiver.receive(request.body, request.headers)
        >>> if event is None:
        ...     return 401
    """

    def __init__(
        self,
        secret: Optional[str],
        dispatcher: Optional[WebhookDispatcher] = None,
        signature_header: str = SIGNATURE_HEADER,
    ):
        self.secret = secret
        self.dispatcher = dispatcher or WebhookDispatcher()
        self.signature_header = signature_header

    def _signature_from(self, headers: Mapping[str, str]) -> Optional[str]:
        wanted = self.signature_header.lower()
        for name, value in headers.items():
            if name.lower() == wanted:
                return value
        return None

    def receive(
        self, body: Union[bytes, str], headers: Mapping[str, str]
    ) -> Optional[WebhookEvent]:
        """Verify the signature header, then parse and dispatch the event.

        Args:
            body: Raw request body, exactly as received
            headers: Request headers

        Returns:
            The dispatched event, or None when the signature is missing or
            does not match

        Raises:
            ParseError: If a correctly signed body is not a valid event
        """
        signature = self._signature_from(headers)
        if not verify_signature(body, self.secret, signature):
            logger.warning("webhook_signature_invalid", has_signature=signature is not None)
            return None

        event = parse_webhook_event(body)
        handled = self.dispatcher.dispatch(event)
        logger.info(
            "webhook_event_received", event_type=event.type, event_id=event.id, handlers=handled
        )
        return event
