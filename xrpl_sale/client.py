"""Main XRPL.Sale client."""

from typing import Any, Optional, Union

import requests
import structlog

from xrpl_sale.config import ClientConfig
from xrpl_sale.executor import RequestExecutor
from xrpl_sale.models import WebhookEvent
from xrpl_sale.retry import RetryPolicy
from xrpl_sale.services import (
    AnalyticsService,
    AuthService,
    InvestmentsService,
    ProjectsService,
    WebhooksService,
)
from xrpl_sale.signature import verify_signature
from xrpl_sale.webhooks import WebhookDispatcher, WebhookReceiver, parse_webhook_event

logger = structlog.get_logger(__name__)


class XRPLSaleClient:
    """Client for the XRPL.Sale platform API.

    Gives access to projects, investments, analytics, webhook registrations
    and wallet authentication, and verifies inbound webhook signatures.

    Example:
        >>> client = XRPLSaleClient(api_key="your-api-key", environment="testnet")
        >>> page = client.projects.get_active(page=1, limit=10)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        session: Optional[requests.Session] = None,
        retry_policy: Optional[RetryPolicy] = None,
        **options: Any,
    ):
        """Initialize the client.

        Args:
            config: Complete client configuration
            session: Optional requests session to share connection pools
            retry_policy: Optional retry policy overriding the configured one
            **options: ``ClientConfig`` fields, used when ``config`` is omitted
        """
        if config is not None and options:
            raise TypeError("Pass either a ClientConfig or keyword options, not both")
        self.config = config if config is not None else ClientConfig(**options)
        self._executor = RequestExecutor(self.config, session=session, retry_policy=retry_policy)

        self.projects = ProjectsService(self._executor)
        self.investments = InvestmentsService(self._executor)
        self.analytics = AnalyticsService(self._executor)
        self.webhooks = WebhooksService(self._executor)
        self.auth = AuthService(self._executor)

        logger.debug(
            "client_initialized",
            base_url=self.config.resolved_base_url,
            environment=self.config.environment.value,
            max_retries=self.config.max_retries,
        )

    @classmethod
    def create(cls, api_key: str) -> "XRPLSaleClient":
        """Create a production client with just an API key."""
        return cls(api_key=api_key)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "XRPLSaleClient":
        """Create a client configured from ``XRPLSALE_*`` environment variables."""
        return cls(ClientConfig.from_env(), **kwargs)

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    @property
    def auth_token(self) -> Optional[str]:
        return self._executor.auth_token

    def set_auth_token(self, token: Optional[str]) -> None:
        """Use ``token`` as bearer credential for subsequent requests."""
        self._executor.set_auth_token(token)

    def verify_webhook_signature(
        self, payload: Union[bytes, str], signature: Optional[str]
    ) -> bool:
        """Verify a webhook signature against the configured webhook secret.

        Returns False when no webhook secret is configured.
        """
        return verify_signature(payload, self.config.webhook_secret, signature)

    def parse_webhook_event(self, payload: Union[bytes, str]) -> WebhookEvent:
        return parse_webhook_event(payload)

    def webhook_receiver(self, dispatcher: Optional[WebhookDispatcher] = None) -> WebhookReceiver:
        """Receiver that checks deliveries against the configured webhook secret."""
        return WebhookReceiver(self.config.webhook_secret, dispatcher=dispatcher)

    def close(self) -> None:
        self._executor.close()

    def __enter__(self) -> "XRPLSaleClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
