"""Service for managing webhook endpoint registrations."""

from typing import Any, Dict, List
from urllib.parse import quote

from xrpl_sale.executor import RequestExecutor
from xrpl_sale.models import CreateWebhookRequest, PaginatedResponse, Webhook, WebhookDelivery


def _webhook_path(webhook_id: str, *parts: str) -> str:
    return "/".join(["/webhooks", quote(webhook_id, safe=""), *parts])


class WebhooksService:
    """Register endpoints that receive platform events.

    Verifying and dispatching inbound deliveries is handled by
    :class:`xrpl_sale.webhooks.WebhookReceiver`.
    """

    def __init__(self, executor: RequestExecutor):
        self._executor = executor

    def list(self) -> List[Webhook]:
        return self._executor.execute("GET", "/webhooks", response_model=List[Webhook])

    def get(self, webhook_id: str) -> Webhook:
        return self._executor.execute("GET", _webhook_path(webhook_id), response_model=Webhook)

    def create(self, request: CreateWebhookRequest) -> Webhook:
        return self._executor.execute(
            "POST", "/webhooks", json=request.to_payload(), response_model=Webhook
        )

    def update(self, webhook_id: str, updates: Dict[str, Any]) -> Webhook:
        return self._executor.execute(
            "PATCH", _webhook_path(webhook_id), json=updates, response_model=Webhook
        )

    def delete(self, webhook_id: str) -> None:
        self._executor.execute("DELETE", _webhook_path(webhook_id))

    def test(self, webhook_id: str) -> WebhookDelivery:
        """Ask the platform to send a test event to the endpoint."""
        return self._executor.execute(
            "POST", _webhook_path(webhook_id, "test"), json={}, response_model=WebhookDelivery
        )

    def get_deliveries(
        self, webhook_id: str, page: int = 1, limit: int = 10
    ) -> PaginatedResponse[WebhookDelivery]:
        return self._executor.execute(
            "GET",
            _webhook_path(webhook_id, "deliveries"),
            params={"page": page, "limit": limit},
            response_model=PaginatedResponse[WebhookDelivery],
        )
