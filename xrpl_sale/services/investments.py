"""Service for investments into token sales."""

from decimal import Decimal
from typing import Optional, Union
from urllib.parse import quote

from xrpl_sale.executor import RequestExecutor
from xrpl_sale.models import (
    CreateInvestmentRequest,
    Investment,
    InvestmentListOptions,
    InvestmentSimulation,
    PaginatedResponse,
)


class InvestmentsService:
    """Record and query investments."""

    def __init__(self, executor: RequestExecutor):
        self._executor = executor

    def list(
        self, options: Optional[InvestmentListOptions] = None
    ) -> PaginatedResponse[Investment]:
        params = options.to_params() if options else None
        return self._executor.execute(
            "GET", "/investments", params=params, response_model=PaginatedResponse[Investment]
        )

    def get(self, investment_id: str) -> Investment:
        return self._executor.execute(
            "GET", f"/investments/{quote(investment_id, safe='')}", response_model=Investment
        )

    def create(self, request: CreateInvestmentRequest) -> Investment:
        """Submit an investment into a project.

        Raises:
            ValidationError: If the amount or tier is rejected
        """
        return self._executor.execute(
            "POST", "/investments", json=request.to_payload(), response_model=Investment
        )

    def get_by_project(
        self, project_id: str, page: int = 1, limit: int = 10
    ) -> PaginatedResponse[Investment]:
        return self.list(InvestmentListOptions(project_id=project_id, page=page, limit=limit))

    def get_by_investor(
        self, investor_address: str, page: int = 1, limit: int = 10
    ) -> PaginatedResponse[Investment]:
        return self.list(
            InvestmentListOptions(investor_address=investor_address, page=page, limit=limit)
        )

    def simulate(
        self, project_id: str, amount_xrp: Union[Decimal, str, int]
    ) -> InvestmentSimulation:
        """Preview the tokens an amount of XRP would buy right now.

        Args:
            project_id: The project ID
            amount_xrp: Amount of XRP to invest

        Returns:
            Simulated token amount and tier
        """
        body = {"project_id": project_id, "amount_xrp": str(Decimal(amount_xrp))}
        return self._executor.execute(
            "POST", "/investments/simulate", json=body, response_model=InvestmentSimulation
        )
