"""Data models for XRPL.Sale API resources."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class APIModel(BaseModel):
    """Base for response models.

    Unknown fields are kept so newer API versions do not break parsing.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class ProjectStatus(str, Enum):
    """Lifecycle status of a token sale project."""

    DRAFT = "draft"
    UPCOMING = "upcoming"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InvestmentStatus(str, Enum):
    """Status of an investment transaction."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    REFUNDED = "refunded"


class Tier(APIModel):
    """Pricing tier of a token sale."""

    id: Optional[str] = None
    tier: int
    price_per_token: Decimal
    total_tokens: Decimal
    tokens_sold: Decimal = Decimal("0")
    is_active: bool = False
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class Project(APIModel):
    """Token sale project."""

    id: str
    name: str
    description: Optional[str] = None
    token_symbol: str
    total_supply: Optional[Decimal] = None
    status: ProjectStatus
    total_raised: Decimal = Decimal("0")
    investor_count: int = 0
    tiers: List[Tier] = Field(default_factory=list)
    website: Optional[str] = None
    whitepaper: Optional[str] = None
    social_links: Dict[str, str] = Field(default_factory=dict)
    sale_start_date: Optional[datetime] = None
    sale_end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectStats(APIModel):
    """Aggregated statistics for one project."""

    project_id: str
    total_raised: Decimal = Decimal("0")
    total_investors: int = 0
    tokens_sold: Decimal = Decimal("0")
    average_investment: Optional[Decimal] = None
    completion_percentage: float = 0.0
    current_tier: Optional[int] = None


class Investor(APIModel):
    """Investor in a project."""

    address: str
    total_invested: Decimal = Decimal("0")
    tokens_purchased: Decimal = Decimal("0")
    investment_count: int = 0
    first_investment_at: Optional[datetime] = None


class Investment(APIModel):
    """Single investment made into a project."""

    id: str
    project_id: str
    investor_address: str
    amount_xrp: Decimal
    token_amount: Optional[Decimal] = None
    tier: Optional[int] = None
    status: InvestmentStatus
    transaction_hash: Optional[str] = None
    created_at: Optional[datetime] = None


class InvestmentSimulation(APIModel):
    """Projected outcome of investing an amount into a project."""

    project_id: str
    amount_xrp: Decimal
    token_amount: Decimal
    price_per_token: Optional[Decimal] = None
    tier: Optional[int] = None


class Pagination(APIModel):
    """Pagination metadata of a list response."""

    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 0


class PaginatedResponse(APIModel, Generic[T]):
    """Page of results."""

    data: List[T] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)

    @property
    def has_next(self) -> bool:
        return self.pagination.page < self.pagination.total_pages


class PlatformAnalytics(APIModel):
    """Platform-wide totals."""

    total_projects: int = 0
    active_projects: int = 0
    total_raised: Decimal = Decimal("0")
    total_investors: int = 0
    total_investments: int = 0


class ProjectAnalytics(APIModel):
    """Time-series analytics for one project."""

    project_id: str
    period: str
    total_raised: Decimal = Decimal("0")
    new_investors: int = 0
    investments: int = 0
    data_points: List[Dict[str, Any]] = Field(default_factory=list)


class MarketTrends(APIModel):
    period: str
    trending_projects: List[Project] = Field(default_factory=list)
    metrics: Dict[str, Any] = Field(default_factory=dict)


class Webhook(APIModel):
    """Registered webhook endpoint."""

    id: str
    url: str
    events: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None


class WebhookDelivery(APIModel):
    """Delivery attempt of an event to a webhook endpoint."""

    id: str
    webhook_id: str
    event_type: str
    status_code: Optional[int] = None
    success: bool = False
    attempted_at: Optional[datetime] = None


class AuthChallenge(APIModel):
    challenge: str
    expires_at: Optional[datetime] = None


class AuthResponse(APIModel):
    """Result of a wallet authentication exchange."""

    token: str
    expires_at: Optional[datetime] = None
    wallet_address: Optional[str] = None


class WebhookEvent(APIModel):
    """Event delivered to a webhook endpoint.

    ``type`` is kept as a plain string so unknown event types still parse.
    """

    id: Optional[str] = None
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


# Request bodies


class RequestModel(BaseModel):
    """Base for request bodies; rejects misspelled fields."""

    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class CreateProjectRequest(RequestModel):
    name: str
    description: str
    token_symbol: str
    total_supply: Decimal
    tiers: List[Tier] = Field(default_factory=list)
    sale_start_date: Optional[datetime] = None
    sale_end_date: Optional[datetime] = None
    website: Optional[str] = None
    whitepaper: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None


class CreateInvestmentRequest(RequestModel):
    project_id: str
    amount_xrp: Decimal
    investor_account: str
    tier: Optional[int] = None


class CreateWebhookRequest(RequestModel):
    url: str
    events: List[str]
    secret: Optional[str] = None


class AuthRequest(RequestModel):
    """Signed wallet challenge used to obtain a bearer token."""

    wallet_address: str
    signature: str
    timestamp: int


# Query options


class ListOptions(RequestModel):
    """Pagination query parameters."""

    page: Optional[int] = Field(None, ge=1)
    limit: Optional[int] = Field(None, ge=1)

    def to_params(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ProjectListOptions(ListOptions):
    status: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


class ProjectSearchOptions(ListOptions):
    status: Optional[str] = None


class InvestmentListOptions(ListOptions):
    project_id: Optional[str] = None
    investor_address: Optional[str] = None
    status: Optional[str] = None
