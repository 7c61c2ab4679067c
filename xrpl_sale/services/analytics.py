"""Service for platform and project analytics."""

from urllib.parse import quote

from xrpl_sale.executor import RequestExecutor
from xrpl_sale.models import MarketTrends, PlatformAnalytics, ProjectAnalytics


class AnalyticsService:
    def __init__(self, executor: RequestExecutor):
        self._executor = executor

    def get_platform_analytics(self) -> PlatformAnalytics:
        return self._executor.execute(
            "GET", "/analytics/platform", response_model=PlatformAnalytics
        )

    def get_project_analytics(self, project_id: str, period: str = "30d") -> ProjectAnalytics:
        """Retrieve time-series analytics for a project.

        Args:
            project_id: The project ID
            period: Time period (``24h``, ``7d``, ``30d``, ``all``)
        """
        return self._executor.execute(
            "GET",
            f"/analytics/projects/{quote(project_id, safe='')}",
            params={"period": period},
            response_model=ProjectAnalytics,
        )

    def get_market_trends(self, period: str = "7d") -> MarketTrends:
        return self._executor.execute(
            "GET", "/analytics/trends", params={"period": period}, response_model=MarketTrends
        )
