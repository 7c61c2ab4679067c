"""Service for managing token sale projects."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from xrpl_sale.executor import RequestExecutor
from xrpl_sale.models import (
    CreateProjectRequest,
    Investor,
    PaginatedResponse,
    Project,
    ProjectListOptions,
    ProjectSearchOptions,
    ProjectStats,
    Tier,
)


def _project_path(project_id: str, *parts: str) -> str:
    return "/".join(["/projects", quote(project_id, safe=""), *parts])


class ProjectsService:
    """Create, update, launch and inspect token sale projects.

    Every method raises an ``XRPLSaleError`` subclass when the request fails.
    """

    def __init__(self, executor: RequestExecutor):
        self._executor = executor

    def list(self, options: Optional[ProjectListOptions] = None) -> PaginatedResponse[Project]:
        """List projects with optional filtering and pagination.

        Args:
            options: Status filter, pagination and sorting

        Returns:
            Page of projects
        """
        params = options.to_params() if options else None
        return self._executor.execute(
            "GET", "/projects", params=params, response_model=PaginatedResponse[Project]
        )

    def get_active(self, page: int = 1, limit: int = 10) -> PaginatedResponse[Project]:
        return self.list(ProjectListOptions(status="active", page=page, limit=limit))

    def get_upcoming(self, page: int = 1, limit: int = 10) -> PaginatedResponse[Project]:
        return self.list(ProjectListOptions(status="upcoming", page=page, limit=limit))

    def get_completed(self, page: int = 1, limit: int = 10) -> PaginatedResponse[Project]:
        return self.list(ProjectListOptions(status="completed", page=page, limit=limit))

    def get(self, project_id: str) -> Project:
        """Retrieve a project by ID.

        Raises:
            NotFoundError: If the project does not exist
        """
        return self._executor.execute("GET", _project_path(project_id), response_model=Project)

    def create(self, request: CreateProjectRequest) -> Project:
        """Create a new project.

        Raises:
            ValidationError: If the API rejects the project fields
        """
        return self._executor.execute(
            "POST", "/projects", json=request.to_payload(), response_model=Project
        )

    def update(self, project_id: str, updates: Dict[str, Any]) -> Project:
        """Partially update a project.

        Args:
            project_id: The project ID
            updates: Fields to change
        """
        return self._executor.execute(
            "PATCH", _project_path(project_id), json=updates, response_model=Project
        )

    def _transition(self, project_id: str, action: str) -> Project:
        return self._executor.execute(
            "POST", _project_path(project_id, action), json={}, response_model=Project
        )

    def launch(self, project_id: str) -> Project:
        """Launch a project, making it active."""
        return self._transition(project_id, "launch")

    def pause(self, project_id: str) -> Project:
        return self._transition(project_id, "pause")

    def resume(self, project_id: str) -> Project:
        return self._transition(project_id, "resume")

    def cancel(self, project_id: str) -> Project:
        return self._transition(project_id, "cancel")

    def get_stats(self, project_id: str) -> ProjectStats:
        return self._executor.execute(
            "GET", _project_path(project_id, "stats"), response_model=ProjectStats
        )

    def get_investors(
        self, project_id: str, page: int = 1, limit: int = 10
    ) -> PaginatedResponse[Investor]:
        return self._executor.execute(
            "GET",
            _project_path(project_id, "investors"),
            params={"page": page, "limit": limit},
            response_model=PaginatedResponse[Investor],
        )

    def get_tiers(self, project_id: str) -> List[Tier]:
        return self._executor.execute(
            "GET", _project_path(project_id, "tiers"), response_model=List[Tier]
        )

    def update_tiers(self, project_id: str, tiers: List[Tier]) -> List[Tier]:
        """Replace the pricing tiers of a project.

        Args:
            project_id: The project ID
            tiers: Complete list of tiers

        Returns:
            Tiers as stored by the API
        """
        body = {"tiers": [tier.model_dump(mode="json", exclude_none=True) for tier in tiers]}
        return self._executor.execute(
            "PUT", _project_path(project_id, "tiers"), json=body, response_model=List[Tier]
        )

    def search(
        self, query: str, options: Optional[ProjectSearchOptions] = None
    ) -> PaginatedResponse[Project]:
        """Search projects by free-text query."""
        params = {"q": query}
        if options:
            params.update(options.to_params())
        return self._executor.execute(
            "GET", "/projects/search", params=params, response_model=PaginatedResponse[Project]
        )

    def get_featured(self, limit: int = 10) -> List[Project]:
        return self._executor.execute(
            "GET", "/projects/featured", params={"limit": limit}, response_model=List[Project]
        )

    def get_trending(self, period: str = "24h", limit: int = 10) -> List[Project]:
        """Retrieve trending projects.

        Args:
            period: Time period (``24h``, ``7d``, ``30d``)
            limit: Maximum number of projects to return
        """
        return self._executor.execute(
            "GET",
            "/projects/trending",
            params={"period": period, "limit": limit},
            response_model=List[Project],
        )
