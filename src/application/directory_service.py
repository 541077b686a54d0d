import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
import aiohttp

from src.application.favorites import FavoriteService
from src.application.view_pipeline import derive
from src.domain.exceptions import DirectoryException
from src.domain.models import PageView, Project, SORT_DIRECTIONS, ViewParameters
from src.infrastructure.acl import ProjectTranslator
from src.infrastructure.api_client import DirectoryApiClient

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch projects."
SUBMIT_SUCCESS_MESSAGE = "Repository added successfully!"
SUBMIT_FAILURE_MESSAGE = "Failed to add repository. Please check the URL or try again later."


@dataclass(frozen=True)
class SubmissionResult:
    success: bool
    message: str


class DirectoryService:
    """
    Session state behind the directory view: the fetched projects, the current
    view parameters and the favorite set.

    Setters replace `params` with a validated copy; `view()` re-derives the
    visible page from the current state on demand.
    """

    def __init__(
            self,
            api_client: DirectoryApiClient,
            favorite_service: FavoriteService,
            params: Optional[ViewParameters] = None,
    ):
        self.api_client = api_client
        self.favorite_service = favorite_service
        self.projects: List[Project] = []
        self.loading = False
        self.error: Optional[str] = None
        base = params or ViewParameters()
        self.params = base.evolve(favorites=favorite_service.favorites)

    async def load(self) -> None:
        """
        Fetches the project collection once. On failure the service is left in
        a terminal error state with no projects; there is no retry.
        """
        self.loading = True
        self.error = None
        try:
            async with aiohttp.ClientSession() as session:
                raw_projects = await self.api_client.fetch_projects(session)
        except DirectoryException as e:
            logger.error(f"Could not load projects: {e}")
            self.projects = []
            self.error = FETCH_ERROR_MESSAGE
            return
        finally:
            self.loading = False

        self.projects = self._translate(raw_projects)
        logger.info(f"Loaded {len(self.projects)} projects.")

    @staticmethod
    def _translate(raw_projects: Iterable[Dict[str, Any]]) -> List[Project]:
        projects: List[Project] = []
        seen = set()
        for raw in raw_projects:
            if not isinstance(raw, dict):
                logger.warning(f"Skipping non-object project record: {raw!r}")
                continue
            try:
                project = ProjectTranslator.to_domain(raw)
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed project record: {e}")
                continue
            if project.name in seen:
                logger.warning(f"Skipping duplicate project '{project.name}'.")
                continue
            seen.add(project.name)
            projects.append(project)
        return projects

    def view(self) -> PageView:
        return derive(self.projects, self.params)

    def _update(self, reset_page: bool = True, **changes: Any) -> ViewParameters:
        if reset_page:
            changes.setdefault("current_page", 1)
        self.params = self.params.evolve(**changes)
        return self.params

    def select_language(self, language: str) -> ViewParameters:
        return self._update(selected_language=language)

    def toggle_tag(self, tag: str) -> ViewParameters:
        tags = self.params.selected_tags
        tags = tags - {tag} if tag in tags else tags | {tag}
        return self._update(selected_tags=tags)

    def search_repos(self, text: str) -> ViewParameters:
        return self._update(repo_search=text)

    def search_issues(self, text: str) -> ViewParameters:
        return self._update(issue_search=text)

    def sort_by(self, field: str, direction: Optional[str] = None) -> ViewParameters:
        """Sorts by `field`; without a direction, stars sort descending and activity most-recent first."""
        if direction is None:
            direction = SORT_DIRECTIONS[field][0] if field in SORT_DIRECTIONS else ""
        return self._update(sort_field=field, sort_direction=direction)

    def set_page_size(self, page_size: int) -> ViewParameters:
        return self._update(page_size=page_size)

    def go_to_page(self, page: int) -> ViewParameters:
        return self._update(reset_page=False, current_page=page)

    def toggle_favorite(self, name: str) -> ViewParameters:
        favorites = self.favorite_service.toggle(name)
        return self._update(reset_page=False, favorites=favorites)

    async def submit_repository(self, url: str) -> SubmissionResult:
        """
        Forwards a repository URL to the directory API and reports the outcome
        as a user-facing message. Never touches the loaded projects or parameters.
        """
        try:
            async with aiohttp.ClientSession() as session:
                message = await self.api_client.submit_repository(session, url)
        except DirectoryException as e:
            logger.error(f"Repository submission failed: {e}")
            return SubmissionResult(success=False, message=SUBMIT_FAILURE_MESSAGE)

        return SubmissionResult(success=True, message=message or SUBMIT_SUCCESS_MESSAGE)
