import logging
from datetime import datetime
from typing import Any, Dict, Optional
from src.domain.models import Issue, Project

logger = logging.getLogger(__name__)

class ProjectTranslator:
    """
    Anti-corruption layer that translates raw directory API JSON records into Project instances.
    """

    @staticmethod
    def parse_timestamp(raw_date: Optional[str]) -> Optional[datetime]:
        """Parses an ISO-8601 timestamp, returning None when it is absent or malformed."""
        if not raw_date:
            return None
        try:
            return datetime.fromisoformat(str(raw_date).replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparsable lastActivity '{raw_date}'; treating as unknown.")
            return None

    @staticmethod
    def issue_to_domain(raw_issue: Dict[str, Any]) -> Issue:
        """
        Transforms a raw issue record into an Issue.

        Labels may arrive as plain strings or as objects carrying a `name`.
        """
        labels = set()
        for label in raw_issue.get('labels') or []:
            if isinstance(label, dict):
                label = label.get('name')
            if label:
                labels.add(str(label))

        return Issue(
            url=raw_issue.get('url', ''),
            number=raw_issue.get('number') or 0,
            title=raw_issue.get('title') or '',
            labels=frozenset(labels),
            comment_count=raw_issue.get('commentCount') or 0,
        )

    @staticmethod
    def to_domain(raw_project: Dict[str, Any]) -> Project:
        """
        Transforms a raw `/repos` record into a Project.

        Args:
            raw_project (Dict[str, Any]): One element of the `/repos` JSON array.

        Returns:
            Project: The domain model instance representing the repository.
        """
        name = raw_project.get('name')
        if not name:
            raise ValueError("name is required to build Project.")

        raw_issues = raw_project.get('issues') or []
        if not isinstance(raw_issues, list):
            raise ValueError(f"issues of '{name}' must be a list, got {type(raw_issues).__name__}.")
        for raw_issue in raw_issues:
            if raw_issue and not isinstance(raw_issue, dict):
                raise ValueError(f"issue of '{name}' must be an object, got {type(raw_issue).__name__}.")

        issues = tuple(
            ProjectTranslator.issue_to_domain(raw_issue)
            for raw_issue in raw_issues
            if raw_issue
        )

        return Project(
            name=name,
            description=raw_project.get('description'),
            stars=raw_project.get('stars'),
            last_activity=ProjectTranslator.parse_timestamp(raw_project.get('lastActivity')),
            languages=raw_project.get('languages') or {},
            issues=issues,
            issues_count=raw_project.get('issues_count') or 0,
        )
