import math
from datetime import datetime, timezone
from typing import AbstractSet, Iterable, List, Sequence, Tuple

from src.domain.models import ALL_LANGUAGES, PageView, Project, ViewParameters

# Sort key used for projects without a parsable last activity.
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _matches_language(project: Project, language: str) -> bool:
    return language == ALL_LANGUAGES or language in project.languages


def _matches_tags(project: Project, tags: AbstractSet[str]) -> bool:
    if not tags:
        return True
    # A project without issues can never satisfy a tag filter.
    return any(not issue.labels.isdisjoint(tags) for issue in project.issues)


def _matches_repo_search(project: Project, needle: str) -> bool:
    return not needle or needle.lower() in project.name.lower()


def _matches_issue_search(project: Project, needle: str) -> bool:
    if not needle:
        return True
    needle = needle.lower()
    return any(needle in issue.title.lower() for issue in project.issues)


def filter_projects(projects: Iterable[Project], params: ViewParameters) -> List[Project]:
    """Stage A: keeps the projects matching every active filter, in input order."""
    return [
        project for project in projects
        if _matches_language(project, params.selected_language)
        and _matches_tags(project, params.selected_tags)
        and _matches_repo_search(project, params.repo_search)
        and _matches_issue_search(project, params.issue_search)
    ]


def _stars_key(project: Project) -> Tuple[bool, int]:
    # Missing star counts sort below every known count, including zero.
    return (project.stars is not None, project.stars or 0)


def _activity_key(project: Project) -> datetime:
    return project.last_activity or _OLDEST


def sort_projects(projects: Sequence[Project], params: ViewParameters) -> List[Project]:
    """
    Stage B: stable sort by the selected field and direction.

    `sorted` keeps ties in input order even with reverse=True.
    """
    if params.sort_field == "stars":
        return sorted(projects, key=_stars_key, reverse=params.sort_direction == "desc")
    return sorted(projects, key=_activity_key, reverse=params.sort_direction == "recent")


def partition_favorites(projects: Sequence[Project], favorites: AbstractSet[str]) -> List[Project]:
    """Stage C: moves favorites ahead of the rest without reordering either group."""
    pinned = [project for project in projects if project.name in favorites]
    others = [project for project in projects if project.name not in favorites]
    return pinned + others


def paginate(projects: Sequence[Project], page: int, page_size: int) -> PageView:
    """
    Stage D: slices one page out of the derived sequence.

    A page past the end yields an empty page rather than an error.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1.")
    if page < 1:
        raise ValueError("page must be at least 1.")

    total_pages = max(1, math.ceil(len(projects) / page_size))
    start = (page - 1) * page_size
    return PageView(
        page_items=tuple(projects[start:start + page_size]),
        total_pages=total_pages,
        total_items=len(projects),
        page=page,
    )


def derive(projects: Iterable[Project], params: ViewParameters) -> PageView:
    """
    Transforms the raw project collection into the page to display.

    Pure: filter, then sort, then pin favorites, then slice the requested page.
    """
    filtered = filter_projects(projects, params)
    ordered = sort_projects(filtered, params)
    pinned = partition_favorites(ordered, params.favorites)
    return paginate(pinned, params.current_page, params.page_size)
