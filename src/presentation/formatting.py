from datetime import datetime
from typing import Dict, List, Optional, Tuple

from src.domain.models import Issue, Project

ISSUE_PREVIEW_LIMIT = 5


def format_stars(stars: Optional[int]) -> str:
    """Renders a star count, abbreviating thousands (1500 -> '1.5k')."""
    if stars is None:
        return "N/A"
    if stars >= 1000:
        return f"{stars / 1000:.1f}k"
    return str(stars)


def top_languages(languages: Dict[str, float], limit: int = 3) -> List[str]:
    ranked = sorted(languages.items(), key=lambda item: item[1], reverse=True)
    return [name for name, _ in ranked[:limit]]


def truncate_text(text: Optional[str], max_length: int) -> str:
    text = text or ""
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def format_activity(instant: Optional[datetime]) -> str:
    """Formats a timestamp in local time as e.g. 'January 2, 2024, 3:04 PM'."""
    if instant is None:
        return "N/A"
    instant = instant.astimezone()
    hour = instant.hour % 12 or 12
    meridiem = "AM" if instant.hour < 12 else "PM"
    return f"{instant:%B} {instant.day}, {instant.year}, {hour}:{instant:%M} {meridiem}"


def preview_issues(project: Project, limit: int = ISSUE_PREVIEW_LIMIT) -> Tuple[Issue, ...]:
    return project.issues[:limit]


def explore_issues_url(project: Project) -> Optional[str]:
    """Issue list of the repository, derived from its first issue's URL."""
    if not project.issues:
        return None
    url = project.issues[0].url
    head, sep, _ = url.rstrip("/").rpartition("/")
    return head if sep else url


def render_project(project: Project, is_favorite: bool = False, show_issues: bool = False) -> List[str]:
    """Plain-text card for one project."""
    marker = "*" if is_favorite else " "
    noun = "issue" if project.issues_count == 1 else "issues"
    lines = [
        f"{marker} {truncate_text(project.name, 40)}  [{project.issues_count} {noun}]",
        f"    stars: {format_stars(project.stars)}  last activity: {format_activity(project.last_activity)}",
    ]
    if project.description:
        lines.append(f"    {truncate_text(project.description, 120)}")
    languages = top_languages(project.languages)
    if languages:
        lines.append(f"    languages: {', '.join(languages)}")
    if show_issues:
        for issue in preview_issues(project):
            labels = f" ({', '.join(sorted(issue.labels))})" if issue.labels else ""
            lines.append(f"      #{issue.number} {truncate_text(issue.title, 80)}{labels} [{issue.comment_count} comments]")
        if project.issues_count > ISSUE_PREVIEW_LIMIT and explore_issues_url(project):
            lines.append(f"      more issues: {explore_issues_url(project)}")
    return lines
