from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Literal, Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

ALL_LANGUAGES = "All"

# Languages offered by the language filter, in display order.
LANGUAGES: Tuple[str, ...] = (
    ALL_LANGUAGES,
    "Python",
    "Go",
    "Java",
    "TypeScript",
    "JavaScript",
    "Rust",
    "C++",
    "C",
    "C#",
    "Ruby",
    "PHP",
    "Swift",
    "Kotlin",
    "Scala",
    "Haskell",
    "Dart",
    "Elixir",
    "Clojure",
    "Lua",
    "R",
    "Julia",
    "Perl",
    "Assembly",
    "COBOL",
)

SortField = Literal["stars", "activity"]

SORT_DIRECTIONS: Dict[str, Tuple[str, str]] = {
    "stars": ("desc", "asc"),
    "activity": ("recent", "oldest"),
}

DEFAULT_PAGE_SIZE = 6


class Issue(BaseModel):
    """An open issue attached to a project."""
    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Link to the issue, unique across the directory")
    number: int = Field(..., description="Issue number within its repository")
    title: str = Field("", description="Issue title")
    labels: FrozenSet[str] = Field(default_factory=frozenset, description="Label names")
    comment_count: int = Field(0, ge=0, description="Number of comments")


class Project(BaseModel):
    """
    Immutable domain model representing a repository listed in the directory.
    `name` is the primary key used for favorites and de-duplication.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique repository name")
    description: Optional[str] = Field(None, description="Short repository description")
    stars: Optional[int] = Field(None, ge=0, description="Stargazer count, None when unknown")
    last_activity: Optional[datetime] = Field(None, description="Timestamp of the last activity")
    languages: Dict[str, float] = Field(default_factory=dict, description="Language name to byte weight")
    issues: Tuple[Issue, ...] = Field(default_factory=tuple, description="Issues as delivered, possibly truncated")
    issues_count: int = Field(0, ge=0, description="Total open issues, independent of len(issues)")

    @field_validator("last_activity")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Naive timestamps are compared against aware ones when sorting.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ViewParameters(BaseModel):
    """
    User-controlled filter, sort and pagination inputs.

    Instances are immutable; use `evolve` to obtain an updated, re-validated copy.
    """
    model_config = ConfigDict(frozen=True)

    selected_language: str = ALL_LANGUAGES
    selected_tags: FrozenSet[str] = Field(default_factory=frozenset)
    repo_search: str = ""
    issue_search: str = ""
    sort_field: SortField = "stars"
    sort_direction: str = "desc"
    favorites: FrozenSet[str] = Field(default_factory=frozenset)
    current_page: int = Field(1, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1)

    @field_validator("selected_language")
    @classmethod
    def _known_language(cls, value: str) -> str:
        if value not in LANGUAGES:
            raise ValueError(f"Unknown language '{value}'. Expected one of: {', '.join(LANGUAGES)}")
        return value

    @model_validator(mode="after")
    def _direction_matches_field(self) -> "ViewParameters":
        allowed = SORT_DIRECTIONS[self.sort_field]
        if self.sort_direction not in allowed:
            raise ValueError(
                f"Sort direction '{self.sort_direction}' is invalid for '{self.sort_field}'. "
                f"Expected one of: {', '.join(allowed)}"
            )
        return self

    def evolve(self, **changes: Any) -> "ViewParameters":
        """Returns a validated copy with `changes` applied."""
        return ViewParameters.model_validate({**self.model_dump(), **changes})


class PageView(BaseModel):
    """The visible page produced by the view pipeline."""
    model_config = ConfigDict(frozen=True)

    page_items: Tuple[Project, ...] = Field(default_factory=tuple)
    total_pages: int = Field(1, ge=1)
    total_items: int = Field(0, ge=0, description="Number of projects left after filtering")
    page: int = Field(1, ge=1)
