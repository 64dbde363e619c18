"""Domain entities for release notes generation."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

GHOST_LOGIN = "ghost"


@dataclass(frozen=True)
class RepositoryRef:
    """Immutable reference to a GitHub repository."""

    owner: str
    name: str

    def __post_init__(self):
        if not self.owner or not self.name:
            raise ValueError("Repository owner and name must be non-empty")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, full_name: str) -> "RepositoryRef":
        """Build a reference from an ``owner/name`` string."""
        owner, _, name = full_name.partition("/")
        return cls(owner=owner.strip(), name=name.strip())


@dataclass(frozen=True)
class ReleaseQuery:
    """A repository plus the ref expression (tag, branch or SHA) to resolve."""

    repository: RepositoryRef
    tag_expression: str

    def __post_init__(self):
        if not self.tag_expression:
            raise ValueError("Tag expression must be non-empty")


@dataclass(frozen=True)
class CommitInfo:
    """Resolved commit date. ``date`` is None when the ref did not resolve."""

    date: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.date is not None


@dataclass(frozen=True)
class PullRequestRecord:
    """A merged pull request."""

    title: str
    url: str
    author_login: str = GHOST_LOGIN

    @property
    def number(self) -> str:
        # Always the last path segment, e.g. ".../pull/1234" -> "1234"
        return self.url[self.url.rfind("/") + 1:]


@dataclass(frozen=True)
class DateRange:
    """Merge window expressed as ISO calendar dates."""

    start: str
    end: str

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def to_search_filter(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass
class AuthorClassification:
    """Pull requests split into dependency updates and contributions."""

    dependency_updates: List[PullRequestRecord] = field(default_factory=list)
    contributions: List[PullRequestRecord] = field(default_factory=list)

    @classmethod
    def partition(
        cls,
        records: Iterable[PullRequestRecord],
        dependency_authors: Iterable[str],
    ) -> "AuthorClassification":
        """
        Stable split of records by author.

        Records whose author is in ``dependency_authors`` go to
        ``dependency_updates``; everything else goes to ``contributions``.
        Relative order is preserved within each bucket.
        """
        authors = frozenset(dependency_authors)
        classification = cls()
        for record in records:
            if record.author_login in authors:
                classification.dependency_updates.append(record)
            else:
                classification.contributions.append(record)
        return classification

    @property
    def total(self) -> int:
        return len(self.dependency_updates) + len(self.contributions)
