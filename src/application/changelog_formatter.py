"""Plain text rendering of classified pull requests."""

from typing import List

from src.domain.release import AuthorClassification, PullRequestRecord

CONTRIBUTIONS_HEADER = "New and Fixes"
DEPENDENCY_UPDATES_HEADER = "Updates"


def format_pull_request(record: PullRequestRecord, show_author: bool = True) -> str:
    line = f"- {record.title} ( #{record.number} )"
    if show_author:
        line += f" by {record.author_login}"
    return line


def render_changelog(classification: AuthorClassification, show_author: bool = True) -> List[str]:
    """
    Render both sections, contributions first.

    Headers are always present; a section with no pull requests has no entries.
    """
    lines = [CONTRIBUTIONS_HEADER]
    lines.extend(format_pull_request(pr, show_author) for pr in classification.contributions)
    lines.append("")
    lines.append(DEPENDENCY_UPDATES_HEADER)
    lines.extend(format_pull_request(pr, show_author) for pr in classification.dependency_updates)
    return lines
