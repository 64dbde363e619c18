"""
Unit tests for the release notes domain entities.
"""

import pytest

from src.domain.release import (
    AuthorClassification,
    CommitInfo,
    DateRange,
    PullRequestRecord,
    ReleaseQuery,
    RepositoryRef,
)


# ============================================================================
# RepositoryRef / ReleaseQuery
# ============================================================================

class TestRepositoryRef:

    def test_full_name(self):
        assert RepositoryRef("octo", "widgets").full_name == "octo/widgets"

    def test_parse(self):
        assert RepositoryRef.parse("octo/widgets") == RepositoryRef("octo", "widgets")

    @pytest.mark.parametrize("owner,name", [("", "widgets"), ("octo", "")])
    def test_rejects_empty_fields(self, owner, name):
        with pytest.raises(ValueError):
            RepositoryRef(owner, name)

    def test_parse_without_slash_is_rejected(self):
        with pytest.raises(ValueError):
            RepositoryRef.parse("widgets")


class TestReleaseQuery:

    def test_rejects_empty_tag_expression(self, repository):
        with pytest.raises(ValueError):
            ReleaseQuery(repository, "")

    def test_accepts_any_ref(self, repository):
        assert ReleaseQuery(repository, "main").tag_expression == "main"


# ============================================================================
# CommitInfo / DateRange
# ============================================================================

class TestCommitInfo:

    def test_found(self):
        assert CommitInfo("2021-07-01").found
        assert not CommitInfo().found


class TestDateRange:

    def test_search_filter(self):
        assert DateRange("2021-07-01", "2021-08-01").to_search_filter() == "2021-07-01..2021-08-01"

    def test_same_day_is_not_empty(self):
        assert not DateRange("2021-07-01", "2021-07-01").is_empty

    def test_inverted_range_is_empty(self):
        assert DateRange("2021-08-01", "2021-07-01").is_empty


# ============================================================================
# PullRequestRecord
# ============================================================================

class TestPullRequestNumber:

    def test_number_is_last_path_segment(self):
        pr = PullRequestRecord("Fix", "https://github.com/o/r/pull/1234", "alice")
        assert pr.number == "1234"

    def test_number_without_slash_is_whole_url(self):
        assert PullRequestRecord("Fix", "1234", "alice").number == "1234"

    def test_default_author_is_ghost(self):
        assert PullRequestRecord("Fix", "https://github.com/o/r/pull/1").author_login == "ghost"


# ============================================================================
# AuthorClassification
# ============================================================================

class TestAuthorClassification:

    def test_partition_by_author(self, sample_pull_requests):
        result = AuthorClassification.partition(sample_pull_requests, {"bot-updater"})

        assert [pr.number for pr in result.contributions] == ["10", "12"]
        assert [pr.number for pr in result.dependency_updates] == ["11", "13"]

    def test_partition_is_exhaustive_and_disjoint(self, sample_pull_requests):
        result = AuthorClassification.partition(sample_pull_requests, {"bot-updater", "bob"})

        combined = result.contributions + result.dependency_updates
        assert sorted(combined, key=lambda pr: pr.number) == sample_pull_requests
        assert not set(result.contributions) & set(result.dependency_updates)
        assert result.total == len(sample_pull_requests)

    def test_partition_preserves_order(self, sample_pull_requests):
        reversed_prs = list(reversed(sample_pull_requests))
        result = AuthorClassification.partition(reversed_prs, {"bot-updater"})

        assert [pr.number for pr in result.contributions] == ["12", "10"]
        assert [pr.number for pr in result.dependency_updates] == ["13", "11"]

    def test_no_dependency_authors(self, sample_pull_requests):
        result = AuthorClassification.partition(sample_pull_requests, [])

        assert result.contributions == sample_pull_requests
        assert result.dependency_updates == []

    def test_author_match_is_case_sensitive(self, sample_pull_requests):
        result = AuthorClassification.partition(sample_pull_requests, {"Bot-Updater"})
        assert result.dependency_updates == []

    def test_empty_input(self):
        result = AuthorClassification.partition([], {"bot-updater"})
        assert result.total == 0
