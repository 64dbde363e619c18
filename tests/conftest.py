"""
Shared fixtures for release notes tests.
"""

import importlib.util
import os
from unittest.mock import Mock

import pytest

from src.domain.release import PullRequestRecord, RepositoryRef

SCRIPTS_DIR = os.path.join(os.path.dirname(__file__), '..', 'scripts')


def make_response(payload, status_code=200, reason="OK"):
    """Build a requests.Response stand-in."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.text = str(payload)
    response.json.return_value = payload
    return response


def commit_payload(committed_date):
    return {"data": {"repository": {"object": {"oid": "abc123", "committedDate": committed_date}}}}


def search_payload(nodes, issue_count=None):
    return {
        "data": {
            "search": {
                "issueCount": len(nodes) if issue_count is None else issue_count,
                "nodes": nodes,
            }
        }
    }


@pytest.fixture
def repository():
    return RepositoryRef(owner="octo", name="widgets")


@pytest.fixture
def sample_pull_requests():
    return [
        PullRequestRecord("Fix bug", "https://github.com/octo/widgets/pull/10", "alice"),
        PullRequestRecord("Bump dep", "https://github.com/octo/widgets/pull/11", "bot-updater"),
        PullRequestRecord("Add feature", "https://github.com/octo/widgets/pull/12", "bob"),
        PullRequestRecord("Bump other dep", "https://github.com/octo/widgets/pull/13", "bot-updater"),
    ]


@pytest.fixture
def fake_client():
    """Stand-in for GitHubGraphQLClient exposing the typed query helpers."""
    client = Mock()
    client.get_commit_date.return_value = "2021-07-01T10:00:00Z"
    client.search_pull_requests.return_value = ([], 0)
    return client


@pytest.fixture
def release_notes_script():
    """Import scripts/release_notes.py as a module."""
    path = os.path.join(SCRIPTS_DIR, 'release_notes.py')
    spec = importlib.util.spec_from_file_location("release_notes_script", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run without any token configured and without a .env file in the cwd."""
    for name in ("GITHUB_API_TOKEN", "GITHUB_TOKEN", "DEPENDENCY_AUTHORS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
