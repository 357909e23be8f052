#!/usr/bin/env python3
"""Tests for project conversion, categorisation and filtering."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from project_showcase.github import GitHubError
from project_showcase.models import GitHubRepo, Project
from project_showcase.projects import (
    collect_categories,
    convert_github_repo,
    extract_category,
    filter_projects,
    filter_updated_since,
    format_relative_date,
    format_title,
    load_projects,
    parse_timestamp,
    sort_by_updated,
)


class FakeClient:
    """Stand-in for GitHubClient.list_repos."""

    def __init__(self, repos=None, error=None):
        self.repos = repos or []
        self.error = error
        self.usernames: list[str] = []

    def list_repos(self, username):
        self.usernames.append(username)
        if self.error:
            raise self.error
        return self.repos


def make_project(**kwargs) -> Project:
    defaults = {
        "id": 1,
        "title": "Project",
        "github_url": "https://github.com/vibespin/project",
    }
    defaults.update(kwargs)
    return Project(**defaults)


class TestFormatTitle:
    """Tests for format_title()."""

    def test_prefix_date_and_acronym(self):
        assert (
            format_title("breakthrough_2025-09-02_support_ab_testing")
            == "Support A/B Testing"
        )

    def test_dash_separated_date(self):
        assert (
            format_title("breakthrough_2025-08-26-user-analytics-v2")
            == "User Analytics V2"
        )

    def test_acronyms(self):
        assert format_title("breakthrough_ai_ui_api_ux") == "AI UI API UX"

    def test_plain_name(self):
        assert format_title("my-cool_repo") == "My Cool Repo"


class TestExtractCategory:
    """Tests for extract_category()."""

    def test_exact_match(self):
        assert (
            extract_category("breakthrough_2025-08-29_isometric_imagen")
            == "AI Generative Media"
        )

    @pytest.mark.parametrize(
        "name,category",
        [
            ("breakthrough_support_bot", "Analytics & Testing"),
            ("breakthrough_new_payment_gateway", "E-commerce"),
            ("breakthrough_feedback_widget", "User Research"),
            ("breakthrough_image_tool", "AI Generative Media"),
            ("breakthrough_onboarding", "User Experience"),
            ("breakthrough_cli_tool", "Development"),
        ],
    )
    def test_keyword_fallbacks(self, name, category):
        assert extract_category(name) == category

    def test_keyword_order(self):
        """Earlier categories win when several keywords match."""
        assert extract_category("breakthrough_user_analytics") == "Analytics & Testing"


class TestConvertGitHubRepo:
    """Tests for convert_github_repo()."""

    def test_conversion(self, sample_repos):
        project = convert_github_repo(GitHubRepo.model_validate(sample_repos[0]))
        assert project.id == 1
        assert project.title == "Payments Flow"
        assert project.tagline == "Checkout experiments"
        assert project.category == "E-commerce"
        assert project.github_url == sample_repos[0]["html_url"]
        assert project.image == (
            "https://opengraph.githubassets.com/1/"
            "vibespin/breakthrough_2025-08-28_payments_flow"
        )
        assert project.stars == 3
        assert project.language == "TypeScript"
        assert project.topics == ["payments"]
        assert project.repo == "vibespin/breakthrough_2025-08-28_payments_flow"

    def test_missing_description(self, sample_repos):
        project = convert_github_repo(GitHubRepo.model_validate(sample_repos[2]))
        assert project.tagline == "No description available"
        assert project.topics == []


class TestLoadProjects:
    """Tests for load_projects() and its fallback chain."""

    def test_filters_and_sorts(self, sample_repos):
        repos = [GitHubRepo.model_validate(r) for r in sample_repos]
        client = FakeClient(repos=repos)
        projects = load_projects(client, "vibespin")  # type: ignore[arg-type]
        assert client.usernames == ["vibespin"]
        assert [p.id for p in projects] == [3, 1]

    def test_custom_name_filter(self, sample_repos):
        repos = [GitHubRepo.model_validate(r) for r in sample_repos]
        projects = load_projects(FakeClient(repos=repos), "u", name_filter="dot")  # type: ignore[arg-type]
        assert [p.id for p in projects] == [2]

    def test_fallback_file(self, tmp_path: Path):
        fallback = tmp_path / "projects.json"
        fallback.write_text(
            json.dumps(
                [
                    {
                        "id": "static-1",
                        "title": "Static",
                        "tagline": "From disk",
                        "category": "E-commerce",
                        "githubUrl": "https://github.com/vibespin/static",
                    }
                ]
            )
        )
        client = FakeClient(error=GitHubError("rate limited"))
        projects = load_projects(client, "vibespin", fallback_path=fallback)  # type: ignore[arg-type]
        assert len(projects) == 1
        assert projects[0].github_url == "https://github.com/vibespin/static"
        assert projects[0].repo == "vibespin/static"

    def test_missing_fallback_returns_empty(self, tmp_path: Path):
        client = FakeClient(error=GitHubError("down"))
        projects = load_projects(
            client, "vibespin", fallback_path=tmp_path / "missing.json"  # type: ignore[arg-type]
        )
        assert projects == []

    def test_invalid_fallback_returns_empty(self, tmp_path: Path):
        fallback = tmp_path / "projects.json"
        fallback.write_text('{"not": "a list"}')
        client = FakeClient(error=GitHubError("down"))
        assert load_projects(client, "u", fallback_path=fallback) == []  # type: ignore[arg-type]

    def test_no_fallback_returns_empty(self):
        client = FakeClient(error=GitHubError("down"))
        assert load_projects(client, "u") == []  # type: ignore[arg-type]


class TestFiltering:
    """Tests for category and date filters."""

    def test_collect_categories(self):
        projects = [
            make_project(category="User Research"),
            make_project(category="E-commerce"),
            make_project(category="User Research"),
        ]
        assert collect_categories(projects) == ["E-commerce", "User Research"]

    def test_filter_all(self):
        projects = [make_project(category="A"), make_project(category="B")]
        assert filter_projects(projects, "all") == projects

    def test_filter_category(self):
        a = make_project(id=1, category="A")
        b = make_project(id=2, category="B")
        assert filter_projects([a, b], "B") == [b]

    def test_filter_updated_since(self):
        old = make_project(id=1, updated_at="2020-01-01T00:00:00Z")
        new = make_project(id=2, updated_at="2025-06-01T00:00:00Z")
        undated = make_project(id=3)
        assert filter_updated_since([old, new, undated], "2021-01-01") == [new]

    def test_filter_updated_since_invalid(self):
        with pytest.raises(ValueError):
            filter_updated_since([make_project()], "qwertyuiop")

    def test_sort_by_updated_puts_undated_last(self):
        undated = make_project(id=1)
        old = make_project(id=2, updated_at="2020-01-01T00:00:00Z")
        new = make_project(id=3, updated_at="2025-01-01T00:00:00Z")
        assert [p.id for p in sort_by_updated([undated, old, new])] == [3, 2, 1]


class TestDates:
    """Tests for timestamp parsing and relative dates."""

    NOW = datetime(2025, 9, 10, tzinfo=timezone.utc)

    def test_parse_timestamp(self):
        result = parse_timestamp("2025-06-14T10:30:45Z")
        assert result == datetime(2025, 6, 14, 10, 30, 45, tzinfo=timezone.utc)

    def test_parse_timestamp_invalid(self):
        assert parse_timestamp("not-a-timestamp") is None
        assert parse_timestamp(None) is None

    @pytest.mark.parametrize(
        "updated_at,expected",
        [
            ("2025-09-09T00:00:00Z", "yesterday"),
            ("2025-09-09T12:00:00Z", "yesterday"),
            ("2025-09-05T00:00:00Z", "5 days ago"),
            ("2025-08-27T00:00:00Z", "2 weeks ago"),
            ("2025-07-12T00:00:00Z", "2 months ago"),
            ("2023-09-10T00:00:00Z", "3 years ago"),
        ],
    )
    def test_relative_date(self, updated_at, expected):
        assert format_relative_date(updated_at, now=self.NOW) == expected

    def test_relative_date_missing(self):
        assert format_relative_date(None, now=self.NOW) == ""
        assert format_relative_date("garbage", now=self.NOW) == ""
