"""Shared test fixtures."""

from collections.abc import Callable

import pytest
import respx

from ghcompare.models import (
    ContributionBreakdown,
    ContributionStats,
    LanguageStat,
    RepositoryTotals,
    UserInsights,
)


class FirstChoice:
    """Deterministic random source that always picks the first option."""

    def choice(self, seq):
        return seq[0]


class LastChoice:
    """Deterministic random source that always picks the last option."""

    def choice(self, seq):
        return seq[-1]


@pytest.fixture
def first_choice() -> FirstChoice:
    return FirstChoice()


@pytest.fixture
def last_choice() -> LastChoice:
    return LastChoice()


@pytest.fixture
def mock_github_api():
    """Mock GitHub API responses."""
    with respx.mock(base_url="https://api.github.com", assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def make_rest_user() -> Callable[..., dict]:
    """Factory for raw REST user payloads."""

    def _make(login: str = "octocat", **overrides) -> dict:
        user = {
            "login": login,
            "name": login.title(),
            "avatar_url": f"https://avatars.githubusercontent.com/{login}",
            "html_url": f"https://github.com/{login}",
            "bio": None,
            "company": None,
            "location": None,
            "followers": 10,
            "following": 2,
            "public_repos": 3,
            "public_gists": 0,
            "created_at": "2015-01-01T00:00:00Z",
        }
        user.update(overrides)
        return user

    return _make


@pytest.fixture
def make_repo() -> Callable[..., dict]:
    """Factory for raw REST repository payloads."""

    def _make(name: str, **overrides) -> dict:
        repo = {
            "id": abs(hash(name)) % 100000,
            "name": name,
            "full_name": f"octocat/{name}",
            "description": None,
            "stargazers_count": 0,
            "watchers_count": 0,
            "forks_count": 0,
            "open_issues_count": 0,
            "html_url": f"https://github.com/octocat/{name}",
            "language": None,
            "archived": False,
            "disabled": False,
            "created_at": "2020-01-01T00:00:00Z",
            "updated_at": "2024-01-01T00:00:00Z",
            "pushed_at": "2024-01-01T00:00:00Z",
            "private": False,
            "fork": False,
        }
        repo.update(overrides)
        return repo

    return _make


@pytest.fixture
def sample_repos(make_repo) -> list[dict]:
    """Three repositories in upstream (updated desc) order."""
    return [
        make_repo(
            "floris",
            stargazers_count=100,
            forks_count=5,
            watchers_count=100,
            open_issues_count=3,
            language="Python",
            created_at="2019-05-01T00:00:00Z",
            updated_at="2024-03-01T00:00:00Z",
        ),
        make_repo(
            "flasc",
            stargazers_count=40,
            forks_count=12,
            watchers_count=40,
            open_issues_count=1,
            language="Python",
            created_at="2018-02-01T00:00:00Z",
            updated_at="2024-02-01T00:00:00Z",
        ),
        make_repo(
            "dotfiles",
            stargazers_count=2,
            forks_count=0,
            watchers_count=2,
            open_issues_count=0,
            language="Shell",
            created_at="2021-07-01T00:00:00Z",
            updated_at="2023-01-01T00:00:00Z",
            archived=True,
        ),
    ]


@pytest.fixture
def contributions_collection() -> dict:
    """GraphQL contributionsCollection with two weeks of data."""
    return {
        "contributionCalendar": {
            "totalContributions": 1234,
            "weeks": [
                {
                    "firstDay": "2024-01-07",
                    "contributionDays": [
                        {"date": "2024-01-07", "contributionCount": 1},
                        {"date": "2024-01-08", "contributionCount": 1},
                        {"date": "2024-01-09", "contributionCount": 0},
                        {"date": "2024-01-10", "contributionCount": 1},
                    ],
                },
                {
                    "firstDay": "2024-01-14",
                    "contributionDays": [
                        {"date": "2024-01-14", "contributionCount": 1},
                        {"date": "2024-01-15", "contributionCount": 1},
                        {"date": "2024-01-16", "contributionCount": 0},
                        {"date": "2024-01-17", "contributionCount": 0},
                    ],
                },
            ],
        },
        "totalCommitContributions": 3,
        "totalIssueContributions": 1,
        "totalPullRequestContributions": 1,
        "totalPullRequestReviewContributions": 0,
        "restrictedContributionsCount": 7,
    }


@pytest.fixture
def analytics_user(contributions_collection) -> dict:
    """GraphQL `user` object for the analytics query."""
    return {
        "contributionsCollection": contributions_collection,
        "repositories": {
            "nodes": [
                {
                    "name": "floris",
                    "stargazerCount": 100,
                    "forkCount": 5,
                    "primaryLanguage": {"name": "Python", "color": "#3572A5"},
                    "languages": {
                        "edges": [
                            {"size": 700, "node": {"name": "Python", "color": "#3572A5"}},
                            {"size": 100, "node": {"name": "Shell", "color": "#89e051"}},
                        ]
                    },
                    "updatedAt": "2024-03-01T00:00:00Z",
                    "createdAt": "2019-05-01T00:00:00Z",
                    "url": "https://github.com/octocat/floris",
                    "isArchived": False,
                },
                {
                    "name": "flasc",
                    "stargazerCount": 40,
                    "forkCount": 12,
                    "primaryLanguage": {"name": "Python", "color": "#3572A5"},
                    "languages": {
                        "edges": [
                            {"size": 200, "node": {"name": "Python", "color": "#3572A5"}},
                        ]
                    },
                    "updatedAt": "2024-02-01T00:00:00Z",
                    "createdAt": "2018-02-01T00:00:00Z",
                    "url": "https://github.com/octocat/flasc",
                    "isArchived": False,
                },
            ]
        },
        "pinnedItems": {
            "nodes": [
                {
                    "name": "floris",
                    "description": "Wind farm controls",
                    "stargazerCount": 100,
                    "url": "https://github.com/octocat/floris",
                    "primaryLanguage": {"name": "Python"},
                    "updatedAt": "2024-03-01T00:00:00Z",
                    "createdAt": "2019-05-01T00:00:00Z",
                    "isArchived": False,
                }
            ]
        },
    }


@pytest.fixture
def make_insights() -> Callable[..., UserInsights]:
    """Factory for UserInsights with only the compared fields set."""

    def _make(
        login: str,
        stars: int = 0,
        followers: int = 0,
        public_repos: int = 0,
        weekly_average: float | None = None,
        last_year: int = 0,
        pull_requests: int = 0,
        top_language: tuple[str, float] | None = None,
    ) -> UserInsights:
        contributions = None
        if weekly_average is not None:
            contributions = ContributionStats(
                total=last_year,
                last_year=last_year,
                weekly_average=weekly_average,
                weekly_max=0,
                breakdown=ContributionBreakdown(pull_requests=pull_requests),
            )
        languages = []
        if top_language:
            name, share = top_language
            languages = [LanguageStat(name=name, bytes=100, percentage=share, repo_count=1)]

        return UserInsights(
            login=login,
            avatar_url="",
            profile_url=f"https://github.com/{login}",
            followers=followers,
            public_repos=public_repos,
            totals=RepositoryTotals(stars=stars),
            languages=languages,
            contributions=contributions,
        )

    return _make
