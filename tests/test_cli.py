"""Tests for CLI commands."""

import json

import httpx
import pytest
from click.testing import CliRunner
from httpx import Response

from ghcompare.cli import main


@pytest.fixture
def github_env(monkeypatch, tmp_path):
    """Point settings at a token and an empty config directory."""
    monkeypatch.setenv("GHCOMPARE_GITHUB_TOKEN", "test_token")
    monkeypatch.setenv("GHCOMPARE_CONFIG_DIR", str(tmp_path))


@pytest.fixture
def alice_and_bob(mock_github_api, make_rest_user, make_repo, analytics_user):
    """Register REST and GraphQL routes for two users."""
    users = {
        "alice": (make_rest_user("alice", followers=10), [make_repo("big", stargazers_count=500)]),
        "bob": (make_rest_user("bob", followers=40), [make_repo("small", stargazers_count=350)]),
    }
    for login, (user, repos) in users.items():
        mock_github_api.get(f"/users/{login}").mock(return_value=Response(200, json=user))
        mock_github_api.get(f"/users/{login}/repos").mock(return_value=Response(200, json=repos))

    def _analytics(request: httpx.Request) -> Response:
        return Response(200, json={"data": {"user": analytics_user}})

    mock_github_api.post("/graphql").mock(side_effect=_analytics)
    return users


class TestCLI:
    """Tests for CLI commands."""

    def test_main_help(self) -> None:
        """Test main help output."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Compare GitHub users" in result.output

    def test_compare_help(self) -> None:
        """Test compare command help."""
        runner = CliRunner()
        result = runner.invoke(main, ["compare", "--help"])

        assert result.exit_code == 0
        assert "--refresh" in result.output
        assert "--meme" in result.output
        assert "--export" in result.output

    def test_insights_help(self) -> None:
        """Test insights command help."""
        runner = CliRunner()
        result = runner.invoke(main, ["insights", "--help"])

        assert result.exit_code == 0
        assert "--json" in result.output

    def test_batch_help(self) -> None:
        """Test batch command help."""
        runner = CliRunner()
        result = runner.invoke(main, ["batch", "--help"])

        assert result.exit_code == 0
        assert "--dry-run" in result.output

    def test_compare_same_user(self) -> None:
        """Test comparing a user with themself is rejected before any request."""
        runner = CliRunner()
        result = runner.invoke(main, ["compare", "octocat", "@OctoCat"])

        assert result.exit_code == 2
        assert "Invalid input" in result.output

    def test_list_pairs_no_config(self, tmp_path, monkeypatch) -> None:
        """Test list command with no config."""
        monkeypatch.setenv("GHCOMPARE_CONFIG_DIR", str(tmp_path))
        runner = CliRunner()
        result = runner.invoke(main, ["list"])

        # Should handle missing config gracefully
        assert result.exit_code == 0
        assert "No pairs configured" in result.output

    def test_list_pairs_incomplete_config(self, tmp_path, monkeypatch) -> None:
        """Test an incomplete pairs file is reported instead of listing blanks."""
        (tmp_path / "pairs.yaml").write_text("pairs:\n  - user_b: defunkt\n")
        monkeypatch.setenv("GHCOMPARE_CONFIG_DIR", str(tmp_path))
        runner = CliRunner()
        result = runner.invoke(main, ["list"])

        assert result.exit_code == 2
        assert "Invalid pairs.yaml" in result.output


class TestCompareCommand:
    """Tests for compare and insights against mocked GitHub responses."""

    def test_compare_json(self, github_env, alice_and_bob) -> None:
        """Test --json prints the comparison and meme payload."""
        runner = CliRunner()
        result = runner.invoke(main, ["compare", "alice", "@bob", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert set(payload) == {"comparison", "meme"}
        assert payload["meme"] is None

        comparison = payload["comparison"]
        assert comparison["userA"]["login"] == "alice"
        assert comparison["userB"]["login"] == "bob"
        assert [m["id"] for m in comparison["metrics"]] == [
            "repositories",
            "stars",
            "followers",
            "weekly_contributions",
            "yearly_contributions",
            "top_language_share",
            "pull_requests",
        ]
        assert comparison["heroMetric"]["id"] == "stars"
        assert comparison["heroMetric"]["direction"] == "up"
        assert comparison["memePrompt"]["category"] == "dominant"

    def test_compare_table(self, github_env, alice_and_bob) -> None:
        """Test the default output renders the verdict."""
        runner = CliRunner()
        result = runner.invoke(main, ["compare", "alice", "bob"])

        assert result.exit_code == 0
        assert "alice outshines bob on repository stars by 150." in result.output

    def test_compare_user_not_found(self, github_env, mock_github_api, make_rest_user) -> None:
        """Test an unknown user prints a not-found message and exits 1."""
        mock_github_api.get("/users/octocat").mock(
            return_value=Response(200, json=make_rest_user("octocat"))
        )
        mock_github_api.get("/users/octocat/repos").mock(return_value=Response(200, json=[]))
        for path in ("/users/ghost-user", "/users/ghost-user/repos"):
            mock_github_api.get(path).mock(
                return_value=Response(404, json={"message": "Not Found"})
            )

        def _analytics(request: httpx.Request) -> Response:
            if json.loads(request.content)["variables"]["login"] == "octocat":
                return Response(200, json={"data": {"user": None}})
            return Response(
                200,
                json={
                    "data": {"user": None},
                    "errors": [{"type": "NOT_FOUND", "message": "Could not resolve to a User"}],
                },
            )

        mock_github_api.post("/graphql").mock(side_effect=_analytics)

        runner = CliRunner()
        result = runner.invoke(main, ["compare", "octocat", "ghost-user"])

        assert result.exit_code == 1
        assert "GitHub user not found" in result.output

    def test_insights_upstream_error(self, github_env, mock_github_api) -> None:
        """Test a server error prints the status and exits 1."""
        for path in ("/users/octocat", "/users/octocat/repos"):
            mock_github_api.get(path).mock(
                return_value=Response(500, json={"message": "Server Error"})
            )
        mock_github_api.post("/graphql").mock(
            return_value=Response(200, json={"data": {"user": None}})
        )

        runner = CliRunner()
        result = runner.invoke(main, ["insights", "octocat"])

        assert result.exit_code == 1
        assert "GitHub API error 500: Server Error" in result.output

    def test_insights_json(self, github_env, alice_and_bob) -> None:
        """Test insights --json prints the profile record."""
        runner = CliRunner()
        result = runner.invoke(main, ["insights", "https://github.com/alice", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["login"] == "alice"
        assert payload["followers"] == 10
        assert payload["contributions"]["lastYear"] == 5
