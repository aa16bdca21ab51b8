"""Profile fetching and user comparison orchestration."""

import asyncio
import logging
import re

from ghcompare.aggregator import (
    aggregate_contributions,
    aggregate_languages,
    compute_totals,
    derive_highlights,
    format_repository,
)
from ghcompare.cache import TTLCache
from ghcompare.comparator import build_comparison_metrics, select_hero_metric
from ghcompare.github_client import GitHubClient
from ghcompare.models import ComparisonResult, UserInsights
from ghcompare.narrative import RandomSource, build_summary, derive_meme_prompt

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 300.0

PROFILE_URL_PATTERN = re.compile(r"github\.com/([^/?#]+)", re.IGNORECASE)


class InvalidInputError(ValueError):
    """Raised for an empty or malformed user handle."""


def sanitize_login(value: str) -> str:
    """Extract a login from a bare handle, an @handle or a profile URL.

    Args:
        value: Raw user input.

    Returns:
        Login with case preserved.

    Raises:
        InvalidInputError: If the input is empty.
    """
    trimmed = value.strip()
    if not trimmed:
        raise InvalidInputError("GitHub username cannot be empty")

    match = PROFILE_URL_PATTERN.search(trimmed)
    if match:
        return match.group(1)

    login = trimmed.removeprefix("@")
    if not login:
        raise InvalidInputError("GitHub username cannot be empty")
    return login


def comparison_key(login_a: str, login_b: str) -> str:
    """Cache key for an ordered pair of logins."""
    return f"{login_a.lower()}::{login_b.lower()}"


class InsightsService:
    """Fetches user insights and compares users, caching both.

    Holds two caches: one for single profiles keyed by lower-cased login,
    one for comparisons keyed by the ordered pair of logins.

    Attributes:
        client: Open GitHub client.
        insights_cache: Per-user cache.
        comparison_cache: Per-pair cache.
    """

    def __init__(
        self,
        client: GitHubClient,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        rng: RandomSource | None = None,
        insights_cache: TTLCache[UserInsights] | None = None,
        comparison_cache: TTLCache[ComparisonResult] | None = None,
    ):
        """Initialize the service.

        Args:
            client: Open GitHub client (inside its async context).
            cache_ttl: Default cache lifetime in seconds.
            rng: Random source for meme phrasing.
            insights_cache: Cache override for user insights.
            comparison_cache: Cache override for comparisons.
        """
        self.client = client
        self.rng = rng
        self.insights_cache = insights_cache if insights_cache is not None else TTLCache(cache_ttl)
        self.comparison_cache = (
            comparison_cache if comparison_cache is not None else TTLCache(cache_ttl)
        )

    async def _fetch_insights(self, login: str) -> UserInsights:
        user, repos, analytics = await asyncio.gather(
            self.client.get_user(login),
            self.client.get_user_repositories(login),
            self.client.get_user_analytics(login),
        )

        graph_repos = None
        pinned = None
        collection = None
        if analytics:
            graph_repos = (analytics.get("repositories") or {}).get("nodes")
            pinned = (analytics.get("pinnedItems") or {}).get("nodes")
            collection = analytics.get("contributionsCollection")

        insights = UserInsights(
            login=user["login"],
            name=user.get("name"),
            avatar_url=user.get("avatar_url", ""),
            profile_url=user.get("html_url", ""),
            bio=user.get("bio"),
            company=user.get("company"),
            location=user.get("location"),
            followers=user.get("followers", 0),
            following=user.get("following", 0),
            public_repos=user.get("public_repos", 0),
            public_gists=user.get("public_gists", 0),
            created_at=user.get("created_at", ""),
            totals=compute_totals(repos),
            languages=aggregate_languages(repos, graph_repos),
            contributions=aggregate_contributions(collection),
            highlights=derive_highlights(repos, pinned),
            repositories=[format_repository(repo) for repo in repos],
        )
        logger.info(
            "Fetched insights for %s: %d repositories, analytics %s",
            insights.login,
            len(repos),
            "available" if analytics else "unavailable",
        )
        return insights

    async def get_user_insights(self, handle: str, force_refresh: bool = False) -> UserInsights:
        """Get insights for one user.

        Args:
            handle: Username, @handle or profile URL.
            force_refresh: Evict any cached entry before fetching.

        Returns:
            UserInsights.

        Raises:
            InvalidInputError: If the handle is empty.
            GitHubAPIError: If the profile or repository fetch fails.
        """
        login = sanitize_login(handle)
        key = login.lower()

        if force_refresh:
            self.insights_cache.clear(key)

        return await self.insights_cache.remember(key, lambda: self._fetch_insights(login))

    async def _compare(self, login_a: str, login_b: str, force_refresh: bool) -> ComparisonResult:
        user_a, user_b = await asyncio.gather(
            self.get_user_insights(login_a, force_refresh=force_refresh),
            self.get_user_insights(login_b, force_refresh=force_refresh),
        )

        metrics = build_comparison_metrics(user_a, user_b)
        hero = select_hero_metric(metrics)

        return ComparisonResult(
            user_a=user_a,
            user_b=user_b,
            metrics=metrics,
            hero_metric=hero,
            summary=build_summary(user_a, user_b, hero),
            meme_prompt=derive_meme_prompt(user_a, user_b, metrics, hero, rng=self.rng),
        )

    async def compare_users(
        self,
        handle_a: str,
        handle_b: str,
        force_refresh: bool = False,
    ) -> ComparisonResult:
        """Compare two users.

        Order matters: (a, b) and (b, a) are cached separately since the
        narrative is framed from user A's side.

        Args:
            handle_a: First user's handle.
            handle_b: Second user's handle.
            force_refresh: Bypass the comparison and both insights caches.

        Returns:
            ComparisonResult.

        Raises:
            InvalidInputError: If either handle is empty.
            GitHubAPIError: If any upstream fetch fails.
        """
        login_a = sanitize_login(handle_a)
        login_b = sanitize_login(handle_b)
        key = comparison_key(login_a, login_b)

        if force_refresh:
            self.comparison_cache.clear(key)

        return await self.comparison_cache.remember(
            key, lambda: self._compare(login_a, login_b, force_refresh)
        )
