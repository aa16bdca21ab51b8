"""Pure aggregation of raw GitHub responses into insight records."""

from dataclasses import dataclass

from ghcompare.models import (
    ContributionBreakdown,
    ContributionStats,
    ContributionStreak,
    LanguageStat,
    RepositoryHighlight,
    RepositoryHighlights,
    RepositoryTotals,
    WeeklyContribution,
)

MAX_LANGUAGES = 8


@dataclass
class _LanguageTotal:
    bytes: int = 0
    repo_count: int = 0
    color: str | None = None


def _percentage(part: int, total: int) -> float:
    """Share of total in percent, truncated to 2 decimals so shares never sum past 100."""
    if not total:
        return 0.0
    return (part * 10000 // total) / 100


def aggregate_languages(
    rest_repos: list[dict],
    graph_repos: list[dict] | None,
) -> list[LanguageStat]:
    """Rank languages across a user's repositories.

    Uses per-repository language byte sizes from the graph API when present.
    Otherwise each REST repository counts one unit for its primary language.

    Percentages are truncated to 2 decimals rather than rounded, so a 2/3
    share reads 66.66 where half-up rounding would give 66.67. Truncation
    keeps the shares from summing past 100.

    Args:
        rest_repos: Raw REST repository objects.
        graph_repos: Raw GraphQL repository nodes, or None.

    Returns:
        Up to MAX_LANGUAGES stats, largest volume first.
    """
    totals: dict[str, _LanguageTotal] = {}

    if graph_repos:
        for repo in graph_repos:
            seen: set[str] = set()
            for edge in (repo.get("languages") or {}).get("edges", []):
                node = edge.get("node") or {}
                name = node.get("name")
                if not name:
                    continue
                entry = totals.setdefault(name, _LanguageTotal(color=node.get("color")))
                entry.bytes += edge.get("size", 0)
                if name not in seen:
                    entry.repo_count += 1
                    seen.add(name)
                if entry.color is None:
                    entry.color = node.get("color")
    else:
        for repo in rest_repos:
            language = repo.get("language")
            if not language:
                continue
            entry = totals.setdefault(language, _LanguageTotal())
            entry.bytes += 1
            entry.repo_count += 1

    total_bytes = sum(entry.bytes for entry in totals.values())

    stats = [
        LanguageStat(
            name=name,
            bytes=entry.bytes,
            percentage=_percentage(entry.bytes, total_bytes),
            repo_count=entry.repo_count,
            color=entry.color,
        )
        for name, entry in totals.items()
    ]
    stats.sort(key=lambda stat: stat.bytes, reverse=True)
    return stats[:MAX_LANGUAGES]


def compute_streak(day_counts: list[int]) -> ContributionStreak:
    """Compute current and longest runs of days with at least one contribution.

    Args:
        day_counts: Daily contribution counts in chronological order.

    Returns:
        ContributionStreak; `current` is the run ending on the last day.
    """
    current = 0
    longest = 0
    for count in day_counts:
        if count > 0:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return ContributionStreak(current=current, longest=longest)


def aggregate_contributions(collection: dict | None) -> ContributionStats | None:
    """Summarize a GraphQL contributionsCollection.

    Args:
        collection: Raw contributionsCollection object, or None.

    Returns:
        ContributionStats, or None when no collection is available.
    """
    if not collection:
        return None

    calendar = collection.get("contributionCalendar") or {}
    weeks = calendar.get("weeks") or []

    series = [
        WeeklyContribution(
            week_start=week.get("firstDay", ""),
            total=sum(day.get("contributionCount", 0) for day in week.get("contributionDays", [])),
        )
        for week in weeks
    ]
    weekly_totals = [week.total for week in series]
    weekly_average = round(sum(weekly_totals) / len(weekly_totals), 2) if weekly_totals else 0.0

    days = sorted(
        (day for week in weeks for day in week.get("contributionDays", [])),
        key=lambda day: day.get("date", ""),
    )
    streak = compute_streak([day.get("contributionCount", 0) for day in days])

    return ContributionStats(
        total=calendar.get("totalContributions", 0),
        last_year=sum(weekly_totals),
        weekly_average=weekly_average,
        weekly_max=max(weekly_totals, default=0),
        weekly_series=series,
        streak=streak,
        breakdown=ContributionBreakdown(
            commits=collection.get("totalCommitContributions", 0),
            pull_requests=collection.get("totalPullRequestContributions", 0),
            reviews=collection.get("totalPullRequestReviewContributions", 0),
            issues=collection.get("totalIssueContributions", 0),
            restricted=collection.get("restrictedContributionsCount", 0),
        ),
    )


def format_repository(repo: dict) -> RepositoryHighlight:
    """Map a REST repository object to a RepositoryHighlight."""
    return RepositoryHighlight(
        name=repo.get("name", ""),
        description=repo.get("description"),
        url=repo.get("html_url", ""),
        stargazers=repo.get("stargazers_count", 0),
        forks=repo.get("forks_count", 0),
        primary_language=repo.get("language"),
        created_at=repo.get("created_at", ""),
        updated_at=repo.get("updated_at", ""),
        is_archived=bool(repo.get("archived") or repo.get("disabled")),
    )


def format_pinned(item: dict) -> RepositoryHighlight:
    """Map a GraphQL pinned item to a RepositoryHighlight.

    Pinned items do not expose a fork count, so forks is always 0.
    """
    return RepositoryHighlight(
        name=item.get("name", ""),
        description=item.get("description"),
        url=item.get("url", ""),
        stargazers=item.get("stargazerCount", 0),
        forks=0,
        primary_language=(item.get("primaryLanguage") or {}).get("name"),
        created_at=item.get("createdAt", ""),
        updated_at=item.get("updatedAt", ""),
        is_archived=bool(item.get("isArchived")),
    )


def derive_highlights(repos: list[dict], pinned: list[dict] | None) -> RepositoryHighlights:
    """Pick superlative repositories and map pinned items.

    Ties go to the repository that appears first in `repos`.

    Args:
        repos: Raw REST repositories in upstream order.
        pinned: Raw GraphQL pinned nodes, or None without analytics.

    Returns:
        RepositoryHighlights.
    """
    if not repos:
        highlights = RepositoryHighlights()
    else:
        # max/min return the first of several equal items
        highlights = RepositoryHighlights(
            most_starred=format_repository(max(repos, key=lambda r: r.get("stargazers_count", 0))),
            most_forked=format_repository(max(repos, key=lambda r: r.get("forks_count", 0))),
            oldest_repo=format_repository(min(repos, key=lambda r: r.get("created_at", ""))),
            newest_repo=format_repository(max(repos, key=lambda r: r.get("updated_at", ""))),
        )

    if pinned is None:
        return highlights

    return RepositoryHighlights(
        most_starred=highlights.most_starred,
        most_forked=highlights.most_forked,
        oldest_repo=highlights.oldest_repo,
        newest_repo=highlights.newest_repo,
        # pinnedItems may contain empty nodes for non-repository items
        pinned=[format_pinned(item) for item in pinned if item],
    )


def compute_totals(repos: list[dict]) -> RepositoryTotals:
    """Sum stars, forks, watchers and open issues over the given repositories."""
    return RepositoryTotals(
        stars=sum(repo.get("stargazers_count", 0) for repo in repos),
        forks=sum(repo.get("forks_count", 0) for repo in repos),
        watchers=sum(repo.get("watchers_count", 0) for repo in repos),
        issues=sum(repo.get("open_issues_count", 0) for repo in repos),
    )
