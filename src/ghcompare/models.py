"""Data models for ghcompare."""

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True)
class RepositoryHighlight:
    """Display-relevant fields of a single repository.

    Attributes:
        name: Repository name (e.g., "hello-world").
        description: Repository description, if any.
        url: Canonical repository URL.
        stargazers: Number of stars.
        forks: Number of forks (0 for pinned items, which do not expose it).
        primary_language: Primary language reported upstream.
        created_at: Creation timestamp (ISO 8601).
        updated_at: Last update timestamp (ISO 8601).
        is_archived: True if the repository is archived or disabled.
    """

    name: str
    url: str
    stargazers: int = 0
    forks: int = 0
    description: str | None = None
    primary_language: str | None = None
    created_at: str = ""
    updated_at: str = ""
    is_archived: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output.

        Returns:
            Dictionary representation of the repository.
        """
        return {
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "stargazers": self.stargazers,
            "forks": self.forks,
            "primaryLanguage": self.primary_language,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "isArchived": self.is_archived,
        }


@dataclass(frozen=True)
class RepositoryTotals:
    """Counters summed across the fetched repositories."""

    stars: int = 0
    forks: int = 0
    watchers: int = 0
    issues: int = 0

    def to_dict(self) -> dict:
        return {
            "stars": self.stars,
            "forks": self.forks,
            "watchers": self.watchers,
            "issues": self.issues,
        }


@dataclass(frozen=True)
class LanguageStat:
    """Aggregated usage of one language.

    Attributes:
        name: Language name.
        bytes: Byte volume, or repository count when byte data is unavailable.
        percentage: Share of the total volume, truncated to 2 decimals.
        repo_count: Number of repositories containing the language.
        color: Display color from the graph API, if known.
    """

    name: str
    bytes: int
    percentage: float
    repo_count: int
    color: str | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "bytes": self.bytes,
            "percentage": self.percentage,
            "repoCount": self.repo_count,
            "color": self.color,
        }


@dataclass(frozen=True)
class WeeklyContribution:
    week_start: str
    total: int

    def to_dict(self) -> dict:
        return {"weekStart": self.week_start, "total": self.total}


@dataclass(frozen=True)
class ContributionStreak:
    current: int = 0
    longest: int = 0

    def to_dict(self) -> dict:
        return {"current": self.current, "longest": self.longest}


@dataclass(frozen=True)
class ContributionBreakdown:
    """Contribution counts by kind. `restricted` counts private activity."""

    commits: int = 0
    pull_requests: int = 0
    reviews: int = 0
    issues: int = 0
    restricted: int = 0

    def to_dict(self) -> dict:
        return {
            "commits": self.commits,
            "pullRequests": self.pull_requests,
            "reviews": self.reviews,
            "issues": self.issues,
            "restricted": self.restricted,
        }


@dataclass(frozen=True)
class ContributionStats:
    """Contribution calendar summary.

    Attributes:
        total: Lifetime total reported by the contribution calendar.
        last_year: Sum of the weekly totals in the returned window.
        weekly_average: Mean weekly total, rounded to 2 decimals.
        weekly_max: Largest weekly total.
        weekly_series: Weekly totals in calendar order.
        streak: Current and longest daily streaks.
        breakdown: Counts by contribution kind.
    """

    total: int
    last_year: int
    weekly_average: float
    weekly_max: int
    weekly_series: list[WeeklyContribution] = field(default_factory=list)
    streak: ContributionStreak = field(default_factory=ContributionStreak)
    breakdown: ContributionBreakdown = field(default_factory=ContributionBreakdown)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "lastYear": self.last_year,
            "weeklyAverage": self.weekly_average,
            "weeklyMax": self.weekly_max,
            "weeklySeries": [week.to_dict() for week in self.weekly_series],
            "streak": self.streak.to_dict(),
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class RepositoryHighlights:
    """Superlative repository picks plus pinned repositories.

    `pinned` is None when graph analytics were unavailable.
    """

    most_starred: RepositoryHighlight | None = None
    most_forked: RepositoryHighlight | None = None
    oldest_repo: RepositoryHighlight | None = None
    newest_repo: RepositoryHighlight | None = None
    pinned: list[RepositoryHighlight] | None = None

    def to_dict(self) -> dict:
        def _opt(repo: RepositoryHighlight | None) -> dict | None:
            return repo.to_dict() if repo else None

        return {
            "mostStarred": _opt(self.most_starred),
            "mostForked": _opt(self.most_forked),
            "oldestRepo": _opt(self.oldest_repo),
            "newestRepo": _opt(self.newest_repo),
            "pinned": [repo.to_dict() for repo in self.pinned] if self.pinned is not None else None,
        }


@dataclass(frozen=True)
class UserInsights:
    """Normalized profile of one GitHub user.

    Attributes:
        login: Canonical handle as returned upstream (case preserved).
        name: Display name.
        avatar_url: Avatar image URL.
        profile_url: Profile page URL.
        bio: Profile bio.
        company: Company field.
        location: Location field.
        followers: Follower count.
        following: Following count.
        public_repos: Public repository count.
        public_gists: Public gist count.
        created_at: Account creation timestamp (ISO 8601).
        totals: Counters summed over the fetched repositories.
        languages: Top languages, largest first.
        contributions: Contribution summary, None without graph analytics.
        highlights: Superlative and pinned repositories.
        repositories: Every fetched repository.
    """

    login: str
    avatar_url: str
    profile_url: str
    name: str | None = None
    bio: str | None = None
    company: str | None = None
    location: str | None = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    public_gists: int = 0
    created_at: str = ""
    totals: RepositoryTotals = field(default_factory=RepositoryTotals)
    languages: list[LanguageStat] = field(default_factory=list)
    contributions: ContributionStats | None = None
    highlights: RepositoryHighlights = field(default_factory=RepositoryHighlights)
    repositories: list[RepositoryHighlight] = field(default_factory=list)

    @property
    def cache_key(self) -> str:
        """Case-folded login used for cache lookups."""
        return self.login.lower()

    @property
    def top_language(self) -> LanguageStat | None:
        """Highest-ranked language, if any were recorded."""
        return self.languages[0] if self.languages else None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output.

        Returns:
            Dictionary representation of the insights.
        """
        return {
            "login": self.login,
            "name": self.name,
            "avatarUrl": self.avatar_url,
            "profileUrl": self.profile_url,
            "bio": self.bio,
            "company": self.company,
            "location": self.location,
            "followers": self.followers,
            "following": self.following,
            "publicRepos": self.public_repos,
            "publicGists": self.public_gists,
            "createdAt": self.created_at,
            "totals": self.totals.to_dict(),
            "languages": [lang.to_dict() for lang in self.languages],
            "contributions": self.contributions.to_dict() if self.contributions else None,
            "highlights": self.highlights.to_dict(),
            "repositories": [repo.to_dict() for repo in self.repositories],
        }


class MetricDirection(StrEnum):
    """Direction of user A relative to user B."""

    UP = "up"
    DOWN = "down"
    EQUAL = "equal"


@dataclass(frozen=True)
class ComparisonMetric:
    """Head-to-head value of one metric.

    Attributes:
        id: Stable metric identifier (e.g., "stars").
        label: Human readable label.
        user_a: Value for the first user.
        user_b: Value for the second user.
        diff: user_a - user_b, rounded to 2 decimals.
        direction: Up, down or equal (within tolerance).
        description: What the metric measures.
    """

    id: str
    label: str
    user_a: float
    user_b: float
    diff: float
    direction: MetricDirection
    description: str | None = None

    @property
    def gap(self) -> float:
        return abs(self.diff)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "userA": self.user_a,
            "userB": self.user_b,
            "diff": self.diff,
            "direction": str(self.direction),
        }


@dataclass(frozen=True)
class MemePrompt:
    """Caption request for the meme service.

    Attributes:
        template_id: Caption template identifier.
        top_text: First caption line.
        bottom_text: Second caption line.
        category: Band that produced the prompt (dominant, close, upset, tie).
    """

    template_id: str
    top_text: str
    bottom_text: str
    category: str

    def to_dict(self) -> dict:
        return {
            "templateId": self.template_id,
            "topText": self.top_text,
            "bottomText": self.bottom_text,
            "category": self.category,
        }


@dataclass(frozen=True)
class MemeResult:
    url: str
    page_url: str

    def to_dict(self) -> dict:
        return {"url": self.url, "pageUrl": self.page_url}


@dataclass(frozen=True)
class ComparisonResult:
    """Full comparison of two users.

    Attributes:
        user_a: First user, as supplied by the caller.
        user_b: Second user.
        metrics: Fixed, ordered list of metrics.
        hero_metric: Metric with the largest gap, None on a full tie.
        summary: One-sentence verdict.
        meme_prompt: Caption prompt derived from the verdict.
    """

    user_a: UserInsights
    user_b: UserInsights
    metrics: list[ComparisonMetric]
    hero_metric: ComparisonMetric | None = None
    summary: str = ""
    meme_prompt: MemePrompt | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output.

        Returns:
            Dictionary representation of the comparison.
        """
        return {
            "userA": self.user_a.to_dict(),
            "userB": self.user_b.to_dict(),
            "metrics": [metric.to_dict() for metric in self.metrics],
            "heroMetric": self.hero_metric.to_dict() if self.hero_metric else None,
            "summary": self.summary,
            "memePrompt": self.meme_prompt.to_dict() if self.meme_prompt else None,
        }
