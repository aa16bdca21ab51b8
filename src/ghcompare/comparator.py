"""Head-to-head metrics between two users."""

from ghcompare.models import ComparisonMetric, MetricDirection, UserInsights

EQUAL_TOLERANCE = 0.01


def build_metric(
    metric_id: str,
    label: str,
    user_a: float,
    user_b: float,
    description: str | None = None,
) -> ComparisonMetric:
    """Build a metric with a rounded signed difference and direction.

    Differences within EQUAL_TOLERANCE count as equal.

    Args:
        metric_id: Stable metric identifier.
        label: Human readable label.
        user_a: Value for the first user.
        user_b: Value for the second user.
        description: What the metric measures.

    Returns:
        ComparisonMetric.
    """
    diff = round(user_a - user_b, 2)
    if abs(diff) <= EQUAL_TOLERANCE:
        direction = MetricDirection.EQUAL
    elif diff > 0:
        direction = MetricDirection.UP
    else:
        direction = MetricDirection.DOWN

    return ComparisonMetric(
        id=metric_id,
        label=label,
        user_a=user_a,
        user_b=user_b,
        diff=diff,
        direction=direction,
        description=description,
    )


def build_comparison_metrics(user_a: UserInsights, user_b: UserInsights) -> list[ComparisonMetric]:
    """Build the seven fixed metrics, in display order.

    Missing contribution or language data counts as 0.
    """
    a_contrib = user_a.contributions
    b_contrib = user_b.contributions
    a_top = user_a.top_language
    b_top = user_b.top_language

    return [
        build_metric(
            "repositories",
            "Public Repositories",
            user_a.public_repos,
            user_b.public_repos,
            "Total public repositories owned by each user.",
        ),
        build_metric(
            "stars",
            "Repository Stars",
            user_a.totals.stars,
            user_b.totals.stars,
            "Sum of stars across public repositories.",
        ),
        build_metric(
            "followers",
            "Followers",
            user_a.followers,
            user_b.followers,
            "Follower counts indicate community reach.",
        ),
        build_metric(
            "weekly_contributions",
            "Average Weekly Contributions",
            a_contrib.weekly_average if a_contrib else 0,
            b_contrib.weekly_average if b_contrib else 0,
            "Average contributions per week over the last year.",
        ),
        build_metric(
            "yearly_contributions",
            "Yearly Contributions",
            a_contrib.last_year if a_contrib else 0,
            b_contrib.last_year if b_contrib else 0,
            "Total contributions in the last 52 weeks.",
        ),
        build_metric(
            "top_language_share",
            "Top Language Share (%)",
            a_top.percentage if a_top else 0,
            b_top.percentage if b_top else 0,
            "Share of work done in the most used language.",
        ),
        build_metric(
            "pull_requests",
            "Pull Request Contributions",
            a_contrib.breakdown.pull_requests if a_contrib else 0,
            b_contrib.breakdown.pull_requests if b_contrib else 0,
            "Pull requests made in the last year.",
        ),
    ]


def _ranked_by_gap(metrics: list[ComparisonMetric]) -> list[ComparisonMetric]:
    # sorted is stable: equal gaps keep list order
    return sorted(
        (metric for metric in metrics if metric.direction != MetricDirection.EQUAL),
        key=lambda metric: metric.gap,
        reverse=True,
    )


def select_hero_metric(metrics: list[ComparisonMetric]) -> ComparisonMetric | None:
    """Return the non-equal metric with the largest gap, or None on a full tie."""
    ranked = _ranked_by_gap(metrics)
    return ranked[0] if ranked else None


def select_supporting_metric(
    metrics: list[ComparisonMetric],
    hero: ComparisonMetric | None,
) -> ComparisonMetric | None:
    """Return the next-largest-gap metric after the hero, if any."""
    if hero is None:
        return None
    for metric in _ranked_by_gap(metrics):
        if metric.id != hero.id:
            return metric
    return None
