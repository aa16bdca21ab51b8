"""Tabular export of comparison results using polars."""

from pathlib import Path

import polars as pl

from ghcompare.models import ComparisonResult

METRICS_SCHEMA = {
    "metric_id": pl.Utf8,
    "label": pl.Utf8,
    "user_a": pl.Utf8,
    "user_b": pl.Utf8,
    "value_a": pl.Float64,
    "value_b": pl.Float64,
    "diff": pl.Float64,
    "direction": pl.Utf8,
    "is_hero": pl.Boolean,
}

WEEKLY_SCHEMA = {
    "week_start": pl.Date,
    "login": pl.Utf8,
    "total": pl.Int64,
}


def metrics_frame(result: ComparisonResult) -> pl.DataFrame:
    """Build one row per comparison metric.

    Args:
        result: Comparison to export.

    Returns:
        DataFrame with METRICS_SCHEMA columns, in metric order.
    """
    hero_id = result.hero_metric.id if result.hero_metric else None
    rows = [
        {
            "metric_id": metric.id,
            "label": metric.label,
            "user_a": result.user_a.login,
            "user_b": result.user_b.login,
            "value_a": float(metric.user_a),
            "value_b": float(metric.user_b),
            "diff": float(metric.diff),
            "direction": str(metric.direction),
            "is_hero": metric.id == hero_id,
        }
        for metric in result.metrics
    ]
    return pl.DataFrame(rows, schema=METRICS_SCHEMA)


def weekly_series_frame(result: ComparisonResult) -> pl.DataFrame:
    """Build the weekly contribution series of both users in long format.

    Users without contribution data contribute no rows.

    Args:
        result: Comparison to export.

    Returns:
        DataFrame with WEEKLY_SCHEMA columns sorted by login and week.
    """
    rows = []
    for user in (result.user_a, result.user_b):
        if user.contributions is None:
            continue
        rows.extend(
            {"week_start": week.week_start, "login": user.login, "total": week.total}
            for week in user.contributions.weekly_series
        )

    if not rows:
        return pl.DataFrame(schema=WEEKLY_SCHEMA)

    return (
        pl.DataFrame(rows, schema={**WEEKLY_SCHEMA, "week_start": pl.Utf8})
        .with_columns(pl.col("week_start").str.to_date())
        .sort(["login", "week_start"])
    )


def write_frame(df: pl.DataFrame, output_path: str | Path) -> Path:
    """Write a DataFrame, choosing the format from the file suffix.

    Args:
        df: DataFrame to write.
        output_path: Destination ending in .csv, .json or .parquet.

    Returns:
        Path written to.

    Raises:
        ValueError: For an unsupported suffix.
    """
    path = Path(output_path)
    suffix = path.suffix.lower()
    if suffix not in (".csv", ".json", ".parquet"):
        raise ValueError(f"Unsupported export format: {path.suffix or '(none)'}")

    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        df.write_csv(path)
    elif suffix == ".json":
        df.write_json(path)
    else:
        df.write_parquet(path)
    return path
