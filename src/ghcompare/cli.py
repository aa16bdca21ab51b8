"""Command-line interface for ghcompare."""

import asyncio
import json
import logging
from collections.abc import Coroutine
from typing import Any

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ghcompare.config import ComparisonPair, PairsConfigError, Settings, get_settings
from ghcompare.export import metrics_frame, weekly_series_frame, write_frame
from ghcompare.github_client import GitHubAPIError, GitHubClient, NotFoundError, RateLimitError
from ghcompare.insights import InsightsService, InvalidInputError
from ghcompare.meme import MemeGenerator
from ghcompare.models import ComparisonResult, MemeResult, MetricDirection, UserInsights
from ghcompare.narrative import format_compact
from ghcompare.schemas import ComparisonInput

console = Console()

DIRECTION_STYLES = {
    MetricDirection.UP: "green",
    MetricDirection.DOWN: "red",
    MetricDirection.EQUAL: "dim",
}


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine, turning known failures into a clean exit."""
    try:
        return asyncio.run(coro)
    except (InvalidInputError, ValidationError) as e:
        console.print(f"[red]Invalid input: {escape(str(e))}[/red]")
        raise click.exceptions.Exit(2) from e
    except NotFoundError as e:
        console.print(f"[red]GitHub user not found: {escape(str(e))}[/red]")
        raise click.exceptions.Exit(1) from e
    except RateLimitError as e:
        reset = e.reset_at.isoformat() if e.reset_at else "unknown"
        console.print(f"[red]GitHub rate limit exceeded (resets at {reset})[/red]")
        raise click.exceptions.Exit(1) from e
    except GitHubAPIError as e:
        console.print(f"[red]GitHub API error {e.status}: {escape(str(e))}[/red]")
        raise click.exceptions.Exit(1) from e


def _load_pairs(settings: Settings) -> list[ComparisonPair]:
    try:
        return settings.load_pairs()
    except PairsConfigError as e:
        console.print(f"[red]Invalid pairs.yaml: {escape(str(e))}[/red]")
        raise click.exceptions.Exit(2) from e


def _print_insights(user: UserInsights) -> None:
    console.print(f"\n[bold cyan]{user.login}[/bold cyan] {user.name or ''}")
    console.print(f"[dim]{user.profile_url}[/dim]")

    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Followers", str(user.followers))
    table.add_row("Public repositories", str(user.public_repos))
    table.add_row("Stars", str(user.totals.stars))
    table.add_row("Forks", str(user.totals.forks))
    if user.contributions:
        table.add_row("Contributions (last year)", str(user.contributions.last_year))
        table.add_row("Weekly average", str(user.contributions.weekly_average))
        table.add_row("Longest streak", f"{user.contributions.streak.longest} days")
    console.print(table)

    if user.languages:
        languages = Table(title="Languages")
        languages.add_column("Language", style="green")
        languages.add_column("Share", justify="right")
        languages.add_column("Repositories", justify="right")
        for lang in user.languages:
            languages.add_row(lang.name, f"{lang.percentage}%", str(lang.repo_count))
        console.print(languages)


def _print_comparison(result: ComparisonResult, meme: MemeResult | None) -> None:
    hero_id = result.hero_metric.id if result.hero_metric else None

    table = Table(title=f"{result.user_a.login} vs {result.user_b.login}")
    table.add_column("Metric", style="cyan")
    table.add_column(result.user_a.login, justify="right")
    table.add_column(result.user_b.login, justify="right")
    table.add_column("Diff", justify="right")

    for metric in result.metrics:
        label = f"[bold]{metric.label} *[/bold]" if metric.id == hero_id else metric.label
        style = DIRECTION_STYLES[metric.direction]
        table.add_row(
            label,
            format_compact(metric.user_a),
            format_compact(metric.user_b),
            f"[{style}]{metric.diff:+g}[/{style}]",
        )

    console.print(table)
    console.print(f"\n{escape(result.summary)}")

    if result.meme_prompt:
        console.print(
            f"[dim]Meme ({result.meme_prompt.category}): "
            f"{escape(result.meme_prompt.top_text)} / "
            f"{escape(result.meme_prompt.bottom_text)}[/dim]"
        )
    if meme:
        console.print(f"[green]Meme: {meme.url}[/green]")


async def _insights(settings: Settings, handle: str, refresh: bool) -> UserInsights:
    async with GitHubClient(settings.github_token, timeout=settings.request_timeout) as client:
        service = InsightsService(client, cache_ttl=settings.cache_ttl_seconds)
        return await service.get_user_insights(handle, force_refresh=refresh)


async def _compare_pairs(
    settings: Settings,
    pairs: list[ComparisonPair],
    with_meme: bool,
) -> list[tuple[ComparisonResult, MemeResult | None]]:
    """Compare each pair with one shared service so repeated users hit the cache."""
    generator = MemeGenerator(
        settings.imgflip_username,
        settings.imgflip_password,
        timeout=settings.request_timeout,
    )
    results = []

    async with GitHubClient(settings.github_token, timeout=settings.request_timeout) as client:
        service = InsightsService(client, cache_ttl=settings.cache_ttl_seconds)
        for pair in pairs:
            request = ComparisonInput(user_a=pair.user_a, user_b=pair.user_b, refresh=pair.refresh)
            result = await service.compare_users(
                request.user_a, request.user_b, force_refresh=request.refresh
            )
            meme = await generator.generate(result.meme_prompt) if with_meme else None
            results.append((result, meme))

    return results


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Compare GitHub users head to head."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@main.command()
@click.argument("handle")
@click.option("--refresh", is_flag=True, help="Bypass the cache")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def insights(ctx: click.Context, handle: str, refresh: bool, as_json: bool) -> None:
    """Show insights for one user.

    Examples:
        ghcompare insights octocat
        ghcompare insights https://github.com/octocat --json
    """
    settings = get_settings()
    user = _run(_insights(settings, handle, refresh))

    if as_json:
        click.echo(json.dumps(user.to_dict(), indent=2))
        return

    _print_insights(user)


@main.command()
@click.argument("user_a")
@click.argument("user_b")
@click.option("--refresh", is_flag=True, help="Bypass the cache")
@click.option("--meme/--no-meme", default=False, help="Caption a meme via Imgflip")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.option(
    "--export", "-o", "export_path", type=click.Path(), help="Export metrics (.csv/.json/.parquet)"
)
@click.option("--weekly", "weekly_path", type=click.Path(), help="Export weekly contributions")
@click.pass_context
def compare(
    ctx: click.Context,
    user_a: str,
    user_b: str,
    refresh: bool,
    meme: bool,
    as_json: bool,
    export_path: str | None,
    weekly_path: str | None,
) -> None:
    """Compare two users.

    Examples:
        ghcompare compare torvalds gvanrossum
        ghcompare compare @octocat https://github.com/defunkt --meme
        ghcompare compare octocat defunkt -o metrics.csv
    """
    settings = get_settings()
    pair = ComparisonPair(user_a=user_a, user_b=user_b, refresh=refresh)
    [(result, meme_result)] = _run(_compare_pairs(settings, [pair], meme))

    if as_json:
        payload = {
            "comparison": result.to_dict(),
            "meme": meme_result.to_dict() if meme_result else None,
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        _print_comparison(result, meme_result)

    if export_path:
        path = write_frame(metrics_frame(result), export_path)
        console.print(f"[green]Exported metrics to {path}[/green]")
    if weekly_path:
        path = write_frame(weekly_series_frame(result), weekly_path)
        console.print(f"[green]Exported weekly contributions to {path}[/green]")


@main.command()
@click.option("--meme/--no-meme", default=False, help="Caption a meme via Imgflip")
@click.option("--dry-run", is_flag=True, help="Show what would be compared")
@click.pass_context
def batch(ctx: click.Context, meme: bool, dry_run: bool) -> None:
    """Compare every pair configured in config/pairs.yaml."""
    settings = get_settings()
    pairs = _load_pairs(settings)

    if not pairs:
        console.print("[yellow]No pairs configured in config/pairs.yaml[/yellow]")
        return

    if dry_run:
        for pair in pairs:
            console.print(f"  Would compare: {pair.user_a} vs {pair.user_b}")
        return

    for result, meme_result in _run(_compare_pairs(settings, pairs, meme)):
        _print_comparison(result, meme_result)


@main.command("list")
@click.pass_context
def list_pairs(ctx: click.Context) -> None:
    """List configured comparison pairs."""
    settings = get_settings()
    pairs = _load_pairs(settings)

    if not pairs:
        console.print("[yellow]No pairs configured in config/pairs.yaml[/yellow]")
        return

    table = Table(title="Configured Pairs")
    table.add_column("User A", style="cyan")
    table.add_column("User B", style="green")

    for pair in pairs:
        table.add_row(pair.user_a, pair.user_b)

    console.print(table)


if __name__ == "__main__":
    main()
