"""Verdict sentence and meme caption prompts for a comparison.

Phrase and template selection is random within a band so repeated
comparisons read differently. The random source is injected; pass a
seeded `random.Random` (or any object with `choice`) for repeatable output.
"""

import random
from collections.abc import Sequence
from typing import Protocol, TypeVar

from ghcompare.comparator import select_supporting_metric
from ghcompare.models import ComparisonMetric, MemePrompt, UserInsights

T = TypeVar("T")

DOMINANT_GAP = 100
CLOSE_GAP = 10
UNKNOWN_LANGUAGE = "mystery code"

MEME_TEMPLATES: dict[str, tuple[str, ...]] = {
    "dominant": ("61579", "112126428"),  # One Does Not Simply, Distracted Boyfriend
    "close": ("129242436", "87743020"),  # Change My Mind, Two Buttons
    "upset": ("181913649", "124822590"),  # Drake Hotline Bling, Left Exit 12
    "tie": ("438680", "247375501"),  # Batman Slapping Robin, Buff Doge vs Cheems
}

MEME_PHRASES: dict[str, tuple[tuple[str, str], ...]] = {
    "dominant": (
        (
            "{winner} flexing {metric}",
            "{loser} stuck on {loser_value} while {winner} hits {winner_value}.",
        ),
        (
            "One does not simply catch {winner}",
            "{winner_value} {metric} vs {loser_value}. Not even close.",
        ),
        (
            "{loser} looking at {winner}'s {metric}",
            "{winner_language} carried {winner} to {winner_value}.",
        ),
    ),
    "close": (
        ("{winner} edges out {loser}", "{metric}: {winner_value} vs {loser_value}. Photo finish."),
        ("{metric} is basically a draw", "{winner} wins by {gap}. Change my mind."),
        ("{winner_language} vs {loser_language}", "{winner} squeaks ahead on {metric} by {gap}."),
    ),
    "upset": (
        ("{loser} at {loser_value} {metric}", "{winner} at {winner_value}. Plot twist."),
        ("Nobody expected {winner}", "to beat {loser} on {metric} by {gap}."),
    ),
    "tie": (
        ("{user_a} vs {user_b}", "It's too close to call. Maybe open a PR together?"),
        (
            "{user_a} and {user_b}",
            "Same stats, different {user_a_language} and {user_b_language} opinions.",
        ),
    ),
}

# Only offered when the hero metric's loser leads the runner-up metric.
SUPPORTING_PHRASES: dict[str, tuple[tuple[str, str], ...]] = {
    "upset": (
        (
            "{winner} takes {metric} by {gap}",
            "but {support_winner} still leads on {support_metric}.",
        ),
    ),
}


class RandomSource(Protocol):
    def choice(self, seq: Sequence[T]) -> T: ...


def format_number(value: float) -> str:
    """Format a value rounded to 2 decimals, dropping a zero fraction."""
    rounded = round(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


def format_compact(value: float) -> str:
    """Format large values with a k/m suffix (12345 -> "12.3k")."""
    magnitude = abs(value)
    if magnitude >= 1_000_000:
        return f"{value / 1_000_000:.1f}m"
    if magnitude >= 1000:
        return f"{value / 1000:.1f}k"
    return format_number(value)


def _language(user: UserInsights) -> str:
    top = user.top_language
    return top.name if top else UNKNOWN_LANGUAGE


def _split(
    hero: ComparisonMetric, user_a: UserInsights, user_b: UserInsights
) -> tuple[UserInsights, UserInsights, float, float]:
    """Return (winner, loser, winner_value, loser_value); a non-negative diff favours user A."""
    if hero.diff >= 0:
        return user_a, user_b, hero.user_a, hero.user_b
    return user_b, user_a, hero.user_b, hero.user_a


def band_for_gap(gap: float) -> str:
    """Map the hero metric gap to a caption band."""
    if gap > DOMINANT_GAP:
        return "dominant"
    if gap < CLOSE_GAP:
        return "close"
    return "upset"


def build_summary(
    user_a: UserInsights,
    user_b: UserInsights,
    hero: ComparisonMetric | None,
) -> str:
    """Build the one-sentence verdict."""
    if hero is None:
        return f"{user_a.login} and {user_b.login} are neck and neck across all tracked metrics."

    winner, loser, _, _ = _split(hero, user_a, user_b)
    return (
        f"{winner.login} outshines {loser.login} on {hero.label.lower()} "
        f"by {format_number(hero.gap)}. Check the charts for the full story."
    )


def derive_meme_prompt(
    user_a: UserInsights,
    user_b: UserInsights,
    metrics: list[ComparisonMetric],
    hero: ComparisonMetric | None,
    rng: RandomSource | None = None,
) -> MemePrompt:
    """Pick a caption template and phrase pair for the comparison outcome.

    Args:
        user_a: First user.
        user_b: Second user.
        metrics: All comparison metrics.
        hero: Hero metric, or None on a full tie.
        rng: Random source used for template and phrase choice.

    Returns:
        MemePrompt for the band the outcome falls in.
    """
    rng = rng or random.Random()
    context = {
        "user_a": user_a.login,
        "user_b": user_b.login,
        "user_a_language": _language(user_a),
        "user_b_language": _language(user_b),
    }

    if hero is None:
        band = "tie"
        phrases = list(MEME_PHRASES[band])
    else:
        winner, loser, winner_value, loser_value = _split(hero, user_a, user_b)
        band = band_for_gap(hero.gap)
        context.update(
            winner=winner.login,
            loser=loser.login,
            metric=hero.label.lower(),
            winner_value=format_compact(winner_value),
            loser_value=format_compact(loser_value),
            gap=format_compact(hero.gap),
            winner_language=_language(winner),
            loser_language=_language(loser),
        )
        phrases = list(MEME_PHRASES[band])

        support = select_supporting_metric(metrics, hero)
        if (
            support is not None
            and band in SUPPORTING_PHRASES
            and (support.diff >= 0) != (hero.diff >= 0)
        ):
            context.update(
                support_metric=support.label.lower(),
                support_winner=loser.login,
            )
            phrases.extend(SUPPORTING_PHRASES[band])

    template_id = rng.choice(MEME_TEMPLATES[band])
    top, bottom = rng.choice(phrases)
    return MemePrompt(
        template_id=template_id,
        top_text=top.format(**context),
        bottom_text=bottom.format(**context),
        category=band,
    )
