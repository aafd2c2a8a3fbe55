"""Formatting and conversion utilities.

Percentages, standings tables and other human-readable renderings.
"""

from __future__ import annotations

from typing import Iterable

from hexclash.models.team import Team


def format_percent(value: float) -> str:
    """Format a 0..1 fraction as a percentage with one decimal."""
    return f"{value * 100:.1f}"


def format_standings(teams: Iterable[Team]) -> str:
    """One line per team, highest score first."""
    ranked = sorted(teams, key=lambda t: t.points, reverse=True)
    lines = []
    for place, team in enumerate(ranked, start=1):
        lines.append(f"{place}. {team.name}: {team.points} points ({team.games_won} games won)")
    return "\n".join(lines)
