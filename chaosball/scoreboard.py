"""Rich scoreboard for terminal viewers."""

from typing import Optional

from rich.color import Color, ColorParseError
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from chaosball.core.models import Bet, GameState, GeneratedVisual, Possession, Team


def _team_style(team: Team) -> str:
    """Bold in the team color; plain bold when the generated color is not one rich knows."""
    color = team.color.strip().lower()
    try:
        Color.parse(color)
    except ColorParseError:
        return "bold"
    return f"bold {color}"


def render_score_line(state: GameState) -> Text:
    """Away score, quarter, clock, home score; a dot marks possession."""
    text = Text()

    if state.possession is Possession.AWAY:
        text.append("● ", style="bold #2e7d32")
    else:
        text.append("  ")
    text.append(f"{state.away_team.name} ", style=_team_style(state.away_team))
    text.append(f"{state.away_score:>3}", style="bold")

    text.append("    ")
    text.append(f"Q{state.quarter}", style="bold #666666")
    text.append(f"  {state.time_remaining}  ")

    text.append(f"{state.home_score:<3}", style="bold")
    text.append(f" {state.home_team.name}", style=_team_style(state.home_team))
    if state.possession is Possession.HOME:
        text.append(" ●", style="bold #2e7d32")

    return text


def render_odds(state: GameState) -> Table:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Home")
    table.add_column("Away")
    table.add_column("O/U")
    table.add_row(
        f"{state.odds.home_win:.2f}",
        f"{state.odds.away_win:.2f}",
        f"{state.odds.over_under:.2f}",
    )
    return table


def render_bets(bets: tuple[Bet, ...], wallet: float, limit: int = 5) -> Table:
    table = Table(title=f"Wallet {wallet:,.2f}", show_header=True, header_style="bold")
    table.add_column("Type")
    table.add_column("Stake", justify="right")
    table.add_column("Odds", justify="right")
    table.add_column("Status")
    status_styles = {"PENDING": "yellow", "WON": "green", "LOST": "red"}
    for bet in bets[:limit]:
        table.add_row(
            bet.type.value,
            f"{bet.amount:,.2f}",
            f"{bet.odds:.2f}",
            Text(bet.status.value, style=status_styles[bet.status.value]),
        )
    return table


def render_scoreboard(
    state: GameState,
    visual: Optional[GeneratedVisual] = None,
    bets: tuple[Bet, ...] = (),
    wallet: Optional[float] = None,
) -> Panel:
    """Full broadcast panel: score, narrative, odds, visual and slips."""
    parts = [render_score_line(state), Text("")]
    parts.append(Text(state.last_play_description, style="bold"))
    parts.append(Text(f'"{state.commentary}"', style="italic"))
    parts.append(render_odds(state))
    if visual is not None:
        parts.append(Text(f"[{visual.type.value}] {visual.prompt}", style="dim"))
    if wallet is not None:
        parts.append(render_bets(bets, wallet))

    title = state.venue or "ChaosBall"
    return Panel(Group(*parts), title=title, subtitle=state.status.value)
