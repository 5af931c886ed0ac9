"""
Rich rendering for the fxbias CLI
"""

from typing import Iterable, List, Optional

import pandas as pd
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.padding import Padding
from rich.table import Table

from fxbias.analysis.direction import compute_deviations
from fxbias.analysis.models import AnalysisData, Direction, PairBias
from fxbias.risk.models import RiskConviction, RiskSentimentAnalysis, RiskSignal


DIRECTION_COLORS = {
    Direction.VERY_BULLISH: "bold green",
    Direction.BULLISH: "green",
    Direction.NEUTRAL: "white",
    Direction.BEARISH: "red",
    Direction.VERY_BEARISH: "bold red",
}

SIGNAL_COLORS = {
    RiskSignal.RISK_ON: "green",
    RiskSignal.RISK_OFF: "red",
    RiskSignal.NEUTRAL: "yellow",
}


def _signed(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:+.2f}"


class DisplayManager:
    """All CLI output goes through here"""

    def __init__(self, width: int = 100):
        self.console = Console(width=width)

    def _direction(self, direction: Direction) -> str:
        color = DIRECTION_COLORS.get(direction, "white")
        return f"[{color}]{direction.value}[/{color}]"

    def _signal(self, signal: RiskSignal) -> str:
        color = SIGNAL_COLORS.get(signal, "white")
        return f"[{color}]{signal.value}[/{color}]"

    def show_currencies(self, analysis_data: AnalysisData, order: Optional[Iterable[str]] = None) -> None:
        """Per-currency scores, modifiers and direction"""
        codes = [c for c in (order if order is not None else analysis_data.keys()) if analysis_data.get(c) is not None]
        if not codes:
            self.show_warning("No currency has been analysed yet.")
            return

        deviations = compute_deviations(analysis_data)
        table = Table(title="Currency Bias", box=box.ROUNDED, show_lines=False)
        table.add_column("Currency", style="bold cyan", width=10)
        table.add_column("Sigma", justify="right")
        table.add_column("Event", justify="right")
        table.add_column("Risk", justify="right")
        table.add_column("Final", justify="right")
        table.add_column("Deviation", justify="right")
        table.add_column("Direction", width=14)
        table.add_column("Scored", justify="right")

        for code in codes:
            ca = analysis_data[code]
            table.add_row(
                code,
                _signed(ca.sigma_score),
                f"{ca.event_modifier_score:+d}",
                f"{ca.risk_modifier:+d}",
                _signed(ca.final_score),
                _signed(deviations.get(code)),
                self._direction(ca.direction),
                str(len(ca.scores)),
            )

        self.console.print(table)

    def show_pairs(self, pairs: List[PairBias], top: Optional[int] = None) -> None:
        if not pairs:
            self.show_warning("At least two analysed currencies are needed for pair biases.")
            return

        table = Table(title="Pair Bias", box=box.ROUNDED)
        table.add_column("Pair", style="bold cyan", width=10)
        table.add_column("Spread", justify="right")
        table.add_column("Bias", width=14)

        for pair in pairs[:top] if top else pairs:
            table.add_row(pair.name, _signed(pair.spread), self._direction(pair.bias))

        self.console.print(table)

    def show_risk_sentiment(self, sentiment: Optional[RiskSentimentAnalysis]) -> None:
        """Instrument readings plus the overall mood panel"""
        if sentiment is None:
            self.show_warning("No risk sentiment yet. Run `fxbias risk --refresh`.")
            return

        table = Table(title="Risk Sentiment", box=box.ROUNDED, show_lines=True)
        table.add_column("Instrument", style="bold cyan", width=18)
        table.add_column("Role", width=22)
        table.add_column("Signal", width=10)
        table.add_column("Override", width=10)
        table.add_column("Rationale")

        for ia in sentiment.instruments().values():
            override = self._signal(ia.user_override_signal) if ia.user_override_signal else "-"
            table.add_row(ia.name, ia.role, self._signal(ia.signal), override, ia.rationale)

        self.console.print(table)

        s = sentiment.summary
        lines = [
            f"[bold]Overall:[/bold]    {self._signal(sentiment.overall_signal)}",
            f"[bold]Conviction:[/bold] {sentiment.conviction.value}",
            f"[bold]Signals:[/bold]    {s.on} on / {s.off} off / {s.neutral} neutral",
        ]
        if sentiment.user_override_signal or sentiment.user_override_conviction:
            lines.append("[dim]Overall values are manually overridden.[/dim]")

        border = SIGNAL_COLORS.get(sentiment.overall_signal, "blue")
        if sentiment.conviction == RiskConviction.UNCERTAIN:
            border = "yellow"
        self.console.print(Padding(Panel("\n".join(lines), title="Market Mood", border_style=border), (1, 0, 0, 0)))

    def show_history(self, currency: str, frame: pd.DataFrame) -> None:
        if frame.empty:
            self.show_warning(f"No history recorded for {currency}.")
            return

        table = Table(title=f"{currency} History", box=box.ROUNDED)
        table.add_column("Date", style="bold cyan")
        for column in frame.columns:
            table.add_column(str(column), justify="right")

        for day, row in frame.iterrows():
            table.add_row(str(day), *["-" if pd.isna(v) else f"{v:+.2f}" for v in row.tolist()])

        self.console.print(table)

    def show_error(self, message: str, title: str = "Error") -> None:
        self.console.print(Panel(f"[red]{escape(message)}[/red]", title=title, border_style="red"))

    def show_success(self, message: str, title: str = "Success") -> None:
        self.console.print(Panel(f"[green]{escape(message)}[/green]", title=title, border_style="green"))

    def show_warning(self, message: str, title: str = "Warning") -> None:
        self.console.print(Panel(f"[yellow]{escape(message)}[/yellow]", title=title, border_style="yellow"))
