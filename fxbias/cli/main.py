from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from fxbias.analysis.history import SIGMA_COLUMN, history_frame
from fxbias.analysis.store import AnalysisStore, EngineState
from fxbias.cache import TTLCache
from fxbias.cli.display import DisplayManager
from fxbias.config import EngineSettings, load_config, reset_config
from fxbias.market_data.alpha_vantage import AlphaVantageClient
from fxbias.market_data.service import fetch_and_analyze_risk_sentiment
from fxbias.persistence import JsonStateStore
from fxbias.risk.models import INSTRUMENT_KEYS, RiskConviction, RiskSignal
from fxbias.utils.errors import FxBiasError, ValidationError
from fxbias.utils.paths import resolve_project_path
from fxbias.utils.validation import validate_currency_code, validate_currency_pair


app = typer.Typer(add_completion=False, help="Currency bias engine CLI")


@dataclass
class Session:
    settings: EngineSettings
    state_file: JsonStateStore

    def load(self) -> AnalysisStore:
        defaults = EngineState(
            use_score_modifier=self.settings.use_score_modifier,
            use_risk_modifier=self.settings.use_risk_modifier,
        )
        return self.state_file.load(cache=TTLCache(self.settings.cache_ttl_seconds), defaults=defaults)

    def save(self, store: AnalysisStore) -> Path:
        return self.state_file.save(store)


def _fail(display: DisplayManager, error: Exception) -> None:
    display.show_error(str(error))
    raise typer.Exit(code=1)


def _currency(code: str) -> str:
    return validate_currency_code(code.strip().upper())


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
):
    """Load configuration and locate the state file."""
    try:
        if config is not None:
            reset_config()
        cfg = load_config(str(config) if config is not None else "config.yaml")
    except FxBiasError as e:
        typer.secho(f"Failed to load configuration: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    settings = EngineSettings.from_config(cfg)
    ctx.obj = Session(settings=settings, state_file=JsonStateStore(resolve_project_path(settings.state_path)))


@app.command("show")
def show(ctx: typer.Context):
    """Show scores, modifiers and direction for every analysed currency."""
    session: Session = ctx.obj
    display = DisplayManager()
    try:
        store = session.load()
    except FxBiasError as e:
        _fail(display, e)
    display.show_currencies(store.analysis_data, order=session.settings.currencies)


@app.command("pairs")
def pairs(
    ctx: typer.Context,
    pair: Optional[str] = typer.Argument(None, help="Show a single pair, e.g. EUR/USD or EURUSD"),
    top: Optional[int] = typer.Option(None, "--top", "-n", min=1, help="Only the N strongest pairs"),
):
    """Rank currency pairs by the spread between their deviations."""
    session: Session = ctx.obj
    display = DisplayManager()
    try:
        store = session.load()
        ranked = store.currency_pairs(order=session.settings.currencies)
        if pair is not None:
            base, quote = validate_currency_pair(pair)
            ranked = [p for p in ranked if (p.base, p.quote) == (base, quote)]
            if not ranked:
                raise ValidationError(f"{base}/{quote} needs both currencies analysed")
    except FxBiasError as e:
        _fail(display, e)
    display.show_pairs(ranked, top=top)


@app.command("risk")
def risk(
    ctx: typer.Context,
    refresh: bool = typer.Option(False, "--refresh", "-r", help="Fetch fresh market data from Alpha Vantage"),
):
    """Show (and optionally refresh) the market risk sentiment."""
    session: Session = ctx.obj
    display = DisplayManager()
    try:
        store = session.load()
        if refresh:
            client = AlphaVantageClient(settings=session.settings.market_data, cache=store.cache)
            with display.console.status("Fetching market data..."):
                sentiment = asyncio.run(
                    fetch_and_analyze_risk_sentiment(client, previous=store.risk_sentiment)
                )
            store.set_risk_sentiment(sentiment)
            session.save(store)
    except FxBiasError as e:
        _fail(display, e)
    display.show_risk_sentiment(store.risk_sentiment)


@app.command("history")
def history(
    ctx: typer.Context,
    currency: str = typer.Argument(..., help="Currency code, e.g. USD"),
    indicators: Optional[List[str]] = typer.Option(
        None, "--indicator", "-i", help="Indicator score column to include (repeat option)"
    ),
):
    """Show the daily snapshots recorded for one currency."""
    session: Session = ctx.obj
    display = DisplayManager()
    try:
        code = _currency(currency)
        store = session.load()
    except FxBiasError as e:
        _fail(display, e)
    frame = history_frame(store.history, code, indicators or [])
    display.show_history(code, frame[frame[SIGMA_COLUMN].notna()])


@app.command("override-score")
def override_score(
    ctx: typer.Context,
    currency: str = typer.Argument(..., help="Currency code, e.g. USD"),
    indicator: str = typer.Argument(..., help="Indicator name, e.g. CPI"),
    score: int = typer.Option(..., "--score", "-s", help="Score in [-2, 2]"),
):
    """Manually set one indicator score."""
    session: Session = ctx.obj
    display = DisplayManager()
    try:
        code = _currency(currency)
        store = session.load()
        ca = store.update_score(code, indicator, score)
        store.save_snapshot()
        session.save(store)
    except FxBiasError as e:
        _fail(display, e)
    display.show_success(
        f"{code} {indicator} set to {score:+d}. Sigma {ca.sigma_score:+.2f}, {ca.direction.value}."
    )


@app.command("event-modifier")
def event_modifier(
    ctx: typer.Context,
    currency: str = typer.Argument(..., help="Currency code, e.g. USD"),
    value: int = typer.Option(..., "--value", "-v", help="Event modifier: -1, 0 or 1"),
    rationale: Optional[str] = typer.Option(None, "--rationale", help="Why the modifier was set"),
):
    """Set the event modifier of an analysed currency."""
    session: Session = ctx.obj
    display = DisplayManager()
    try:
        code = _currency(currency)
        store = session.load()
        if store.analysis_data.get(code) is None:
            raise ValidationError(f"{code} has not been analysed yet")
        if rationale:
            store.set_event_modifier_rationale(code, rationale)
        store.set_event_modifier(code, value)
        session.save(store)
    except FxBiasError as e:
        _fail(display, e)
    ca = store.analysis_data[code]
    display.show_success(f"{code} event modifier {ca.event_modifier_score:+d}, {ca.direction.value}.")


@app.command("risk-override")
def risk_override(
    ctx: typer.Context,
    signal: Optional[RiskSignal] = typer.Option(None, "--signal", case_sensitive=False, help="Risk-On, Risk-Off or Neutral"),
    conviction: Optional[RiskConviction] = typer.Option(
        None, "--conviction", case_sensitive=False, help="Overall conviction override"
    ),
    instrument: Optional[str] = typer.Option(
        None, "--instrument", help=f"Override one instrument instead: {', '.join(INSTRUMENT_KEYS)}"
    ),
    clear: bool = typer.Option(False, "--clear", help="Remove the override"),
):
    """Override the risk signal of one instrument or of the overall sentiment."""
    session: Session = ctx.obj
    display = DisplayManager()
    try:
        if not clear and signal is None and conviction is None:
            raise ValidationError("Give --signal/--conviction, or --clear")
        store = session.load()
        if store.risk_sentiment is None:
            raise ValidationError("No risk sentiment to override; run `fxbias risk --refresh` first")

        if instrument is not None:
            store.set_indicator_override(instrument.lower(), None if clear else signal)
        else:
            store.set_overall_override(None if clear else signal, None if clear else conviction)
        session.save(store)
    except FxBiasError as e:
        _fail(display, e)
    display.show_risk_sentiment(store.risk_sentiment)


@app.command("modifiers")
def modifiers(
    ctx: typer.Context,
    risk_modifier: Optional[bool] = typer.Option(None, "--risk/--no-risk", help="Apply risk sentiment modifiers"),
    score_modifier: Optional[bool] = typer.Option(
        None, "--score/--no-score", help="Apply recap score modifiers"
    ),
):
    """Toggle the modifier settings stored with the state."""
    session: Session = ctx.obj
    display = DisplayManager()
    try:
        store = session.load()
        if risk_modifier is not None:
            store.set_use_risk_modifier(risk_modifier)
        if score_modifier is not None:
            store.set_use_score_modifier(score_modifier)
        session.save(store)
    except FxBiasError as e:
        _fail(display, e)
    state = store.state
    display.show_success(
        f"Risk modifier {'on' if state.use_risk_modifier else 'off'}, "
        f"score modifier {'on' if state.use_score_modifier else 'off'}."
    )


if __name__ == "__main__":
    app()
