#!filepath: minclock/cli.py
from typing import Optional

import typer
from rich import print
from rich.table import Table

from minclock import __version__
from minclock.config.app_config import AppConfig
from minclock.core.instant import Instant
from minclock.core.interval import Interval
from minclock.utils.errors import MinClockError
from minclock.utils.logger import logs

app = typer.Typer(help="minclock: immutable instants from the command line")


@logs.catch(msg="config load failed")
def _config(path: Optional[str]) -> AppConfig:
    cfg = AppConfig.load(path)
    cfg.apply()
    return cfg


def _fail(exc: Exception) -> None:
    print(f"[red]{type(exc).__name__}: {exc}[/red]")
    raise typer.Exit(code=1)


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def now(
    tz: Optional[str] = typer.Option(None, "--tz", help="Timezone (default from config)"),
    pattern: str = typer.Option("c", "--pattern", "-p", help="Format pattern"),
    config: Optional[str] = typer.Option(None, "--config", help="YAML config path"),
):
    """
    当前时间
    """
    cfg = _config(config)
    try:
        instant = cfg.build_clock().now()
        if tz:
            instant = instant.with_timezone(tz)
        print(instant.format(pattern))
    except MinClockError as exc:
        _fail(exc)


@app.command("format")
def format_(
    text: str,
    pattern: str = typer.Option("Y-m-d H:i:s", "--pattern", "-p"),
    tz: Optional[str] = typer.Option(None, "--tz", help="Zone to display in"),
):
    """
    Parse TEXT and print it with PATTERN (PHP date() tokens)
    """
    try:
        instant = Instant.parse(text)
        if tz:
            instant = instant.with_timezone(tz)
        print(instant.format(pattern))
    except MinClockError as exc:
        _fail(exc)


@app.command()
def shift(
    text: str,
    interval: str,
    pattern: str = typer.Option("c", "--pattern", "-p"),
):
    """
    TEXT + INTERVAL ("1 month", "-2 days", "P1Y2M")
    """
    try:
        iv = Interval.parse(interval)
        print(Instant.parse(text).add_interval(iv).format(pattern))
    except ValueError as exc:
        _fail(exc)


@app.command()
def diff(
    start: str,
    end: str,
    unit: Optional[str] = typer.Option(None, "--unit", "-u", help="seconds / minutes / ... / years"),
):
    """
    END - START (negative when END is earlier)
    """
    try:
        a, b = Instant.parse(start), Instant.parse(end)
        if unit:
            print(a.diff_in(unit, b))
        else:
            print(a.diff(b).to_iso())
    except ValueError as exc:
        _fail(exc)


@app.command()
def human(
    text: str,
    other: Optional[str] = typer.Option(None, "--other", help="Compare against this instead of now"),
    locale: Optional[str] = typer.Option(None, "--locale", "-l"),
    config: Optional[str] = typer.Option(None, "--config", help="YAML config path"),
):
    """
    Human readable difference ("2 hours ago")
    """
    _config(config)
    try:
        print(Instant.parse(text).human_diff(other, locale=locale))
    except MinClockError as exc:
        _fail(exc)


@app.command()
def bounds(
    text: str,
    unit: str = typer.Option("day", "--unit", "-u", help="day / week / month / year"),
):
    """
    Start and end of the UNIT containing TEXT
    """
    try:
        instant = Instant.parse(text)
        table = Table(title=f"{unit} of {instant.to_iso_string()}")
        table.add_column("edge")
        table.add_column("instant")
        table.add_row("start", instant.start_of(unit).format("Y-m-d H:i:s.u P"))
        table.add_row("end", instant.end_of(unit).format("Y-m-d H:i:s.u P"))
        print(table)
    except ValueError as exc:
        _fail(exc)


if __name__ == "__main__":
    app()

# python -m minclock.cli format "2024-01-15 10:30:00" -p "d/m/Y"
