"""
Dashboard Panels - Individual UI components.

Each function renders one panel from a published Snapshot.
Panels only read; they never touch controller state.
"""

from datetime import datetime, timezone
from typing import Optional

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.errors import FetchError
from core.models import Snapshot
from core.modes import Mode
from dashboard.chart_series import ChartSeries, to_chart_series

SPARK_CHARS = "▁▂▃▄▅▆▇█"
MAX_TRADE_ROWS = 12
MAX_PRICE_ROWS = 8


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _pnl(value: Optional[float]) -> str:
    if value is None:
        return "[dim]-[/]"
    style = "green" if value > 0 else "red" if value < 0 else "dim"
    return f"[{style}]{value:+,.2f}[/]"


def render_top_bar(mode: Mode, sync_state: str, snapshot: Optional[Snapshot]) -> Text:
    """Render the status bar at top of dashboard."""
    bar = Text()

    # Viewed mode
    mode_color = "yellow" if mode is Mode.TRAINING else "green bold"
    bar.append("VIEW: ", style="dim")
    bar.append(mode.value, style=mode_color)
    bar.append(" │ ")

    # Bot status (independent of the viewed mode)
    bar.append("BOT: ", style="dim")
    status = snapshot.status if snapshot else None
    if status is None:
        bar.append("?", style="dim")
    else:
        bot_mode = status.mode.value if status.mode else "-"
        if status.is_running:
            bar.append(f"RUNNING {bot_mode}", style="green")
        else:
            bar.append(f"STOPPED {bot_mode}", style="red")
        if status.mode and status.mode is not mode:
            bar.append(" (other mode)", style="yellow")
    bar.append(" │ ")

    # Sync
    bar.append("SYNC: ", style="dim")
    if snapshot is None:
        bar.append(sync_state.upper(), style="yellow")
    else:
        age = (datetime.now(timezone.utc) - snapshot.fetched_at).total_seconds()
        style = "green" if sync_state == "live" else "yellow"
        bar.append(f"{sync_state.upper()} ({age:.0f}s)", style=style)
    bar.append(" │ ")

    bar.append(datetime.now(timezone.utc).strftime("%H:%M:%S"), style="dim")
    return bar


def render_status_panel(snapshot: Optional[Snapshot]) -> Panel:
    """Render bot run-state."""
    if snapshot is None:
        return Panel("[dim]Waiting for data[/]", title="[bold]🤖 Bot Status[/]", border_style="dim")

    status = snapshot.status
    last_run = status.last_run.astimezone().strftime("%Y-%m-%d %H:%M:%S") if status.last_run else "-"
    lines = [
        f"Mode:     [white]{status.mode.value if status.mode else '-'}[/]",
        f"Running:  {'[green]Yes[/]' if status.is_running else '[red]No[/]'}",
        f"Last Run: [white]{last_run}[/]",
    ]
    return Panel("\n".join(lines), title="[bold]🤖 Bot Status[/]", border_style="blue")


def render_account_panel(snapshot: Optional[Snapshot]) -> Panel:
    """Render balance, holdings value and total."""
    if snapshot is None:
        return Panel("[dim]No account data[/]", title="[bold cyan]💰 Account[/]", border_style="cyan")

    acct = snapshot.account
    table = Table(box=None, padding=(0, 2), expand=True)
    table.add_column("Balance", justify="center")
    table.add_column("Portfolio Value", justify="center")
    table.add_column("Total Value", justify="center")
    table.add_row(
        f"[bold]{_money(acct.balance)}[/]",
        f"[bold]{_money(acct.portfolio_value)}[/]",
        f"[bold]{_money(acct.total_value)}[/]",
    )
    return Panel(table, title=f"[bold cyan]💰 Account ({snapshot.mode.value})[/]", border_style="cyan")


def render_portfolio_panel(snapshot: Optional[Snapshot]) -> Panel:
    """Render open holdings."""
    table = Table(box=None, padding=(0, 1), expand=True)
    table.add_column("Symbol", style="cyan")
    table.add_column("Qty", justify="right")
    table.add_column("Avg Buy", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Unrl P&L", justify="right")

    positions = snapshot.portfolio if snapshot else ()
    for p in positions:
        table.add_row(
            p.symbol,
            f"{p.quantity:.8f}".rstrip("0").rstrip("."),
            _money(p.average_buy_price),
            _money(p.current_price),
            _money(p.current_value),
            _pnl(p.unrealized_pnl),
        )
    if not positions:
        table.add_row("[dim]No positions[/]", "", "", "", "", "")

    title = f"[bold green]📊 Portfolio ({snapshot.mode.value})[/]" if snapshot else "[bold green]📊 Portfolio[/]"
    return Panel(table, title=title, border_style="green")


def sparkline(values: tuple[float, ...], width: int = 60) -> str:
    """Compress a series into block characters, newest on the right."""
    if not values:
        return ""
    values = values[-width:]
    low, high = min(values), max(values)
    span = high - low
    if span == 0:
        return SPARK_CHARS[len(SPARK_CHARS) // 2] * len(values)
    top = len(SPARK_CHARS) - 1
    return "".join(SPARK_CHARS[round((v - low) / span * top)] for v in values)


def render_price_panel(snapshot: Optional[Snapshot], series: Optional[ChartSeries] = None) -> Panel:
    """Render price history as a sparkline plus the latest points."""
    if snapshot is None:
        return Panel("[dim]No price history[/]", title="[bold yellow]📈 Price History[/]", border_style="yellow")

    series = series or to_chart_series(snapshot.prices)
    lines = []
    if len(series) == 0:
        lines.append("[dim]No price history[/]")
    else:
        lines.append(f"[yellow]{sparkline(series.values)}[/]")
        lines.append(
            f"[dim]{series.labels[0]} → {series.labels[-1]}  "
            f"low {min(series.values):,.2f}  high {max(series.values):,.2f}[/]"
        )
        lines.append("")
        recent = list(zip(series.labels, series.values))[-MAX_PRICE_ROWS:]
        for label, value in recent:
            lines.append(f"{label}  [white]{value:,.2f}[/]")

    return Panel(
        "\n".join(lines),
        title=f"[bold yellow]📈 {series.label} ({snapshot.mode.value})[/]",
        border_style="yellow",
    )


def render_trades_panel(snapshot: Optional[Snapshot]) -> Panel:
    """Render trade history in server order."""
    table = Table(box=None, padding=(0, 1), expand=True)
    table.add_column("Date", style="dim")
    table.add_column("Action")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("P/L", justify="right")

    trades = list(snapshot.trades)[:MAX_TRADE_ROWS] if snapshot else []
    for t in trades:
        side_style = "green" if t.is_buy else "red"
        table.add_row(
            t.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            f"[{side_style}]{t.trade_type}[/]",
            f"{t.quantity:.8f}".rstrip("0").rstrip("."),
            _money(t.price),
            _pnl(t.profit_loss),
        )
    if not trades:
        table.add_row("[dim]No trades[/]", "", "", "", "")

    subtitle = f"[dim]Realized {snapshot.realized_pnl:+,.2f}[/]" if snapshot else None
    title = f"[bold magenta]📋 Trades ({snapshot.mode.value})[/]" if snapshot else "[bold magenta]📋 Trades[/]"
    return Panel(table, title=title, subtitle=subtitle, border_style="magenta")


def render_error_panel(error: Optional[FetchError], at: Optional[datetime]) -> Panel:
    """Render the most recent sync error, if any."""
    if error is None:
        return Panel("[dim]No errors[/]", title="[dim]Errors[/]", border_style="dim")
    tstr = at.strftime("%H:%M:%S") if at else "--:--:--"
    return Panel(
        f"[red]{tstr} {type(error).__name__}[/] {str(error)[:100]}",
        title="[bold red]Errors[/]",
        border_style="red",
    )
