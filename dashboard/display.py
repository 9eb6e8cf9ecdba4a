"""
Main Dashboard Display - terminal view of the bot monitor.

Subscribes to a SyncController and re-renders from the latest published
Snapshot. Holds no state of its own beyond what the controller hands it.
"""

from datetime import datetime, timezone
from typing import Optional

from rich.console import Console
from rich.layout import Layout

from core.errors import FetchError
from core.models import Snapshot
from dashboard.chart_series import ChartSeries, to_chart_series
from dashboard.panels import (
    render_account_panel,
    render_error_panel,
    render_portfolio_panel,
    render_price_panel,
    render_status_panel,
    render_top_bar,
    render_trades_panel,
)
from dashboard.sync_controller import SyncController

console = Console()


class Dashboard:
    """Rich layout bound to one SyncController."""

    def __init__(self, controller: SyncController):
        self.console = console
        self.controller = controller
        self.snapshot: Optional[Snapshot] = None
        self.series: Optional[ChartSeries] = None
        self.last_error: Optional[FetchError] = None
        self.last_error_at: Optional[datetime] = None

        controller.on_snapshot(self.update)
        controller.on_error(self.show_error)

    def update(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        self.series = to_chart_series(snapshot.prices)

    def show_error(self, error: FetchError) -> None:
        self.last_error = error
        self.last_error_at = datetime.now(timezone.utc)

    def render(self) -> Layout:
        """Render the full dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=1),
            Layout(name="top", size=7),
            Layout(name="main"),
            Layout(name="footer", size=3),
        )
        layout["top"].split_row(
            Layout(name="status", ratio=1),
            Layout(name="account", ratio=2),
        )
        layout["main"].split_row(
            Layout(name="left", ratio=1),
            Layout(name="right", ratio=1),
        )
        layout["left"].split_column(
            Layout(name="portfolio", ratio=1),
            Layout(name="prices", ratio=1),
        )

        snap = self.snapshot
        layout["header"].update(render_top_bar(self.controller.mode, self.controller.state.value, snap))
        layout["status"].update(render_status_panel(snap))
        layout["account"].update(render_account_panel(snap))
        layout["portfolio"].update(render_portfolio_panel(snap))
        layout["prices"].update(render_price_panel(snap, self.series))
        layout["right"].update(render_trades_panel(snap))
        layout["footer"].update(render_error_panel(self.last_error, self.last_error_at))

        return layout
