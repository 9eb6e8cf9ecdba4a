"""
Dashboard module - synchronization core and terminal view for the bot monitor.

SyncController keeps the published Snapshot consistent with the selected
mode; the Rich display only renders what it publishes.
"""

from dashboard.chart_series import ChartSeries, to_chart_series
from dashboard.display import Dashboard
from dashboard.sync_controller import SyncController, SyncState

__all__ = ["ChartSeries", "Dashboard", "SyncController", "SyncState", "to_chart_series"]
