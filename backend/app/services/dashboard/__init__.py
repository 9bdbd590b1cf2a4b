"""Dashboard data layer: reads, relation normalisation, stats and load orchestration."""

from app.services.dashboard.loader import DashboardLoader, MarkReadResult
from app.services.dashboard.stats import calculate_stats

__all__ = ["DashboardLoader", "MarkReadResult", "calculate_stats"]
