from odonto.domain.entities import DashboardCounts
from odonto.domain.interfaces import IDashboardReader


class DashboardService:
    """Counters shown on the dashboard; available to every signed-in role."""

    def __init__(self, repo: IDashboardReader) -> None:
        self.repo = repo

    def get_counts(self) -> DashboardCounts:
        return self.repo.counts()
