"""Domain layer for ledgerview application."""

from ledgerview.domain.view_engine import DerivedViewEngine
from ledgerview.domain.chart_of_accounts import ChartOfAccountsService
from ledgerview.domain.personnel import PersonnelService
from ledgerview.domain.activity_log import ActivityLogService
from ledgerview.domain.dashboard import DashboardService
from ledgerview.domain.dialog import DialogStateMachine

__all__ = [
    "DerivedViewEngine",
    "ChartOfAccountsService",
    "PersonnelService",
    "ActivityLogService",
    "DashboardService",
    "DialogStateMachine",
]
