"""
Web 서비스 패키지

비즈니스 로직 처리
"""

from web.services.category_service import CategoryService
from web.services.dashboard_service import DashboardService, MonthlySeries
from web.services.opening_balance_service import OpeningBalanceService
from web.services.report_service import ReportService
from web.services.student_service import StudentService
from web.services.transaction_service import TransactionService

__all__ = [
    "DashboardService",
    "MonthlySeries",
    "TransactionService",
    "CategoryService",
    "StudentService",
    "OpeningBalanceService",
    "ReportService",
]
