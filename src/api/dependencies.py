"""Request dependencies resolved from objects created at startup."""

from fastapi import Request

from reports.view import ReportView
from services.analysis import AnalysisService


def get_report_view(request: Request) -> ReportView:
    return request.app.state.report_view


def get_analysis_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service
