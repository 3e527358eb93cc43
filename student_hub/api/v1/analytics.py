# student_hub/api/v1/analytics.py
from fastapi import APIRouter, Depends

from student_hub.api.deps import get_analytics_service
from student_hub.core.security import require_faculty
from student_hub.models.user import UserProfile
from student_hub.services.analytics_service import AnalyticsService, AnalyticsSummary

router = APIRouter()


@router.get("/analytics", response_model=AnalyticsSummary)
async def get_analytics(
    faculty: UserProfile = Depends(require_faculty),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Institution-wide status counts, monthly engagement and department performance
    """
    return await analytics_service.get_dashboard()
