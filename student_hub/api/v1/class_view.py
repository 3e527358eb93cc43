# student_hub/api/v1/class_view.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from student_hub.api.deps import get_roster_service, get_user_repository
from student_hub.core.security import require_faculty
from student_hub.models.user import UserProfile
from student_hub.repositories.users import UserRepository
from student_hub.services.profile_service import select_class
from student_hub.services.roster_service import RosterGroup, RosterService

router = APIRouter()


@router.get("/class-view", response_model=List[RosterGroup])
async def get_class_roster(
    department: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    section: Optional[str] = Query(None),
    faculty: UserProfile = Depends(require_faculty),
    roster_service: RosterService = Depends(get_roster_service)
):
    """
    Every submission of the selected class, grouped by student
    """
    return await roster_service.class_roster(select_class(faculty, department, year, section))


@router.get("/class-view/students", response_model=List[UserProfile])
async def get_class_students(
    department: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    section: Optional[str] = Query(None),
    faculty: UserProfile = Depends(require_faculty),
    users: UserRepository = Depends(get_user_repository)
):
    """
    Students registered in the selected class, by name
    """
    return users.students_in_class(select_class(faculty, department, year, section))
