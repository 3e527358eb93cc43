# student_hub/api/v1/auth.py
from fastapi import APIRouter, Depends, status

from student_hub.api.deps import get_auth_service
from student_hub.core.security import require_signed_in
from student_hub.core.session import SessionContext
from student_hub.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from student_hub.services.auth_service import AuthService

router = APIRouter()


@router.post("/auth/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Create a student or faculty account with its profile and sign it in
    """
    return await auth_service.register(request)


@router.post("/auth/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await auth_service.login(request.email, request.password)


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    session: SessionContext = Depends(require_signed_in),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Revoke the caller's refresh tokens and end the session
    """
    await auth_service.logout(session.uid)
    session.sign_out()
