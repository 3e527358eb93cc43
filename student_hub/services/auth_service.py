# student_hub/services/auth_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from student_hub.config import settings
from student_hub.core.exceptions import AuthFailure, ExternalServiceError, ValidationError
from student_hub.core.firebase import initialize_firebase
from student_hub.models.user import UserProfile
from student_hub.repositories.users import UserRepository
from student_hub.schemas.auth import LoginResponse, RegisterRequest

logger = logging.getLogger(__name__)

# Identity Toolkit error codes that mean "wrong email or password"
_CREDENTIAL_ERRORS = {
    "INVALID_LOGIN_CREDENTIALS",
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_EMAIL",
    "USER_DISABLED",
}


class FirebaseIdentityProvider:
    """Firebase Auth: Admin SDK for accounts and tokens, Identity Toolkit REST for password sign-in"""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self._client = http_client or httpx.AsyncClient(timeout=30)

    def verify_id_token(self, token: str) -> Dict[str, Any]:
        initialize_firebase()
        try:
            return firebase_auth.verify_id_token(token, check_revoked=True)
        except (firebase_auth.InvalidIdTokenError, firebase_auth.UserDisabledError, ValueError) as e:
            raise AuthFailure("Invalid authentication credentials") from e
        except firebase_auth.CertificateFetchError as e:
            raise ExternalServiceError("Could not verify credentials, please try again") from e

    def create_user(self, email: str, password: str, display_name: str) -> str:
        initialize_firebase()
        try:
            user = firebase_auth.create_user(email=email, password=password, display_name=display_name)
        except firebase_auth.EmailAlreadyExistsError as e:
            raise AuthFailure("An account with this email already exists") from e
        except ValueError as e:
            raise ValidationError(str(e)) from e
        except firebase_exceptions.FirebaseError as e:
            raise ExternalServiceError(f"Account creation failed: {e}") from e
        return user.uid

    def delete_user(self, uid: str):
        initialize_firebase()
        firebase_auth.delete_user(uid)

    def revoke_sessions(self, uid: str):
        initialize_firebase()
        firebase_auth.revoke_refresh_tokens(uid)

    async def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        if not settings.FIREBASE_WEB_API_KEY:
            raise ExternalServiceError("FIREBASE_WEB_API_KEY is not configured")
        try:
            r = await self._client.post(
                f"{settings.IDENTITY_TOOLKIT_URL}/accounts:signInWithPassword",
                params={"key": settings.FIREBASE_WEB_API_KEY},
                json={"email": email, "password": password, "returnSecureToken": True}
            )
        except httpx.RequestError as e:
            raise ExternalServiceError("Identity service is unreachable, please try again") from e

        if r.status_code == 200:
            return r.json()

        try:
            message = r.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            message = r.text
        # Messages look like "INVALID_PASSWORD" or "TOO_MANY_ATTEMPTS_TRY_LATER : ..."
        code = message.split(":")[0].strip()
        if code in _CREDENTIAL_ERRORS:
            raise AuthFailure("Invalid email or password")
        logger.error(f"Password sign-in failed with {r.status_code}: {message}")
        if r.status_code >= 500:
            raise ExternalServiceError("Identity service error, please try again")
        raise AuthFailure(f"Login failed: {code}")

    async def aclose(self):
        await self._client.aclose()


class AuthService:

    def __init__(self, identity, users: UserRepository):
        self.identity = identity
        self.users = users

    async def register(self, request: RegisterRequest) -> LoginResponse:
        """Create the account and its profile document, then sign in"""
        if len(request.password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long."
            )

        uid = self.identity.create_user(request.email, request.password, request.name)
        profile = UserProfile(
            uid=uid,
            email=request.email,
            role=request.role,
            name=request.name,
            department=request.department,
            year=request.year,
            section=request.section,
            skill_set=[],
            created_at=datetime.now(timezone.utc),
        )
        try:
            self.users.create(profile)
        except Exception:
            # Do not leave an account without a profile behind
            logger.error(f"Profile creation failed for {uid}, removing account")
            self.identity.delete_user(uid)
            raise

        logger.info(f"Registered {request.role.value} account {uid}")
        return await self.login(request.email, request.password)

    async def login(self, email: str, password: str) -> LoginResponse:
        if not email or not password:
            raise ValidationError("Please provide a valid email and password.")
        tokens = await self.identity.sign_in_with_password(email, password)
        profile = self.users.get(tokens["localId"])
        return LoginResponse(
            uid=tokens["localId"],
            id_token=tokens["idToken"],
            refresh_token=tokens.get("refreshToken"),
            expires_in=int(tokens.get("expiresIn", 3600)),
            role=profile.role if profile else None,
        )

    async def logout(self, uid: str):
        self.identity.revoke_sessions(uid)
        logger.info(f"Revoked sessions for {uid}")
