# student_hub/api/deps.py
from functools import lru_cache

from fastapi import Depends

from student_hub.core.database import DocumentStore, FirestoreDocumentStore
from student_hub.core.firebase import get_firestore_client
from student_hub.repositories.achievements import AchievementRepository
from student_hub.repositories.teammates import TeammatePostRepository
from student_hub.repositories.users import UserRepository
from student_hub.services.achievement_service import AchievementService
from student_hub.services.ai_service import AIService
from student_hub.services.analytics_service import AnalyticsService
from student_hub.services.approval_service import ApprovalWorkflow
from student_hub.services.auth_service import AuthService, FirebaseIdentityProvider
from student_hub.services.gemini_client import GeminiClient
from student_hub.services.portfolio_service import PortfolioService
from student_hub.services.profile_service import ProfileService
from student_hub.services.roster_service import RosterService
from student_hub.services.skill_extractor import SkillExtractor
from student_hub.services.storage_service import FirebaseBlobStorage
from student_hub.services.teammate_service import TeammateService
from student_hub.services.websocket_manager import WebSocketManager


# Process-wide adapters. Tests replace these through app.dependency_overrides.

@lru_cache
def get_store() -> DocumentStore:
    return FirestoreDocumentStore(get_firestore_client())


@lru_cache
def get_ai_client() -> GeminiClient:
    return GeminiClient()


@lru_cache
def get_identity_provider() -> FirebaseIdentityProvider:
    return FirebaseIdentityProvider()


@lru_cache
def get_blob_storage() -> FirebaseBlobStorage:
    return FirebaseBlobStorage()


@lru_cache
def get_ws_manager() -> WebSocketManager:
    return WebSocketManager()


# Repositories

def get_user_repository(store: DocumentStore = Depends(get_store)) -> UserRepository:
    return UserRepository(store)


def get_achievement_repository(store: DocumentStore = Depends(get_store)) -> AchievementRepository:
    return AchievementRepository(store)


def get_teammate_repository(store: DocumentStore = Depends(get_store)) -> TeammatePostRepository:
    return TeammatePostRepository(store)


# Services

def get_auth_service(
    identity=Depends(get_identity_provider),
    users: UserRepository = Depends(get_user_repository)
) -> AuthService:
    return AuthService(identity, users)


def get_approval_workflow(
    achievements: AchievementRepository = Depends(get_achievement_repository),
    users: UserRepository = Depends(get_user_repository),
    ai_client=Depends(get_ai_client)
) -> ApprovalWorkflow:
    return ApprovalWorkflow(achievements, users, SkillExtractor(ai_client))


def get_achievement_service(
    achievements: AchievementRepository = Depends(get_achievement_repository),
    blob_storage=Depends(get_blob_storage),
    workflow: ApprovalWorkflow = Depends(get_approval_workflow),
    ai_client=Depends(get_ai_client)
) -> AchievementService:
    return AchievementService(achievements, blob_storage, workflow, ai_client)


def get_roster_service(
    achievements: AchievementRepository = Depends(get_achievement_repository)
) -> RosterService:
    return RosterService(achievements)


def get_analytics_service(
    achievements: AchievementRepository = Depends(get_achievement_repository)
) -> AnalyticsService:
    return AnalyticsService(achievements)


def get_portfolio_service(
    achievements: AchievementRepository = Depends(get_achievement_repository),
    users: UserRepository = Depends(get_user_repository)
) -> PortfolioService:
    return PortfolioService(achievements, users)


def get_ai_service(
    ai_client=Depends(get_ai_client),
    achievements: AchievementRepository = Depends(get_achievement_repository),
    users: UserRepository = Depends(get_user_repository)
) -> AIService:
    return AIService(ai_client, achievements, users)


def get_teammate_service(
    posts: TeammatePostRepository = Depends(get_teammate_repository)
) -> TeammateService:
    return TeammateService(posts)


def get_profile_service(users: UserRepository = Depends(get_user_repository)) -> ProfileService:
    return ProfileService(users)
