"""
Smart Student Hub - Test Configuration and Fixtures
"""
import datetime as dt

import pytest
from fastapi.testclient import TestClient

from fakes import FakeAIClient, FakeBlobStorage, FakeIdentityProvider, InMemoryDocumentStore
from student_hub.api.deps import get_ai_client, get_blob_storage, get_identity_provider, get_store
from student_hub.main import app
from student_hub.models.achievement import AchievementRecord, AchievementStatus
from student_hub.models.user import Role, UserProfile
from student_hub.repositories.achievements import AchievementRepository
from student_hub.repositories.users import UserRepository
from student_hub.services.approval_service import ApprovalWorkflow
from student_hub.services.skill_extractor import SkillExtractor

CSE_2 = {"department": "CSE", "year": "2nd Year", "section": "A"}

# Smallest valid PNG signature plus padding; contents are never decoded
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def ai_client():
    return FakeAIClient()


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def blob_storage():
    return FakeBlobStorage()


@pytest.fixture
def users(store):
    return UserRepository(store)


@pytest.fixture
def achievements(store):
    return AchievementRepository(store)


@pytest.fixture
def workflow(achievements, users, ai_client):
    return ApprovalWorkflow(achievements, users, SkillExtractor(ai_client))


@pytest.fixture
def student(users):
    return users.create(UserProfile(
        uid="student-1",
        role=Role.STUDENT,
        name="Asha Verma",
        email="asha@example.com",
        skill_set=[],
        **CSE_2
    ))


@pytest.fixture
def other_student(users):
    return users.create(UserProfile(
        uid="student-2",
        role=Role.STUDENT,
        name="Bilal Khan",
        email="bilal@example.com",
        skill_set=[],
        **CSE_2
    ))


@pytest.fixture
def faculty(users):
    return users.create(UserProfile(
        uid="faculty-1",
        role=Role.FACULTY,
        name="Dr. Rao",
        email="rao@example.com",
        **CSE_2
    ))


@pytest.fixture
def make_record(achievements):
    """Create an achievement directly in the store"""

    def factory(owner: UserProfile, title="Hackathon Winner", status=AchievementStatus.PENDING, **fields):
        values = {
            "student_id": owner.uid,
            "student_name": owner.name,
            "title": title,
            "description": f"{title} description",
            "date": dt.date(2025, 1, 15),
            "image_url": "https://storage.example.com/cert.png",
            "status": status,
            "department": owner.department,
            "year": owner.year,
            "section": owner.section,
            "submitted_at": dt.datetime(2025, 1, 20, 10, 0, tzinfo=dt.timezone.utc),
        }
        values.update(fields)
        return achievements.create(AchievementRecord(**values))

    return factory


@pytest.fixture
def client(store, ai_client, identity, blob_storage):
    """Test client with every external adapter replaced by an in-memory fake"""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_blob_storage] = lambda: blob_storage

    yield TestClient(app)

    app.dependency_overrides.clear()


def auth_headers(uid: str) -> dict:
    return {"Authorization": f"Bearer {FakeIdentityProvider.token_for(uid)}"}
