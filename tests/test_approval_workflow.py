"""
Unit Tests for the approval workflow state machine
"""
import datetime as dt
import hashlib

import pytest

from student_hub.core.exceptions import ExternalServiceError, Forbidden, PreconditionFailed, ValidationError
from student_hub.models.achievement import AchievementStatus
from student_hub.services.approval_service import integrity_stamp


class TestIntegrityStamp:

    def test_hash_of_id_and_epoch_millis(self):
        verified_at = dt.datetime(2025, 3, 1, 12, 0, 0, 123000, tzinfo=dt.timezone.utc)
        millis = int(verified_at.timestamp() * 1000)
        expected = hashlib.sha256(f"ach-1-{millis}".encode()).hexdigest()

        assert integrity_stamp("ach-1", verified_at) == expected
        assert len(expected) == 64

    def test_different_records_get_different_stamps(self):
        now = dt.datetime.now(dt.timezone.utc)
        assert integrity_stamp("a", now) != integrity_stamp("b", now)


class TestApprove:

    async def test_approve_sets_verification_fields(self, workflow, achievements, student, faculty, make_record):
        record = make_record(student)

        verified = await workflow.approve(record.id, faculty)

        assert verified.status == AchievementStatus.VERIFIED
        assert verified.verified_by == faculty.uid
        assert verified.verified_at is not None
        assert verified.blockchain_hash == integrity_stamp(record.id, verified.verified_at)
        assert achievements.get(record.id).status == AchievementStatus.VERIFIED

    async def test_second_approval_fails_and_keeps_first_stamp(self, workflow, achievements, student, faculty, make_record):
        record = make_record(student)
        first = await workflow.approve(record.id, faculty)

        with pytest.raises(PreconditionFailed):
            await workflow.approve(record.id, faculty)

        assert achievements.get(record.id).blockchain_hash == first.blockchain_hash

    async def test_student_cannot_approve(self, workflow, student, make_record):
        record = make_record(student)

        with pytest.raises(Forbidden):
            await workflow.approve(record.id, student)

    async def test_rejected_record_cannot_be_approved(self, workflow, student, faculty, make_record):
        record = make_record(student, status=AchievementStatus.REJECTED, rejection_reason="blurry")

        with pytest.raises(PreconditionFailed):
            await workflow.approve(record.id, faculty)


class TestReject:

    async def test_reject_stores_reason(self, workflow, student, faculty, make_record):
        record = make_record(student)

        rejected = await workflow.reject(record.id, faculty, "  blurry image  ")

        assert rejected.status == AchievementStatus.REJECTED
        assert rejected.rejection_reason == "blurry image"

    @pytest.mark.parametrize("reason", ["", "   ", None])
    async def test_empty_reason_is_refused_without_a_write(self, workflow, achievements, student, faculty, make_record, reason):
        record = make_record(student)

        with pytest.raises(ValidationError):
            await workflow.reject(record.id, faculty, reason)

        assert achievements.get(record.id).status == AchievementStatus.PENDING

    async def test_verified_record_cannot_be_rejected(self, workflow, student, faculty, make_record):
        record = make_record(student)
        await workflow.approve(record.id, faculty)

        with pytest.raises(PreconditionFailed):
            await workflow.reject(record.id, faculty, "changed my mind")


class TestResubmit:

    async def test_resubmit_clears_rejection(self, workflow, student, faculty, make_record):
        record = make_record(student)
        await workflow.reject(record.id, faculty, "blurry image")

        resubmitted = await workflow.resubmit(record.id, student, {"title": "Hackathon Winner (clear scan)"})

        assert resubmitted.status == AchievementStatus.PENDING
        assert resubmitted.rejection_reason is None
        assert resubmitted.title == "Hackathon Winner (clear scan)"
        assert resubmitted.last_updated_at is not None

    async def test_only_owner_can_resubmit(self, workflow, student, other_student, faculty, make_record):
        record = make_record(student)
        await workflow.reject(record.id, faculty, "blurry image")

        with pytest.raises(Forbidden):
            await workflow.resubmit(record.id, other_student, {"title": "Mine now"})

    async def test_verified_is_terminal(self, workflow, student, faculty, make_record):
        record = make_record(student)
        await workflow.approve(record.id, faculty)

        with pytest.raises(PreconditionFailed):
            await workflow.resubmit(record.id, student, {"title": "Edited"})


class TestSkillExtraction:

    async def test_new_skills_are_added_case_insensitively(self, workflow, users, ai_client, student, faculty, make_record):
        users.update(student.uid, {"skillSet": ["python"]})
        record = await workflow.approve(make_record(student).id, faculty)
        ai_client.responses.append('["Python", "React", "Teamwork"]')

        added = await workflow.extract_skills(record)

        assert added == ["React", "Teamwork"]
        assert users.get(student.uid).skill_set == ["python", "React", "Teamwork"]
        assert ai_client.calls[-1]["response_schema"] is not None

    async def test_failure_leaves_record_verified(self, workflow, achievements, users, ai_client, student, faculty, make_record):
        record = await workflow.approve(make_record(student).id, faculty)
        ai_client.error = ExternalServiceError("AI service is unreachable")

        assert await workflow.extract_skills(record) == []
        assert achievements.get(record.id).status == AchievementStatus.VERIFIED
        assert users.get(student.uid).skill_set == []

    async def test_malformed_output_is_swallowed(self, workflow, users, ai_client, student, faculty, make_record):
        record = await workflow.approve(make_record(student).id, faculty)
        ai_client.responses.append("Sorry, I cannot help with that.")

        assert await workflow.extract_skills(record) == []
        assert users.get(student.uid).skill_set == []


class TestEndToEnd:

    async def test_reject_resubmit_approve_reaches_portfolio(
        self, workflow, achievements, users, ai_client, student, faculty, make_record
    ):
        from student_hub.services.portfolio_service import PortfolioService

        record = make_record(student, title="Robotics Challenge")
        assert [r.id for r in achievements.pending_for_class(faculty.partition)] == [record.id]

        await workflow.reject(record.id, faculty, "blurry image")
        assert achievements.pending_for_class(faculty.partition) == []

        await workflow.resubmit(record.id, student, {"imageUrl": "https://storage.example.com/clear.png"})
        assert [r.id for r in achievements.pending_for_class(faculty.partition)] == [record.id]

        verified = await workflow.approve(record.id, faculty)
        ai_client.error = ExternalServiceError("quota exceeded")
        await workflow.extract_skills(verified)

        portfolio = await PortfolioService(achievements, users).get_portfolio(student.uid)
        assert [a.title for a in portfolio.achievements] == ["Robotics Challenge"]
        assert portfolio.achievements[0].image_url == "https://storage.example.com/clear.png"
        assert achievements.get(record.id).status == AchievementStatus.VERIFIED
