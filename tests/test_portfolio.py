"""
Unit Tests for the public portfolio
"""
import datetime as dt

import pytest

from student_hub.core.exceptions import NotFound
from student_hub.models.achievement import AchievementStatus
from student_hub.services.portfolio_service import PortfolioService, assemble_portfolio


@pytest.fixture
def portfolio_service(achievements, users):
    return PortfolioService(achievements, users)


class TestAssemblePortfolio:

    def test_only_verified_records_of_the_student(self, student, other_student, make_record):
        records = [
            make_record(student, "Verified", status=AchievementStatus.VERIFIED, verified_by="faculty-1"),
            make_record(student, "Pending"),
            make_record(student, "Rejected", status=AchievementStatus.REJECTED, rejection_reason="blurry"),
            make_record(other_student, "Someone else", status=AchievementStatus.VERIFIED),
        ]

        portfolio = assemble_portfolio(student.uid, student.name, records)

        assert [a.title for a in portfolio.achievements] == ["Verified"]

    def test_newest_event_first_and_undated_last(self, student, make_record):
        records = [
            make_record(student, "Old", status=AchievementStatus.VERIFIED, date=dt.date(2023, 5, 1)),
            make_record(student, "Undated", status=AchievementStatus.VERIFIED, date=None),
            make_record(student, "New", status=AchievementStatus.VERIFIED, date=dt.date(2025, 2, 1)),
        ]

        portfolio = assemble_portfolio(student.uid, student.name, records)

        assert [a.title for a in portfolio.achievements] == ["New", "Old", "Undated"]

    def test_faculty_only_fields_are_not_exposed(self, student, make_record):
        record = make_record(student, status=AchievementStatus.VERIFIED, verified_by="faculty-1")

        payload = assemble_portfolio(student.uid, student.name, [record]).model_dump(by_alias=True)

        achievement = payload["achievements"][0]
        assert "verifiedBy" not in achievement
        assert "rejectionReason" not in achievement
        assert "status" not in achievement


class TestPortfolioService:

    async def test_unknown_student(self, portfolio_service):
        with pytest.raises(NotFound):
            await portfolio_service.get_portfolio("nobody")

    async def test_faculty_has_no_portfolio(self, portfolio_service, faculty):
        with pytest.raises(NotFound):
            await portfolio_service.get_portfolio(faculty.uid)

    async def test_csv_export(self, portfolio_service, student, make_record):
        make_record(student, "Hackathon Winner", status=AchievementStatus.VERIFIED, blockchain_hash="ab" * 32)
        portfolio = await portfolio_service.get_portfolio(student.uid)

        csv_text = await portfolio_service.export_to_csv(portfolio)

        lines = csv_text.strip().splitlines()
        assert lines[0].startswith("Title,Date")
        assert "Hackathon Winner" in lines[1]
        assert "ab" * 32 in lines[1]

    async def test_pdf_export(self, portfolio_service, student, make_record):
        make_record(student, status=AchievementStatus.VERIFIED)
        portfolio = await portfolio_service.get_portfolio(student.uid)

        pdf = await portfolio_service.export_to_pdf(portfolio)

        assert pdf.startswith(b"%PDF")
