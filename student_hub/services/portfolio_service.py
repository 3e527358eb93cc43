# student_hub/services/portfolio_service.py
import csv
import datetime as dt
import io
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from student_hub.core.exceptions import NotFound
from student_hub.models.achievement import AchievementRecord, AchievementStatus
from student_hub.models.user import Role
from student_hub.repositories.achievements import AchievementRepository
from student_hub.repositories.users import UserRepository


class PublicAchievement(BaseModel):
    """The only achievement fields that reach the public surface"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    title: str
    description: str = ""
    date: Optional[dt.date] = None
    image_url: Optional[str] = None
    blockchain_hash: Optional[str] = None
    verified_at: Optional[dt.datetime] = None

    @classmethod
    def from_record(cls, record: AchievementRecord) -> "PublicAchievement":
        return cls(
            id=record.id,
            title=record.title,
            description=record.description,
            date=record.date,
            image_url=record.image_url,
            blockchain_hash=record.blockchain_hash,
            verified_at=record.verified_at,
        )


class PublicPortfolio(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    student_id: str
    student_name: str
    achievements: List[PublicAchievement]


def assemble_portfolio(
    student_id: str,
    student_name: str,
    records: Iterable[AchievementRecord]
) -> PublicPortfolio:
    """
    Build the public view of a student's portfolio.

    Whatever the input mixture, only the student's verified records survive,
    newest event date first (undated records last).
    """
    verified = [
        record for record in records
        if record.status == AchievementStatus.VERIFIED and record.student_id == student_id
    ]
    verified.sort(key=lambda record: (record.date is not None, record.date or dt.date.min), reverse=True)
    return PublicPortfolio(
        student_id=student_id,
        student_name=student_name or "Student",
        achievements=[PublicAchievement.from_record(record) for record in verified],
    )


class PortfolioService:

    def __init__(self, achievements: AchievementRepository, users: UserRepository):
        self.achievements = achievements
        self.users = users

    def student_name(self, student_id: str) -> str:
        profile = self.users.get(student_id)
        if profile is None or profile.role != Role.STUDENT:
            raise NotFound("Student profile not found.")
        return profile.name

    async def get_portfolio(self, student_id: str) -> PublicPortfolio:
        name = self.student_name(student_id)
        return assemble_portfolio(student_id, name, self.achievements.verified_for_student(student_id))

    async def export_to_csv(self, portfolio: PublicPortfolio) -> str:
        """
        Export a public portfolio to CSV format
        """
        output = io.StringIO()
        writer = csv.writer(output)

        # Header
        writer.writerow([
            'Title', 'Date', 'Description', 'Verified At', 'Verification Hash', 'Certificate URL'
        ])

        # Data
        for achievement in portfolio.achievements:
            writer.writerow([
                achievement.title,
                achievement.date.isoformat() if achievement.date else '',
                achievement.description,
                achievement.verified_at.strftime('%Y-%m-%d') if achievement.verified_at else '',
                achievement.blockchain_hash or '',
                achievement.image_url or ''
            ])

        return output.getvalue()

    async def export_to_pdf(self, portfolio: PublicPortfolio) -> bytes:
        """
        Export a public portfolio to PDF format
        """
        from reportlab.lib.pagesizes import letter
        from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
        from reportlab.lib.styles import getSampleStyleSheet
        from reportlab.lib import colors

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=letter)
        elements = []

        styles = getSampleStyleSheet()

        # Title
        elements.append(Paragraph(f"{portfolio.student_name} - Verified Achievements", styles['Title']))
        elements.append(Spacer(1, 12))

        if not portfolio.achievements:
            elements.append(Paragraph("No verified achievements yet.", styles['Normal']))
            doc.build(elements)
            return buffer.getvalue()

        # Table data
        data = [['Title', 'Date', 'Verification Hash']]
        for achievement in portfolio.achievements:
            data.append([
                achievement.title[:45],
                achievement.date.strftime('%Y-%m-%d') if achievement.date else 'No Date',
                (achievement.blockchain_hash or '')[:16]
            ])

        # Create table
        table = Table(data)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 12),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
            ('BACKGROUND', (0, 1), (-1, -1), colors.beige),
            ('GRID', (0, 0), (-1, -1), 1, colors.black)
        ]))

        elements.append(table)
        doc.build(elements)

        return buffer.getvalue()
