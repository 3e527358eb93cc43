# student_hub/services/ai_service.py
import logging
from typing import Iterable, List, Optional

from student_hub.core.exceptions import Forbidden, NotFound, PreconditionFailed, ValidationError
from student_hub.models.user import ClassPartition, Role, UserProfile
from student_hub.repositories.achievements import AchievementRepository
from student_hub.repositories.users import UserRepository
from student_hub.schemas.ai import (
    Pathway,
    PathwayDraft,
    PathwayTopic,
    Recommendations,
    Report,
    ReportRequest,
    ReportType,
    RoadmapStage,
)
from student_hub.services.profile_service import select_class
from student_hub.utils.ai_json import parse_ai_model

logger = logging.getLogger(__name__)


def mark_completed(draft: PathwayDraft, goal: str, skills: Iterable[str]) -> Pathway:
    """Flag every roadmap topic the student already lists as a skill"""
    known = {skill.strip().casefold() for skill in skills}
    roadmap: List[RoadmapStage] = [
        RoadmapStage(
            title=stage.title,
            topics=[
                PathwayTopic(name=topic, completed=topic.strip().casefold() in known)
                for topic in stage.topics
            ]
        )
        for stage in draft.roadmap
    ]
    return Pathway(
        goal=goal,
        roadmap=roadmap,
        learning_resources=draft.learning_resources,
        project_milestones=draft.project_milestones,
        peer_finder_message=draft.peer_finder_message,
    )


class AIService:
    """Recommendations, career pathways and faculty reports"""

    def __init__(self, ai_client, achievements: AchievementRepository, users: UserRepository):
        self.ai_client = ai_client
        self.achievements = achievements
        self.users = users

    async def recommendations(self, student: UserProfile) -> Recommendations:
        if not student.skill_set:
            raise ValidationError(
                "Your skill set is empty. Get an achievement verified to unlock recommendations."
            )

        skills = ", ".join(student.skill_set)
        prompt = f"""Based on the skills [{skills}], suggest relevant learning opportunities for a {student.year} {student.department} student.

Your response must be a valid JSON object with three keys: "courses", "competitions", and "projects".

- "courses": Provide 2 relevant online courses.
- "competitions": Use Google Search to find 2 famous, currently active or upcoming hackathons or coding competitions relevant to the student's skills. Prioritize platforms like Unstop, Devfolio, Hack2Skill, Major League Hacking (MLH), and official Google or Microsoft events. For each, include the platform name in the description.
- "projects": Provide 1 interesting project idea.

Each key ("courses", "competitions", "projects") should be an array of objects, where each object has "title", "description", and "link" properties. Ensure all links are valid URLs."""

        text = await self.ai_client.generate(prompt, web_search=True)
        recommendations = parse_ai_model(text, Recommendations)
        logger.info(f"Generated recommendations for {student.uid}")
        return recommendations

    async def pathway(self, student: UserProfile, goal: str) -> Pathway:
        goal = (goal or "").strip()
        if not goal:
            raise ValidationError("Please enter your career goal.")

        prompt = f"""I am a {student.year} {student.department} student with existing skills in [{', '.join(student.skill_set)}]. My career goal is to become a "{goal}".

Generate a detailed, step-by-step roadmap for me. The response must be a valid JSON object with the following keys: "roadmap", "learningResources", "projectMilestones", and "peerFinderMessage".

- "roadmap": An array of objects, where each object represents a stage (e.g., "Fundamentals", "Advanced Topics"). Each stage object must have a "title" (string) and a "topics" (array of strings) property. The topics should be specific skills or technologies.
- "learningResources": An array of 2 objects, each representing a specific online course with "title", "description", and "link" properties.
- "projectMilestones": An array of 2 objects, each a mini-project idea with "title" and "description" properties.
- "peerFinderMessage": A short, compelling message (as a string) that I can use to find teammates based on my goal.

Use Google Search for real-time, relevant information. Ensure the entire output is a single, valid JSON object."""

        text = await self.ai_client.generate(prompt, web_search=True)
        draft = parse_ai_model(text, PathwayDraft)
        return mark_completed(draft, goal, student.skill_set)

    async def report(
        self,
        faculty: UserProfile,
        request: ReportRequest,
        partition: Optional[ClassPartition] = None
    ) -> Report:
        """Reports are limited to students of the selected class, the faculty's own by default"""
        partition = partition or select_class(faculty)
        student = self.users.get(request.student_id)
        if student is None or student.role != Role.STUDENT:
            raise NotFound("Student not found")
        if not partition.is_complete or student.partition.as_filters() != partition.as_filters():
            raise Forbidden(f"{student.name} is not a student of {partition}")

        achievements = self.achievements.verified_for_student(student.uid)
        if not achievements:
            raise PreconditionFailed("This student has no verified achievements to report on.")

        summary = "\n".join(f"- {a.title}: {a.description}" for a in achievements)
        prompt = f"You are an academic advisor. Generate a professional document for a student named {student.name}."
        if request.report_type == ReportType.PROGRESS_REPORT:
            prompt += (
                " Create a concise progress report summarizing the student's key accomplishments"
                f" based on the following verified achievements:\n\n{summary}\n\n"
                "Conclude with a positive, encouraging remark."
            )
        else:
            prompt += (
                " Create a strong, positive letter of recommendation. Highlight the student's skills"
                f" and dedication as evidenced by these achievements:\n\n{summary}\n\n"
                f"Structure it as a formal letter from a faculty member of the {faculty.department} department."
            )

        content = await self.ai_client.generate(prompt)
        logger.info(f"{request.report_type.value} generated for {student.uid} by {faculty.uid}")
        return Report(
            student_id=student.uid,
            student_name=student.name,
            report_type=request.report_type,
            content=content.strip(),
        )
