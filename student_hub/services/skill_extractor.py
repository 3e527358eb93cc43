# student_hub/services/skill_extractor.py
import logging
from typing import Any, Iterable, List

from student_hub.config import settings
from student_hub.utils.ai_json import extract_json

logger = logging.getLogger(__name__)

SKILLS_SCHEMA = {"type": "ARRAY", "items": {"type": "STRING"}}

# Longest tag we accept; anything longer is a sentence, not a skill
MAX_SKILL_LENGTH = 50


def normalize_skills(raw_skills: Iterable[Any]) -> List[str]:
    """
    Clean a model-produced skill list: strip whitespace, drop non-strings and
    implausible lengths, deduplicate case-insensitively keeping first spelling.
    """
    seen = set()
    skills = []
    for item in raw_skills:
        if not isinstance(item, str):
            continue
        skill = " ".join(item.split())
        if not 0 < len(skill) <= MAX_SKILL_LENGTH:
            continue
        key = skill.casefold()
        if key in seen:
            continue
        seen.add(key)
        skills.append(skill)
    return skills


def merge_skill_sets(existing: Iterable[str], new: Iterable[str]) -> List[str]:
    """Set union of two skill lists, case-insensitive, existing order first"""
    return normalize_skills(list(existing) + list(new))


class SkillExtractor:
    """Extract skill tags from an achievement's text with the AI service"""

    def __init__(self, ai_client, max_skills: int = settings.MAX_EXTRACTED_SKILLS):
        self.ai_client = ai_client
        self.max_skills = max_skills

    async def extract(self, title: str, description: str) -> List[str]:
        text_to_analyze = f"Title: {title}. Description: {description}"
        prompt = (
            f"From the following text, extract a list of 3-{self.max_skills} key skills. "
            'Return the skills as a JSON array of strings. For example: '
            '["React", "Project Management", "Public Speaking"]. '
            f'Text: "{text_to_analyze}"'
        )
        raw_text = await self.ai_client.generate(prompt, response_schema=SKILLS_SCHEMA)
        skills = normalize_skills(extract_json(raw_text, list))[:self.max_skills]
        logger.info(f"Extracted {len(skills)} skills from '{title}'")
        return skills
