# student_hub/schemas/forms.py
from typing import Dict, List

DEPARTMENTS = ["CSE", "IT", "CSBS", "AIDS", "ECE", "EEE", "Civil", "Mechanical", "Chemical", "Instrumentation"]
YEARS = ["1st Year", "2nd Year", "3rd Year", "4th Year"]
SECTIONS = ["A", "B", "C"]

# Choices offered by the registration, profile and class-selection forms
FORM_OPTIONS: Dict[str, List[str]] = {
    "departments": DEPARTMENTS,
    "years": YEARS,
    "sections": SECTIONS,
}


def check_option(field: str, value: str) -> str:
    """Raise ValueError unless ``value`` is one of the ``field`` choices"""
    if value not in FORM_OPTIONS[field]:
        raise ValueError(f"must be one of: {', '.join(FORM_OPTIONS[field])}")
    return value
