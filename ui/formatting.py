"""
Display helpers for team member cards
"""

from typing import Dict, List

MAX_LISTED_ROLES = 3


def summarize_experience(candidate: Dict, limit: int = MAX_LISTED_ROLES) -> List[str]:
    """First few roles as 'role at company', plus a '+N more positions' line"""
    experiences = candidate.get('work_experiences') or []
    lines = [
        f"{exp.get('roleName', '')} at {exp.get('company', '')}"
        for exp in experiences[:limit]
    ]
    if len(experiences) > limit:
        lines.append(f"+{len(experiences) - limit} more positions")
    return lines


def summarize_education(candidate: Dict) -> str:
    education = candidate.get('education') or {}
    degrees = education.get('degrees') or []
    highest = education.get('highest_level') or "Education"

    if not degrees:
        return highest

    first = degrees[0]
    school = first.get('originalSchool') or first.get('school', '')
    return f"{highest} in {first.get('subject', '')} ({school})"


def full_time_salary(candidate: Dict) -> str:
    salary = (candidate.get('annual_salary_expectation') or {}).get('full-time')
    return str(salary) if salary else "N/A"


def progress_message(progress: int) -> str:
    """Status text for a progress value between 0 and 100"""
    if progress < 30:
        return "Analyzing job requirements..."
    if progress < 60:
        return "Finding matching candidates..."
    if progress < 90:
        return "Selecting diverse team..."
    return "Finalizing results..."


def next_progress(progress: int, step: int = 10, ceiling: int = 90) -> int:
    """Advance the waiting indicator, holding below completion until the reply arrives"""
    return min(progress + step, ceiling)


def error_message(response) -> str:
    """Backend error message from a failed API response"""
    try:
        detail = response.json().get('detail')
    except ValueError:
        detail = None
    return detail or "Failed to match candidates"
