"""
Matching documents
Text representation of jobs and candidate profiles fed to the embedder
"""
from typing import Iterable, List, Tuple

from domain.entities import CandidateProfile, Job


def job_document(job: Job) -> str:
    parts = [
        job.title,
        job.experience_level.value,
        job.description,
        job.requirements or "",
        "Skills: " + ", ".join(job.skills_required),
        "Certifications: " + ", ".join(job.certifications),
        "Versions: " + ", ".join(job.servicenow_versions),
    ]
    return "\n".join(p for p in parts if p)


def profile_document(profile: CandidateProfile) -> str:
    parts = [
        profile.headline or "",
        profile.current_role or "",
        profile.desired_role or "",
        profile.experience_level.value,
        profile.bio or "",
        "Skills: " + ", ".join(profile.skills),
        "Certifications: " + ", ".join(profile.certifications),
        "Versions: " + ", ".join(profile.servicenow_versions),
    ]
    return "\n".join(p for p in parts if p)


def job_skills(job: Job) -> Tuple[str, ...]:
    return tuple(job.skills_required) + tuple(job.certifications)


def profile_skills(profile: CandidateProfile) -> Tuple[str, ...]:
    return tuple(profile.skills) + tuple(profile.certifications)


def matched_skills(ours: Iterable[str], theirs: Iterable[str]) -> List[str]:
    """Case-insensitive intersection, in the order of ours"""
    wanted = {s.lower() for s in theirs}
    seen = set()
    result = []
    for skill in ours:
        key = skill.lower()
        if key in wanted and key not in seen:
            seen.add(key)
            result.append(skill)
    return result
