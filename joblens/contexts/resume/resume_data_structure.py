"""
Resume data structures for the Resume context.

ParsedResume is the structured record extracted from raw resume text. It is
immutable: re-parsing produces a new value, never an in-place update.
ResumeDocument pairs it with the raw text it came from, which is what gets
persisted and what the analysis call sends.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from joblens.contexts.resume.section_patterns import (
    MAX_CERTIFICATIONS,
    MAX_EDUCATION,
    MAX_PROJECTS,
    MAX_SKILLS,
)


@dataclass(frozen=True)
class ParsedResume:
    """
    Fields extracted from a resume.

    List fields are already deduplicated, filtered to their length windows
    and truncated to their caps by the extractors; __post_init__ re-applies
    the caps so a hand-built instance cannot violate them either.
    """

    name: str = ""
    email: str = ""
    skills: tuple[str, ...] = field(default_factory=tuple)
    education: tuple[str, ...] = field(default_factory=tuple)
    experience_years: float = 0.0
    projects: tuple[str, ...] = field(default_factory=tuple)
    certifications: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "skills", tuple(self.skills)[:MAX_SKILLS])
        object.__setattr__(self, "education", tuple(self.education)[:MAX_EDUCATION])
        object.__setattr__(self, "projects", tuple(self.projects)[:MAX_PROJECTS])
        object.__setattr__(self, "certifications", tuple(self.certifications)[:MAX_CERTIFICATIONS])
        object.__setattr__(self, "experience_years", max(0.0, float(self.experience_years)))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted (camelCase) shape."""
        return {
            "name": self.name,
            "email": self.email,
            "skills": list(self.skills),
            "education": list(self.education),
            "experienceYears": self.experience_years,
            "projects": list(self.projects),
            "certifications": list(self.certifications),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParsedResume":
        """Rebuild from the persisted shape. Missing fields take their defaults."""
        return cls(
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            skills=tuple(data.get("skills") or ()),
            education=tuple(data.get("education") or ()),
            experience_years=float(data.get("experienceYears") or 0),
            projects=tuple(data.get("projects") or ()),
            certifications=tuple(data.get("certifications") or ()),
        )


@dataclass(frozen=True)
class ResumeDocument:
    """Raw resume text plus the fields parsed from it."""

    raw: str
    parsed: ParsedResume
