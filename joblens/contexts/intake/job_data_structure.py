"""
Job posting data structure for the Intake context.

JobPosting is the normalized record extracted from one job page. It is
immutable: a fresher extraction of the same job supersedes the old value
instead of being merged into it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from joblens.contexts.intake.extraction_patterns import (
    EXPERIENCE_NOT_SPECIFIED,
    MAX_DESCRIPTION_CHARS,
    SALARY_NOT_DISCLOSED,
)


class SiteType(str, Enum):
    """Which extractor family produced (or should produce) a posting."""

    LINKEDIN = "linkedin"
    INTERNSHALA = "internshala"
    GENERIC = "generic"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class JobPosting:
    """
    One job posting as extracted from a page.

    title is never empty for a posting that leaves the extractor.
    description is capped at MAX_DESCRIPTION_CHARS.
    """

    title: str
    url: str
    site: SiteType
    extracted_at: str
    company: str = ""
    location: str = ""
    experience: str = EXPERIENCE_NOT_SPECIFIED
    salary: str = SALARY_NOT_DISCLOSED
    description: str = ""
    skills: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.title:
            raise ValueError("JobPosting.title must not be empty")
        object.__setattr__(self, "site", SiteType(self.site))
        object.__setattr__(self, "description", (self.description or "")[:MAX_DESCRIPTION_CHARS])
        object.__setattr__(self, "skills", tuple(self.skills))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire / persisted (camelCase) shape."""
        return {
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "experience": self.experience,
            "salary": self.salary,
            "description": self.description,
            "skills": list(self.skills),
            "site": self.site.value,
            "url": self.url,
            "extractedAt": self.extracted_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobPosting":
        """
        Rebuild from the wire shape.

        Raises:
            ValueError: If title is missing or site is not a known SiteType
        """
        return cls(
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            site=SiteType(data.get("site") or SiteType.GENERIC.value),
            extracted_at=str(data.get("extractedAt") or ""),
            company=str(data.get("company") or ""),
            location=str(data.get("location") or ""),
            experience=str(data.get("experience") or EXPERIENCE_NOT_SPECIFIED),
            salary=str(data.get("salary") or SALARY_NOT_DISCLOSED),
            description=str(data.get("description") or ""),
            skills=tuple(data.get("skills") or ()),
        )
