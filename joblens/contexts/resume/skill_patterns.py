"""
Curated technology keyword patterns for skill extraction.

Each category is one compiled alternation. Boundaries are lookarounds rather
than \\b so that terms ending in symbols ("c++", "c#", "ci/cd") still match.
These lists are not exhaustive; extend them as new stacks show up.
"""

import re
from dataclasses import dataclass


def _keyword_pattern(*terms: str) -> re.Pattern:
    """Compile terms into a case-insensitive, symbol-safe whole-word alternation."""
    alternation = "|".join(terms)
    return re.compile(rf"(?<![\w+#.])(?:{alternation})(?![\w+#])", re.IGNORECASE)


@dataclass(frozen=True)
class SkillKeywordPatterns:
    """Keyword alternations grouped by category."""

    LANGUAGES: re.Pattern = _keyword_pattern(
        r"python", r"javascript", r"typescript", r"java", r"c\+\+", r"c#", r"ruby", r"go",
        r"rust", r"scala", r"php", r"swift", r"kotlin", r"r", r"matlab", r"bash", r"shell",
    )

    WEB_FRONTEND: re.Pattern = _keyword_pattern(
        r"react(?:\.js)?", r"vue(?:\.js)?", r"angular", r"next(?:\.js)?", r"nuxt", r"svelte",
        r"html5?", r"css3?", r"sass", r"less", r"tailwind", r"bootstrap", r"jquery",
        r"webpack", r"vite",
    )

    BACKEND: re.Pattern = _keyword_pattern(
        r"node(?:\.js)?", r"express(?:\.js)?", r"django", r"flask", r"fastapi", r"spring",
        r"laravel", r"rails", r"asp\.net", r"graphql", r"restful", r"rest",
    )

    DATABASES: re.Pattern = _keyword_pattern(
        r"mysql", r"postgresql", r"postgres", r"mongodb", r"redis", r"elasticsearch",
        r"sqlite", r"cassandra", r"dynamodb", r"firebase", r"supabase", r"prisma",
    )

    CLOUD_DEVOPS: re.Pattern = _keyword_pattern(
        r"aws", r"gcp", r"azure", r"docker", r"kubernetes", r"k8s", r"ci/cd", r"jenkins",
        r"github actions", r"terraform", r"ansible", r"linux", r"nginx", r"apache",
    )

    ML_AI: re.Pattern = _keyword_pattern(
        r"tensorflow", r"pytorch", r"scikit-learn", r"pandas", r"numpy", r"keras",
        r"hugging face", r"llm", r"nlp", r"machine learning", r"deep learning", r"data science",
    )

    TOOLS: re.Pattern = _keyword_pattern(
        r"git", r"github", r"gitlab", r"jira", r"confluence", r"figma", r"postman", r"swagger",
        r"vs code", r"intellij", r"vim",
    )


# Scan order (categories are independent; order only affects first-insertion order)
SKILL_KEYWORD_PATTERNS = [
    SkillKeywordPatterns.LANGUAGES,
    SkillKeywordPatterns.WEB_FRONTEND,
    SkillKeywordPatterns.BACKEND,
    SkillKeywordPatterns.DATABASES,
    SkillKeywordPatterns.CLOUD_DEVOPS,
    SkillKeywordPatterns.ML_AI,
    SkillKeywordPatterns.TOOLS,
]


def find_keyword_skills(text: str) -> list[str]:
    """
    Return every curated keyword found in text, lowercased, in scan order.

    Duplicates are kept; callers deduplicate.
    """
    found = []
    for pattern in SKILL_KEYWORD_PATTERNS:
        for match in pattern.finditer(text):
            found.append(match.group(0).lower().strip())
    return found
