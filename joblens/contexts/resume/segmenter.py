"""
Section segmenter for resume and job text.

Isolates the body of one labeled section (e.g. "Skills") from a larger text.
Returns None when no heading matched, so callers can tell "section not found"
apart from "section found but empty" ("").
"""

from typing import Iterable, Optional

from joblens.contexts.resume.section_patterns import KNOWN_SECTION_HEADINGS, normalize_heading


def match_heading(line: str, aliases: Iterable[str]) -> Optional[str]:
    """
    Return the first alias that opens a section on this line, or None.

    A line opens a section when, lowercased and trimmed, it equals the alias
    or starts with "alias:" or "alias ".
    """
    lower = normalize_heading(line)
    for alias in aliases:
        if lower == alias or lower.startswith(alias + ":") or lower.startswith(alias + " "):
            return alias
    return None


def is_section_boundary(line: str, target_aliases: Iterable[str]) -> bool:
    """True if the line is a known heading that does not belong to the current target."""
    lower = normalize_heading(line)
    targets = set(target_aliases)
    for heading in KNOWN_SECTION_HEADINGS:
        if heading in targets:
            continue
        if lower == heading or lower.startswith(heading + ":"):
            return True
    return False


def segment(text: str, heading_aliases: Iterable[str]) -> Optional[str]:
    """
    Extract the body of the first section opened by one of heading_aliases.

    Scans top to bottom. The first line matching an alias opens the section;
    collection stops (exclusive) at the first known heading that is not a
    target alias. For "Alias: inline content" headings the inline content is
    the first body line.

    Args:
        text: Full resume or job text
        heading_aliases: Aliases for the wanted section (lowercase)

    Returns:
        Section body with surrounding whitespace stripped, "" for an empty
        section, or None if no heading alias matched
    """
    aliases = tuple(alias.lower() for alias in heading_aliases)
    section_lines: list[str] = []
    in_section = False

    for line in text.split("\n"):
        if not in_section:
            alias = match_heading(line, aliases)
            if alias is None:
                continue
            in_section = True
            remainder = _inline_remainder(line, alias)
            if remainder:
                section_lines.append(remainder)
            continue

        if is_section_boundary(line, aliases):
            break
        section_lines.append(line)

    if not in_section:
        return None
    return "\n".join(section_lines).strip()


def _inline_remainder(line: str, alias: str) -> str:
    """Content after "alias:" on a heading line ("" for bare headings)."""
    stripped = line.strip()
    if not normalize_heading(stripped).startswith(alias + ":"):
        return ""
    _, _, rest = stripped.partition(":")
    return rest.strip()
