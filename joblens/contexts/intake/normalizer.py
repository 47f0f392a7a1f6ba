"""
Page text normalizer for the Intake context.

Rendered page text carries non-breaking spaces, zero-width characters and
layout whitespace. Normalize before measuring or storing a description so
length thresholds compare visible characters.
"""

import re
import unicodedata

# Unicode replacements: problematic char -> plain equivalent
UNICODE_REPLACEMENTS = {
    # Spaces
    "\u00a0": " ",  # non-breaking space
    "\u202f": " ",  # narrow no-break space
    "\u2009": " ",  # thin space
    # Zero-width characters -> remove
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u200d": "",  # zero-width joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM / zero-width no-break space
}

_WHITESPACE_RUN = re.compile(r"\s+")
_INLINE_WHITESPACE_RUN = re.compile(r"[ \t\r\f\v]+")


def normalize_unicode(text: str) -> str:
    """
    Replace invisible and non-standard space characters.

    NFC only: compatibility folding (NFKC) would rewrite currency and
    superscript characters that salary text depends on.
    """
    text = unicodedata.normalize("NFC", text)
    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text


def collapse_whitespace(text: str) -> str:
    """Every whitespace run (newlines included) becomes one space; ends trimmed."""
    return _WHITESPACE_RUN.sub(" ", normalize_unicode(text or "")).strip()


def tidy_lines(text: str) -> str:
    """
    Collapse whitespace inside each line and drop blank lines.

    Keeps line structure, which section scanning relies on.
    """
    lines = []
    for line in normalize_unicode(text).split("\n"):
        line = _INLINE_WHITESPACE_RUN.sub(" ", line).strip()
        if line:
            lines.append(line)
    return "\n".join(lines)
