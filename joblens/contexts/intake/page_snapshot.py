"""
Read-only view of a rendered job page.

Wraps BeautifulSoup so extractors can ask for "text of the first element
matching this selector" the way a browser script would, without ever
mutating the parsed document.
"""

from pathlib import Path
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from joblens.contexts.intake.normalizer import tidy_lines

# Never rendered as text
INVISIBLE_TAGS = frozenset({"script", "style", "noscript", "template", "head"})

# Page chrome excluded from main-content text
BOILERPLATE_TAGS = frozenset({"nav", "header", "footer", "aside"})

# Elements that start a new line when rendered
BLOCK_TAGS = frozenset(
    {
        "address", "article", "blockquote", "dd", "div", "dl", "dt", "fieldset",
        "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6",
        "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table",
        "tbody", "td", "th", "thead", "tr", "ul", "aside",
    }
)


def render_text(element: Tag, skip: Iterable[str] = ()) -> str:
    """
    Visible text of an element, one line per block.

    Args:
        element: Root element
        skip: Extra tag names whose subtrees are left out

    Returns:
        Text with whitespace collapsed inside lines and blank lines dropped
    """
    skipped = INVISIBLE_TAGS | frozenset(skip)
    parts: list[str] = []
    _render(element, skipped, parts)
    return tidy_lines("".join(parts))


def _render(node: Tag, skipped: frozenset, parts: list[str]) -> None:
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
            continue
        if not isinstance(child, Tag) or child.name in skipped:
            continue
        if child.name == "br":
            parts.append("\n")
            continue
        is_block = child.name in BLOCK_TAGS
        if is_block:
            parts.append("\n")
        _render(child, skipped, parts)
        if is_block:
            parts.append("\n")


class PageSnapshot:
    """
    A parsed page plus the URL it was loaded from.

    Selector lookups use CSS (soupsieve). Every text accessor returns "" rather
    than None when nothing matches.
    """

    def __init__(self, html: str, url: str):
        self.html = html
        self.url = url
        self.soup = BeautifulSoup(html, "html.parser")

    @classmethod
    def from_file(cls, path: Path, url: str) -> "PageSnapshot":
        """Load a saved page."""
        return cls(Path(path).read_text(encoding="utf-8", errors="replace"), url)

    def element(self, selector: str) -> Optional[Tag]:
        """First element matching selector, or None."""
        return self.soup.select_one(selector)

    def first_element(self, selectors: Iterable[str]) -> Optional[Tag]:
        """First element matched by the first selector that matches anything."""
        for selector in selectors:
            found = self.element(selector)
            if found is not None:
                return found
        return None

    def text(self, selector: str) -> str:
        """Rendered text of the first match for selector."""
        found = self.element(selector)
        return render_text(found) if found is not None else ""

    def first_text(self, selectors: Iterable[str]) -> str:
        """First non-empty rendered text across a selector cascade."""
        for selector in selectors:
            value = self.text(selector)
            if value:
                return value
        return ""

    def texts(self, selector: str) -> list[str]:
        """Non-empty rendered text of every match for selector."""
        values = (render_text(found) for found in self.soup.select(selector))
        return [value for value in values if value]

    def body_text(self) -> str:
        """Rendered text of the whole body (or document if there is no body)."""
        root = self.soup.body or self.soup
        return render_text(root)

    def content_text(self, element: Optional[Tag]) -> str:
        """Rendered text of element with navigation/header/footer/aside left out."""
        if element is None:
            return ""
        return render_text(element, skip=BOILERPLATE_TAGS)

    def document_title(self) -> str:
        """Contents of <title>, trimmed."""
        title = self.soup.title
        return title.get_text(strip=True) if title is not None else ""
